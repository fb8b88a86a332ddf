"""
Diagnostic reporting: rustc-style text through rich, or JSON
"""

import json
import logging
from typing import Any

from rich.console import Console
from rich.markup import escape

from sorty.core.base_processor import ProcessingStatus, ProcessResult
from sorty.core.diagnostics import Diagnostic, Severity
from sorty.core.source_map import SourceMap

logger = logging.getLogger(__name__)

SEVERITY_STYLES = {
    Severity.WARNING: "bold yellow",
    Severity.ERROR: "bold red",
}


def diagnostic_to_dict(diagnostic: Diagnostic, source_map: SourceMap) -> dict[str, Any]:
    """Plain representation of a diagnostic with 1-based positions"""
    span = diagnostic.span
    line, column = source_map.lookup_position(span.file, span.lo)
    end_line, end_column = source_map.lookup_position(span.file, span.hi)
    return {
        "file": span.file,
        "line": line,
        "column": column,
        "end_line": end_line,
        "end_column": end_column,
        "severity": diagnostic.severity.value,
        "lint": diagnostic.lint,
        "level": diagnostic.level.value,
        "message": diagnostic.message,
        "suggestion": diagnostic.suggestion,
    }


class Reporter:
    """Prints check results"""

    def __init__(
        self,
        source_map: SourceMap,
        console: Console | None = None,
        output_format: str = "text",
        show_suggestions: bool = True,
    ):
        self.source_map = source_map
        self.console = console or Console(highlight=False, emoji=False)
        self.output_format = output_format
        self.show_suggestions = show_suggestions

    def report(self, results: list[ProcessResult]) -> None:
        if self.output_format == "json":
            self._report_json(results)
        else:
            self._report_text(results)

    # ========================================================================
    # JSON
    # ========================================================================

    def _report_json(self, results: list[ProcessResult]) -> None:
        payload = []
        for result in results:
            for diagnostic in result.diagnostics:
                entry = diagnostic_to_dict(diagnostic, self.source_map)
                if not self.show_suggestions:
                    entry["suggestion"] = None
                payload.append(entry)
        self.console.print(
            json.dumps(payload, indent=2), markup=False, highlight=False, soft_wrap=True
        )

    # ========================================================================
    # TEXT
    # ========================================================================

    def _report_text(self, results: list[ProcessResult]) -> None:
        for result in results:
            if result.status == ProcessingStatus.ERROR:
                self.console.print(
                    f"[bold red]error[/]: could not check {escape(str(result.file_path))}: "
                    f"{escape(result.error_message or 'unknown error')}",
                    soft_wrap=True,
                )
            for diagnostic in result.diagnostics:
                self.render_diagnostic(diagnostic)
        self._print_summary(results)

    def render_diagnostic(self, diagnostic: Diagnostic) -> None:
        """Print one diagnostic in the style of rustc"""
        span = diagnostic.span
        lines = self.source_map.span_lines(span)
        line, column = self.source_map.lookup_position(span.file, span.lo)
        gutter = " " * len(str(lines[-1]))
        style = SEVERITY_STYLES[diagnostic.severity]

        out = [
            f"[{style}]{diagnostic.severity.value}[/]: [bold]{escape(diagnostic.message)}[/]",
            f"{gutter}[bold blue]-->[/] {escape(span.file)}:{line}:{column}",
            f"{gutter} [bold blue]|[/]",
        ]
        for number in lines:
            text = escape(self.source_map.line_text(span.file, number))
            out.append(f"[bold blue]{number:>{len(gutter)}} |[/] {text}")
        out.append(f"{gutter} [bold blue]|[/]")
        note = f"`#[{diagnostic.level.value}({diagnostic.lint})]` is in effect"
        out.append(f"{gutter} [bold blue]=[/] [bold]note[/]: {escape(note)}")
        if self.show_suggestions and diagnostic.suggestion:
            help_lines = diagnostic.suggestion.rstrip("\n").split("\n")
            out.append(f"{gutter} [bold blue]=[/] [bold]help[/]: {escape(help_lines[0])}")
            indent = " " * (len(gutter) + 9)
            out.extend(f"{indent}{escape(text)}".rstrip() for text in help_lines[1:])

        self.console.print("\n".join(out), soft_wrap=True)
        self.console.print()

    def _print_summary(self, results: list[ProcessResult]) -> None:
        diagnostics = [d for result in results for d in result.diagnostics]
        warnings = sum(1 for d in diagnostics if d.severity == Severity.WARNING)
        errors = sum(1 for d in diagnostics if d.severity == Severity.ERROR)
        failed = sum(1 for result in results if result.status == ProcessingStatus.ERROR)
        checked = sum(1 for result in results if result.is_success)

        if not diagnostics and not failed:
            self.console.print(
                f"[green]✓[/] {checked} files checked, declarations in order"
            )
            return

        parts = []
        if warnings:
            parts.append(f"[yellow]{warnings} warning{'s' if warnings != 1 else ''}[/]")
        if errors:
            parts.append(f"[red]{errors} error{'s' if errors != 1 else ''}[/]")
        if failed:
            parts.append(f"[red]{failed} file{'s' if failed != 1 else ''} failed[/]")
        self.console.print(f"{checked} files checked: {', '.join(parts)}")
