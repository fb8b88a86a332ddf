"""
The ``unsorted_declarations`` lint.

``check_mod`` is the entry point: it is called once per module and reports at
most one diagnostic for each of the three declaration groups. ``walk_module``
plays the part of the compiler driver, visiting a file module and every inline
module nested in it while tracking ``#[allow(...)]`` style lint levels.
"""

import logging
from dataclasses import dataclass

from sorty.core.attributes import MalformedAttributeError
from sorty.core.classifier import DeclarationRecord, classify
from sorty.core.diagnostics import Diagnostic, DiagnosticSink, Level
from sorty.core.ordering import find_divergence
from sorty.core.source_map import SourceMap
from sorty.core.suggestion import Suggestion, build_suggestion
from sorty.core.syntax import Attribute, MetaList, MetaWord, ModDecl, Module

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Lint:
    name: str
    default_level: Level
    description: str


UNSORTED_DECLARATIONS = Lint(
    name="unsorted_declarations",
    default_level=Level.WARN,
    description=(
        "Warn when the declarations of crates or modules are not in alphabetical order"
    ),
)

LINT_PATHS = {UNSORTED_DECLARATIONS.name, f"sorty::{UNSORTED_DECLARATIONS.name}"}
LEVEL_NAMES = {level.value for level in Level}

# (Declarations field, label used in messages, keyword used in suggestions)
DECLARATION_GROUPS = (
    ("extern_crates", "crate declarations", "extern crate"),
    ("mods", "module declarations (other than inline modules)", "mod"),
    ("uses", "use statements", "use"),
)


def check_sequence(
    records: tuple[DeclarationRecord, ...], kind: str, keyword: str
) -> Suggestion | None:
    """Suggestion for the first divergence of one group, if any"""
    divergence = find_divergence(records)
    if divergence is None:
        return None
    return build_suggestion(divergence, kind, keyword)


def check_mod(
    module: Module,
    source_map: SourceMap,
    sink: DiagnosticSink,
    level: Level = UNSORTED_DECLARATIONS.default_level,
) -> None:
    """Check the declaration order of one module, emitting through ``sink``"""
    severity = level.severity
    if severity is None:
        return

    declarations = classify(module, source_map)
    for field_name, kind, keyword in DECLARATION_GROUPS:
        suggestion = check_sequence(getattr(declarations, field_name), kind, keyword)
        if suggestion is None:
            continue
        sink.emit(
            Diagnostic(
                lint=UNSORTED_DECLARATIONS.name,
                severity=severity,
                span=suggestion.span,
                message=suggestion.message,
                suggestion=suggestion.text,
                level=level,
            )
        )


def _names_this_lint(meta_items) -> bool:
    for meta in meta_items:
        match meta:
            case MetaWord(name=name) if name in LINT_PATHS:
                return True
    return False


def lint_level(attrs: tuple[Attribute, ...], inherited: Level) -> Level:
    """Level in effect after applying ``attrs``; ``forbid`` cannot be lowered"""
    level = inherited
    for attr in attrs:
        if level == Level.FORBID:
            break
        match attr.meta:
            case MetaList(name=name, items=items) if name in LEVEL_NAMES:
                if _names_this_lint(items):
                    level = Level(name)
    return level


def walk_module(
    module: Module,
    source_map: SourceMap,
    sink: DiagnosticSink,
    level: Level = UNSORTED_DECLARATIONS.default_level,
) -> None:
    """Run ``check_mod`` on ``module`` and on every inline module inside it"""
    level = lint_level(module.inner_attrs, level)
    try:
        check_mod(module, source_map, sink, level)
    except MalformedAttributeError as e:
        # only this module is skipped, nested modules are still checked
        logger.error(f"Skipping declaration check of a module in {module.file}: {e}")

    for item in module.items:
        match item.kind:
            case ModDecl(body=Module() as body):
                walk_module(body, source_map, sink, lint_level(item.attrs, level))
