"""
Command module for checking declaration order in Rust sources
"""

import logging
from pathlib import Path

from sorty.core.base_processor import BaseProcessor, ProcessingStatus, ProcessResult
from sorty.core.config import Config
from sorty.core.diagnostics import CollectingSink, Level
from sorty.core.git_manager import GitManager
from sorty.core.lint import walk_module
from sorty.core.parser import parse_source
from sorty.core.path_analyzer import PathAnalyzer
from sorty.core.source_map import SourceMap

logger = logging.getLogger(__name__)


class RustFileChecker(BaseProcessor):
    """Parses one Rust file and runs the declaration order lint over it"""

    def __init__(
        self,
        source_map: SourceMap,
        level: Level = Level.WARN,
        extensions: list[str] | None = None,
    ):
        super().__init__({"level": level.value, "extensions": extensions or [".rs"]})
        self.source_map = source_map
        self.level = level

    def can_process(self, file_path: Path) -> bool:
        return file_path.suffix in self.config["extensions"]

    def process_file(
        self,
        file_path: Path,
        **kwargs,
    ) -> ProcessResult:
        sink = CollectingSink()
        try:
            text = self.read_file(file_path)
            self.source_map.add_file(file_path, text)
            module = parse_source(text, file_path)
            walk_module(module, self.source_map, sink, self.level)
        except (OSError, UnicodeDecodeError, ValueError) as e:
            self.logger.error(f"Error checking {file_path}: {e}")
            return ProcessResult(
                file_path=file_path,
                status=ProcessingStatus.ERROR,
                error_message=str(e),
            )

        status = (
            ProcessingStatus.ISSUES_FOUND if sink.diagnostics else ProcessingStatus.CLEAN
        )
        self.logger.debug(f"{file_path}: {len(sink.diagnostics)} diagnostics")
        return ProcessResult(
            file_path=file_path, status=status, diagnostics=sink.diagnostics
        )


class CheckCommand:
    """Command handler for the declaration order check"""

    def __init__(self, config: Config, source_map: SourceMap | None = None):
        """Initialize check command with configuration"""
        self.config = config
        self.source_map = source_map or SourceMap()
        self.analyzer = PathAnalyzer(
            extensions=config.discovery.extensions,
            exclude=config.discovery.exclude,
            recursive=config.discovery.recursive,
        )
        self.checker = RustFileChecker(
            self.source_map,
            level=config.level,
            extensions=config.discovery.extensions,
        )

    def collect_files(
        self,
        paths: list[Path],
        changed_since: str | None = None,
    ) -> tuple[list[Path], list[ProcessResult]]:
        """
        Resolve the files to check

        Args:
            paths: Files or directories given on the command line
            changed_since: Only keep files changed since this Git reference

        Returns:
            Files to check, and error results for paths that do not exist
        """
        files: list[Path] = []
        missing: list[ProcessResult] = []
        for path in paths:
            analysis = self.analyzer.analyze(path)
            if not path.exists():
                logger.error(analysis.description)
                missing.append(
                    ProcessResult(
                        file_path=path,
                        status=ProcessingStatus.ERROR,
                        error_message=analysis.description,
                    )
                )
                continue
            logger.info(f"{path}: {analysis.description}")
            files.extend(f for f in analysis.rust_files if f not in files)

        if changed_since:
            git_manager = GitManager(paths[0] if paths else None)
            changed = {
                p.resolve()
                for p in git_manager.get_changed_rust_files(
                    changed_since, self.config.discovery.extensions
                )
            }
            files = [f for f in files if f.resolve() in changed]
            logger.info(f"{len(files)} files changed since {changed_since}")

        return files, missing

    def execute(
        self,
        paths: list[Path],
        changed_since: str | None = None,
    ) -> list[ProcessResult]:
        """
        Check every Rust file under the given paths

        Args:
            paths: Files or directories to check
            changed_since: Optional Git reference restricting the check to changed files

        Returns:
            One ProcessResult per file
        """
        files, results = self.collect_files(paths, changed_since)
        results.extend(self.checker.process_batch(files))

        issues = sum(1 for r in results if r.status == ProcessingStatus.ISSUES_FOUND)
        errors = sum(1 for r in results if r.status == ProcessingStatus.ERROR)
        logger.info(
            f"Checked {len(files)} files: {issues} with unsorted declarations, "
            f"{errors} errors"
        )
        return results

    def exit_code(self, results: list[ProcessResult]) -> int:
        """0 when clean, 1 when something must be fixed"""
        for result in results:
            if result.status == ProcessingStatus.ERROR or result.has_errors:
                return 1
            if result.diagnostics and self.config.output.fail_on_warning:
                return 1
        return 0
