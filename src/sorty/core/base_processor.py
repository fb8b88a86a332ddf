"""
Base processor interface for file checking operations
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from sorty.core.diagnostics import Diagnostic, Severity

logger = logging.getLogger(__name__)


class ProcessingStatus(Enum):
    """Status of a checking operation"""

    CLEAN = "clean"
    ISSUES_FOUND = "issues_found"
    ERROR = "error"
    SKIPPED = "skipped"


@dataclass
class ProcessResult:
    """Result of checking one file"""

    file_path: Path
    status: ProcessingStatus
    diagnostics: list[Diagnostic] = field(default_factory=list)
    error_message: str | None = None

    @property
    def is_success(self) -> bool:
        """Check if the file was checked without failing"""
        return self.status in [ProcessingStatus.CLEAN, ProcessingStatus.ISSUES_FOUND]

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self.diagnostics)

    def __str__(self) -> str:
        """String representation"""
        if self.status == ProcessingStatus.CLEAN:
            return f"✓ {self.file_path.name}: declarations in order"
        elif self.status == ProcessingStatus.ISSUES_FOUND:
            return f"! {self.file_path.name}: {len(self.diagnostics)} unsorted groups"
        elif self.status == ProcessingStatus.SKIPPED:
            return f"⊝ {self.file_path.name}: Skipped"
        else:
            return f"✗ {self.file_path.name}: {self.error_message}"


class BaseProcessor(ABC):
    """Abstract base class for all file processors"""

    def __init__(
        self,
        config: dict[str, Any] | None = None,
    ):
        """
        Initialize processor

        Args:
            config: Configuration dictionary
        """
        self.config = config or {}
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def can_process(self, file_path: Path) -> bool:
        """
        Check if this processor can handle the given file

        Args:
            file_path: Path to file

        Returns:
            True if processor can handle this file type
        """
        pass

    @abstractmethod
    def process_file(
        self,
        file_path: Path,
        **kwargs,
    ) -> ProcessResult:
        """
        Check a single file

        Args:
            file_path: Path to file to check
            **kwargs: Additional processing parameters

        Returns:
            ProcessResult with the diagnostics found
        """
        pass

    def read_file(
        self,
        file_path: Path,
    ) -> str:
        """
        Read file content

        Args:
            file_path: Path to file

        Returns:
            File content as string
        """
        try:
            return file_path.read_text(encoding="utf-8")
        except Exception as e:
            self.logger.error(f"Error reading {file_path}: {e}")
            raise

    def process_batch(
        self,
        file_paths: list[Path],
        **kwargs,
    ) -> list[ProcessResult]:
        """
        Check multiple files

        Args:
            file_paths: List of file paths
            **kwargs: Additional processing parameters

        Returns:
            List of ProcessResult objects
        """
        results = []
        for file_path in file_paths:
            if self.can_process(file_path):
                result = self.process_file(file_path, **kwargs)
                results.append(result)
            else:
                results.append(
                    ProcessResult(
                        file_path=file_path,
                        status=ProcessingStatus.SKIPPED,
                        error_message="File type not supported by this processor",
                    )
                )
        return results
