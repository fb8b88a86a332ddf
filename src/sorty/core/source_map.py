"""
Source map: knows which file a span lives in and how to turn offsets into
line/column positions for reporting.
"""

import bisect
import logging
from pathlib import Path

from sorty.core.syntax import Span

logger = logging.getLogger(__name__)


class SourceMap:
    """Registry of loaded source files"""

    def __init__(self):
        self._texts: dict[str, str] = {}
        self._line_starts: dict[str, list[int]] = {}

    def add_file(self, file: str | Path, text: str) -> str:
        """Register file contents and return the key used for its spans"""
        key = str(file)
        self._texts[key] = text
        starts = [0]
        for index, char in enumerate(text):
            if char == "\n":
                starts.append(index + 1)
        self._line_starts[key] = starts
        logger.debug(f"Registered {key} ({len(starts)} lines)")
        return key

    def load_file(self, path: Path) -> str:
        """Read a file from disk and register it"""
        return self.add_file(path, path.read_text(encoding="utf-8"))

    def has_file(self, file: str | Path) -> bool:
        return str(file) in self._texts

    def text(self, file: str | Path) -> str:
        return self._texts[str(file)]

    @staticmethod
    def span_to_filename(span: Span) -> str:
        """Name of the file a span is located in"""
        return span.file

    def lookup_position(self, file: str | Path, offset: int) -> tuple[int, int]:
        """1-based (line, column) of a character offset"""
        starts = self._line_starts[str(file)]
        line_index = bisect.bisect_right(starts, offset) - 1
        return line_index + 1, offset - starts[line_index] + 1

    def line_text(self, file: str | Path, line: int) -> str:
        """Text of a 1-based line, without its newline"""
        key = str(file)
        starts = self._line_starts[key]
        text = self._texts[key]
        start = starts[line - 1]
        end = starts[line] - 1 if line < len(starts) else len(text)
        return text[start:end].rstrip("\r")

    def span_lines(self, span: Span) -> range:
        """1-based line numbers covered by a span"""
        first, _ = self.lookup_position(span.file, span.lo)
        last, _ = self.lookup_position(span.file, max(span.lo, span.hi - 1))
        return range(first, last + 1)
