"""
Core modules for declaration order checking
"""

from .diagnostics import CollectingSink, Diagnostic, Level, Severity
from .lint import UNSORTED_DECLARATIONS, check_mod, walk_module
from .parser import ParseError, parse_file, parse_source
from .source_map import SourceMap

__all__ = [
    # Entry points
    "check_mod",
    "walk_module",
    "parse_file",
    "parse_source",
    # Classes
    "CollectingSink",
    "Diagnostic",
    "Level",
    "ParseError",
    "Severity",
    "SourceMap",
    # Lint metadata
    "UNSORTED_DECLARATIONS",
]
