"""
Diagnostic values and sinks
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from sorty.core.syntax import Span


class Level(Enum):
    """Lint levels, as spelled in ``#[allow(...)]`` style attributes"""

    ALLOW = "allow"
    WARN = "warn"
    DENY = "deny"
    FORBID = "forbid"

    @property
    def severity(self) -> "Severity | None":
        if self == Level.ALLOW:
            return None
        if self == Level.WARN:
            return Severity.WARNING
        return Severity.ERROR


class Severity(Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    lint: str
    severity: Severity
    span: Span
    message: str
    suggestion: str | None = None
    level: Level = Level.WARN


class DiagnosticSink(Protocol):
    def emit(self, diagnostic: Diagnostic) -> None: ...


@dataclass
class CollectingSink:
    """Sink that keeps every diagnostic it receives, in emission order"""

    diagnostics: list[Diagnostic] = field(default_factory=list)

    def emit(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]
