"""Data models for the linter."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Severity(Enum):
    """Severity levels for diagnostics."""
    WARNING = "warning"        # Advisory, import still works
    ERROR = "error"           # Blocks a successful import


@dataclass
class Diagnostic:
    """A single problem found in a quiz document."""
    rule: str
    severity: Severity
    message: str
    line: Optional[int] = None
    context: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "rule": self.rule,
            "severity": self.severity.value,
            "message": self.message,
        }
        if self.line is not None:
            data["line"] = self.line
        if self.context is not None:
            data["context"] = self.context
        return data


@dataclass
class LintReport:
    """Complete lint report for a quiz document."""
    source_path: str
    total_issues: int = 0
    warnings: int = 0
    errors: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def add(self, diagnostic: Diagnostic) -> None:
        """Add a diagnostic to the report and update counts."""
        self.diagnostics.append(diagnostic)
        self.total_issues += 1

        if diagnostic.severity == Severity.WARNING:
            self.warnings += 1
        elif diagnostic.severity == Severity.ERROR:
            self.errors += 1

    @property
    def is_clean(self) -> bool:
        return self.errors == 0

    def to_dict(self) -> dict:
        return {
            "source_path": self.source_path,
            "total_issues": self.total_issues,
            "warnings": self.warnings,
            "errors": self.errors,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }
