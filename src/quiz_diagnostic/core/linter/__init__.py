"""Markdown linter for authoring-format quizzes."""
from .engine import lint, lint_content, lint_file, get_available_rules
from .models import Diagnostic, LintReport, Severity

__all__ = [
    "lint",
    "lint_content",
    "lint_file",
    "get_available_rules",
    "Diagnostic",
    "LintReport",
    "Severity",
]
