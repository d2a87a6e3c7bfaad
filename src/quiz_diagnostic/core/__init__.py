"""Core modules for quiz linting and QTI validation."""
from .linter import lint, lint_file
from .quiz import Quiz, parse_quiz
from .validator import QtiValidator, ValidationReport

__all__ = [
    "lint",
    "lint_file",
    "Quiz",
    "parse_quiz",
    "QtiValidator",
    "ValidationReport",
]
