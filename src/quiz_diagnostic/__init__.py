"""Compliance checks for Markdown quizzes and QTI packages before LMS import."""
__version__ = "0.4.0"

from quiz_diagnostic.core.linter import lint, lint_file
from quiz_diagnostic.core.validator import QtiValidator, ValidatorOptions, validate

__all__ = [
    "__version__",
    "lint",
    "lint_file",
    "QtiValidator",
    "ValidatorOptions",
    "validate",
]
