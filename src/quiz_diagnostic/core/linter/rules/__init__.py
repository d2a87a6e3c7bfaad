"""Lint rules for Markdown quiz documents."""
from . import markers, questions
from .markers import MARKER_RULES, MarkerRule

# Raw-text rules, evaluated line by line before parsing
RAW_TEXT_RULES: dict[str, MarkerRule] = {rule.name: rule for rule in MARKER_RULES}

# Per-question rules, evaluated in this order for every question
QUESTION_RULES = {
    "too_few_options": questions.too_few_options,
    "missing_correct_answer": questions.missing_correct_answer,
    "ambiguous_single_choice": questions.ambiguous_single_choice,
    "missing_stem": questions.missing_stem,
}

# Whole-quiz rules, evaluated after every question was checked
QUIZ_RULES = {
    "duplicate_question_ids": questions.duplicate_question_ids,
}

__all__ = [
    "RAW_TEXT_RULES",
    "QUESTION_RULES",
    "QUIZ_RULES",
    "MarkerRule",
    "markers",
    "questions",
]
