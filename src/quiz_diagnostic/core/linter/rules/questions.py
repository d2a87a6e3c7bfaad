"""Structural rules over the parsed quiz model."""
from collections import Counter
from typing import Generator

from quiz_diagnostic.core.quiz.models import Question, QuestionType, Quiz

from ..models import Diagnostic, Severity

MIN_OPTIONS = 2


def question_context(question: Question, index: int) -> str:
    """Short label identifying a question in messages."""
    return f'Question {index} ("{question.stem[:30]}...")'


def too_few_options(question: Question, index: int) -> Generator[Diagnostic, None, None]:
    """
    Flag choice questions with fewer than two options.

    A single-option question cannot be imported as multiple choice.
    """
    if not question.type.has_options:
        return

    if len(question.options) < MIN_OPTIONS:
        yield Diagnostic(
            rule="too_few_options",
            severity=Severity.ERROR,
            message=(
                f"Question type '{question.type.value}' must have at least "
                f"{MIN_OPTIONS} options. Found {len(question.options)}."
            ),
            line=question.source_line,
            context=question_context(question, index),
        )


def missing_correct_answer(question: Question, index: int) -> Generator[Diagnostic, None, None]:
    """Flag choice questions with no option marked correct."""
    if not question.type.has_options:
        return

    if not question.correct_options:
        yield Diagnostic(
            rule="missing_correct_answer",
            severity=Severity.ERROR,
            message="No correct answer marked. Use [x] or ✓ to mark the correct option.",
            line=question.source_line,
            context=question_context(question, index),
        )


def ambiguous_single_choice(question: Question, index: int) -> Generator[Diagnostic, None, None]:
    """
    Flag multiple-choice questions with more than one correct option.

    The author most likely meant a multiple-answers question.
    """
    if question.type is not QuestionType.MULTIPLE_CHOICE:
        return

    if len(question.correct_options) > 1:
        yield Diagnostic(
            rule="ambiguous_single_choice",
            severity=Severity.WARNING,
            message=(
                "Multiple correct answers found for 'multiple_choice'. "
                "Use 'Multiple Answer' type or ensure only one is correct."
            ),
            line=question.source_line,
            context=question_context(question, index),
        )


def missing_stem(question: Question, index: int) -> Generator[Diagnostic, None, None]:
    """Flag questions whose stem is empty."""
    if not question.stem or not question.stem.strip():
        yield Diagnostic(
            rule="missing_stem",
            severity=Severity.ERROR,
            message="Question is missing a question stem/text.",
            line=question.source_line,
            context=question_context(question, index),
        )


def no_questions(quiz: Quiz) -> Generator[Diagnostic, None, None]:
    """Flag documents in which no question header was found."""
    if not quiz.questions:
        yield Diagnostic(
            rule="no_questions",
            severity=Severity.ERROR,
            message=(
                "No questions found. Ensure headers start with ## and follow "
                "the correct format."
            ),
        )


def duplicate_question_ids(quiz: Quiz) -> Generator[Diagnostic, None, None]:
    """
    Flag question ids used more than once.

    One error per distinct id, reported at the first question using it.
    """
    counts = Counter(q.id for q in quiz.questions)
    reported: set[str] = set()

    for index, question in enumerate(quiz.questions, start=1):
        if counts[question.id] < 2 or question.id in reported:
            continue
        reported.add(question.id)

        yield Diagnostic(
            rule="duplicate_question_ids",
            severity=Severity.ERROR,
            message=f"Duplicate Question ID found: {question.id}",
            line=question.source_line,
            context=question_context(question, index),
        )
