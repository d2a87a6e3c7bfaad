"""Tests for the Markdown quiz linter."""
import asyncio

import pytest

from quiz_diagnostic.core.linter import (
    Severity,
    get_available_rules,
    lint,
    lint_file,
)
from quiz_diagnostic.core.quiz.models import Option, Question, QuestionType, Quiz


def _run(coro):
    """Run async coroutine synchronously (avoids pytest-asyncio dep)."""
    return asyncio.run(coro)


def _messages(diagnostics) -> list[str]:
    return [d.message for d in diagnostics]


# ---------------------------------------------------------------------------
# Valid quizzes
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("marker", ["[x]", "✓", "✔", "[correct]"])
def test_valid_quiz_with_recommended_marker(marker):
    content = f"""
# Quiz Title
## 1. Valid Question [1 pt]
1) Option A
2) Option B {marker}
"""
    assert lint(content) == []


def test_true_false_arrow_quiz_is_clean():
    content = """
# Section: True/False
## 1. The sky is blue. -> True
## 2. Water is dry. -> False
"""
    assert lint(content) == []


def test_essay_question_needs_no_options():
    content = """
# Essay
## 1. Explain the central limit theorem.
"""
    assert lint(content) == []


# ---------------------------------------------------------------------------
# Structural rules
# ---------------------------------------------------------------------------


def test_empty_quiz_reports_only_no_questions():
    diagnostics = lint("")
    assert len(diagnostics) == 1
    assert diagnostics[0].rule == "no_questions"
    assert "No questions found" in diagnostics[0].message
    assert diagnostics[0].line is None


def test_missing_correct_answer():
    content = """
# Quiz
## 1. Invalid Question
1) A
2) B
"""
    diagnostics = lint(content)
    assert any("No correct answer marked" in m for m in _messages(diagnostics))
    assert all(d.severity is Severity.ERROR for d in diagnostics)


def test_missing_correct_answer_line_number():
    content = """# Quiz

## 1. Valid Question [1 pt]
1) Option A
2) Option B [x]

## 2. Missing correct answer
1) A
2) B
"""
    diagnostics = lint(content)
    missing = [d for d in diagnostics if d.rule == "missing_correct_answer"]
    assert len(missing) == 1
    assert missing[0].line == 7
    assert missing[0].context.startswith("Question 2 (")


def test_too_few_options_line_number():
    content = """# Quiz

## 1. Bad Question
1) A [x]
"""
    diagnostics = lint(content)
    too_few = [d for d in diagnostics if d.rule == "too_few_options"]
    assert len(too_few) == 1
    assert too_few[0].line == 3
    assert "must have at least 2 options. Found 1." in too_few[0].message


def test_ambiguous_single_choice_is_warning():
    content = """
# Multiple Choice
## 1. Pick one
a) A [x]
b) B [x]
"""
    diagnostics = lint(content)
    assert [d.rule for d in diagnostics] == ["ambiguous_single_choice"]
    assert diagnostics[0].severity is Severity.WARNING


def test_multiple_answers_allow_several_correct():
    content = """
# Multiple Answers
## 1. Pick all that apply
a) A [x]
b) B [x]
c) C
"""
    assert lint(content) == []


def test_duplicate_question_ids_reported_at_first_occurrence():
    content = """# Quiz

## 1. Question A [1 pt]
1) A
2) B [x]

## 1. Question B [1 pt]
1) A
2) B [x]
"""
    diagnostics = lint(content)
    duplicates = [d for d in diagnostics if d.rule == "duplicate_question_ids"]
    assert len(duplicates) == 1
    assert duplicates[0].message == "Duplicate Question ID found: 1"
    assert duplicates[0].line == 3
    assert duplicates[0].context.startswith("Question 1 (")


def test_missing_stem_uses_injected_parser():
    quiz = Quiz(questions=[
        Question(
            id="1",
            stem="",
            type=QuestionType.MULTIPLE_CHOICE,
            points=1,
            source_line=4,
            options=[Option("A", is_correct=True), Option("B")],
        )
    ])
    diagnostics = lint("ignored", parser=lambda _content: quiz)
    assert [d.rule for d in diagnostics] == ["missing_stem"]
    assert diagnostics[0].line == 4


def test_question_rules_run_before_quiz_rules():
    content = """
## 1. First
a) A
b) B
## 1. Second
a) A [x]
"""
    rules = [d.rule for d in lint(content)]
    assert rules == [
        "missing_correct_answer",
        "too_few_options",
        "duplicate_question_ids",
    ]


# ---------------------------------------------------------------------------
# Deprecated marker warnings
# ---------------------------------------------------------------------------


def test_bold_marker_warning():
    content = """
# Quiz
## 1. Question [1 pt]
1) Option A
2) **Option B**
"""
    diagnostics = lint(content)
    assert len(diagnostics) == 1
    warning = diagnostics[0]
    assert warning.rule == "deprecated_bold_marker"
    assert warning.severity is Severity.WARNING
    assert warning.line == 5
    assert warning.context == "2) **Option B**"


def test_prefix_marker_warning():
    content = """
# Quiz
## 1. Question [1 pt]
*a) Correct answer
b) Wrong answer
"""
    diagnostics = lint(content)
    assert [d.rule for d in diagnostics] == ["deprecated_prefix_marker"]
    assert diagnostics[0].line == 4


def test_numbered_prefix_marker_warning():
    content = "# Quiz\n## 1. Question\n*1) Correct answer\n2) Wrong answer\n"
    diagnostics = lint(content)
    assert [d.rule for d in diagnostics] == ["deprecated_prefix_marker"]


def test_bold_marker_on_dash_option():
    content = "# Quiz\n## 1. Question\n- Option A\n- **Option B**\n"
    diagnostics = lint(content)
    assert [d.rule for d in diagnostics] == ["deprecated_bold_marker"]


def test_bold_marker_with_latex():
    content = "# Quiz\n## 1. Question\na) $x = 1$\nb) **$x = 2$**\n"
    assert "deprecated_bold_marker" in [d.rule for d in lint(content)]


def test_bold_prefix_line_only_reports_bold():
    content = "# Quiz\n## 1. Question\n**a) bold label**\nb) other [x]\n"
    rules = [d.rule for d in lint(content)]
    assert "deprecated_prefix_marker" not in rules


def test_raw_text_lines_skip_frontmatter():
    content = "---\ntitle: Q\n---\n## 1. Question\na) A\nb) **B**\n"
    diagnostics = lint(content)
    assert [(d.rule, d.line) for d in diagnostics] == [("deprecated_bold_marker", 6)]


def test_context_is_truncated():
    long_option = "b) **" + "x" * 80 + "**"
    content = f"## 1. Question\na) A\n{long_option}\n"
    diagnostics = lint(content, context_width=20)
    assert diagnostics[0].context == long_option[:20]


def test_raw_text_findings_come_first():
    content = """
## 1. Question
a) A
b) **B**
## 2. Other
a) A
b) B
"""
    rules = [d.rule for d in lint(content)]
    assert rules == ["deprecated_bold_marker", "missing_correct_answer"]


# ---------------------------------------------------------------------------
# Rule selection and file entry point
# ---------------------------------------------------------------------------


def test_rule_selection_limits_output():
    content = "## 1. Question\na) A\nb) **B**\n## 1. Again\na) A\nb) B [x]\n"
    diagnostics = lint(content, rules=["duplicate_question_ids"])
    assert [d.rule for d in diagnostics] == ["duplicate_question_ids"]


def test_available_rules_have_descriptions():
    rules = get_available_rules()
    for name in (
        "deprecated_bold_marker",
        "deprecated_prefix_marker",
        "too_few_options",
        "missing_correct_answer",
        "ambiguous_single_choice",
        "missing_stem",
        "no_questions",
        "duplicate_question_ids",
    ):
        assert rules[name]


def test_lint_file_builds_report(tmp_path):
    path = tmp_path / "quiz.md"
    path.write_text("# Quiz\n## 1. Q\na) A\nb) **B**\n## 2. R\na) A\nb) B\n", encoding="utf-8")

    report = _run(lint_file(path))

    assert report.source_path == str(path)
    assert report.total_issues == 2
    assert report.warnings == 1
    assert report.errors == 1
    assert not report.is_clean

    data = report.to_dict()
    assert data["diagnostics"][0]["rule"] == "deprecated_bold_marker"
    assert data["diagnostics"][0]["severity"] == "warning"
    assert data["diagnostics"][0]["line"] == 4
