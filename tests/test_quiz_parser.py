"""Tests for the Markdown quiz parser."""
from quiz_diagnostic.core.quiz import QuestionType, parse_quiz


def test_standard_quiz():
    quiz = parse_quiz("""
# Quiz Title

# Multiple Choice

## 1. Question 1 [2 pts]
1) Option A
2) **Option B**
""")
    assert quiz.title == "Quiz Title"
    assert len(quiz.questions) == 1

    question = quiz.questions[0]
    assert question.id == "1"
    assert question.points == 2
    assert question.type is QuestionType.MULTIPLE_CHOICE
    assert [o.text for o in question.options] == ["Option A", "Option B"]
    assert [o.is_correct for o in question.options] == [False, True]


def test_section_prefix_header():
    quiz = parse_quiz("""
# Statistics Exam

# Section: Multiple Choice

## 1. What is variance? [3 pts]
1) Sum of squares
2) **Average squared deviation**
""")
    assert quiz.title == "Statistics Exam"
    assert len(quiz.sections) == 1
    assert "Multiple Choice" in quiz.sections[0].title
    assert len(quiz.questions) == 1
    assert quiz.questions[0].section == "Multiple Choice"


def test_escaped_points_brackets():
    quiz = parse_quiz("""
# Quiz
## 1. Question Title \\[2 pts\\]
1) A
2) **B**
""")
    assert quiz.questions[0].points == 2
    assert quiz.questions[0].stem == "Question Title"


def test_default_points_from_frontmatter():
    quiz = parse_quiz("""---
title: Week 3
points: 4
---
## 1. First [2 pts]
a) A [x]
b) B

## 2. Second
a) A
b) B ✓
""")
    assert quiz.title == "Week 3"
    assert quiz.metadata["points"] == 4
    assert [q.points for q in quiz.questions] == [2, 4]


def test_source_lines_count_frontmatter():
    content = "---\ntitle: T\n---\n# Quiz\n\n## 1. First\na) A [x]\nb) B\n"
    quiz = parse_quiz(content)
    assert quiz.questions[0].source_line == 6


def test_invalid_frontmatter_is_ignored():
    quiz = parse_quiz("---\ntitle: [unclosed\n---\n## 1. Q\na) A [x]\nb) B\n")
    assert quiz.metadata == {}
    assert len(quiz.questions) == 1


def test_true_false_arrow_answers_generate_options():
    quiz = parse_quiz("""
# Section: True/False
## 1. Simple Fact
The sky is blue. -> True

## 2. Another Fact
Water is dry. -> False
""")
    q1, q2 = quiz.questions

    assert q1.type is QuestionType.TRUE_FALSE
    assert [o.text for o in q1.options] == ["True", "False"]
    assert q1.options[0].is_correct is True
    assert "-> True" not in q1.stem

    assert q2.options[1].text == "False"
    assert q2.options[1].is_correct is True


def test_arrow_answer_in_header():
    quiz = parse_quiz("""
# Section: True/False

## 1. R squared can range from 0 to 1. → True
""")
    question = quiz.questions[0]
    assert question.stem == "R squared can range from 0 to 1."
    assert question.options[0].text == "True"
    assert question.options[0].is_correct is True


def test_checkmark_is_stripped_and_marks_correct():
    quiz = parse_quiz("""
# Multiple Choice

## 1. What is variance?
1) Sum of squares
2) Average squared deviation from mean ✓
3) Standard deviation
4) Range
""")
    option = quiz.questions[0].options[1]
    assert option.text == "Average squared deviation from mean"
    assert option.is_correct is True
    assert len(quiz.questions[0].correct_options) == 1


def test_prefix_marker_marks_correct():
    quiz = parse_quiz("## 1. Q\n*a) Right\nb) Wrong\n")
    options = quiz.questions[0].options
    assert options[0].text == "Right"
    assert options[0].is_correct is True
    assert options[1].is_correct is False


def test_solution_blocks_are_skipped():
    quiz = parse_quiz("""
# Multiple Choice

## 1. What is variance?
1) Sum of squares
2) **Average squared deviation**

<div class="proof solution">

<span class="proof-title">*Solution*. </span>Variance measures the
average squared deviation from the mean. <div>nested</div> The formula
divides by N for population variance.

</div>

## 2. Second question
1) A
2) **B**
""")
    assert len(quiz.questions) == 2
    stem = quiz.questions[0].stem
    assert "Solution" not in stem
    assert "population variance" not in stem
    assert "nested" not in stem


def test_fenced_code_stays_in_stem():
    quiz = parse_quiz("""
## 1. What does this print?
```python
# not a heading
a) not an option
```
a) 1 [x]
b) 2
""")
    question = quiz.questions[0]
    assert len(quiz.questions) == 1
    assert "# not a heading" in question.stem
    assert "a) not an option" in question.stem
    assert len(question.options) == 2


def test_section_types_follow_keywords():
    quiz = parse_quiz("""
# Quiz
# Multiple Answers
## 1. Pick two
a) A [x]
b) B [x]
# Essay
## 2. Explain
""")
    assert [s.type for s in quiz.sections] == [
        QuestionType.MULTIPLE_ANSWERS,
        QuestionType.OTHER,
    ]
    assert quiz.questions[0].type is QuestionType.MULTIPLE_ANSWERS
    assert quiz.questions[1].type is QuestionType.OTHER


def test_headers_without_id_get_sequential_ids():
    quiz = parse_quiz("## What is 1+1?\na) 2 [x]\nb) 3\n## Another\na) x [x]\nb) y\n")
    assert [q.id for q in quiz.questions] == ["q1", "q2"]
    assert quiz.questions[0].stem == "What is 1+1?"


def test_empty_document():
    quiz = parse_quiz("")
    assert quiz.questions == []
    assert quiz.title == ""
