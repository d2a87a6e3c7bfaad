"""Markdown quiz parser.

Turns an authoring-format Markdown document into a `Quiz`:

    ---
    title: Week 3
    points: 2
    ---
    # Section: Multiple Choice
    ## 1. What is variance? [3 pts]
    1) Sum of squares
    2) Average squared deviation [x]

    # True/False
    ## 2. R squared can range from 0 to 1. -> True

The parser is permissive: it never raises on malformed content. Anything it
cannot place becomes stem text, and the linter decides what is wrong.
"""
from dataclasses import dataclass, field
import logging
import re

import yaml

from .models import Option, Question, QuestionType, Quiz, Section

logger = logging.getLogger(__name__)

DEFAULT_TYPE = QuestionType.MULTIPLE_CHOICE
DEFAULT_POINTS = 1.0

FRONTMATTER_PATTERN = re.compile(r'^---\s*\n(.*?)\n---\s*\n', re.DOTALL)

H1_PATTERN = re.compile(r'^#\s+(.+?)\s*$')
QUESTION_PATTERN = re.compile(r'^##\s+(.*?)\s*$')
QUESTION_ID_PATTERN = re.compile(r'^([A-Za-z0-9_-]+)[.)](?:\s+(.*))?$')
SECTION_PREFIX_PATTERN = re.compile(r'^section\s*:\s*', re.IGNORECASE)

# `[2 pts]`, `[1 pt]`, `[3 points]`, and the escaped `\[2 pts\]` form
POINTS_PATTERN = re.compile(
    r'\s*\\?\[\s*(\d+(?:\.\d+)?)\s*(?:pts?|points?)\s*\\?\]',
    re.IGNORECASE
)
ARROW_ANSWER_PATTERN = re.compile(r'\s*(?:->|→)\s*(true|false)\s*$', re.IGNORECASE)

LABELED_OPTION_PATTERN = re.compile(r'^\s*(\*)?([A-Za-z]|\d{1,2})\)\s+(.*)$')
DASH_OPTION_PATTERN = re.compile(r'^\s*-\s+(.*)$')

CORRECT_MARKER_PATTERNS = [
    re.compile(r'\s*\[(?:x|correct)\]\s*', re.IGNORECASE),
    re.compile(r'\s*[✓✔]\s*'),
]
BOLD_OPTION_PATTERN = re.compile(r'\*\*([^*]+)\*\*')

FENCE_PATTERN = re.compile(r'^\s*(```|~~~)')
SOLUTION_OPEN_PATTERN = re.compile(
    r'<div\b[^>]*class\s*=\s*["\'][^"\']*\bsolution\b',
    re.IGNORECASE
)

# Checked in order: "multiple answers" must win over "multiple choice"
SECTION_TYPE_KEYWORDS = [
    (re.compile(r'multiple[\s_-]+answers?', re.IGNORECASE), QuestionType.MULTIPLE_ANSWERS),
    (re.compile(r'true\s*(?:/|-|or)\s*false', re.IGNORECASE), QuestionType.TRUE_FALSE),
    (re.compile(r'multiple[\s_-]+choice', re.IGNORECASE), QuestionType.MULTIPLE_CHOICE),
    (
        re.compile(r'essay|short[\s_-]+answer|numeric(?:al)?|fill[\s_-]+in', re.IGNORECASE),
        QuestionType.OTHER
    ),
]


@dataclass
class _PendingQuestion:
    """Question being accumulated until the next header."""
    id: str
    header: str
    points: float
    source_line: int
    type: QuestionType
    section: str | None
    body: list[str] = field(default_factory=list)
    options: list[Option] = field(default_factory=list)
    arrow_answer: str | None = None

    def build(self) -> Question:
        stem = "\n".join([self.header, *self.body]).strip()
        qtype = QuestionType.TRUE_FALSE if self.arrow_answer else self.type
        options = list(self.options)

        if qtype is QuestionType.TRUE_FALSE and not options and self.arrow_answer:
            options = [
                Option("True", is_correct=self.arrow_answer == "true"),
                Option("False", is_correct=self.arrow_answer == "false"),
            ]

        return Question(
            id=self.id,
            stem=stem,
            type=qtype,
            points=self.points,
            source_line=self.source_line,
            options=options,
            section=self.section,
        )


def parse_quiz(content: str) -> Quiz:
    """
    Parse a Markdown quiz document.

    Args:
        content: Full document text, optionally starting with YAML frontmatter

    Returns:
        Quiz with questions in document order. `source_line` values are
        1-based and count frontmatter lines.
    """
    metadata, body, offset = _split_frontmatter(content)

    quiz = Quiz(metadata=metadata)
    if isinstance(metadata.get("title"), str):
        quiz.title = metadata["title"]

    default_points = _coerce_points(metadata.get("points"), DEFAULT_POINTS)

    section_type = DEFAULT_TYPE
    section_title: str | None = None
    heading_title_seen = False
    pending: _PendingQuestion | None = None

    in_fence = False
    solution_depth = 0

    for line_num, line in enumerate(body.split('\n'), offset + 1):
        # Solution blocks are dropped wholesale, nested divs included
        if solution_depth > 0:
            solution_depth += _div_balance(line)
            continue
        if not in_fence and SOLUTION_OPEN_PATTERN.search(line):
            solution_depth = _div_balance(line)
            continue

        if FENCE_PATTERN.match(line):
            in_fence = not in_fence
            if pending is not None:
                pending.body.append(line)
            continue

        if in_fence:
            if pending is not None:
                pending.body.append(line)
            continue

        if match := H1_PATTERN.match(line):
            if pending is not None:
                quiz.questions.append(pending.build())
                pending = None

            heading = match.group(1)
            has_prefix = SECTION_PREFIX_PATTERN.match(heading) is not None
            name = SECTION_PREFIX_PATTERN.sub('', heading).strip()
            heading_type = _section_type(name)

            if not has_prefix and heading_type is None and not heading_title_seen:
                heading_title_seen = True
                quiz.title = quiz.title or name
                continue

            section_type = heading_type or DEFAULT_TYPE
            section_title = name
            quiz.sections.append(Section(title=name, type=section_type, source_line=line_num))
            continue

        if match := QUESTION_PATTERN.match(line):
            if pending is not None:
                quiz.questions.append(pending.build())
            pending = _start_question(
                match.group(1),
                line_num=line_num,
                auto_id=f"q{len(quiz.questions) + 1}",
                default_points=default_points,
                section_type=section_type,
                section_title=section_title,
            )
            continue

        if pending is None or not line.strip():
            continue

        option = _parse_option(line)
        if option is not None:
            pending.options.append(option)
            continue

        if arrow := ARROW_ANSWER_PATTERN.search(line):
            pending.arrow_answer = arrow.group(1).lower()
            remainder = line[:arrow.start()].strip()
            if remainder:
                pending.body.append(remainder)
            continue

        pending.body.append(line.strip())

    if pending is not None:
        quiz.questions.append(pending.build())

    logger.debug(
        f"Parsed quiz '{quiz.title}': {len(quiz.questions)} questions, "
        f"{len(quiz.sections)} sections"
    )
    return quiz


def _split_frontmatter(content: str) -> tuple[dict, str, int]:
    """
    Split YAML frontmatter from the document body.

    Returns:
        Tuple of (metadata, body, number_of_frontmatter_lines)
    """
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return {}, content, 0

    frontmatter = match.group()
    offset = frontmatter.count('\n')
    body = content[len(frontmatter):]

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        logger.warning(f"Failed to parse quiz frontmatter: {e}")
        return {}, body, offset

    if not isinstance(data, dict):
        logger.warning("Quiz frontmatter is not a mapping, ignoring")
        return {}, body, offset

    return data, body, offset


def _start_question(
    header: str,
    line_num: int,
    auto_id: str,
    default_points: float,
    section_type: QuestionType,
    section_title: str | None,
) -> _PendingQuestion:
    qid = auto_id
    if match := QUESTION_ID_PATTERN.match(header):
        qid = match.group(1)
        header = match.group(2) or ""

    points = default_points
    if match := POINTS_PATTERN.search(header):
        points = float(match.group(1))
        header = POINTS_PATTERN.sub('', header, count=1)

    arrow_answer = None
    if match := ARROW_ANSWER_PATTERN.search(header):
        arrow_answer = match.group(1).lower()
        header = header[:match.start()]

    return _PendingQuestion(
        id=qid,
        header=header.strip(),
        points=points,
        source_line=line_num,
        type=section_type,
        section=section_title,
        arrow_answer=arrow_answer,
    )


def _parse_option(line: str) -> Option | None:
    """Parse an option line, or return None when the line is not one."""
    prefixed = False
    if match := LABELED_OPTION_PATTERN.match(line):
        prefixed = match.group(1) is not None
        text = match.group(3)
    elif match := DASH_OPTION_PATTERN.match(line):
        text = match.group(1)
    else:
        return None

    text, marked = _strip_correct_markers(text)
    return Option(text=text, is_correct=marked or prefixed)


def _strip_correct_markers(text: str) -> tuple[str, bool]:
    correct = False
    for pattern in CORRECT_MARKER_PATTERNS:
        text, count = pattern.subn(' ', text)
        correct = correct or count > 0

    text = re.sub(r'[ \t]{2,}', ' ', text).strip()

    if bold := BOLD_OPTION_PATTERN.fullmatch(text):
        text = bold.group(1).strip()
        correct = True

    return text, correct


def _section_type(name: str) -> QuestionType | None:
    for pattern, qtype in SECTION_TYPE_KEYWORDS:
        if pattern.search(name):
            return qtype
    return None


def _div_balance(line: str) -> int:
    lowered = line.lower()
    return len(re.findall(r'<div\b', lowered)) - lowered.count('</div>')


def _coerce_points(value, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric default points in frontmatter: {value!r}")
        return default
