"""Data models for parsed Markdown quizzes."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class QuestionType(Enum):
    """Question kinds the Markdown format can express."""
    MULTIPLE_CHOICE = "multiple_choice"
    MULTIPLE_ANSWERS = "multiple_answers"
    TRUE_FALSE = "true_false"
    OTHER = "other"

    @property
    def has_options(self) -> bool:
        """True for types answered by picking from a list of options."""
        return self is not QuestionType.OTHER


@dataclass
class Option:
    """A single answer option."""
    text: str
    is_correct: bool = False


@dataclass
class Question:
    """A question parsed from a `## ...` header and the lines below it."""
    id: str
    stem: str
    type: QuestionType
    points: float
    source_line: int
    options: list[Option] = field(default_factory=list)
    section: str | None = None

    @property
    def correct_options(self) -> list[Option]:
        return [o for o in self.options if o.is_correct]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "stem": self.stem,
            "type": self.type.value,
            "points": self.points,
            "source_line": self.source_line,
            "section": self.section,
            "options": [
                {"text": o.text, "is_correct": o.is_correct} for o in self.options
            ],
        }


@dataclass
class Section:
    """A `# Heading` grouping that sets the type of the questions below it."""
    title: str
    type: QuestionType
    source_line: int


@dataclass
class Quiz:
    """A parsed quiz document."""
    title: str = ""
    questions: list[Question] = field(default_factory=list)
    sections: list[Section] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
