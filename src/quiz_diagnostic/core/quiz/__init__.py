"""Quiz model and Markdown parser."""
from .models import Option, Question, QuestionType, Quiz, Section
from .parser import parse_quiz

__all__ = ["Option", "Question", "QuestionType", "Quiz", "Section", "parse_quiz"]
