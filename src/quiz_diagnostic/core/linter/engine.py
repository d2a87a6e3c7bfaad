"""Lint engine - runs raw-text and structural rules over a quiz document."""
import logging
from pathlib import Path
from typing import Callable, Optional

from quiz_diagnostic.core.quiz.models import Quiz
from quiz_diagnostic.core.quiz.parser import FRONTMATTER_PATTERN, parse_quiz

from .models import Diagnostic, LintReport
from .rules import QUESTION_RULES, QUIZ_RULES, RAW_TEXT_RULES
from .rules.markers import DEFAULT_CONTEXT_WIDTH, scan_markers
from .rules.questions import no_questions

logger = logging.getLogger(__name__)

QuizParser = Callable[[str], Quiz]


def lint(
    content: str,
    parser: QuizParser = parse_quiz,
    rules: Optional[list[str]] = None,
    context_width: int = DEFAULT_CONTEXT_WIDTH
) -> list[Diagnostic]:
    """
    Lint Markdown quiz content.

    Phase 1 scans the raw text for deprecated markers. Phase 2 parses the
    document and checks every question, then the quiz as a whole. Both
    phases always run; only an empty quiz stops phase 2 early.

    Args:
        content: The Markdown quiz document
        parser: Markdown -> Quiz function (default: parse_quiz)
        rules: Specific rules to run (default: all). The empty-quiz check
            always runs.
        context_width: Maximum length of the context excerpt for raw-text rules

    Returns:
        Diagnostics in discovery order
    """
    selected = _select_rules(rules)
    diagnostics: list[Diagnostic] = []

    # Phase 1: raw text, frontmatter excluded
    body, frontmatter_lines = _extract_frontmatter(content)
    marker_rules = [rule for name, rule in RAW_TEXT_RULES.items() if name in selected]

    try:
        for diagnostic in scan_markers(body, marker_rules, context_width=context_width):
            diagnostic.line += frontmatter_lines
            diagnostics.append(diagnostic)
    except Exception as e:
        logger.error(f"Raw-text scan failed: {e}")

    # Phase 2: structure
    quiz = parser(content)

    empty = list(no_questions(quiz))
    if empty:
        diagnostics.extend(empty)
        return diagnostics

    for index, question in enumerate(quiz.questions, 1):
        for rule_name, rule_func in QUESTION_RULES.items():
            if rule_name not in selected:
                continue
            try:
                diagnostics.extend(rule_func(question, index))
            except Exception as e:
                logger.error(f"Rule {rule_name} failed on question {index}: {e}")

    for rule_name, rule_func in QUIZ_RULES.items():
        if rule_name not in selected:
            continue
        try:
            diagnostics.extend(rule_func(quiz))
        except Exception as e:
            logger.error(f"Rule {rule_name} failed: {e}")

    return diagnostics


# Name used by callers that lint in-memory content
lint_content = lint


async def lint_file(
    path: Path,
    rules: Optional[list[str]] = None,
    context_width: int = DEFAULT_CONTEXT_WIDTH
) -> LintReport:
    """
    Lint a Markdown quiz file.

    Args:
        path: Path to the .md file
        rules: Specific rules to run (default: all)
        context_width: Maximum length of the context excerpt

    Returns:
        LintReport with all diagnostics found
    """
    content = path.read_text(encoding='utf-8')

    report = LintReport(source_path=str(path))
    for diagnostic in lint(content, rules=rules, context_width=context_width):
        report.add(diagnostic)

    logger.info(
        f"Linted {path}: {report.errors} errors, {report.warnings} warnings"
    )
    return report


def get_available_rules() -> dict[str, str]:
    """
    Get list of available rules with descriptions.

    Returns:
        Dict mapping rule name to a one-line description
    """
    available = {name: rule.description for name, rule in RAW_TEXT_RULES.items()}
    for name, func in {**QUESTION_RULES, **QUIZ_RULES, "no_questions": no_questions}.items():
        available[name] = (func.__doc__ or "No description").strip().split('\n')[0]
    return available


def _select_rules(rules: Optional[list[str]]) -> set[str]:
    known = set(RAW_TEXT_RULES) | set(QUESTION_RULES) | set(QUIZ_RULES)
    if not rules:
        return known

    for name in rules:
        if name not in known:
            logger.warning(f"Unknown rule: {name}")
    return known.intersection(rules)


def _extract_frontmatter(content: str) -> tuple[str, int]:
    """
    Extract YAML frontmatter from content.

    Returns:
        Tuple of (content_without_frontmatter, num_frontmatter_lines)
    """
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return content, 0

    frontmatter = match.group()
    return content[len(frontmatter):], frontmatter.count('\n')
