"""Raw-text rules for deprecated correct-answer markers.

These run line by line before the document is parsed, so they see the
markers exactly as the author typed them. Recommended markers are
`[x]`, `✓`, `✔` and `[correct]`.
"""
from dataclasses import dataclass
import re
from typing import Generator, Iterable, Optional

from ..models import Diagnostic, Severity

DEFAULT_CONTEXT_WIDTH = 50


@dataclass(frozen=True)
class MarkerRule:
    """A line pattern that flags a deprecated marker convention."""
    name: str
    pattern: re.Pattern
    message: str
    description: str
    severity: Severity = Severity.WARNING
    exclude: Optional[re.Pattern] = None

    def matches(self, line: str) -> bool:
        if not self.pattern.search(line):
            return False
        return self.exclude is None or not self.exclude.search(line)


MARKER_RULES: list[MarkerRule] = [
    MarkerRule(
        name="deprecated_bold_marker",
        # a) **text**, *1) **text**, - **text**
        pattern=re.compile(
            r'^\s*(?:\*?(?:[a-z]|\d{1,2})\)|-)\s+\*\*[^*]+\*\*',
            re.IGNORECASE
        ),
        message=(
            "Deprecated: **bold** marker for correct answers. Use [x] or ✓ instead. "
            "Bold conflicts with LaTeX formulas and reveals answers in preview."
        ),
        description="Flag **bold** used to mark the correct option.",
    ),
    MarkerRule(
        name="deprecated_prefix_marker",
        # *a) text, *1) text
        pattern=re.compile(r'^\s*\*(?:[a-z]|\d{1,2})\)\s+', re.IGNORECASE),
        exclude=re.compile(r'^\s*\*\*'),
        message=(
            "Deprecated: *prefix marker for correct answers. Use [x] or ✓ instead. "
            "Asterisk prefix conflicts with Markdown lists."
        ),
        description="Flag an asterisk prefix before the option label.",
    ),
]


def scan_markers(
    content: str,
    rules: Iterable[MarkerRule] = MARKER_RULES,
    context_width: int = DEFAULT_CONTEXT_WIDTH
) -> Generator[Diagnostic, None, None]:
    """
    Scan raw content line by line against the marker rule table.

    Diagnostics come out in line order; rules that match the same line
    keep table order.
    """
    rules = list(rules)

    for line_num, line in enumerate(content.split('\n'), 1):
        for rule in rules:
            if rule.matches(line):
                yield Diagnostic(
                    rule=rule.name,
                    severity=rule.severity,
                    message=rule.message,
                    line=line_num,
                    context=line.strip()[:context_width],
                )
