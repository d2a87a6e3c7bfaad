"""Rule tables shared by the manifest and legacy QTI checks.

Each heuristic is a data entry (pattern + message + severity). The
checkers only decide which text a table is applied to.
"""
from dataclasses import dataclass
import re
from typing import Iterable, Iterator

from quiz_diagnostic.core.linter.models import Severity

from .models import ValidationReport


@dataclass(frozen=True)
class ContentRule:
    """A text pattern that produces one report entry when it matches."""
    name: str
    pattern: re.Pattern
    message: str           # str.format template, fields supplied by the caller
    severity: Severity
    strip_tags: bool = False

    def matches(self, text: str) -> bool:
        if self.strip_tags:
            text = TAG_PATTERN.sub("", text)
        return self.pattern.search(text) is not None


def apply_rules(
    rules: Iterable[ContentRule],
    text: str,
    report: ValidationReport,
    **fields
) -> list[str]:
    """
    Evaluate every rule against text and record matches on the report.

    Returns:
        Names of the rules that matched, in table order
    """
    matched = []
    for rule in rules:
        if not rule.matches(text):
            continue
        matched.append(rule.name)
        message = rule.message.format(construct=rule.name, **fields)
        if rule.severity == Severity.ERROR:
            report.error(message)
        else:
            report.warning(message)
    return matched


# Tags and comments, for rules that look at text between markup
TAG_PATTERN = re.compile(r'<!--.*?-->|</?[A-Za-z][^<>]*>', re.DOTALL)

# Embedded content that must never reach the LMS
DANGEROUS_CONSTRUCTS = ("<script", "<iframe", "<object", "<embed", "javascript:")

SECURITY_RULES = [
    ContentRule(
        name=construct,
        pattern=re.compile(re.escape(construct), re.IGNORECASE),
        message="Security Error: Potential malicious content ({construct}) detected in item {item}",
        severity=Severity.ERROR,
    )
    for construct in DANGEROUS_CONSTRUCTS
]

ESCAPED_ANCHOR_PATTERN = re.compile(r'&lt;a (?:href|class)=')
RAW_COMPARISON_PATTERN = re.compile(r'[<>]')
# "$" math that was never converted to \( \) delimiters
UNCONVERTED_MATH_PATTERN = re.compile(r'^(?!.*\\\$)(?!.*\\\()(?=.*\$)', re.DOTALL)

STEM_COMPATIBILITY_RULES = [
    ContentRule(
        name="escaped_anchor",
        pattern=ESCAPED_ANCHOR_PATTERN,
        message=(
            "Item {item}: Escaped HTML anchor tag detected - cross-references "
            "may not have been stripped properly"
        ),
        severity=Severity.WARNING,
    ),
    ContentRule(
        name="raw_comparison_operator",
        pattern=RAW_COMPARISON_PATTERN,
        message=(
            "Item {item}: Unescaped comparison operator detected - may render "
            "incorrectly in Canvas"
        ),
        severity=Severity.WARNING,
        strip_tags=True,
    ),
]

OPTION_COMPATIBILITY_RULES = [
    ContentRule(
        name="escaped_anchor",
        pattern=ESCAPED_ANCHOR_PATTERN,
        message="Item {item}, option {option}: Escaped HTML anchor tag detected",
        severity=Severity.WARNING,
    ),
    ContentRule(
        name="unconverted_math",
        pattern=UNCONVERTED_MATH_PATTERN,
        message="Item {item}, option {option}: Dollar signs detected - LaTeX may not be converted",
        severity=Severity.WARNING,
    ),
]

# Authoring-toolchain features counted across a legacy file
COMPATIBILITY_FEATURES = {
    "inline_code": re.compile(r'<code>.*?</code>', re.DOTALL),
    "latex_math": re.compile(r'\\\(.*?\\\)|\\\[.*?\\\]', re.DOTALL),
    "escaped_operators": re.compile(r'&lt;|&gt;'),
    "escaped_anchors": ESCAPED_ANCHOR_PATTERN,
    "unconverted_math": UNCONVERTED_MATH_PATTERN,
}

# Interactions the target LMS cannot import
UNSUPPORTED_INTERACTIONS = (
    "gapMatchInteraction",
    "orderInteraction",
    "associateInteraction",
    "graphicGapMatchInteraction",
    "hotspotInteraction",
)

# Interactions that import with reduced functionality
LIMITED_INTERACTIONS = ("matchInteraction",)

IDENTIFIER_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')

ITEM_RESOURCE_PATTERN = re.compile(r'^imsqti_item_xmlv\d+p\d+$')
TEST_RESOURCE_PATTERN = re.compile(r'^imsqti_test_xmlv\d+p\d+$')

IMAGE_SRC_PATTERN = re.compile(r'<img\b[^>]*?\bsrc\s*=\s*["\']([^"\']+)["\']', re.IGNORECASE)
IMAGE_EXTENSION_PATTERN = re.compile(r'\.(?:png|jpe?g|gif|svg|webp)$', re.IGNORECASE)
ABSOLUTE_URI_PATTERN = re.compile(r'^(?:[a-z][a-z0-9+.-]*:|//)', re.IGNORECASE)

# Legacy question_type values answered in free text (never answer-checked)
FREE_TEXT_QUESTION_TYPES = frozenset({"essay_question", "short_answer_question"})

KNOWN_QUESTION_TYPES = frozenset({
    "multiple_choice_question",
    "true_false_question",
    "multiple_answers_question",
    "short_answer_question",
    "essay_question",
    "numerical_question",
    "matching_question",
    "fill_in_multiple_blanks_question",
    "multiple_dropdowns_question",
    "calculated_question",
    "file_upload_question",
    "text_only_question",
})


def is_valid_identifier(identifier: str) -> bool:
    return IDENTIFIER_PATTERN.match(identifier) is not None


def image_sources(html: str) -> Iterator[str]:
    """`<img src>` values found in HTML, in order."""
    for match in IMAGE_SRC_PATTERN.finditer(html):
        yield match.group(1).strip()
