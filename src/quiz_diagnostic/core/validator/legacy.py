"""Checks for single-file legacy packages (QTI 1.2 `questestinterop`)."""
from pathlib import Path
from xml.etree import ElementTree as ET
import logging
import math

from .context import PackageContext
from .rules import (
    ABSOLUTE_URI_PATTERN,
    COMPATIBILITY_FEATURES,
    FREE_TEXT_QUESTION_TYPES,
    KNOWN_QUESTION_TYPES,
    OPTION_COMPATIBILITY_RULES,
    SECURITY_RULES,
    STEM_COMPATIBILITY_RULES,
    apply_rules,
    image_sources,
    is_valid_identifier,
)
from .xmltree import attr, children, descendants, first, html_content, text_of

logger = logging.getLogger(__name__)

LEGACY_ROOT = "questestinterop"
MIN_STEM_LENGTH = 3


def check_legacy_package(ctx: PackageContext, root: ET.Element, file_path: Path) -> None:
    """
    Validate one `questestinterop` document.

    Args:
        ctx: Run context (report, registry, strict flag)
        root: Parsed document root
        file_path: File the document came from (for logging)
    """
    report = ctx.report
    logger.info(f"Validating QTI 1.2 document {file_path.name}")

    assessment = first(root, "assessment")
    if assessment is None:
        report.error("QTI 1.2: Missing <assessment> element")
        return

    # A legacy file is its own manifest and test
    report.details.manifest_found = True
    report.details.test_found = True

    ctx.registry.register(attr(assessment, "ident"), "Assessment")

    if ctx.strict:
        if not attr(assessment, "ident"):
            report.error('Strict: Assessment missing required "ident" attribute')
        if not attr(assessment, "title"):
            report.warning('Strict: Assessment missing "title" attribute (recommended)')

    sections = children(assessment, "section")
    if not sections:
        report.error("QTI 1.2: Missing <section> element")
        return

    items = collect_items(sections)
    report.details.item_count = len(items)
    if not items:
        report.error("QTI 1.2: No <item> elements found")
        return

    _log_compatibility_features(root, file_path)

    for index, item in enumerate(items):
        _check_item(ctx, item, index)


def collect_items(sections: list[ET.Element]) -> list[ET.Element]:
    """Items of every section in document order, nested sections included."""
    items = []
    for section in sections:
        for child in section:
            if child.tag == "item":
                items.append(child)
            elif child.tag == "section":
                items.extend(collect_items([child]))
    return items


def item_metadata(item: ET.Element) -> dict[str, str]:
    """`qtimetadatafield` label -> entry pairs of an item."""
    metadata = {}
    for field in descendants(first(item, "itemmetadata"), "qtimetadatafield"):
        label = text_of(first(field, "fieldlabel")).strip()
        if label:
            metadata[label] = text_of(first(field, "fieldentry")).strip()
    return metadata


def _log_compatibility_features(root: ET.Element, file_path: Path) -> None:
    counts = dict.fromkeys(COMPATIBILITY_FEATURES, 0)
    for mattext in root.iter("mattext"):
        html = html_content(mattext)
        for name, pattern in COMPATIBILITY_FEATURES.items():
            counts[name] += len(pattern.findall(html))
    logger.debug(f"Compatibility features in {file_path.name}: {counts}")


def _check_item(ctx: PackageContext, item: ET.Element, index: int) -> None:
    report = ctx.report
    raw_ident = attr(item, "ident")
    item_id = raw_ident or f"item_{index + 1}"

    ctx.registry.register(raw_ident, f"Item {item_id}")

    presentation = first(item, "presentation")
    if presentation is None:
        report.error(f"QTI 1.2: Item {item_id} missing <presentation> element")
        return

    stem = first(presentation, "material/mattext")
    if stem is not None:
        question_text = html_content(stem)
    else:
        question_text = text_of(first(presentation, "material"))
    if len(question_text.strip()) < MIN_STEM_LENGTH:
        report.error(
            f"Canvas import may fail: Question stem appears empty or too short for item {item_id}"
        )

    apply_rules(SECURITY_RULES, question_text, report, item=item_id)
    apply_rules(STEM_COMPATIBILITY_RULES, question_text, report, item=item_id)

    metadata = item_metadata(item)
    question_type = metadata.get("question_type", "")

    if ctx.strict:
        _check_strict_item(ctx, item, item_id, raw_ident, metadata)

    option_texts = []
    response_lid = next(iter(descendants(presentation, "response_lid")), None)
    if response_lid is not None:
        option_texts = _check_choice_response(ctx, item, response_lid, item_id, question_type)
    elif not descendants(presentation, "response_str"):
        report.error(
            f"QTI 1.2: Item {item_id} missing response element (response_lid or response_str)"
        )

    for html in [question_text, *option_texts]:
        if any(not ABSOLUTE_URI_PATTERN.match(src) for src in image_sources(html)):
            report.warning(
                f"Item {item_id} has image with relative path - may not display in Canvas"
            )
            break


def _check_strict_item(
    ctx: PackageContext,
    item: ET.Element,
    item_id: str,
    raw_ident: str | None,
    metadata: dict[str, str]
) -> None:
    report = ctx.report

    if first(item, "itemmetadata/qtimetadata") is None:
        report.error(f"Strict: Item {item_id} missing <itemmetadata> with <qtimetadata>")

    points = _parse_points(metadata.get("points_possible"))
    if points is None:
        report.error(f'Strict: Item {item_id} missing "points_possible" metadata')
    elif points <= 0:
        report.warning(f"Strict: Item {item_id} has zero or negative points ({points:g})")

    question_type = metadata.get("question_type")
    if not question_type:
        report.error(f'Strict: Item {item_id} missing "question_type" metadata')
    elif question_type not in KNOWN_QUESTION_TYPES:
        report.warning(f"Strict: Item {item_id} has unrecognized question_type '{question_type}'")

    if raw_ident is None:
        report.error('Strict: Item missing required "ident" attribute')
    elif not is_valid_identifier(raw_ident):
        report.error(f'Strict: Item identifier "{raw_ident}" contains invalid characters')

    if not attr(item, "title"):
        report.warning(f'Strict: Item {item_id} missing "title" attribute (recommended)')


def _check_choice_response(
    ctx: PackageContext,
    item: ET.Element,
    response_lid: ET.Element,
    item_id: str,
    question_type: str
) -> list[str]:
    """Option and grading checks for a `response_lid`; returns the option HTML."""
    report = ctx.report
    option_texts = []

    render_choice = next(iter(descendants(response_lid, "render_choice")), None)
    if render_choice is not None:
        labels = descendants(render_choice, "response_label")
        if len(labels) < 2:
            report.error(f"Canvas import may fail: Less than 2 answer options for item {item_id}")

        for label in labels:
            option_id = attr(label, "ident") or "?"
            html = html_content(first(label, "material/mattext"))
            option_texts.append(html)
            apply_rules(OPTION_COMPATIBILITY_RULES, html, report, item=item_id, option=option_id)

    is_free_text = question_type in FREE_TEXT_QUESTION_TYPES
    resprocessing = first(item, "resprocessing")

    if resprocessing is None:
        if is_free_text:
            return option_texts
        if ctx.strict:
            report.error(f"Strict: Item {item_id} missing required <resprocessing> element")
        else:
            report.warning(f"Item {item_id} missing <resprocessing> (may need manual grading)")
        return option_texts

    has_answer = any(
        descendants(condition, "varequal")
        for condition in descendants(resprocessing, "conditionvar")
    )
    if not has_answer and not is_free_text:
        report.error(f"Canvas import may fail: No correct answer defined for item {item_id}")

    if ctx.strict:
        setvars = descendants(resprocessing, "setvar")
        if not setvars:
            report.warning(f"Strict: Item {item_id} resprocessing missing <setvar> for score assignment")
        elif any(not _is_complete_setvar(setvar) for setvar in setvars):
            report.warning(f"Strict: Item {item_id} setvar missing varname/action attributes")

        if first(resprocessing, "outcomes/decvar") is None:
            report.warning(f"Strict: Item {item_id} missing <outcomes><decvar> declaration")

    return option_texts


def _is_complete_setvar(setvar: ET.Element) -> bool:
    # "actoin" is a misspelling some exporters emit
    has_name = attr(setvar, "varname") or attr(setvar, "respident")
    has_action = attr(setvar, "action") or attr(setvar, "actoin")
    return bool(has_name or has_action)


def _parse_points(value: str | None) -> float | None:
    """Numeric points_possible, or None when absent or not a number."""
    if not value:
        return None
    try:
        points = float(value)
    except ValueError:
        return None
    return None if math.isnan(points) else points
