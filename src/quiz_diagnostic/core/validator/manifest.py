"""Checks for manifest-dialect packages (imsmanifest.xml + item/test files)."""
from pathlib import Path
from xml.etree import ElementTree as ET
import logging

from .context import PackageContext
from .rules import (
    ABSOLUTE_URI_PATTERN,
    IMAGE_EXTENSION_PATTERN,
    ITEM_RESOURCE_PATTERN,
    LIMITED_INTERACTIONS,
    SECURITY_RULES,
    TEST_RESOURCE_PATTERN,
    UNSUPPORTED_INTERACTIONS,
    apply_rules,
    image_sources,
    is_valid_identifier,
)
from .xmltree import (
    XML_ERRORS,
    attr,
    children,
    descendants,
    describe_error,
    first,
    html_content,
    local_name,
)

logger = logging.getLogger(__name__)

MANIFEST_NAME = "imsmanifest.xml"


def check_manifest_package(ctx: PackageContext, manifest_path: Path) -> None:
    """
    Validate a manifest package rooted at ctx.root.

    All findings accumulate on ctx.report; nothing is raised for content
    problems.
    """
    report = ctx.report
    report.details.manifest_found = True

    try:
        manifest = ctx.load_xml(manifest_path)
    except XML_ERRORS as e:
        report.error(f"Invalid XML in {MANIFEST_NAME}: {describe_error(e)}")
        return

    if local_name(manifest) != "manifest":
        report.error(f"{MANIFEST_NAME} missing root <manifest> element")
        return

    ctx.registry.register(attr(manifest, "identifier"), "Manifest")

    resources = children(first(manifest, "resources"), "resource")
    report.details.resource_count = len(resources)
    logger.debug(f"Manifest declares {len(resources)} resources")

    for resource in resources:
        _check_resource(ctx, resource)

    if not report.details.test_found:
        report.warning(
            "No assessmentTest resource found (imsqti_test_xmlv2p1). "
            "This may just be an item bank."
        )


def _check_resource(ctx: PackageContext, resource: ET.Element) -> None:
    report = ctx.report
    ctx.registry.register(attr(resource, "identifier"), "Resource")

    resource_type = attr(resource, "type") or ""
    is_item = ITEM_RESOURCE_PATTERN.match(resource_type) is not None
    is_test = TEST_RESOURCE_PATTERN.match(resource_type) is not None
    if is_item:
        report.details.item_count += 1
    if is_test:
        report.details.test_found = True

    href = attr(resource, "href")
    xml_hrefs = []
    if href:
        if ctx.exists(href):
            xml_hrefs.append(href)
        else:
            report.error(f"Resource main file not found: {href}")

    for file_node in children(resource, "file"):
        file_href = attr(file_node, "href")
        if not file_href:
            continue
        if not ctx.exists(file_href):
            report.error(f"Missing resource file: {file_href}")
        else:
            xml_hrefs.append(file_href)

    if not (is_item or is_test):
        return

    # The main href is usually listed again as a <file>; check each path once
    checked = set()
    for xml_href in xml_hrefs:
        path = ctx.resolve(xml_href)
        if not xml_href.lower().endswith(".xml") or path in checked:
            continue
        checked.add(path)
        if is_item:
            _check_item_file(ctx, xml_href)
        else:
            _check_test_file(ctx, xml_href)


def _load_resource_xml(ctx: PackageContext, href: str) -> ET.Element | None:
    try:
        return ctx.load_xml(ctx.resolve(href))
    except XML_ERRORS as e:
        ctx.report.error(f"Invalid XML content in {href}: {describe_error(e)}")
        return None


def _check_item_file(ctx: PackageContext, href: str) -> None:
    item = _load_resource_xml(ctx, href)
    if item is None:
        return

    if local_name(item) != "assessmentItem":
        ctx.report.error(f"Invalid Item XML (missing assessmentItem): {href}")
        return

    ctx.registry.register(attr(item, "identifier"), f"Item {href}")
    check_item(ctx, item, href)


def check_item(ctx: PackageContext, item: ET.Element, href: str) -> None:
    """Content, grading and compatibility checks for one assessmentItem."""
    report = ctx.report
    identifier = attr(item, "identifier") or href

    outcomes = children(item, "outcomeDeclaration")
    if not any(attr(o, "identifier") == "SCORE" for o in outcomes):
        report.warning(f"Item missing SCORE outcomeDeclaration: {href}")

    item_body = first(item, "itemBody")
    body_html = html_content(item_body)
    apply_rules(SECURITY_RULES, body_html, report, item=identifier)

    if attr(item, "identifier") and not is_valid_identifier(identifier):
        report.warning(
            f"Identifier '{identifier}' contains special characters, may cause issues: {href}"
        )

    declarations = children(item, "responseDeclaration")
    choice_interactions = descendants(item_body, "choiceInteraction")

    for interaction in choice_interactions:
        declaration = _declaration_for(interaction, declarations)
        _check_cardinality(ctx, interaction, declaration, href)

    if choice_interactions:
        has_correct = any(
            first(d, "correctResponse/value") is not None for d in declarations
        )
        if not has_correct:
            report.error(f"Canvas import will fail: No correct answer defined in {href}")

        if first(item, "responseProcessing") is None:
            report.warning(f"Missing responseProcessing (may need manual grading): {href}")

    for name in UNSUPPORTED_INTERACTIONS:
        for _ in descendants(item_body, name):
            report.error(f"Unsupported Canvas interaction '{name}' in {href}")

    for name in LIMITED_INTERACTIONS:
        if descendants(item_body, name):
            report.warning(f"{name} has limited Canvas support: {href}")

    _check_images(ctx, body_html, href)


def _declaration_for(
    interaction: ET.Element,
    declarations: list[ET.Element]
) -> ET.Element | None:
    """Response declaration an interaction answers to (first one as fallback)."""
    response_id = attr(interaction, "responseIdentifier")
    for declaration in declarations:
        if response_id and attr(declaration, "identifier") == response_id:
            return declaration
    return declarations[0] if declarations else None


def _check_cardinality(
    ctx: PackageContext,
    interaction: ET.Element,
    declaration: ET.Element | None,
    href: str
) -> None:
    max_choices = attr(interaction, "maxChoices")
    if declaration is None or max_choices is None:
        return

    cardinality = attr(declaration, "cardinality")
    try:
        count = int(max_choices)
    except ValueError:
        logger.debug(f"Non-numeric maxChoices {max_choices!r} in {href}")
        return

    if cardinality == "single" and (count == 0 or count > 1):
        ctx.report.error(
            f"Mismatch: Cardinality 'single' but maxChoices '{max_choices}' in {href}"
        )
    elif cardinality == "multiple" and count == 1:
        ctx.report.error(
            f"Mismatch: Cardinality 'multiple' but maxChoices '{max_choices}' in {href}"
        )


def _check_images(ctx: PackageContext, body_html: str, href: str) -> None:
    for src in image_sources(body_html):
        if ABSOLUTE_URI_PATTERN.match(src):
            continue
        if not IMAGE_EXTENSION_PATTERN.search(src.split("?", 1)[0].split("#", 1)[0]):
            continue
        if ctx.exists(src, ctx.root / "items") or ctx.exists(src):
            continue
        ctx.report.error(f"Missing image file '{src}' referenced in {href}")


def _check_test_file(ctx: PackageContext, href: str) -> None:
    test = _load_resource_xml(ctx, href)
    if test is None:
        return

    if local_name(test) != "assessmentTest":
        ctx.report.error(f"Invalid Test XML (missing assessmentTest): {href}")
        return

    ctx.registry.register(attr(test, "identifier"), f"Test {href}")

    test_dir = ctx.resolve(href).parent
    for part in children(test, "testPart"):
        for section in children(part, "assessmentSection"):
            _walk_section(ctx, section, href, test_dir)


def _walk_section(
    ctx: PackageContext,
    section: ET.Element,
    href: str,
    test_dir: Path
) -> None:
    """Register a section and check its item refs, then recurse into subsections."""
    ctx.registry.register(attr(section, "identifier"), f"Section in {href}")

    for ref in children(section, "assessmentItemRef"):
        item_href = attr(ref, "href")
        if not item_href:
            continue
        if ctx.exists(item_href) or ctx.exists(item_href, test_dir):
            continue
        ctx.report.error(f"Test references missing item file: {item_href}")

    for subsection in children(section, "assessmentSection"):
        _walk_section(ctx, subsection, href, test_dir)
