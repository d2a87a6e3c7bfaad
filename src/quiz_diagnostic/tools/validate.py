"""validate_qti_package tool implementation."""
import logging

from quiz_diagnostic.config import Config
from quiz_diagnostic.core.validator import QtiValidator, ValidatorOptions

logger = logging.getLogger(__name__)


def register(mcp, config: Config):
    """Register validate_qti_package tool with MCP server."""

    validator = QtiValidator(config=config)

    @mcp.tool()
    async def validate_qti_package(
        package_path: str,
        strict: bool | None = None
    ) -> dict:
        """
        Validate a QTI package (directory or .zip) before LMS import.

        Accepts either a single-file QTI 1.2 export (questestinterop) or a
        QTI 2.1 package with imsmanifest.xml. Reports structural problems,
        duplicate identifiers, ungradable items, dangerous embedded content
        and known import incompatibilities.

        Args:
            package_path: Path to the package directory or .zip archive
            strict: Apply strict metadata/identifier rules
                (default: QUIZ_DIAGNOSTIC_STRICT setting)

        Returns:
            Dictionary with:
            - is_valid (bool): False when any error was found
            - errors (list[str]): Problems that block import
            - warnings (list[str]): Problems worth reviewing
            - details (dict): manifest_found, resource_count, item_count, test_found

        Example:
            {
                "package_path": "build/week-03.zip",
                "strict": true
            }
        """
        logger.info(f"Validating {package_path} (strict={strict})")

        report = await validator.validate_package(
            package_path, ValidatorOptions(strict=strict)
        )

        logger.info(
            f"Validation complete: valid={report.is_valid} "
            f"({len(report.errors)} errors, {len(report.warnings)} warnings)"
        )
        return report.to_dict()
