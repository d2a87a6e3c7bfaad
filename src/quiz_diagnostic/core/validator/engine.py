"""Validator entry point - dispatches a package to the legacy or manifest checks."""
import logging
from pathlib import Path
from typing import Optional

from quiz_diagnostic.config import Config

from .context import PackageContext
from .filesystem import ArchiveError, LocalFilesystem, PackageFilesystem
from .legacy import LEGACY_ROOT, check_legacy_package
from .manifest import check_manifest_package
from .models import ValidationReport, ValidatorOptions
from .xmltree import XML_ERRORS, local_name

logger = logging.getLogger(__name__)


class QtiValidator:
    """
    Structural validator for QTI packages (directory or .zip).

    A single-file QTI 1.2 document at the package root takes precedence;
    otherwise the package must carry an imsmanifest.xml.
    """

    def __init__(
        self,
        options: Optional[ValidatorOptions] = None,
        filesystem: Optional[PackageFilesystem] = None,
        config: Optional[Config] = None
    ):
        self.config = config or Config()
        self.options = options or ValidatorOptions()
        self.fs = filesystem or LocalFilesystem(self.config.work_dir)

    def _is_strict(self, options: Optional[ValidatorOptions]) -> bool:
        merged = self.options.merged(options)
        if merged.strict is None:
            return self.config.strict
        return merged.strict

    async def validate_package(
        self,
        path: str | Path,
        options: Optional[ValidatorOptions] = None
    ) -> ValidationReport:
        """
        Validate a QTI package.

        Args:
            path: Package directory or .zip archive
            options: Per-call overrides of the validator's options

        Returns:
            ValidationReport (never raises for package problems)
        """
        path = Path(path)
        strict = self._is_strict(options)
        report = ValidationReport()

        logger.info(f"Validating {path} (strict={strict})")

        try:
            if not self.fs.exists(path):
                return report.fail(f"File not found: {path}")

            with self.fs.working_area(self.config.workspace_prefix) as work_area:
                if self.fs.is_file(path) and path.suffix.lower() == ".zip":
                    try:
                        self.fs.extract_archive(path, work_area)
                    except ArchiveError as e:
                        logger.warning(f"Could not extract {path}: {e}")
                        return report.fail("Failed to unzip file. Is it a valid zip archive?")
                    root = work_area
                elif self.fs.is_dir(path):
                    root = path
                else:
                    return report.fail("Input must be a directory or .zip file")

                ctx = PackageContext(root=root, fs=self.fs, report=report, strict=strict)
                self._check_root(ctx)

        except Exception as e:
            logger.error(f"Validation of {path} failed: {e}", exc_info=True)
            report.error(f"Validation Error: {e}")

        report.finalize()
        logger.info(
            f"Validated {path}: {len(report.errors)} errors, {len(report.warnings)} warnings"
        )
        return report

    def _check_root(self, ctx: PackageContext) -> None:
        for candidate in self.fs.list_xml_files(ctx.root):
            try:
                document = ctx.load_xml(candidate)
            except XML_ERRORS as e:
                logger.debug(f"Skipping unparseable {candidate.name}: {e}")
                continue

            if local_name(document) == LEGACY_ROOT:
                check_legacy_package(ctx, document, candidate)
                return

        manifest_path = ctx.root / self.config.manifest_name
        if not self.fs.exists(manifest_path):
            ctx.report.error(
                f"{self.config.manifest_name} not found in root (QTI 2.1) "
                "and no valid QTI 1.2 XML file found"
            )
            return

        check_manifest_package(ctx, manifest_path)


async def validate(path: str | Path, strict: bool = False) -> ValidationReport:
    """Validate a package with default settings."""
    return await QtiValidator(ValidatorOptions(strict=strict)).validate_package(path)
