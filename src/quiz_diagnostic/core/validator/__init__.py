"""QTI package validator (manifest and legacy single-file dialects)."""
from .engine import QtiValidator, validate
from .filesystem import ArchiveError, LocalFilesystem, PackageFilesystem
from .models import ReportDetails, ValidationReport, ValidatorOptions
from .registry import IdentifierRegistry

__all__ = [
    "QtiValidator",
    "validate",
    "ArchiveError",
    "LocalFilesystem",
    "PackageFilesystem",
    "ReportDetails",
    "ValidationReport",
    "ValidatorOptions",
    "IdentifierRegistry",
]
