"""Data models for QTI package validation."""
from dataclasses import asdict, dataclass, field
from typing import Optional


@dataclass
class ValidatorOptions:
    """Options for a validation run."""
    strict: Optional[bool] = None  # None = inherit from the validator / config

    def merged(self, override: Optional["ValidatorOptions"]) -> "ValidatorOptions":
        """Return options with every non-None field of `override` applied."""
        if override is None:
            return ValidatorOptions(strict=self.strict)
        return ValidatorOptions(
            strict=override.strict if override.strict is not None else self.strict
        )


@dataclass
class ReportDetails:
    """Package facts collected while validating."""
    manifest_found: bool = False
    resource_count: int = 0
    item_count: int = 0
    test_found: bool = False


@dataclass
class ValidationReport:
    """Result of validating one QTI package."""
    is_valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    details: ReportDetails = field(default_factory=ReportDetails)

    def error(self, message: str) -> None:
        self.errors.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def fail(self, message: str) -> "ValidationReport":
        """Record a fatal error and return the report for early exit."""
        self.errors.append(message)
        self.is_valid = False
        return self

    def finalize(self) -> "ValidationReport":
        if self.errors:
            self.is_valid = False
        return self

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "details": asdict(self.details),
        }
