"""Identifier uniqueness tracking for one validation run."""
import logging

from .models import ValidationReport

logger = logging.getLogger(__name__)


class IdentifierRegistry:
    """
    Set of identifiers seen so far in a package.

    One instance per validation call. Every check that visits an
    identifier-bearing node receives it explicitly.
    """

    def __init__(self, report: ValidationReport):
        self._report = report
        self._seen: set[str] = set()

    def register(self, identifier: str | None, source: str) -> bool:
        """
        Record an identifier, reporting a duplicate as an error.

        Args:
            identifier: Identifier value (empty/None is ignored)
            source: Where it was declared, for the error message

        Returns:
            True if the identifier was new (or empty), False on duplicate
        """
        if not identifier:
            return True

        if identifier in self._seen:
            logger.debug(f"Duplicate identifier {identifier!r} in {source}")
            self._report.error(f"Duplicate identifier used: '{identifier}' in {source}")
            return False

        self._seen.add(identifier)
        return True

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._seen

    def __len__(self) -> int:
        return len(self._seen)
