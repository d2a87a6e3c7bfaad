"""Per-run state handed to every dialect check."""
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from urllib.parse import unquote
from xml.etree import ElementTree as ET

from .filesystem import PackageFilesystem
from .models import ValidationReport
from .registry import IdentifierRegistry
from .xmltree import parse_xml


@dataclass
class PackageContext:
    """Everything a check needs for one package: where, what to record, how strict."""
    root: Path
    fs: PackageFilesystem
    report: ValidationReport
    strict: bool = False
    registry: IdentifierRegistry = field(init=False)

    def __post_init__(self):
        self.registry = IdentifierRegistry(self.report)

    def resolve(self, href: str, base: Path | None = None) -> Path:
        """Path of a package-relative href (URL-style separators)."""
        clean = unquote(href.split("#", 1)[0].split("?", 1)[0]).lstrip("/")
        parts = PurePosixPath(clean).parts
        return (base or self.root).joinpath(*parts)

    def exists(self, href: str, base: Path | None = None) -> bool:
        return self.fs.exists(self.resolve(href, base))

    def load_xml(self, path: Path) -> ET.Element:
        """Read and parse a package file (errors propagate to the caller)."""
        return parse_xml(self.fs.read_text(path))
