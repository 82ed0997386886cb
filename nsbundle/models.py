"""Core data models shared across nsbundle components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Namespace:
    """Caller-supplied prefix applied to every generated identifier."""

    token: str

    def owns(self, name: str) -> bool:
        """Return True when ``name`` already carries the namespace prefix."""
        return name.startswith(self.token)

    def prefix(self, name: str) -> str:
        """Prefix ``name`` exactly once; empty and owned names pass through."""
        if not name or self.owns(name):
            return name
        return f"{self.token}{name}"

    def __str__(self) -> str:
        return self.token


@dataclass(frozen=True)
class PageSource:
    """Raw text of one HTML document plus its location on disk."""

    path: Path
    html: str

    @property
    def directory(self) -> Path:
        return self.path.parent

    @property
    def name(self) -> str:
        return self.directory.name or self.path.stem

    @classmethod
    def read(cls, path: Path) -> "PageSource":
        resolved = Path(path).expanduser().resolve()
        return cls(path=resolved, html=resolved.read_text(encoding="utf-8"))


@dataclass
class ExtractedFragments:
    """Script fragments pulled out of a page, in document order."""

    external_modules: List[Path] = field(default_factory=list)
    inline_modules: List[str] = field(default_factory=list)
    inline_classic: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.external_modules or self.inline_modules or self.inline_classic)


@dataclass
class AssembledPage:
    """The two HTML variants produced for a page."""

    linked_html: str
    standalone_html: str


@dataclass
class BuildArtifacts:
    """Files written for a single page build."""

    page: str
    bundle_js: Path
    linked_html: Path
    standalone_html: Path
    source_map: Optional[Path] = None

    def paths(self) -> List[Path]:
        paths = [self.bundle_js, self.linked_html, self.standalone_html]
        if self.source_map is not None:
            paths.append(self.source_map)
        return paths

    def sizes(self) -> Dict[str, int]:
        """Byte size of each artifact keyed by file name."""
        return {path.name: path.stat().st_size for path in self.paths() if path.exists()}


@dataclass
class BatchOutcome:
    """Result of building every discovered page."""

    built: List[BuildArtifacts] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures
