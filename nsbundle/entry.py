"""Combine extracted fragments into one synthetic bundler entry point."""

from __future__ import annotations

import os
import re
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List

from .logging import get_logger
from .models import ExtractedFragments

ENTRY_FILENAME = "entry.js"

# Comments and string literals are consumed whole so that only real
# `import ... from`, `export ... from`, bare `import '...'` and `import(...)`
# specifiers reach the `spec` group.
_SOURCE_TOKEN = re.compile(
    r"""
    (?P<comment>//[^\n]*|/\*.*?\*/)
    | (?P<string>"(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*'|`(?:\\.|[^`\\])*`)
    | (?P<head>(?<![\w$.])
        (?:(?:import|export)\b[^;'"`()]*?\bfrom\s*
          |import\s*\(\s*
          |import\s*))
      (?P<q>["'])(?P<spec>[^"'\n]+)(?P=q)
    """,
    re.VERBOSE | re.DOTALL,
)

_logger = get_logger("entry")


class EntrySynthesizer:
    """Builds the module-graph root handed to the bundler."""

    def synthesize(self, fragments: ExtractedFragments, page_dir: Path) -> str:
        """Return entry source: re-exports, then inline modules, then classic scripts."""
        parts: List[str] = []

        if fragments.external_modules:
            for module in fragments.external_modules:
                parts.append(f"export * from '{_as_posix(module)}';\n")
            parts.append("\n")

        if fragments.inline_modules:
            parts.append("// Inline module scripts\n")
            for script in fragments.inline_modules:
                parts.append(self.absolutize_imports(script, page_dir))
                parts.append("\n\n")

        if fragments.inline_classic:
            parts.append("// Inline classic scripts, run after module code\n")
            parts.append("(function() {\n")
            parts.append("\n\n".join(fragments.inline_classic))
            parts.append("\n})();\n")

        return "".join(parts)

    @staticmethod
    def absolutize_imports(script: str, page_dir: Path) -> str:
        """Rewrite relative import specifiers to absolute paths under ``page_dir``."""
        base = Path(page_dir).resolve()

        def replace(match: re.Match[str]) -> str:
            specifier = match.group("spec")
            if specifier is None or not _is_relative(specifier):
                return match.group(0)
            resolved = _as_posix(Path(os.path.normpath(base / specifier)))
            quote = match.group("q")
            return f"{match.group('head')}{quote}{resolved}{quote}"

        return _SOURCE_TOKEN.sub(replace, script)


@contextmanager
def synthetic_entry(content: str, directory: Path | None = None) -> Iterator[Path]:
    """Write ``content`` to a temporary entry file and remove it on exit.

    The file lives in its own temporary directory, created inside
    ``directory`` when given, which also serves as the bundler's scratch
    space. Bare imports such as ``'lit'`` resolve from the entry's location,
    so callers pass the page directory. The whole
    directory is deleted whether the body succeeds or raises.
    """
    parent = str(directory) if directory is not None else None
    with tempfile.TemporaryDirectory(prefix=".nsbundle-", dir=parent) as scratch:
        entry_path = Path(scratch) / ENTRY_FILENAME
        entry_path.write_text(content, encoding="utf-8")
        _logger.debug("Created temp entry file %s", entry_path)
        try:
            yield entry_path
        finally:
            _logger.debug("Removing temp entry file %s", entry_path)


def _is_relative(specifier: str) -> bool:
    return specifier in {".", ".."} or specifier.startswith(("./", "../"))


def _as_posix(path: Path) -> str:
    return path.as_posix().replace("\\", "/")


__all__ = ["ENTRY_FILENAME", "EntrySynthesizer", "synthetic_entry"]
