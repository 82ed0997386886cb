"""Produce the linked and standalone HTML artifacts for a page."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional

from .bundler import BUNDLE_FILENAME, SOURCE_MAP_FILENAME, BundleResult
from .logging import get_logger
from .models import AssembledPage, BuildArtifacts, Namespace
from .rewrite import CssNamespacer, HtmlNamespacer

LINKED_FILENAME = "index.html"
STANDALONE_FILENAME = "standalone.html"
STYLESHEET_RELATIVE_PATH = Path("..") / ".." / "index.css"

BUNDLE_REFERENCE = f'<script src="{BUNDLE_FILENAME}"></script>'

_SCRIPT_ELEMENT = re.compile(r"<script\b[^>]*>.*?</script\s*>", re.IGNORECASE | re.DOTALL)
_STYLE_ELEMENT = re.compile(
    r"(?P<open><style\b[^>]*>)(?P<css>.*?)(?P<close></style\s*>)", re.IGNORECASE | re.DOTALL
)
_LINK_TAG = re.compile(r"<link\b[^>]*>", re.IGNORECASE)
_REL_STYLESHEET = re.compile(r"""(?<![\w-])rel\s*=\s*["']?stylesheet\b""", re.IGNORECASE)
_HREF_INDEX_CSS = re.compile(r"""(?<![\w-])href\s*=\s*["']?[^"'\s>]*index\.css["'\s>]""", re.IGNORECASE)
_BODY_CLOSE = re.compile(r"</body\s*>", re.IGNORECASE)


class OutputAssembler:
    """Applies namespacing to a page and swaps its scripts for the bundle."""

    def __init__(self, namespace: Namespace) -> None:
        self.html = HtmlNamespacer(namespace)
        self.css = CssNamespacer(namespace)
        self.logger = get_logger("assembler")

    def assemble(
        self,
        page_html: str,
        bundle_js: str,
        stylesheet: Optional[str] = None,
    ) -> AssembledPage:
        transformed = self.html.apply(page_html)
        transformed = self._namespace_style_blocks(transformed)
        if stylesheet is not None:
            transformed = self.inline_stylesheet(transformed, self.css.apply(stylesheet))
        transformed = strip_scripts(transformed)
        linked = insert_bundle_reference(transformed)
        standalone = linked.replace(BUNDLE_REFERENCE, _inline_script(bundle_js), 1)
        return AssembledPage(linked_html=linked, standalone_html=standalone)

    def inline_stylesheet(self, html: str, css: str) -> str:
        """Replace the first ``index.css`` stylesheet link with an inline block."""
        for link in _LINK_TAG.finditer(html):
            tag = link.group(0)
            if _REL_STYLESHEET.search(tag) and _HREF_INDEX_CSS.search(tag + " "):
                self.logger.debug("Inlining stylesheet in place of %s", tag)
                return f"{html[: link.start()]}<style>\n{css}\n</style>{html[link.end():]}"
        self.logger.debug("No index.css stylesheet link found; stylesheet not inlined")
        return html

    def _namespace_style_blocks(self, html: str) -> str:
        def replace(match: re.Match[str]) -> str:
            return f"{match.group('open')}{self.css.apply(match.group('css'))}{match.group('close')}"

        return _STYLE_ELEMENT.sub(replace, html)


def strip_scripts(html: str) -> str:
    """Remove every script element, inline or external."""
    return _SCRIPT_ELEMENT.sub("", html)


def insert_bundle_reference(html: str) -> str:
    """Place the bundle script tag right before the first ``</body>`` (or at the end)."""
    closing = _BODY_CLOSE.search(html)
    if closing is None:
        return f"{html.rstrip()}\n{BUNDLE_REFERENCE}\n"
    return f"{html[: closing.start()]}    {BUNDLE_REFERENCE}\n{html[closing.start():]}"


def find_stylesheet(page_dir: Path) -> Optional[Path]:
    """Return the conventional stylesheet for a page directory, if present."""
    candidate = (page_dir / STYLESHEET_RELATIVE_PATH).resolve()
    return candidate if candidate.is_file() else None


def write_artifacts(
    output_dir: Path,
    page_name: str,
    assembled: AssembledPage,
    bundle: BundleResult,
) -> BuildArtifacts:
    """Write bundle, source map and both HTML variants, all or nothing."""
    output_dir.mkdir(parents=True, exist_ok=True)
    artifacts = BuildArtifacts(
        page=page_name,
        bundle_js=output_dir / BUNDLE_FILENAME,
        linked_html=output_dir / LINKED_FILENAME,
        standalone_html=output_dir / STANDALONE_FILENAME,
        source_map=output_dir / SOURCE_MAP_FILENAME if bundle.source_map is not None else None,
    )
    contents = [
        (artifacts.bundle_js, bundle.code),
        (artifacts.linked_html, assembled.linked_html),
        (artifacts.standalone_html, assembled.standalone_html),
    ]
    if artifacts.source_map is not None and bundle.source_map is not None:
        contents.append((artifacts.source_map, bundle.source_map))

    written: List[Path] = []
    try:
        for path, text in contents:
            path.write_text(text, encoding="utf-8")
            written.append(path)
    except OSError:
        for path in written:
            path.unlink(missing_ok=True)
        raise
    return artifacts


def _inline_script(bundle_js: str) -> str:
    safe = re.sub(r"</(script)", r"<\\/\1", bundle_js, flags=re.IGNORECASE)
    return f"<script>\n{safe}\n</script>"


__all__ = [
    "BUNDLE_REFERENCE",
    "LINKED_FILENAME",
    "STANDALONE_FILENAME",
    "OutputAssembler",
    "find_stylesheet",
    "insert_bundle_reference",
    "strip_scripts",
    "write_artifacts",
]
