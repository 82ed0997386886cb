"""Pull script fragments out of an HTML page."""

from __future__ import annotations

import re
from typing import Optional

from .logging import get_logger
from .models import ExtractedFragments, Namespace, PageSource
from .rewrite import JsNamespacer

_SCRIPT = re.compile(
    r"<script\b(?P<attrs>[^>]*)>(?P<body>.*?)</script\s*>",
    re.IGNORECASE | re.DOTALL,
)
_TYPE_ATTR = re.compile(
    r"""(?<![\w-])type\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))""", re.IGNORECASE
)
_SRC_ATTR = re.compile(
    r"""(?<![\w-])src\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))""", re.IGNORECASE
)

_CLASSIC_TYPES = frozenset(
    {
        "",
        "text/javascript",
        "application/javascript",
        "application/ecmascript",
        "text/ecmascript",
        "module",
    }
)
_REMOTE_PREFIXES = ("http://", "https://", "//", "data:")


class FragmentExtractor:
    """Collects external modules, inline modules and inline classic scripts."""

    def __init__(self, namespace: Namespace) -> None:
        self.js = JsNamespacer(namespace)
        self.logger = get_logger("extractor")

    def extract(self, page: PageSource) -> ExtractedFragments:
        """Return the page's script fragments in document order.

        Inline bodies are trimmed and already passed through the JavaScript
        namespacer. The page text itself is not modified.
        """
        fragments = ExtractedFragments()
        for match in _SCRIPT.finditer(page.html):
            attrs = match.group("attrs")
            script_type = (_attr_value(_TYPE_ATTR, attrs) or "").strip().lower()
            src = _attr_value(_SRC_ATTR, attrs)
            body = match.group("body").strip()
            is_module = script_type == "module"

            if src is not None:
                self._add_external(fragments, page, src.strip(), is_module=is_module)
                continue
            if script_type not in _CLASSIC_TYPES:
                self.logger.debug("Skipping non-executable script block (type=%s)", script_type)
                continue
            if not body:
                continue
            line_count = len(body.splitlines())
            if is_module:
                fragments.inline_modules.append(self.js.apply(body))
                self.logger.info("Found inline module script (%d lines)", line_count)
            else:
                fragments.inline_classic.append(self.js.apply(body))
                self.logger.info("Found inline script (%d lines)", line_count)
        return fragments

    def _add_external(
        self,
        fragments: ExtractedFragments,
        page: PageSource,
        src: str,
        *,
        is_module: bool,
    ) -> None:
        if not is_module:
            self.logger.warning(
                "External classic script %s is not bundled and will be removed from the output",
                src,
            )
            return
        if not src or src.lower().startswith(_REMOTE_PREFIXES):
            self.logger.warning("Remote module %s cannot be bundled; skipping", src or "(empty)")
            return
        relative = src.split("?", 1)[0].split("#", 1)[0].lstrip("/")
        module_path = (page.directory / relative).resolve()
        fragments.external_modules.append(module_path)
        self.logger.info("Found module: %s", src)


def _attr_value(pattern: re.Pattern[str], attrs: str) -> Optional[str]:
    match = pattern.search(attrs)
    if match is None:
        return None
    return next((group for group in match.groups() if group is not None), "")


__all__ = ["FragmentExtractor"]
