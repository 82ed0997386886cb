"""Namespace ids and classes inside HTML markup."""

from __future__ import annotations

import re
from typing import List, Optional

from ..models import Namespace
from .constants import GLOBAL_TAGS

# Raw-text regions whose contents are not markup.
_OPAQUE = re.compile(
    r"<!--.*?-->|<(script|style)\b.*?</\1\s*>",
    re.IGNORECASE | re.DOTALL,
)

_ATTR = r"""\s+[^\s"'<>/=]+(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'=<>`]+))?"""

_START_TAG = re.compile(
    rf"<(?P<name>[A-Za-z][A-Za-z0-9-]*)(?P<attrs>(?:{_ATTR})*)(?P<trail>\s*)(?P<close>/?)>"
)

_ATTRIBUTE = re.compile(
    r"""(?P<space>\s+)(?P<name>[^\s"'<>/=]+)(?:(?P<eq>\s*=\s*)(?P<value>"[^"]*"|'[^']*'|[^\s"'=<>`]+))?"""
)

# Attributes whose values are whitespace-separated id references.
_ID_REFERENCES = frozenset(
    {"for", "list", "aria-labelledby", "aria-describedby", "aria-controls"}
)


class HtmlNamespacer:
    """Prefixes ``id``/``class`` attributes and tags global elements with classes.

    For each start tag, ids are prefixed first, then every class token, then
    elements named in GLOBAL_TAGS receive a ``<ns><tag>`` class when they carry
    no namespaced class yet. Attributes that reference ids (``for``,
    ``aria-labelledby``...) follow the ids they point at. Comments and the
    bodies of ``<script>``/``<style>`` elements are left alone.
    """

    def __init__(self, namespace: Namespace) -> None:
        self.namespace = namespace
        self._global_tags = frozenset(GLOBAL_TAGS)

    def apply(self, html: str) -> str:
        pieces: List[str] = []
        position = 0
        for match in _OPAQUE.finditer(html):
            pieces.append(self._rewrite_markup(html[position : match.start()]))
            pieces.append(match.group(0))
            position = match.end()
        pieces.append(self._rewrite_markup(html[position:]))
        return "".join(pieces)

    def _rewrite_markup(self, markup: str) -> str:
        return _START_TAG.sub(self._rewrite_tag, markup)

    def _rewrite_tag(self, match: re.Match[str]) -> str:
        name = match.group("name")
        attrs: List[str] = []
        class_index: Optional[int] = None
        class_tokens: List[str] = []

        for attribute in _ATTRIBUTE.finditer(match.group("attrs")):
            attr_name = attribute.group("name").lower()
            value = attribute.group("value")
            if value is None:
                attrs.append(attribute.group(0))
                continue
            quote, inner = _split_quotes(value)
            if attr_name == "id":
                inner = self.namespace.prefix(inner.strip()) if inner.strip() else inner
            elif attr_name in _ID_REFERENCES:
                inner = self._prefix_tokens(inner)
            elif attr_name == "class":
                inner = self._prefix_tokens(inner)
                if class_index is None:
                    class_index = len(attrs)
                    class_tokens = inner.split()
            attrs.append(
                f"{attribute.group('space')}{attribute.group('name')}"
                f"{attribute.group('eq')}{quote}{inner}{quote}"
            )

        tag = name.lower()
        if tag in self._global_tags:
            tag_class = f"{self.namespace.token}{tag}"
            if class_index is None:
                attrs.append(f' class="{tag_class}"')
            elif not any(self.namespace.owns(token) for token in class_tokens):
                original = _ATTRIBUTE.match(attrs[class_index])
                if original is not None:
                    merged = " ".join([tag_class, *class_tokens])
                    attrs[class_index] = (
                        f"{original.group('space')}{original.group('name')}"
                        f'{original.group("eq")}"{merged}"'
                    )

        return f"<{name}{''.join(attrs)}{match.group('trail')}{match.group('close')}>"

    def _prefix_tokens(self, value: str) -> str:
        return " ".join(self.namespace.prefix(token) for token in value.split())


def _split_quotes(value: str) -> tuple[str, str]:
    if len(value) >= 2 and value[0] in {'"', "'"} and value[-1] == value[0]:
        return value[0], value[1:-1]
    return "", value


__all__ = ["HtmlNamespacer"]
