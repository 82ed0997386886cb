"""Namespace DOM lookups inside JavaScript source."""

from __future__ import annotations

import re

from ..models import Namespace

_NAME = r"""[^"'\s\\]+"""
_SIMPLE_NAME = r"[\w-]+"

_BY_ID = re.compile(
    rf"""(?P<call>\bgetElementById\s*\(\s*)(?P<q>["'])(?P<name>{_NAME})(?P=q)(?=\s*\))"""
)

_BY_CLASS_NAME = re.compile(
    rf"""(?P<call>\bgetElementsByClassName\s*\(\s*)(?P<q>["'])(?P<name>{_NAME})(?P=q)(?=\s*\))"""
)

_QUERY = re.compile(
    rf"""(?P<call>\bquerySelector(?:All)?\s*\(\s*)(?P<q>["'])(?P<sigil>[#.])(?P<name>{_SIMPLE_NAME})(?P=q)(?=\s*\))"""
)

_CLASS_LIST = re.compile(
    r"""(?P<call>\bclassList\s*\.\s*(?:add|remove|toggle|contains)\s*\()(?P<args>[^()]*)\)"""
)

_LITERAL_ARG = re.compile(rf"""^(?P<lead>\s*)(?P<q>["'])(?P<name>{_NAME})(?P=q)(?P<tail>\s*)$""")


class JsNamespacer:
    """Prefixes string-literal ids and classes passed to DOM lookup calls.

    Handles ``getElementById``, ``getElementsByClassName``,
    ``querySelector``/``querySelectorAll`` with a single ``#id`` or ``.class``
    selector, and ``classList.add/remove/toggle/contains``. Anything computed
    at runtime (variables, template literals, compound selectors) is left as is.
    """

    def __init__(self, namespace: Namespace) -> None:
        self.namespace = namespace

    def apply(self, source: str) -> str:
        transformed = _BY_ID.sub(self._prefix_literal, source)
        transformed = _BY_CLASS_NAME.sub(self._prefix_literal, transformed)
        transformed = _QUERY.sub(self._prefix_selector, transformed)
        return _CLASS_LIST.sub(self._prefix_class_list, transformed)

    def _prefix_literal(self, match: re.Match[str]) -> str:
        quote = match.group("q")
        name = self.namespace.prefix(match.group("name"))
        return f"{match.group('call')}{quote}{name}{quote}"

    def _prefix_selector(self, match: re.Match[str]) -> str:
        quote = match.group("q")
        name = self.namespace.prefix(match.group("name"))
        return f"{match.group('call')}{quote}{match.group('sigil')}{name}{quote}"

    def _prefix_class_list(self, match: re.Match[str]) -> str:
        args = match.group("args").split(",")
        rewritten = []
        for arg in args:
            literal = _LITERAL_ARG.match(arg)
            if literal is None:
                rewritten.append(arg)
                continue
            quote = literal.group("q")
            name = self.namespace.prefix(literal.group("name"))
            rewritten.append(f"{literal.group('lead')}{quote}{name}{quote}{literal.group('tail')}")
        return f"{match.group('call')}{','.join(rewritten)})"


__all__ = ["JsNamespacer"]
