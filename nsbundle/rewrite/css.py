"""Namespace selectors inside CSS text."""

from __future__ import annotations

import re
from typing import List

from ..models import Namespace
from .constants import tag_alternation

_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)

# Text between the end of the previous rule/declaration and an opening brace.
_PRELUDE = re.compile(r"(?P<prelude>[^{};]+)\{")

# Attribute selectors and strings are kept verbatim.
_LITERAL = re.compile(r"""\[[^\]]*\]|"[^"]*"|'[^']*'""")

_COMMENT_MARK = "\x01"
_LITERAL_MARK = "\x00"

_TAG_SELECTOR = re.compile(
    rf"(?P<lead>^|[\s,>+~(\x01])(?P<tag>{tag_alternation()})(?=$|[\s,>+~):\x01])"
)

_NAME_SELECTOR = re.compile(r"(?P<sigil>[.#])(?P<name>-?[A-Za-z_][\w-]*)")


class CssNamespacer:
    """Rewrites bare global-tag selectors, class selectors and id selectors.

    Only selector preludes are touched: declarations, comments, at-rule
    conditions, attribute selectors and strings pass through unchanged. Tag
    selectors are converted first so the classes they produce are already
    prefixed when class selectors are processed.

    ``#id`` selectors are prefixed along with classes so that rules keep
    matching the ids renamed by :class:`HtmlNamespacer`.
    """

    def __init__(self, namespace: Namespace) -> None:
        self.namespace = namespace

    def apply(self, css: str) -> str:
        comments: List[str] = []
        masked = _mask(_COMMENT, css, comments, _COMMENT_MARK)
        rewritten = _PRELUDE.sub(self._rewrite_rule_start, masked)
        return _unmask(rewritten, comments, _COMMENT_MARK)

    def rewrite_selector(self, selector: str) -> str:
        """Namespace a single selector list such as ``body, .card:hover``."""
        literals: List[str] = []
        masked = _mask(_LITERAL, selector, literals, _LITERAL_MARK)
        masked = _TAG_SELECTOR.sub(self._tag_to_class, masked)
        masked = _NAME_SELECTOR.sub(self._prefix_name, masked)
        return _unmask(masked, literals, _LITERAL_MARK)

    def _rewrite_rule_start(self, match: re.Match[str]) -> str:
        prelude = match.group("prelude")
        visible = _placeholder_pattern(_COMMENT_MARK).sub("", prelude).strip()
        if not visible or visible.startswith("@"):
            return match.group(0)
        return f"{self.rewrite_selector(prelude)}{{"

    def _tag_to_class(self, match: re.Match[str]) -> str:
        return f"{match.group('lead')}.{self.namespace.token}{match.group('tag')}"

    def _prefix_name(self, match: re.Match[str]) -> str:
        return f"{match.group('sigil')}{self.namespace.prefix(match.group('name'))}"


def _placeholder_pattern(mark: str) -> re.Pattern[str]:
    return re.compile(rf"{mark}(\d+){mark}")


def _mask(pattern: re.Pattern[str], text: str, store: List[str], mark: str) -> str:
    def replace(match: re.Match[str]) -> str:
        store.append(match.group(0))
        return f"{mark}{len(store) - 1}{mark}"

    return pattern.sub(replace, text)


def _unmask(text: str, store: List[str], mark: str) -> str:
    if not store:
        return text
    return _placeholder_pattern(mark).sub(lambda match: store[int(match.group(1))], text)


__all__ = ["CssNamespacer"]
