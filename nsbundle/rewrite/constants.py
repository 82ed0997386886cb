"""Tag names whose bare selectors are rewritten into namespaced classes."""

from __future__ import annotations

GLOBAL_TAGS: tuple[str, ...] = (
    "body",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "p",
    "a",
    "span",
    "div",
    "table",
    "thead",
    "tbody",
    "tr",
    "td",
    "th",
    "button",
    "input",
    "form",
    "label",
    "ul",
    "ol",
    "li",
)


def tag_alternation() -> str:
    """Regex alternation of GLOBAL_TAGS, longest names first."""
    return "|".join(sorted(GLOBAL_TAGS, key=len, reverse=True))


__all__ = ["GLOBAL_TAGS", "tag_alternation"]
