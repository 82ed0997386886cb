"""Identifier namespacing for HTML, CSS and JavaScript text."""

from __future__ import annotations

from .constants import GLOBAL_TAGS
from .css import CssNamespacer
from .html import HtmlNamespacer
from .js import JsNamespacer

__all__ = ["GLOBAL_TAGS", "CssNamespacer", "HtmlNamespacer", "JsNamespacer"]
