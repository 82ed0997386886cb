"""Tests for CSS selector namespacing."""

from __future__ import annotations

from nsbundle.models import Namespace
from nsbundle.rewrite import CssNamespacer


def _apply(css: str, token: str = "acme-") -> str:
    return CssNamespacer(Namespace(token)).apply(css)


def test_tag_and_class_selectors_prefixed() -> None:
    css = "body { color: red; } .card:hover { color: blue; }"
    assert _apply(css) == ".acme-body { color: red; } .acme-card:hover { color: blue; }"


def test_tags_followed_by_combinators_and_pseudo_elements() -> None:
    css = "div > p, ul li::marker, a:hover + span ~ h2 { margin: 0; }"
    assert _apply(css) == (
        ".acme-div > .acme-p, .acme-ul .acme-li::marker, "
        ".acme-a:hover + .acme-span ~ .acme-h2 { margin: 0; }"
    )


def test_compound_tag_selectors_keep_the_tag() -> None:
    assert _apply("div.card, input[type=text] { x: y; }") == (
        "div.acme-card, input[type=text] { x: y; }"
    )


def test_declarations_are_not_rewritten() -> None:
    css = ".hero { background: url(img/bg.png); width: 0.5em; grid-column: span 2; }"
    assert _apply(css) == (
        ".acme-hero { background: url(img/bg.png); width: 0.5em; grid-column: span 2; }"
    )


def test_id_selectors_follow_prefixed_ids() -> None:
    assert _apply("#main .title { color: #fff; }") == "#acme-main .acme-title { color: #fff; }"


def test_media_queries_and_nested_rules() -> None:
    css = "@media (max-width: 600px) {\n  p { font-size: 12px; }\n  .wide { display: none; }\n}\n"
    assert _apply(css) == (
        "@media (max-width: 600px) {\n  .acme-p { font-size: 12px; }\n"
        "  .acme-wide { display: none; }\n}\n"
    )


def test_comments_and_attribute_strings_untouched() -> None:
    css = '/* a .note about p */\na[href$=".pdf"] { color: red; }'
    assert _apply(css) == css


def test_selector_starting_on_new_line() -> None:
    css = "h1,\nh2 {\n  margin: 0;\n}\n"
    assert _apply(css) == ".acme-h1,\n.acme-h2 {\n  margin: 0;\n}\n"


def test_not_pseudo_argument_is_converted() -> None:
    assert _apply("li:not(p) { x: y; }") == ".acme-li:not(.acme-p) { x: y; }"


def test_css_transform_is_idempotent() -> None:
    css = (
        "body, h1 { margin: 0 }\n.card:hover > a { color: blue }\n"
        "#main td::before { content: '.x' }\n@font-face { font-family: X; }\n"
    )
    once = _apply(css)
    assert _apply(once) == once
    assert "acme-acme-" not in once


def test_already_prefixed_classes_pass_through() -> None:
    assert _apply(".acme-card { x: y; }") == ".acme-card { x: y; }"


def test_comment_before_selector_is_preserved() -> None:
    assert _apply("/* .note */ p { x: y; }") == "/* .note */ .acme-p { x: y; }"
