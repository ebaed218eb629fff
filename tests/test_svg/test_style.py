"""Tests for presentation property resolution."""

from __future__ import annotations

from svgbridge.models.paint import FilterEffect, LinearGradient
from svgbridge.parsing.color import UNSET, Color
from svgbridge.svg.reader import ElementRecord
from svgbridge.svg.style import (
    build_style,
    cascade,
    element_properties,
    parse_style_attribute,
    url_reference,
)


def _no_refs(_ref):
    return None


def test_parse_style_attribute():
    assert parse_style_attribute(" fill : red ; stroke:blue;;bogus") == {"fill": "red", "stroke": "blue"}


def test_inline_style_wins_over_attribute():
    element = ElementRecord("rect", {"fill": "red", "style": "fill:blue"})
    assert element_properties(element)["fill"] == "blue"


def test_non_presentation_attributes_ignored():
    element = ElementRecord("rect", {"width": "10", "fill": "red"})
    assert element_properties(element) == {"fill": "red"}


def test_inheritance_skips_opacity_and_filter():
    parent = {"fill": "red", "opacity": "0.5", "filter": "url(#f)", "stroke-width": "3"}
    props = cascade(parent, ElementRecord("path"))
    assert props == {"fill": "red", "stroke-width": "3"}


def test_explicit_inherit_keyword():
    props = cascade({"stroke": "green"}, ElementRecord("path", {"stroke": "inherit"}))
    assert props["stroke"] == "green"


def test_defaults():
    style = build_style({}, _no_refs)
    assert style.fill == Color(0, 0, 0)
    assert style.stroke == UNSET
    assert style.stroke_width == 1.0
    assert style.opacity == 1.0


def test_fill_none_and_opacities():
    style = build_style(
        {"fill": "none", "stroke": "#ff0000", "stroke-opacity": "0.5", "opacity": "0.25"},
        _no_refs,
    )
    assert style.fill == UNSET
    assert style.stroke.rgba() == (255, 0, 0, 128)
    assert style.opacity == 0.25


def test_current_color_resolves_against_color_property():
    style = build_style({"stroke": "currentColor", "color": "blue"}, _no_refs)
    assert style.stroke.rgba() == (0, 0, 255, 255)
    assert build_style({"fill": "currentColor"}, _no_refs).fill == Color(0, 0, 0)


def test_url_references():
    gradient = LinearGradient(id="g")
    blur = FilterEffect(id="f")
    table = {"g": gradient, "f": blur}
    style = build_style({"fill": "url(#g)", "filter": "url('#f')"}, table.get)
    assert style.fill_paint is gradient
    assert style.fill == UNSET
    assert style.filter is blur


def test_dangling_url_uses_fallback_color():
    style = build_style({"fill": "url(#missing) red"}, _no_refs)
    assert style.fill_paint is None
    assert style.fill.rgba() == (255, 0, 0, 255)


def test_url_to_wrong_kind_is_ignored():
    style = build_style({"fill": "url(#f)"}, {"f": FilterEffect(id="f")}.get)
    assert style.fill_paint is None


def test_url_reference():
    assert url_reference("url(#abc)") == "abc"
    assert url_reference('url("#a-b")') == "a-b"
    assert url_reference("red") is None


def test_dash_array():
    assert build_style({"stroke-dasharray": "4, 2"}, _no_refs).dash_array == [4.0, 2.0]
    assert build_style({"stroke-dasharray": "none"}, _no_refs).dash_array == []
