"""Presentation properties: inline style strings, attribute fallback, inheritance.

Property resolution for one element, lowest to highest priority:
inherited value from the parent → presentation attribute → inline style.
Only inheritable properties flow from parent to child; opacity, filter and
display stay on the element that declares them.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Optional

from svgbridge.models.paint import FilterEffect, LinearGradient, Marker, Pattern, RadialGradient
from svgbridge.models.scene import BLACK, ShapeStyle
from svgbridge.parsing.color import UNSET, Color, parse_color
from svgbridge.parsing.length import parse_length, parse_number
from svgbridge.svg.reader import ElementRecord

Properties = dict[str, str]
# id → paint server / filter / marker record, or None when unresolved
Lookup = Callable[[str], Optional[object]]

INHERITED = frozenset({
    "color", "fill", "fill-opacity", "fill-rule",
    "stroke", "stroke-width", "stroke-opacity", "stroke-linecap", "stroke-linejoin",
    "stroke-dasharray", "marker-start", "marker-mid", "marker-end",
    "font-family", "font-size", "font-weight", "font-style", "text-anchor",
    "visibility",
})
NOT_INHERITED = frozenset({"opacity", "filter", "display"})
PRESENTATION = INHERITED | NOT_INHERITED

_URL_RE = re.compile(r"url\(\s*['\"]?#([^'\")\s]+)['\"]?\s*\)")
_DASH_SPLIT_RE = re.compile(r"[\s,]+")
_SERVER_TYPES = (LinearGradient, RadialGradient, Pattern)


def parse_style_attribute(text: Optional[str]) -> Properties:
    """'fill:red; stroke : blue' → {'fill': 'red', 'stroke': 'blue'}."""
    props: Properties = {}
    if not text:
        return props
    for declaration in text.split(";"):
        name, sep, value = declaration.partition(":")
        if not sep:
            continue
        name = name.strip().lower()
        value = value.replace("!important", "").strip()
        if name and value:
            props[name] = value
    return props


def element_properties(element: ElementRecord) -> Properties:
    """The element's own declarations; inline style wins over attributes."""
    props = {k: v.strip() for k, v in element.attributes.items() if k in PRESENTATION}
    props.update(parse_style_attribute(element.get("style")))
    return props


def cascade(inherited: Properties, element: ElementRecord) -> Properties:
    """Computed properties for *element* given its parent's computed properties."""
    props = {k: v for k, v in inherited.items() if k in INHERITED}
    for name, value in element_properties(element).items():
        if value == "inherit":
            if name in inherited:
                props[name] = inherited[name]
            continue
        props[name] = value
    return props


def url_reference(value: Optional[str]) -> Optional[str]:
    """'url(#grad1)' → 'grad1'."""
    if not value:
        return None
    m = _URL_RE.search(value)
    return m.group(1) if m else None


def _opacity(value: Optional[str]) -> float:
    if value is None:
        return 1.0
    v = value.strip()
    number = parse_number(v.rstrip("%"), 1.0)
    if v.endswith("%"):
        number /= 100.0
    return max(0.0, min(1.0, number))


def _paint_color(value: str, props: Properties) -> Color:
    if value.strip().lower() == "currentcolor":
        current = props.get("color")
        if current is None:
            return BLACK
        return parse_color(current)
    return parse_color(value)


def resolve_paint(
    value: Optional[str], props: Properties, lookup: Lookup, default: Color
) -> tuple[Color, Optional[object]]:
    """Color plus optional paint server for a fill/stroke value.

    ``url(#id)`` resolves through *lookup*; if the reference is dangling the
    fallback color after it is used (``url(#missing) red``), else no paint.
    """
    if value is None:
        return default, None
    ref = url_reference(value)
    if ref is not None:
        server = lookup(ref)
        if isinstance(server, _SERVER_TYPES):
            return UNSET, server
        fallback = _URL_RE.sub("", value).strip()
        return (_paint_color(fallback, props) if fallback else UNSET), None
    return _paint_color(value, props), None


def _dash_array(value: Optional[str]) -> list[float]:
    if not value or value.strip() == "none":
        return []
    dashes = [parse_length(tok) for tok in _DASH_SPLIT_RE.split(value.strip()) if tok]
    if any(d < 0 for d in dashes) or not any(dashes):
        return []
    return dashes


def _typed(lookup: Lookup, ref: Optional[str], kind: type | tuple[type, ...]) -> Any:
    if ref is None:
        return None
    found = lookup(ref)
    return found if isinstance(found, kind) else None


def build_style(props: Properties, lookup: Lookup) -> ShapeStyle:
    """Turn computed properties into a ShapeStyle, resolving url() references."""
    fill, fill_paint = resolve_paint(props.get("fill"), props, lookup, BLACK)
    stroke, stroke_paint = resolve_paint(props.get("stroke"), props, lookup, UNSET)

    fill = fill.scaled_alpha(_opacity(props.get("fill-opacity")))
    stroke = stroke.scaled_alpha(_opacity(props.get("stroke-opacity")))

    width = props.get("stroke-width")
    return ShapeStyle(
        fill=fill,
        fill_paint=fill_paint,
        stroke=stroke,
        stroke_paint=stroke_paint,
        stroke_width=max(0.0, parse_length(width)) if width is not None else 1.0,
        opacity=_opacity(props.get("opacity")),
        fill_rule=props.get("fill-rule", "nonzero"),
        line_cap=props.get("stroke-linecap", "butt"),
        line_join=props.get("stroke-linejoin", "miter"),
        dash_array=_dash_array(props.get("stroke-dasharray")),
        filter=_typed(lookup, url_reference(props.get("filter")), FilterEffect),
        marker_start=_typed(lookup, url_reference(props.get("marker-start")), Marker),
        marker_mid=_typed(lookup, url_reference(props.get("marker-mid")), Marker),
        marker_end=_typed(lookup, url_reference(props.get("marker-end")), Marker),
    )


def is_hidden(props: Properties) -> bool:
    return props.get("display") == "none" or props.get("visibility") in ("hidden", "collapse")
