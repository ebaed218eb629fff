"""Paint servers and effects: gradients, filters, patterns and markers.

Each collected element is turned into its value record from
svgbridge.models.paint and stored in the per-import context under its id.
Gradients and filters are built first so pattern and marker content can
reference them.
"""

from __future__ import annotations

import logging
from typing import Optional

from svgbridge.models.paint import (
    DropShadow,
    FilterEffect,
    GaussianBlur,
    GradientStop,
    LinearGradient,
    Marker,
    Pattern,
    RadialGradient,
)
from svgbridge.parsing.color import Color, parse_color
from svgbridge.parsing.length import parse_fraction, parse_length, parse_number
from svgbridge.parsing.transform import parse_transform
from svgbridge.svg.collector import CollectedElements, FilterPrimitiveRecord
from svgbridge.svg.context import ImportContext, build_element
from svgbridge.svg.reader import ElementRecord
from svgbridge.svg.style import parse_style_attribute
from svgbridge.svg.viewport import parse_view_box

logger = logging.getLogger(__name__)

_MAX_HREF_DEPTH = 16


# ── Gradients ─────────────────────────────────────────────────────────────


def _href(element: ElementRecord) -> Optional[str]:
    href = element.get("xlink:href") or element.get("href") or ""
    return href[1:] if href.startswith("#") else None


def _template_chain(element: ElementRecord, ctx: ImportContext) -> list[ElementRecord]:
    """The gradient followed by the gradients it inherits from via href."""
    chain = [element]
    seen = {id(element)}
    current = element
    while len(chain) < _MAX_HREF_DEPTH:
        parent = ctx.definition(_href(current))
        if parent is None or id(parent) in seen or not parent.tag.endswith("Gradient"):
            break
        chain.append(parent)
        seen.add(id(parent))
        current = parent
    return chain


def _attr(chain: list[ElementRecord], name: str) -> Optional[str]:
    for element in chain:
        value = element.get(name)
        if value is not None:
            return value
    return None


def parse_stop(stop: ElementRecord) -> GradientStop:
    """Offset (number or %) plus stop-color/stop-opacity, style before attributes."""
    style = parse_style_attribute(stop.get("style"))
    color_text = style.get("stop-color", stop.get("stop-color", "black"))
    opacity_text = style.get("stop-opacity", stop.get("stop-opacity"))
    color = parse_color(color_text)
    if not color.is_set:
        color = Color(0, 0, 0, 0)
    if opacity_text is not None:
        color = color.scaled_alpha(max(0.0, min(1.0, parse_number(opacity_text, 1.0))))
    offset = max(0.0, min(1.0, parse_fraction(stop.get("offset"), 0.0)))
    return GradientStop(offset=offset, color=color)


def _stops(chain: list[ElementRecord]) -> list[GradientStop]:
    for element in chain:
        stops = [parse_stop(child) for child in element.children if child.tag == "stop"]
        if stops:
            # Offsets never decrease
            running = 0.0
            for stop in stops:
                running = max(running, stop.offset)
                stop.offset = running
            return stops
    return []


def _coord(chain: list[ElementRecord], name: str, default: float, user_space: bool, ref: float) -> float:
    value = _attr(chain, name)
    if value is None:
        return default * ref if user_space else default
    if user_space:
        return parse_length(value, ref)
    return parse_fraction(value, default)


def parse_linear_gradient(element: ElementRecord, ctx: ImportContext) -> LinearGradient:
    chain = _template_chain(element, ctx)
    units = _attr(chain, "gradientUnits") or "objectBoundingBox"
    user = units == "userSpaceOnUse"
    w, h = ctx.viewport
    return LinearGradient(
        id=element.id,
        x1=_coord(chain, "x1", 0.0, user, w),
        y1=_coord(chain, "y1", 0.0, user, h),
        x2=_coord(chain, "x2", 1.0, user, w),
        y2=_coord(chain, "y2", 0.0, user, h),
        units=units,
        spread=_attr(chain, "spreadMethod") or "pad",
        transform=parse_transform(_attr(chain, "gradientTransform")),
        stops=_stops(chain),
    )


def parse_radial_gradient(element: ElementRecord, ctx: ImportContext) -> RadialGradient:
    chain = _template_chain(element, ctx)
    units = _attr(chain, "gradientUnits") or "objectBoundingBox"
    user = units == "userSpaceOnUse"
    w, h = ctx.viewport
    diag = ((w * w + h * h) / 2.0) ** 0.5
    cx = _coord(chain, "cx", 0.5, user, w)
    cy = _coord(chain, "cy", 0.5, user, h)
    fx_text, fy_text = _attr(chain, "fx"), _attr(chain, "fy")
    return RadialGradient(
        id=element.id,
        cx=cx,
        cy=cy,
        r=_coord(chain, "r", 0.5, user, diag),
        fx=_coord(chain, "fx", 0.5, user, w) if fx_text is not None else cx,
        fy=_coord(chain, "fy", 0.5, user, h) if fy_text is not None else cy,
        units=units,
        spread=_attr(chain, "spreadMethod") or "pad",
        transform=parse_transform(_attr(chain, "gradientTransform")),
        stops=_stops(chain),
    )


# ── Filters ───────────────────────────────────────────────────────────────


def _std_deviation(element: ElementRecord, default: float) -> float:
    # "2" or "2 3"; anisotropic blur keeps the first value
    return max(0.0, parse_number(element.get("stdDeviation"), default))


def parse_filter_primitive(element: ElementRecord) -> Optional[GaussianBlur | DropShadow]:
    if element.tag == "feGaussianBlur":
        return GaussianBlur(std_deviation=_std_deviation(element, 1.0))
    if element.tag == "feDropShadow":
        style = parse_style_attribute(element.get("style"))
        flood = style.get("flood-color", element.get("flood-color"))
        color = parse_color(flood) if flood is not None else DropShadow().color
        opacity = style.get("flood-opacity", element.get("flood-opacity"))
        if opacity is not None and color.is_set:
            color = color.scaled_alpha(max(0.0, min(1.0, parse_number(opacity, 1.0))))
        return DropShadow(
            dx=parse_number(element.get("dx"), 2.0),
            dy=parse_number(element.get("dy"), 2.0),
            std_deviation=_std_deviation(element, 3.0),
            color=color if color.is_set else DropShadow().color,
        )
    return None


def build_filters(primitives: list[FilterPrimitiveRecord], filters: list[ElementRecord]) -> dict[str, FilterEffect]:
    """Group stamped primitives by owning filter id, in document order."""
    effects: dict[str, FilterEffect] = {}
    for element in filters:
        if element.id and element.id not in effects:
            effects[element.id] = FilterEffect(id=element.id)
    for record in primitives:
        effect = effects.get(record.filter_id)
        if effect is None:
            continue
        primitive = parse_filter_primitive(record.element)
        if primitive is not None:
            effect.primitives.append(primitive)
    return effects


# ── Patterns and markers ──────────────────────────────────────────────────


def _content(element: ElementRecord, ctx: ImportContext) -> list:
    items = []
    for child in element.children:
        item = build_element(child, ctx, {})
        if item is not None:
            items.append(item)
    return items


def parse_pattern(element: ElementRecord) -> Pattern:
    return Pattern(
        id=element.id,
        x=parse_length(element.get("x")),
        y=parse_length(element.get("y")),
        width=parse_length(element.get("width", "10")),
        height=parse_length(element.get("height", "10")),
        units=element.get("patternUnits") or "objectBoundingBox",
        content_units=element.get("patternContentUnits") or "userSpaceOnUse",
        transform=parse_transform(element.get("patternTransform")),
    )


def parse_marker(element: ElementRecord) -> Marker:
    return Marker(
        id=element.id,
        ref_x=parse_number(element.get("refX")),
        ref_y=parse_number(element.get("refY")),
        width=parse_length(element.get("markerWidth", "3")),
        height=parse_length(element.get("markerHeight", "3")),
        orient=element.get("orient") or "auto",
        units=element.get("markerUnits") or "strokeWidth",
        view_box=parse_view_box(element.get("viewBox")),
    )


# ── Entry point ───────────────────────────────────────────────────────────


def resolve_paint_servers(collected: CollectedElements, ctx: ImportContext) -> None:
    """Populate ctx.gradients/filters/patterns/markers from the collected bags.

    Records are registered before pattern and marker content is built, so
    content may reference any server of the document. The first element for
    an id wins, matching the definitions map.
    """
    for element in collected.linear_gradients:
        if element.id and element.id not in ctx.gradients:
            ctx.gradients[element.id] = parse_linear_gradient(element, ctx)
    for element in collected.radial_gradients:
        if element.id and element.id not in ctx.gradients:
            ctx.gradients[element.id] = parse_radial_gradient(element, ctx)

    ctx.filters.update(build_filters(collected.filter_primitives, collected.filters))

    pending: list[tuple[ElementRecord, Pattern | Marker]] = []
    for element in collected.patterns:
        if element.id and element.id not in ctx.patterns:
            pattern = parse_pattern(element)
            ctx.patterns[element.id] = pattern
            pending.append((element, pattern))
    for element in collected.markers:
        if element.id and element.id not in ctx.markers:
            marker = parse_marker(element)
            ctx.markers[element.id] = marker
            pending.append((element, marker))

    for element, record in pending:
        record.children = _content(element, ctx)

    logger.debug(
        "Paint servers: %d gradients, %d filters, %d patterns, %d markers",
        len(ctx.gradients), len(ctx.filters), len(ctx.patterns), len(ctx.markers),
    )
