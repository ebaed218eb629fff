"""Basic shapes: path, rect, circle, ellipse, line, polyline, polygon.

Builders only construct geometry; style and the element's own transform are
applied by build_element() afterwards. Invalid geometry (non-positive sizes,
empty path data) is skipped rather than raised.
"""

from __future__ import annotations

import re
from typing import Optional

from svgbridge.models.scene import (
    EllipseShape,
    LineShape,
    PathShape,
    PolylineShape,
    RectShape,
    SceneItem,
)
from svgbridge.parsing.length import parse_number
from svgbridge.parsing.path_data import parse_path_data
from svgbridge.svg.context import ImportContext
from svgbridge.svg.reader import ElementRecord
from svgbridge.svg.registry import element_builder
from svgbridge.svg.style import Properties

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_points(text: Optional[str]) -> list[tuple[float, float]]:
    """'0,0 10,0 10 10' → [(0, 0), (10, 0), (10, 10)]; an odd trailing number is dropped."""
    if not text:
        return []
    values = [float(tok) for tok in _NUMBER_RE.findall(text)]
    return [(values[i], values[i + 1]) for i in range(0, len(values) - 1, 2)]


def _sodipodi_arc(element: ElementRecord) -> Optional[EllipseShape]:
    """Inkscape stores circles/ellipses as <path sodipodi:type="arc">."""
    if element.get("sodipodi:type") != "arc":
        return None
    if element.get("sodipodi:open") == "true":
        return None  # open arcs keep their path data
    rx = parse_number(element.get("sodipodi:rx"))
    ry = parse_number(element.get("sodipodi:ry"))
    if rx <= 0 or ry <= 0:
        return None
    return EllipseShape(
        cx=parse_number(element.get("sodipodi:cx")),
        cy=parse_number(element.get("sodipodi:cy")),
        rx=rx,
        ry=ry,
    )


@element_builder("path", description="Path data, or an Inkscape arc as an ellipse")
def build_path(element: ElementRecord, ctx: ImportContext, props: Properties) -> Optional[SceneItem]:
    arc = _sodipodi_arc(element)
    if arc is not None:
        return arc
    segments = parse_path_data(element.get("d"))
    if not segments:
        ctx.skip(element, "empty or invalid path data")
        return None
    return PathShape.from_segments(segments)


@element_builder("rect", description="Rectangle with optional corner radii")
def build_rect(element: ElementRecord, ctx: ImportContext, props: Properties) -> Optional[SceneItem]:
    width = ctx.length(element.get("width"), "x")
    height = ctx.length(element.get("height"), "y")
    if width <= 0 or height <= 0:
        ctx.skip(element, "non-positive width or height")
        return None
    rx_attr, ry_attr = element.get("rx"), element.get("ry")
    rx = ctx.length(rx_attr, "x") if rx_attr is not None else None
    ry = ctx.length(ry_attr, "y") if ry_attr is not None else None
    # One radius defaults to the other
    if rx is None:
        rx = ry or 0.0
    if ry is None:
        ry = rx
    return RectShape(
        x=ctx.length(element.get("x"), "x"),
        y=ctx.length(element.get("y"), "y"),
        width=width,
        height=height,
        rx=max(0.0, min(rx, width / 2)),
        ry=max(0.0, min(ry, height / 2)),
    )


@element_builder("circle")
def build_circle(element: ElementRecord, ctx: ImportContext, props: Properties) -> Optional[SceneItem]:
    r = ctx.length(element.get("r"), "xy")
    if r <= 0:
        ctx.skip(element, "non-positive radius")
        return None
    return EllipseShape(
        cx=ctx.length(element.get("cx"), "x"),
        cy=ctx.length(element.get("cy"), "y"),
        rx=r,
        ry=r,
        circle=True,
    )


@element_builder("ellipse")
def build_ellipse(element: ElementRecord, ctx: ImportContext, props: Properties) -> Optional[SceneItem]:
    rx = ctx.length(element.get("rx"), "x")
    ry = ctx.length(element.get("ry"), "y")
    if rx <= 0 or ry <= 0:
        ctx.skip(element, "non-positive radius")
        return None
    return EllipseShape(
        cx=ctx.length(element.get("cx"), "x"),
        cy=ctx.length(element.get("cy"), "y"),
        rx=rx,
        ry=ry,
    )


@element_builder("line")
def build_line(element: ElementRecord, ctx: ImportContext, props: Properties) -> Optional[SceneItem]:
    return LineShape(
        x1=ctx.length(element.get("x1"), "x"),
        y1=ctx.length(element.get("y1"), "y"),
        x2=ctx.length(element.get("x2"), "x"),
        y2=ctx.length(element.get("y2"), "y"),
    )


def _poly(element: ElementRecord, ctx: ImportContext, closed: bool) -> Optional[SceneItem]:
    points = parse_points(element.get("points"))
    if len(points) < 2:
        ctx.skip(element, "fewer than two points")
        return None
    return PolylineShape(points=points, closed=closed)


@element_builder("polyline")
def build_polyline(element: ElementRecord, ctx: ImportContext, props: Properties) -> Optional[SceneItem]:
    return _poly(element, ctx, closed=False)


@element_builder("polygon")
def build_polygon(element: ElementRecord, ctx: ImportContext, props: Properties) -> Optional[SceneItem]:
    return _poly(element, ctx, closed=True)
