"""Scene model: the in-memory shapes an import produces and an export reads.

Geometry is stored in each item's own coordinate system; ``transform`` maps
it into the parent container. Containers (Group, Layer, Scene) own their
children in paint order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Iterator, Optional

import numpy as np

from svgbridge.models.paint import FilterEffect, Marker, PaintServer
from svgbridge.parsing.color import Color, UNSET
from svgbridge.parsing.path_data import (
    ClosePath,
    CubicTo,
    LineTo,
    MoveTo,
    PathSegment,
    arc_to_cubics,
    transform_segments,
)
from svgbridge.parsing.transform import AffineTransform
from svgbridge.utils.geometry import BBox, bbox, ellipse_bbox, segments_bbox, union_bbox

BLACK = Color(0, 0, 0)


@dataclass
class ShapeStyle:
    # UNSET means "no paint"; fill_paint overrides fill when present
    fill: Color = BLACK
    fill_paint: Optional[PaintServer] = None
    stroke: Color = UNSET
    stroke_paint: Optional[PaintServer] = None
    stroke_width: float = 1.0
    opacity: float = 1.0
    fill_rule: str = "nonzero"
    line_cap: str = "butt"
    line_join: str = "miter"
    dash_array: list[float] = field(default_factory=list)
    filter: Optional[FilterEffect] = None
    marker_start: Optional[Marker] = None
    marker_mid: Optional[Marker] = None
    marker_end: Optional[Marker] = None


@dataclass
class SceneItem:
    kind: ClassVar[str] = "item"

    id: str = ""
    transform: AffineTransform = field(default_factory=AffineTransform)
    style: ShapeStyle = field(default_factory=ShapeStyle)

    def set_style(self, style: ShapeStyle) -> None:
        self.style = style

    def apply_transform(self, t: AffineTransform) -> None:
        """Compose *t* on the parent side of the current transform."""
        self.transform = t @ self.transform

    def bounding_box(self) -> Optional[BBox]:
        """Box of the geometry in the parent's coordinates (stroke excluded)."""
        return self.mapped_bbox(AffineTransform())

    def mapped_bbox(self, outer: AffineTransform) -> Optional[BBox]:
        raise NotImplementedError


def _points_bbox(points: list[tuple[float, float]], t: AffineTransform) -> Optional[BBox]:
    if not points:
        return None
    return bbox(t.map_points(np.array(points, dtype=float)))


def _segments_bbox(segments: list[PathSegment], t: AffineTransform) -> Optional[BBox]:
    moves: list[complex] = []
    pieces: list[tuple[complex, ...]] = []
    cur = 0j
    for seg in transform_segments(segments, t):
        end = complex(*seg.end)
        if isinstance(seg, MoveTo):
            moves.append(end)
        elif isinstance(seg, CubicTo):
            pieces.append((cur, complex(seg.x1, seg.y1), complex(seg.x2, seg.y2), end))
        else:
            pieces.append((cur, end))
        cur = end
    return segments_bbox(moves, pieces)


@dataclass
class PathShape(SceneItem):
    kind: ClassVar[str] = "path"

    segments: list[PathSegment] = field(default_factory=list)

    @classmethod
    def from_segments(cls, segments: list[PathSegment], **kwargs) -> PathShape:
        return cls(segments=list(segments), **kwargs)

    def mapped_bbox(self, outer: AffineTransform) -> Optional[BBox]:
        if not self.segments:
            return None
        return _segments_bbox(self.segments, outer @ self.transform)


@dataclass
class RectShape(SceneItem):
    kind: ClassVar[str] = "rect"

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    rx: float = 0.0
    ry: float = 0.0

    def to_segments(self) -> list[PathSegment]:
        x0, y0, x1, y1 = self.x, self.y, self.x + self.width, self.y + self.height
        rx, ry = min(self.rx, self.width / 2), min(self.ry, self.height / 2)
        if rx <= 0 or ry <= 0:
            return [MoveTo(x0, y0), LineTo(x1, y0), LineTo(x1, y1), LineTo(x0, y1), ClosePath(x0, y0)]
        segs: list[PathSegment] = [MoveTo(x0 + rx, y0), LineTo(x1 - rx, y0)]
        segs += arc_to_cubics(x1 - rx, y0, rx, ry, 0, False, True, x1, y0 + ry)
        segs.append(LineTo(x1, y1 - ry))
        segs += arc_to_cubics(x1, y1 - ry, rx, ry, 0, False, True, x1 - rx, y1)
        segs.append(LineTo(x0 + rx, y1))
        segs += arc_to_cubics(x0 + rx, y1, rx, ry, 0, False, True, x0, y1 - ry)
        segs.append(LineTo(x0, y0 + ry))
        segs += arc_to_cubics(x0, y0 + ry, rx, ry, 0, False, True, x0 + rx, y0)
        segs.append(ClosePath(x0 + rx, y0))
        return segs

    def mapped_bbox(self, outer: AffineTransform) -> Optional[BBox]:
        t = outer @ self.transform
        if self.rx > 0 and self.ry > 0:
            return _segments_bbox(self.to_segments(), t)
        x0, y0 = self.x, self.y
        x1, y1 = x0 + self.width, y0 + self.height
        return _points_bbox([(x0, y0), (x1, y0), (x1, y1), (x0, y1)], t)


@dataclass
class EllipseShape(SceneItem):
    kind: ClassVar[str] = "ellipse"

    cx: float = 0.0
    cy: float = 0.0
    rx: float = 0.0
    ry: float = 0.0
    # Written back as <circle> when the source was one
    circle: bool = False

    def mapped_bbox(self, outer: AffineTransform) -> Optional[BBox]:
        t = outer @ self.transform
        cx, cy = t.map(self.cx, self.cy)
        linear = np.array([[t.a, t.c], [t.b, t.d]], dtype=float)
        return ellipse_bbox(cx, cy, self.rx, self.ry, linear)


@dataclass
class LineShape(SceneItem):
    kind: ClassVar[str] = "line"

    x1: float = 0.0
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0

    def to_segments(self) -> list[PathSegment]:
        return [MoveTo(self.x1, self.y1), LineTo(self.x2, self.y2)]

    def mapped_bbox(self, outer: AffineTransform) -> Optional[BBox]:
        return _points_bbox([(self.x1, self.y1), (self.x2, self.y2)], outer @ self.transform)


@dataclass
class PolylineShape(SceneItem):
    kind: ClassVar[str] = "polyline"

    points: list[tuple[float, float]] = field(default_factory=list)
    closed: bool = False

    def mapped_bbox(self, outer: AffineTransform) -> Optional[BBox]:
        return _points_bbox(self.points, outer @ self.transform)


@dataclass
class TextShape(SceneItem):
    kind: ClassVar[str] = "text"

    x: float = 0.0
    y: float = 0.0
    text: str = ""
    font_family: str = "Arial"
    font_size: float = 12.0
    font_weight: str = "normal"
    font_style: str = "normal"
    anchor: str = "start"

    def mapped_bbox(self, outer: AffineTransform) -> Optional[BBox]:
        # Layout-free estimate: 0.6 em per character, baseline at y
        width = 0.6 * self.font_size * len(self.text)
        left = self.x - {"middle": width / 2, "end": width}.get(self.anchor, 0.0)
        top = self.y - self.font_size
        corners = [(left, top), (left + width, top), (left + width, self.y), (left, self.y)]
        return _points_bbox(corners, outer @ self.transform)


@dataclass
class Group(SceneItem):
    kind: ClassVar[str] = "group"

    children: list[SceneItem] = field(default_factory=list)

    def add(self, item: SceneItem) -> SceneItem:
        self.children.append(item)
        return item

    def mapped_bbox(self, outer: AffineTransform) -> Optional[BBox]:
        t = outer @ self.transform
        return union_bbox(child.mapped_bbox(t) for child in self.children)


@dataclass
class Layer(Group):
    kind: ClassVar[str] = "layer"

    name: str = ""
    visible: bool = True
    locked: bool = False


def shape_kind(item: SceneItem) -> str:
    """Kind label as written to SVG: circle/ellipse and polyline/polygon split."""
    if isinstance(item, EllipseShape):
        return "circle" if item.circle else "ellipse"
    if isinstance(item, PolylineShape):
        return "polygon" if item.closed else "polyline"
    return item.kind


@dataclass
class Scene:
    width: float = 0.0
    height: float = 0.0
    view_box: Optional[tuple[float, float, float, float]] = None
    # Maps document user space to scene space; already applied to top-level items
    document_transform: AffineTransform = field(default_factory=AffineTransform)
    items: list[SceneItem] = field(default_factory=list)

    def add(self, item: SceneItem, container: Optional[Group] = None) -> SceneItem:
        """Place *item* at the end of *container*, or at the top level."""
        if container is None:
            self.items.append(item)
        else:
            container.add(item)
        return item

    def walk(self) -> Iterator[tuple[SceneItem, int]]:
        """Depth-first (item, nesting level) pairs in paint order."""
        for item, depth, _ in self.walk_transformed():
            yield item, depth

    def walk_transformed(self) -> Iterator[tuple[SceneItem, int, AffineTransform]]:
        """Like walk(), plus the transform from the item's parent to scene space."""
        stack = [(item, 0, AffineTransform()) for item in reversed(self.items)]
        while stack:
            item, depth, outer = stack.pop()
            yield item, depth, outer
            if isinstance(item, Group):
                inner = outer @ item.transform
                stack.extend((child, depth + 1, inner) for child in reversed(item.children))

    def shapes(self) -> list[SceneItem]:
        """Leaf shapes in paint order."""
        return [item for item, _ in self.walk() if not isinstance(item, Group)]

    def layers(self) -> list[Layer]:
        return [item for item, _ in self.walk() if isinstance(item, Layer)]

    def bounding_box(self) -> Optional[BBox]:
        return union_bbox(item.bounding_box() for item in self.items)
