"""Paint servers and effects: opaque value records filled in by the importer.

Nothing here renders or evaluates paint; the exporter writes these back out
and scene consumers may interpret them however they like.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

from svgbridge.parsing.color import Color
from svgbridge.parsing.transform import AffineTransform

if TYPE_CHECKING:
    from svgbridge.models.scene import SceneItem


@dataclass
class GradientStop:
    offset: float
    color: Color


@dataclass
class LinearGradient:
    id: str
    x1: float = 0.0
    y1: float = 0.0
    x2: float = 1.0
    y2: float = 0.0
    units: str = "objectBoundingBox"
    spread: str = "pad"
    transform: AffineTransform = field(default_factory=AffineTransform)
    stops: list[GradientStop] = field(default_factory=list)


@dataclass
class RadialGradient:
    id: str
    cx: float = 0.5
    cy: float = 0.5
    r: float = 0.5
    fx: float = 0.5
    fy: float = 0.5
    units: str = "objectBoundingBox"
    spread: str = "pad"
    transform: AffineTransform = field(default_factory=AffineTransform)
    stops: list[GradientStop] = field(default_factory=list)


@dataclass
class GaussianBlur:
    std_deviation: float = 1.0


@dataclass
class DropShadow:
    dx: float = 2.0
    dy: float = 2.0
    std_deviation: float = 3.0
    color: Color = field(default_factory=lambda: Color(63, 63, 63, 180))


FilterPrimitive = Union[GaussianBlur, DropShadow]


@dataclass
class FilterEffect:
    id: str
    primitives: list[FilterPrimitive] = field(default_factory=list)


@dataclass
class Pattern:
    id: str
    x: float = 0.0
    y: float = 0.0
    width: float = 10.0
    height: float = 10.0
    units: str = "objectBoundingBox"
    content_units: str = "userSpaceOnUse"
    transform: AffineTransform = field(default_factory=AffineTransform)
    # Tile content, built with the same element builders as the scene
    children: list["SceneItem"] = field(default_factory=list)


@dataclass
class Marker:
    id: str
    ref_x: float = 0.0
    ref_y: float = 0.0
    width: float = 3.0
    height: float = 3.0
    orient: str = "auto"
    units: str = "strokeWidth"
    view_box: tuple[float, float, float, float] | None = None
    children: list["SceneItem"] = field(default_factory=list)


Gradient = Union[LinearGradient, RadialGradient]
PaintServer = Union[LinearGradient, RadialGradient, Pattern]

