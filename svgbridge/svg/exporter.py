"""Scene → SVG export, the structural inverse of the importer.

Each scene item becomes the element of its kind with geometry attributes,
style attributes and one transform attribute. Paint servers, filters and
markers referenced anywhere in the scene are written once into <defs>.
Documents are written with width/height equal to a "0 0 w h" viewBox so
re-importing them maps scene coordinates 1:1.
"""

from __future__ import annotations

import logging
import os

from svgbridge.config import Settings, settings as default_settings
from svgbridge.models.paint import (
    DropShadow,
    FilterEffect,
    GaussianBlur,
    LinearGradient,
    Marker,
    Pattern,
    RadialGradient,
)
from svgbridge.models.scene import (
    EllipseShape,
    Group,
    Layer,
    LineShape,
    PathShape,
    PolylineShape,
    RectShape,
    Scene,
    SceneItem,
    ShapeStyle,
    TextShape,
    shape_kind,
)
from svgbridge.parsing.color import Color
from svgbridge.parsing.path_data import format_path_data
from svgbridge.parsing.transform import format_number, format_transform
from svgbridge.svg.reader import INKSCAPE_NS, SODIPODI_NS, SVG_NS, XLINK_NS, ElementRecord
from svgbridge.svg.serializer import serialize_svg

logger = logging.getLogger(__name__)

_ID_PREFIXES = {
    LinearGradient: "grad",
    RadialGradient: "radial",
    FilterEffect: "filter",
    Pattern: "pattern",
    Marker: "marker",
}


class _Exporter:
    def __init__(self, settings: Settings) -> None:
        self.precision = settings.number_precision
        self.settings = settings
        # id(record) → assigned id, in first-reference order
        self.ids: dict[int, str] = {}
        self.used_ids: set[str] = set()
        self.definitions: list[ElementRecord] = []

    def num(self, value: float) -> str:
        return format_number(value, self.precision)

    # ── Definitions ───────────────────────────────────────────────────────

    def reference(self, record: object) -> str:
        """url(#id) for *record*, emitting its definition on first use."""
        key = id(record)
        if key not in self.ids:
            wanted = getattr(record, "id", "") or ""
            if not wanted or wanted in self.used_ids:
                prefix = _ID_PREFIXES.get(type(record), "def")
                n = 0
                while f"{prefix}_{n}" in self.used_ids:
                    n += 1
                wanted = f"{prefix}_{n}"
            self.ids[key] = wanted
            self.used_ids.add(wanted)
            # Registered before writing so self-referencing content terminates
            self.definitions.append(self.definition(record, wanted))
        return f"url(#{self.ids[key]})"

    def definition(self, record: object, def_id: str) -> ElementRecord:
        if isinstance(record, LinearGradient):
            attrs = {
                "id": def_id,
                "x1": self.num(record.x1),
                "y1": self.num(record.y1),
                "x2": self.num(record.x2),
                "y2": self.num(record.y2),
            }
            return self._gradient("linearGradient", attrs, record)
        if isinstance(record, RadialGradient):
            attrs = {
                "id": def_id,
                "cx": self.num(record.cx),
                "cy": self.num(record.cy),
                "r": self.num(record.r),
                "fx": self.num(record.fx),
                "fy": self.num(record.fy),
            }
            return self._gradient("radialGradient", attrs, record)
        if isinstance(record, FilterEffect):
            return self._filter(record, def_id)
        if isinstance(record, Pattern):
            attrs = {
                "id": def_id,
                "x": self.num(record.x),
                "y": self.num(record.y),
                "width": self.num(record.width),
                "height": self.num(record.height),
                "patternUnits": record.units,
                "patternContentUnits": record.content_units,
            }
            transform = format_transform(record.transform, self.precision)
            if transform:
                attrs["patternTransform"] = transform
            return ElementRecord("pattern", attrs, children=self.items(record.children))
        if isinstance(record, Marker):
            attrs = {
                "id": def_id,
                "refX": self.num(record.ref_x),
                "refY": self.num(record.ref_y),
                "markerWidth": self.num(record.width),
                "markerHeight": self.num(record.height),
                "orient": record.orient,
                "markerUnits": record.units,
            }
            if record.view_box is not None:
                attrs["viewBox"] = " ".join(self.num(v) for v in record.view_box)
            return ElementRecord("marker", attrs, children=self.items(record.children))
        raise TypeError(f"Cannot export definition of type {type(record).__name__}")

    def _gradient(
        self, tag: str, attrs: dict[str, str], record: LinearGradient | RadialGradient
    ) -> ElementRecord:
        if record.units != "objectBoundingBox":
            attrs["gradientUnits"] = record.units
        if record.spread != "pad":
            attrs["spreadMethod"] = record.spread
        transform = format_transform(record.transform, self.precision)
        if transform:
            attrs["gradientTransform"] = transform
        stops = []
        for stop in record.stops:
            stop_attrs = {"offset": self.num(stop.offset), "stop-color": stop.color.to_hex()}
            if stop.color.a < 255:
                stop_attrs["stop-opacity"] = self.num(stop.color.opacity)
            stops.append(ElementRecord("stop", stop_attrs))
        return ElementRecord(tag, attrs, children=stops)

    def _filter(self, record: FilterEffect, def_id: str) -> ElementRecord:
        attrs = {"id": def_id, "x": "-50%", "y": "-50%", "width": "200%", "height": "200%"}
        children = []
        for primitive in record.primitives:
            if isinstance(primitive, GaussianBlur):
                children.append(ElementRecord(
                    "feGaussianBlur", {"stdDeviation": self.num(primitive.std_deviation)}
                ))
            elif isinstance(primitive, DropShadow):
                shadow = {
                    "dx": self.num(primitive.dx),
                    "dy": self.num(primitive.dy),
                    "stdDeviation": self.num(primitive.std_deviation),
                    "flood-color": primitive.color.to_hex(),
                }
                if primitive.color.a < 255:
                    shadow["flood-opacity"] = self.num(primitive.color.opacity)
                children.append(ElementRecord("feDropShadow", shadow))
        return ElementRecord("filter", attrs, children=children)

    # ── Style ─────────────────────────────────────────────────────────────

    def _paint(self, attrs: dict[str, str], name: str, color: Color, server: object | None) -> None:
        if server is not None:
            attrs[name] = self.reference(server)
        elif not color.is_set:
            attrs[name] = "none"
        else:
            attrs[name] = color.to_hex()
            if color.a < 255:
                attrs[f"{name}-opacity"] = self.num(color.opacity)

    def style_attributes(self, style: ShapeStyle, attrs: dict[str, str]) -> None:
        self._paint(attrs, "fill", style.fill, style.fill_paint)
        if style.fill_rule != "nonzero":
            attrs["fill-rule"] = style.fill_rule
        if style.stroke.is_set or style.stroke_paint is not None:
            self._paint(attrs, "stroke", style.stroke, style.stroke_paint)
            attrs["stroke-width"] = self.num(style.stroke_width)
            if style.line_cap != "butt":
                attrs["stroke-linecap"] = style.line_cap
            if style.line_join != "miter":
                attrs["stroke-linejoin"] = style.line_join
            if style.dash_array:
                attrs["stroke-dasharray"] = " ".join(self.num(d) for d in style.dash_array)
        self.effect_attributes(style, attrs)
        for name, marker in (
            ("marker-start", style.marker_start),
            ("marker-mid", style.marker_mid),
            ("marker-end", style.marker_end),
        ):
            if marker is not None:
                attrs[name] = self.reference(marker)

    def effect_attributes(self, style: ShapeStyle, attrs: dict[str, str]) -> None:
        if style.opacity < 1.0:
            attrs["opacity"] = self.num(style.opacity)
        if style.filter is not None:
            attrs["filter"] = self.reference(style.filter)

    # ── Items ─────────────────────────────────────────────────────────────

    def geometry(self, item: SceneItem) -> tuple[str, dict[str, str], str]:
        """(tag, geometry attributes, text content) for a leaf shape."""
        n = self.num
        if isinstance(item, PathShape):
            return "path", {"d": format_path_data(item.segments, self.precision)}, ""
        if isinstance(item, RectShape):
            attrs = {"x": n(item.x), "y": n(item.y), "width": n(item.width), "height": n(item.height)}
            if item.rx > 0 or item.ry > 0:
                attrs["rx"] = n(item.rx)
                attrs["ry"] = n(item.ry)
            return "rect", attrs, ""
        if isinstance(item, EllipseShape):
            if item.circle and item.rx == item.ry:
                return "circle", {"cx": n(item.cx), "cy": n(item.cy), "r": n(item.rx)}, ""
            return "ellipse", {"cx": n(item.cx), "cy": n(item.cy), "rx": n(item.rx), "ry": n(item.ry)}, ""
        if isinstance(item, LineShape):
            return "line", {"x1": n(item.x1), "y1": n(item.y1), "x2": n(item.x2), "y2": n(item.y2)}, ""
        if isinstance(item, PolylineShape):
            points = " ".join(f"{n(x)},{n(y)}" for x, y in item.points)
            return shape_kind(item), {"points": points}, ""
        if isinstance(item, TextShape):
            attrs = {
                "x": n(item.x),
                "y": n(item.y),
                "font-family": item.font_family,
                "font-size": n(item.font_size),
            }
            if item.font_weight != "normal":
                attrs["font-weight"] = item.font_weight
            if item.font_style != "normal":
                attrs["font-style"] = item.font_style
            if item.anchor != "start":
                attrs["text-anchor"] = item.anchor
            return "text", attrs, item.text
        raise TypeError(f"Cannot export scene item of type {type(item).__name__}")

    def item(self, item: SceneItem) -> ElementRecord:
        attrs: dict[str, str] = {}
        if item.id:
            attrs["id"] = item.id

        if isinstance(item, Group):
            tag, text = "g", ""
            if isinstance(item, Layer):
                attrs["inkscape:groupmode"] = "layer"
                attrs["inkscape:label"] = item.name or item.id or "Layer"
                if not item.visible:
                    attrs["style"] = "display:none"
                if item.locked:
                    attrs["sodipodi:insensitive"] = "true"
            self.effect_attributes(item.style, attrs)
            children = self.items(item.children)
        else:
            tag, geometry, text = self.geometry(item)
            attrs.update(geometry)
            self.style_attributes(item.style, attrs)
            children = []

        transform = format_transform(item.transform, self.precision)
        if transform:
            attrs["transform"] = transform
        return ElementRecord(tag, attrs, text=text, children=children)

    def items(self, items: list[SceneItem]) -> list[ElementRecord]:
        return [self.item(item) for item in items]

    # ── Document ──────────────────────────────────────────────────────────

    def document_size(self, scene: Scene) -> tuple[float, float]:
        if scene.width > 0 and scene.height > 0:
            return scene.width, scene.height
        box = scene.bounding_box()
        if box is None:
            return self.settings.empty_scene_width, self.settings.empty_scene_height
        margin = self.settings.export_margin
        return max(box[2], 0.0) + margin, max(box[3], 0.0) + margin

    def document(self, scene: Scene) -> ElementRecord:
        width, height = self.document_size(scene)
        # Item ids are written verbatim; definitions must not reuse them
        self.used_ids.update(item.id for item, _ in scene.walk() if item.id)
        root = ElementRecord("svg", {
            "xmlns": SVG_NS,
            "xmlns:xlink": XLINK_NS,
            "xmlns:inkscape": INKSCAPE_NS,
            "xmlns:sodipodi": SODIPODI_NS,
            "version": "1.1",
            "width": self.num(width),
            "height": self.num(height),
            "viewBox": f"0 0 {self.num(width)} {self.num(height)}",
        })
        body = self.items(scene.items)
        if self.definitions:
            root.children.append(ElementRecord("defs", children=self.definitions))
        root.children.extend(body)
        return root


def export_records(scene: Scene, settings: Settings = default_settings) -> ElementRecord:
    """Scene → ElementRecord tree rooted at <svg>."""
    return _Exporter(settings).document(scene)


def export_svg_string(scene: Scene, settings: Settings = default_settings) -> str:
    return serialize_svg(export_records(scene, settings))


def export_svg_file(
    scene: Scene, path: str | os.PathLike, settings: Settings = default_settings
) -> bool:
    """Write *scene* to *path*. Returns False (and logs) if the file cannot be written."""
    markup = export_svg_string(scene, settings)
    try:
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(markup)
    except OSError as e:
        logger.error("Cannot write %s: %s", path, e)
        return False
    logger.info("Exported %d items to %s", len(scene.items), path)
    return True


def definition_ids(root: ElementRecord) -> list[str]:
    """Ids declared in the <defs> section of an exported document."""
    for child in root.children:
        if child.tag == "defs":
            return [d.id for d in child.children]
    return []


