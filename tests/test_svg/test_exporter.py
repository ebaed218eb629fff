"""Tests for Scene → SVG export and import/export round trips."""

from __future__ import annotations

import pytest

from svgbridge.config import Settings
from svgbridge.models.paint import GradientStop, LinearGradient, Marker, Pattern
from svgbridge.models.scene import (
    EllipseShape,
    Group,
    Layer,
    LineShape,
    PathShape,
    PolylineShape,
    RectShape,
    Scene,
    ShapeStyle,
    TextShape,
    shape_kind,
)
from svgbridge.parsing.color import UNSET, Color
from svgbridge.parsing.path_data import parse_path_data
from svgbridge.parsing.transform import AffineTransform
from svgbridge.svg.exporter import definition_ids, export_records, export_svg_file, export_svg_string
from svgbridge.svg.importer import import_svg, import_svg_file
from svgbridge.svg.reader import read_tree
from tests.conftest import FILLED_SCALED_SVG, HOME_SVG, INKSCAPE_SVG, SMILEY_SVG


def _summary(scene: Scene) -> list[tuple]:
    return [
        (shape_kind(item), depth, item.mapped_bbox(outer))
        for item, depth, outer in scene.walk_transformed()
    ]


def _roundtrip(scene: Scene) -> Scene:
    result = import_svg(export_svg_string(scene))
    assert result.ok, result.error
    return result.scene


# ---------------------------------------------------------------------------
# Round trips
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("markup", [SMILEY_SVG, HOME_SVG, FILLED_SCALED_SVG, INKSCAPE_SVG])
def test_roundtrip_preserves_structure_and_geometry(markup):
    first = import_svg(markup).scene
    second = _roundtrip(first)

    before, after = _summary(first), _summary(second)
    assert [(kind, depth) for kind, depth, _ in before] == [(kind, depth) for kind, depth, _ in after]
    for (_, _, box_a), (_, _, box_b) in zip(before, after):
        if box_a is None:
            assert box_b is None
        else:
            assert box_b == pytest.approx(box_a, abs=1e-4)


def test_roundtrip_preserves_layers_and_styles():
    first = import_svg(INKSCAPE_SVG).scene
    second = _roundtrip(first)

    assert [(l.name, l.visible, l.locked) for l in second.layers()] == [
        ("Background", True, False),
        ("Shapes", True, False),
        ("Hidden", False, True),
    ]
    wall_before = first.items[1].children[1].children[0]
    wall_after = second.items[1].children[1].children[0]
    assert wall_after.id == "wall"
    assert wall_after.style.fill == wall_before.style.fill

    tile = second.items[1].children[4]
    assert tile.style.filter.primitives[0].color.rgba() == (0, 0, 0, 128)
    assert second.items[1].children[3].style.marker_end.id == "arrow"


def test_roundtrip_is_stable():
    once = export_svg_string(import_svg(INKSCAPE_SVG).scene)
    twice = export_svg_string(import_svg(once).scene)
    assert once == twice


# ---------------------------------------------------------------------------
# Document root
# ---------------------------------------------------------------------------

class TestDocument:
    def test_scene_size_written_as_viewbox(self):
        root = export_records(Scene(width=640, height=480))
        assert root.tag == "svg"
        assert root.get("width") == "640"
        assert root.get("height") == "480"
        assert root.get("viewBox") == "0 0 640 480"
        assert root.get("xmlns") == "http://www.w3.org/2000/svg"

    def test_empty_scene_uses_configured_size(self):
        root = export_records(Scene(), Settings(empty_scene_width=300, empty_scene_height=200))
        assert (root.get("width"), root.get("height")) == ("300", "200")

    def test_unsized_scene_fits_content_plus_margin(self):
        scene = Scene(items=[RectShape(x=10, y=10, width=100, height=50)])
        root = export_records(scene, Settings(export_margin=20))
        assert (root.get("width"), root.get("height")) == ("130", "80")

    def test_defs_come_first(self):
        grad = LinearGradient(id="g", stops=[GradientStop(0, Color(255, 0, 0))])
        scene = Scene(width=10, height=10, items=[
            RectShape(width=1, height=1, style=ShapeStyle(fill=UNSET, fill_paint=grad)),
        ])
        root = export_records(scene)
        assert [c.tag for c in root.children] == ["defs", "rect"]

    def test_markup_is_parseable(self):
        scene = Scene(width=10, height=10, items=[TextShape(text="a < b & c")])
        root = read_tree(export_svg_string(scene))
        assert root.children[0].text == "a < b & c"


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

class TestItems:
    def _only(self, item):
        return export_records(Scene(width=10, height=10, items=[item])).children[0]

    def test_rect(self):
        el = self._only(RectShape(x=1, y=2, width=3, height=4, rx=0.5, ry=0.5))
        assert el.tag == "rect"
        assert (el.get("x"), el.get("width"), el.get("rx")) == ("1", "3", "0.5")

    def test_circle_and_ellipse(self):
        assert self._only(EllipseShape(cx=1, cy=1, rx=2, ry=2, circle=True)).tag == "circle"
        assert self._only(EllipseShape(cx=1, cy=1, rx=2, ry=3)).tag == "ellipse"

    def test_polyline_and_polygon(self):
        el = self._only(PolylineShape(points=[(0, 0), (1.5, 2)], closed=True))
        assert el.tag == "polygon"
        assert el.get("points") == "0,0 1.5,2"

    def test_path_and_transform(self):
        path = PathShape.from_segments(
            parse_path_data("M0 0 L10 0 L10 10 Z"),
            transform=AffineTransform.translation(3, 4),
        )
        el = self._only(path)
        assert el.get("d") == "M 0,0 L 10,0 L 10,10 Z"
        assert el.get("transform") == "translate(3,4)"

    def test_style_attributes(self):
        style = ShapeStyle(
            fill=Color(255, 0, 0, 128),
            stroke=Color(0, 0, 255),
            stroke_width=2.5,
            line_cap="round",
            dash_array=[4, 2],
            opacity=0.5,
        )
        el = self._only(LineShape(x2=5, style=style))
        assert el.get("fill") == "#ff0000"
        assert el.get("fill-opacity") == "0.50196078"
        assert el.get("stroke") == "#0000ff"
        assert el.get("stroke-width") == "2.5"
        assert el.get("stroke-linecap") == "round"
        assert el.get("stroke-dasharray") == "4 2"
        assert el.get("opacity") == "0.5"

    def test_unset_fill_and_stroke(self):
        el = self._only(RectShape(width=1, height=1, style=ShapeStyle(fill=UNSET)))
        assert el.get("fill") == "none"
        assert el.get("stroke") is None

    def test_layer_attributes(self):
        layer = Layer(id="l1", name="Ink", visible=False, locked=True, children=[
            Group(id="inner", children=[RectShape(width=1, height=1)]),
        ])
        el = self._only(layer)
        assert el.get("inkscape:groupmode") == "layer"
        assert el.get("inkscape:label") == "Ink"
        assert el.get("style") == "display:none"
        assert el.get("sodipodi:insensitive") == "true"
        assert el.children[0].tag == "g"
        assert el.children[0].children[0].tag == "rect"

    def test_text(self):
        el = self._only(TextShape(x=1, y=2, text="hi", font_size=18, font_weight="bold", anchor="end"))
        assert el.text == "hi"
        assert el.get("font-size") == "18"
        assert el.get("font-weight") == "bold"
        assert el.get("text-anchor") == "end"


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------

class TestDefinitions:
    def test_inkscape_definitions_in_first_reference_order(self):
        root = export_records(import_svg(INKSCAPE_SVG).scene)
        assert definition_ids(root) == ["sky", "sun", "soft", "arrow", "shadow"]

    def test_shared_record_written_once(self):
        grad = LinearGradient(id="g")
        style = ShapeStyle(fill=UNSET, fill_paint=grad)
        scene = Scene(width=10, height=10, items=[
            RectShape(width=1, height=1, style=style),
            EllipseShape(rx=1, ry=1, style=ShapeStyle(fill=UNSET, fill_paint=grad)),
        ])
        root = export_records(scene)
        assert definition_ids(root) == ["g"]
        assert root.children[1].get("fill") == "url(#g)"
        assert root.children[2].get("fill") == "url(#g)"

    def test_generated_and_deduplicated_ids(self):
        scene = Scene(width=10, height=10, items=[
            RectShape(width=1, height=1, style=ShapeStyle(fill_paint=LinearGradient(id=""))),
            RectShape(width=1, height=1, style=ShapeStyle(fill_paint=LinearGradient(id="x"))),
            RectShape(width=1, height=1, style=ShapeStyle(fill_paint=LinearGradient(id="x"))),
        ])
        assert definition_ids(export_records(scene)) == ["grad_0", "x", "grad_1"]

    def test_definition_ids_avoid_item_ids(self):
        scene = Scene(width=10, height=10, items=[
            RectShape(id="grad_0", width=1, height=1, style=ShapeStyle(fill_paint=LinearGradient(id=""))),
            Group(id="g", children=[
                RectShape(width=1, height=1, style=ShapeStyle(fill_paint=LinearGradient(id="g"))),
            ]),
        ])
        root = export_records(scene)
        assert definition_ids(root) == ["grad_1", "grad_2"]
        assert root.children[1].get("id") == "grad_0"
        assert root.children[1].get("fill") == "url(#grad_1)"
        assert root.children[2].children[0].get("fill") == "url(#grad_2)"

    def test_self_referencing_pattern_terminates(self):
        pattern = Pattern(id="p")
        pattern.children.append(
            RectShape(width=5, height=5, style=ShapeStyle(fill=UNSET, fill_paint=pattern))
        )
        scene = Scene(width=10, height=10, items=[
            RectShape(width=10, height=10, style=ShapeStyle(fill=UNSET, fill_paint=pattern)),
        ])
        root = export_records(scene)
        defs = root.children[0]
        assert [d.tag for d in defs.children] == ["pattern"]
        assert defs.children[0].children[0].get("fill") == "url(#p)"

    def test_marker_content_written(self):
        marker = Marker(id="m", children=[PathShape.from_segments(parse_path_data("M0 0 L1 1"))])
        scene = Scene(width=10, height=10, items=[
            LineShape(x2=5, style=ShapeStyle(stroke=Color(0, 0, 0), marker_start=marker)),
        ])
        root = export_records(scene)
        assert root.children[1].get("marker-start") == "url(#m)"
        assert root.children[0].children[0].children[0].tag == "path"


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------

def test_export_file_roundtrip(tmp_path):
    path = tmp_path / "out.svg"
    assert export_svg_file(import_svg(SMILEY_SVG).scene, path) is True
    result = import_svg_file(path)
    assert result.ok
    assert len(result.scene.shapes()) == 4


def test_export_file_unwritable(tmp_path):
    assert export_svg_file(Scene(), tmp_path / "missing" / "out.svg") is False
