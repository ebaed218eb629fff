"""Tests for the tree and event readers."""

from __future__ import annotations

import io

import pytest

from svgbridge.svg.reader import SvgReadError, normalize_name, read_events, read_tree
from tests.conftest import INKSCAPE_SVG, LABELS_SVG, SMILEY_SVG


def _shape(record):
    return (
        record.tag,
        record.attributes,
        record.text,
        record.tail,
        [_shape(c) for c in record.children],
    )


def test_namespaces_normalized():
    root = read_tree(INKSCAPE_SVG)
    assert root.tag == "svg"
    layer = root.children[1]
    assert layer.get("inkscape:groupmode") == "layer"
    use = next(r for r in root.iter() if r.tag == "use")
    assert use.get("xlink:href") == "#tile"
    arc = next(r for r in root.iter() if r.id == "blob")
    assert arc.get("sodipodi:type") == "arc"


def test_unknown_namespace_keeps_clark_name():
    assert normalize_name("{urn:example}thing") == "{urn:example}thing"
    assert normalize_name("{http://www.w3.org/2000/svg}rect") == "rect"


def test_text_and_tspan_runs():
    root = read_tree(INKSCAPE_SVG)
    text = next(r for r in root.iter() if r.tag == "text")
    assert text.full_text() == "Hello world"


@pytest.mark.parametrize("svg", [SMILEY_SVG, INKSCAPE_SVG, LABELS_SVG])
def test_event_reader_matches_tree_reader(svg):
    assert _shape(read_events(svg)) == _shape(read_tree(svg))


def test_reads_bytes_and_file_objects():
    data = SMILEY_SVG.encode("utf-8")
    assert read_tree(data).tag == "svg"
    assert read_events(io.BytesIO(data)).tag == "svg"


def test_reads_path(tmp_path):
    path = tmp_path / "smiley.svg"
    path.write_text(SMILEY_SVG, encoding="utf-8")
    assert len(read_tree(str(path)).children) == 4
    assert len(read_events(path).children) == 4


def test_comments_skipped():
    root = read_tree('<svg xmlns="http://www.w3.org/2000/svg"><!-- hi --><rect width="1" height="1"/></svg>')
    assert [c.tag for c in root.children] == ["rect"]


@pytest.mark.parametrize("reader", [read_tree, read_events])
def test_malformed_xml_raises_read_error(reader):
    with pytest.raises(SvgReadError):
        reader("<svg><rect></svg>")


@pytest.mark.parametrize("reader", [read_tree, read_events])
def test_missing_file_raises_read_error(reader, tmp_path):
    with pytest.raises(SvgReadError):
        reader(str(tmp_path / "missing.svg"))


@pytest.mark.parametrize("reader", [read_tree, read_events])
def test_text_after_tspan_kept(reader):
    root = reader(LABELS_SVG)
    greeting, notes = root.children
    assert greeting.full_text() == "Hello big world"
    assert greeting.children[0].tail == " world"
    assert notes.children[0].full_text() == "a b c d e"


def test_event_reader_keeps_tails_across_read_chunks():
    # Well past the parser's feed size, so end events arrive after later input was consumed
    runs = "".join(
        f'<text id="t{i}">run {i} <tspan>inner</tspan> tail {i}</text>\n' for i in range(2000)
    )
    svg = f'<svg xmlns="http://www.w3.org/2000/svg">\n{runs}</svg>'
    events = read_events(svg)
    assert _shape(events) == _shape(read_tree(svg))
    assert events.children[1999].full_text() == "run 1999 inner tail 1999"


@pytest.mark.parametrize("reader", [read_tree, read_events])
def test_unopenable_path_raises_read_error(reader):
    with pytest.raises(SvgReadError):
        reader("bad\x00name.svg")
