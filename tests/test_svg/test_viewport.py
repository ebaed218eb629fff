"""Tests for document metadata and the viewBox → scene transform."""

from __future__ import annotations

import pytest

from svgbridge.config import Settings
from svgbridge.svg.reader import read_tree
from svgbridge.svg.viewport import (
    DocumentMetadata,
    document_transform,
    parse_view_box,
    read_metadata,
)


def _meta(attrs: str) -> DocumentMetadata:
    return read_metadata(read_tree(f'<svg xmlns="http://www.w3.org/2000/svg" {attrs}/>'))


def _close(p, q):
    return p == pytest.approx(q, abs=1e-9)


def test_no_viewbox_is_identity():
    t = document_transform(_meta('width="100" height="50"'))
    assert t.is_identity()


def test_viewbox_without_size_translates_origin():
    t = document_transform(_meta('viewBox="10 20 100 50"'))
    assert t.is_translation()
    assert _close(t.map(10, 20), (0, 0))


def test_uniform_scale_equal_aspect():
    t = document_transform(_meta('width="200" height="100" viewBox="0 0 100 50"'))
    assert _close(t.map(100, 50), (200, 100))


def test_meet_letterboxes_centered():
    # 100x100 content in a 200x100 viewport: scale 1, centred horizontally
    t = document_transform(_meta('width="200" height="100" viewBox="0 0 100 100"'))
    assert _close(t.map(0, 0), (50, 0))
    assert _close(t.map(100, 100), (150, 100))


def test_meet_xmin_alignment():
    t = document_transform(
        _meta('width="200" height="100" viewBox="0 0 100 100" preserveAspectRatio="xMinYMin meet"')
    )
    assert _close(t.map(0, 0), (0, 0))


def test_meet_xmax_alignment():
    t = document_transform(
        _meta('width="200" height="100" viewBox="0 0 100 100" preserveAspectRatio="xMaxYMid meet"')
    )
    assert _close(t.map(0, 0), (100, 0))


def test_slice_fills_and_crops():
    # scale = max(2, 1) = 2; vertical overflow split evenly
    t = document_transform(
        _meta('width="200" height="100" viewBox="0 0 100 100" preserveAspectRatio="xMidYMid slice"')
    )
    assert _close(t.map(0, 0), (0, -50))
    assert _close(t.map(100, 100), (200, 150))


def test_none_scales_independently():
    t = document_transform(
        _meta('width="200" height="100" viewBox="0 0 100 100" preserveAspectRatio="none"')
    )
    assert _close(t.map(100, 100), (200, 100))


def test_viewbox_origin_applied_before_scale():
    t = document_transform(_meta('width="100" height="100" viewBox="50 50 50 50"'))
    assert _close(t.map(50, 50), (0, 0))
    assert _close(t.map(100, 100), (100, 100))


def test_size_with_units():
    meta = _meta('width="1in" height="2cm" viewBox="0 0 96 75.5906"')
    assert meta.width == pytest.approx(96)
    assert meta.height == pytest.approx(75.5906)


def test_size_falls_back_to_viewbox():
    meta = _meta('viewBox="0 0 24 12"')
    assert meta.size == (24, 12)


def test_defaults_when_nothing_declared():
    meta = read_metadata(
        read_tree('<svg xmlns="http://www.w3.org/2000/svg"/>'),
        Settings(default_document_width=640, default_document_height=480),
    )
    assert meta.size == (640, 480)
    assert meta.view_box == (0, 0, 640, 480)
    assert document_transform(meta).is_identity()


@pytest.mark.parametrize("text", ["0 0 100", "a b c d", "0 0 -10 10", "0 0 0 10", "", None])
def test_malformed_viewbox_ignored(text):
    assert parse_view_box(text) is None


def test_viewbox_commas():
    assert parse_view_box("0,0,10,20") == (0, 0, 10, 20)
