"""Tests for color literal parsing."""

from __future__ import annotations

import pytest

from svgbridge.parsing.color import NAMED_COLORS, UNSET, Color, parse_color


def test_short_hex_equals_long_hex():
    assert parse_color("#fff") == parse_color("#ffffff")
    assert parse_color("#fff").rgba() == (255, 255, 255, 255)


def test_rgba_half_alpha_rounds_up():
    assert parse_color("rgba(0,0,0,0.5)").a == 128


def test_hex_with_alpha():
    assert parse_color("#ff000080").rgba() == (255, 0, 0, 128)
    assert parse_color("#f008").rgba() == (255, 0, 0, 136)


@pytest.mark.parametrize("text", ["none", "currentColor", "CURRENTCOLOR"])
def test_unset_keywords(text):
    assert parse_color(text) == UNSET
    assert not parse_color(text).is_set


@pytest.mark.parametrize("text", ["#12", "#ggg", "rgb(1,2)", "blurple", "hsl(a,b,c)", "", None])
def test_unrecognized_is_unset(text):
    assert parse_color(text) == UNSET


def test_unset_differs_from_transparent_black():
    assert parse_color("transparent") == Color(0, 0, 0, 0)
    assert parse_color("transparent") != UNSET


def test_rgb_clamps_channels():
    assert parse_color("rgb(300, -20, 128)").rgba() == (255, 0, 128, 255)


def test_rgb_percent_channels():
    assert parse_color("rgb(100%, 0%, 50%)").rgba() == (255, 0, 128, 255)


def test_rgba_alpha_clamped():
    assert parse_color("rgba(10,20,30,2)").a == 255
    assert parse_color("rgba(10,20,30,-1)").a == 0


def test_hsl_primary_colors():
    assert parse_color("hsl(0, 100%, 50%)").rgba() == (255, 0, 0, 255)
    assert parse_color("hsl(120, 100%, 50%)").rgba() == (0, 255, 0, 255)
    assert parse_color("hsl(240, 100%, 50%)").rgba() == (0, 0, 255, 255)


def test_hsla_alpha_and_clamping():
    color = parse_color("hsla(400, 150%, 50%, 0.5)")
    # hue clamps to 360 (= red), saturation to 100%
    assert color.rgba() == (255, 0, 0, 128)


def test_named_colors_case_insensitive():
    assert parse_color("AliceBlue").rgba() == (240, 248, 255, 255)
    assert parse_color("rebeccapurple").rgba() == (102, 51, 153, 255)


def test_named_table_size():
    assert len(NAMED_COLORS) >= 140


def test_to_hex_and_opacity():
    color = parse_color("rgba(255, 128, 0, 0.5)")
    assert color.to_hex() == "#ff8000"
    assert color.opacity == pytest.approx(128 / 255)


def test_scaled_alpha_keeps_unset():
    assert UNSET.scaled_alpha(0.5) == UNSET
    assert Color(1, 2, 3).scaled_alpha(0.5).a == 128
