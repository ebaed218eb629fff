"""<text>: one text run per element, tspans flattened into its content."""

from __future__ import annotations

import re
from typing import Optional

from svgbridge.models.scene import SceneItem, TextShape
from svgbridge.parsing.length import parse_length
from svgbridge.svg.context import ImportContext
from svgbridge.svg.reader import ElementRecord
from svgbridge.svg.registry import element_builder
from svgbridge.svg.style import Properties

_WS_RE = re.compile(r"\s+")
_FIRST_RE = re.compile(r"^[^\s,]+")


def _first(value: Optional[str]) -> Optional[str]:
    # x/y may hold per-glyph lists; only the first position is kept
    if value is None:
        return None
    m = _FIRST_RE.match(value.strip())
    return m.group() if m else None


@element_builder("text")
def build_text(element: ElementRecord, ctx: ImportContext, props: Properties) -> Optional[SceneItem]:
    content = _WS_RE.sub(" ", element.full_text()).strip()
    if not content:
        ctx.skip(element, "no text content")
        return None
    family = props.get("font-family", "Arial").split(",")[0].strip().strip("'\"") or "Arial"
    size = parse_length(props.get("font-size"), 12.0) if "font-size" in props else 12.0
    return TextShape(
        x=ctx.length(_first(element.get("x")), "x"),
        y=ctx.length(_first(element.get("y")), "y"),
        text=content,
        font_family=family,
        font_size=size if size > 0 else 12.0,
        font_weight=props.get("font-weight", "normal"),
        font_style=props.get("font-style", "normal"),
        anchor=props.get("text-anchor", "start"),
    )
