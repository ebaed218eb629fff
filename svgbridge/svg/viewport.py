"""Document metadata and the root transform (viewBox + preserveAspectRatio).

The root transform maps document user space into scene space:

    translate(align offset) @ scale(sx, sy) @ translate(-viewBox origin)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from svgbridge.config import Settings, settings as default_settings
from svgbridge.parsing.length import parse_length
from svgbridge.parsing.transform import AffineTransform
from svgbridge.svg.reader import ElementRecord

logger = logging.getLogger(__name__)

_SPLIT_RE = re.compile(r"[\s,]+")
_ALIGN_FACTORS = {"min": 0.0, "mid": 0.5, "max": 1.0}


@dataclass
class DocumentMetadata:
    width: Optional[float] = None
    height: Optional[float] = None
    view_box: Optional[tuple[float, float, float, float]] = None
    preserve_aspect_ratio: str = "xMidYMid meet"

    @property
    def size(self) -> tuple[float, float]:
        """Declared size, falling back to the viewBox extent per axis."""
        w, h = self.width, self.height
        if self.view_box is not None:
            w = w if w is not None else self.view_box[2]
            h = h if h is not None else self.view_box[3]
        return (w or 0.0, h or 0.0)


def parse_view_box(text: Optional[str]) -> Optional[tuple[float, float, float, float]]:
    """"0 0 100 50" → (0, 0, 100, 50); malformed or non-positive extents → None."""
    if not text:
        return None
    parts = [p for p in _SPLIT_RE.split(text.strip()) if p]
    if len(parts) != 4:
        logger.debug("Ignoring viewBox %r: expected 4 numbers", text)
        return None
    try:
        x, y, w, h = (float(p) for p in parts)
    except ValueError:
        logger.debug("Ignoring non-numeric viewBox %r", text)
        return None
    if w <= 0 or h <= 0:
        logger.debug("Ignoring viewBox %r with non-positive extent", text)
        return None
    return (x, y, w, h)


def _declared(text: Optional[str]) -> Optional[float]:
    if text is None or not text.strip() or text.strip().endswith("%"):
        return None
    value = parse_length(text)
    return value if value > 0 else None


def read_metadata(root: ElementRecord, settings: Settings = default_settings) -> DocumentMetadata:
    """Read width/height/viewBox/preserveAspectRatio off the root <svg>.

    A document with neither size nor viewBox gets the configured default
    size with a matching viewBox.
    """
    meta = DocumentMetadata(
        width=_declared(root.get("width")),
        height=_declared(root.get("height")),
        view_box=parse_view_box(root.get("viewBox")),
        preserve_aspect_ratio=(root.get("preserveAspectRatio") or "xMidYMid meet").strip(),
    )
    if meta.view_box is None and meta.width is None and meta.height is None:
        w, h = settings.default_document_width, settings.default_document_height
        meta.width, meta.height = w, h
        meta.view_box = (0.0, 0.0, w, h)
    return meta


def _parse_policy(policy: str) -> tuple[str, str]:
    """'xMinYMax slice' → ('xMinYMax', 'slice'); 'defer' prefix is ignored."""
    tokens = policy.split()
    if tokens and tokens[0] == "defer":
        tokens = tokens[1:]
    align = tokens[0] if tokens else "xMidYMid"
    fit = tokens[1] if len(tokens) > 1 else "meet"
    if fit not in ("meet", "slice"):
        fit = "meet"
    return align, fit


def _align_factors(align: str) -> tuple[float, float]:
    m = re.fullmatch(r"x(Min|Mid|Max)Y(Min|Mid|Max)", align)
    if not m:
        return (0.5, 0.5)
    return (_ALIGN_FACTORS[m.group(1).lower()], _ALIGN_FACTORS[m.group(2).lower()])


def document_transform(meta: DocumentMetadata) -> AffineTransform:
    """Root transform for *meta* (see module docstring)."""
    if meta.view_box is None:
        return AffineTransform()
    vx, vy, vw, vh = meta.view_box
    if meta.width is None and meta.height is None:
        return AffineTransform.translation(-vx, -vy)

    width, height = meta.size
    sx, sy = width / vw, height / vh
    align, fit = _parse_policy(meta.preserve_aspect_ratio)

    if align == "none":
        tx = ty = 0.0
    else:
        uniform = min(sx, sy) if fit == "meet" else max(sx, sy)
        sx = sy = uniform
        fx, fy = _align_factors(align)
        tx = (width - vw * sx) * fx
        ty = (height - vh * sy) * fy

    return (
        AffineTransform.translation(tx, ty)
        @ AffineTransform.scaling(sx, sy)
        @ AffineTransform.translation(-vx, -vy)
    )
