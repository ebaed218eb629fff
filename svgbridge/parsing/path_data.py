"""Path data grammar → MoveTo / LineTo / CubicTo / ClosePath segments.

All commands (M L H V C S Q T A Z, absolute and relative) are reduced to four
absolute segment kinds. Quadratics are raised to cubics and elliptical arcs
are expanded into at most-90° cubic pieces. Parsing stops at the first
malformed token; segments already produced are kept.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Union

from svgbridge.parsing.transform import AffineTransform, format_number

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_COMMANDS = set("MmLlHhVvCcSsQqTtAaZz")
_ARG_COUNTS = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "S": 4, "Q": 4, "T": 2, "A": 7, "Z": 0}

_HALF_PI = math.pi / 2.0


@dataclass(frozen=True)
class MoveTo:
    x: float
    y: float

    @property
    def end(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class LineTo:
    x: float
    y: float

    @property
    def end(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class CubicTo:
    x1: float
    y1: float
    x2: float
    y2: float
    x: float
    y: float

    @property
    def end(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class ClosePath:
    """Closes the subpath; (x, y) is the point of the subpath's MoveTo."""

    x: float
    y: float

    @property
    def end(self) -> tuple[float, float]:
        return (self.x, self.y)


PathSegment = Union[MoveTo, LineTo, CubicTo, ClosePath]


class _Scanner:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def skip_separators(self) -> None:
        n = len(self.text)
        while self.pos < n and (self.text[self.pos].isspace() or self.text[self.pos] == ","):
            self.pos += 1

    def at_end(self) -> bool:
        self.skip_separators()
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos]

    def read_number(self) -> float | None:
        self.skip_separators()
        m = _NUMBER_RE.match(self.text, self.pos)
        if not m:
            return None
        self.pos = m.end()
        return float(m.group())

    def read_flag(self) -> int | None:
        # Flags are single characters and may be packed: "a1 1 0 00 10 10"
        self.skip_separators()
        if self.pos < len(self.text) and self.text[self.pos] in "01":
            self.pos += 1
            return int(self.text[self.pos - 1])
        return None

    def read_args(self, command: str) -> list[float] | None:
        upper = command.upper()
        if upper == "A":
            out: list[float] = []
            for kind in ("n", "n", "n", "f", "f", "n", "n"):
                value = self.read_number() if kind == "n" else self.read_flag()
                if value is None:
                    return None
                out.append(float(value))
            return out
        args = []
        for _ in range(_ARG_COUNTS[upper]):
            value = self.read_number()
            if value is None:
                return None
            args.append(value)
        return args


def _reflect(cx: float, cy: float, px: float, py: float) -> tuple[float, float]:
    return (2.0 * px - cx, 2.0 * py - cy)


def _vector_angle(ux: float, uy: float, vx: float, vy: float) -> float:
    return math.atan2(ux * vy - uy * vx, ux * vx + uy * vy)


def arc_to_cubics(
    x0: float,
    y0: float,
    rx: float,
    ry: float,
    rotation: float,
    large_arc: bool,
    sweep: bool,
    x: float,
    y: float,
) -> list[PathSegment]:
    """Expand one elliptical arc into cubic segments (endpoint parameterization).

    Zero radius gives a single LineTo; coincident endpoints give no segments.
    """
    if x0 == x and y0 == y:
        return []
    rx, ry = abs(rx), abs(ry)
    # Radii too small to square in floating point count as zero
    if rx * rx == 0.0 or ry * ry == 0.0:
        return [LineTo(x, y)]

    phi = math.radians(rotation % 360.0)
    cos_phi, sin_phi = math.cos(phi), math.sin(phi)

    # Step 1: endpoint midpoint in the ellipse's rotated frame
    dx2, dy2 = (x0 - x) / 2.0, (y0 - y) / 2.0
    x1p = cos_phi * dx2 + sin_phi * dy2
    y1p = -sin_phi * dx2 + cos_phi * dy2

    # Radii too small to span the chord are scaled up
    lam = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
    if lam > 1.0:
        s = math.sqrt(lam)
        rx *= s
        ry *= s

    # Step 2: centre in the rotated frame
    rx2, ry2 = rx * rx, ry * ry
    num = rx2 * ry2 - rx2 * y1p * y1p - ry2 * x1p * x1p
    den = rx2 * y1p * y1p + ry2 * x1p * x1p
    if den == 0.0:
        # Endpoints closer than float resolution
        return []
    coef = math.sqrt(max(0.0, num / den))
    if large_arc == sweep:
        coef = -coef
    cxp = coef * rx * y1p / ry
    cyp = -coef * ry * x1p / rx

    # Step 3: centre in user space
    cx = cos_phi * cxp - sin_phi * cyp + (x0 + x) / 2.0
    cy = sin_phi * cxp + cos_phi * cyp + (y0 + y) / 2.0

    # Step 4: start angle and sweep
    ux, uy = (x1p - cxp) / rx, (y1p - cyp) / ry
    vx, vy = (-x1p - cxp) / rx, (-y1p - cyp) / ry
    theta1 = _vector_angle(1.0, 0.0, ux, uy)
    dtheta = _vector_angle(ux, uy, vx, vy)
    if not sweep and dtheta > 0:
        dtheta -= 2.0 * math.pi
    elif sweep and dtheta < 0:
        dtheta += 2.0 * math.pi
    if not math.isfinite(dtheta):
        logger.debug("Arc to (%g, %g) has no finite sweep, drawn as a line", x, y)
        return [LineTo(x, y)]

    n = max(1, math.ceil(abs(dtheta) / _HALF_PI - 1e-9))
    delta = dtheta / n
    handle = 4.0 / 3.0 * math.tan(delta / 4.0)

    def point(angle: float) -> tuple[float, float]:
        ca, sa = math.cos(angle), math.sin(angle)
        return (
            cx + rx * ca * cos_phi - ry * sa * sin_phi,
            cy + rx * ca * sin_phi + ry * sa * cos_phi,
        )

    def tangent(angle: float) -> tuple[float, float]:
        ca, sa = math.cos(angle), math.sin(angle)
        return (
            -rx * sa * cos_phi - ry * ca * sin_phi,
            -rx * sa * sin_phi + ry * ca * cos_phi,
        )

    out: list[PathSegment] = []
    for i in range(n):
        a1 = theta1 + i * delta
        a2 = a1 + delta
        p1x, p1y = point(a1)
        p2x, p2y = point(a2)
        t1x, t1y = tangent(a1)
        t2x, t2y = tangent(a2)
        if i == n - 1:
            p2x, p2y = x, y
        out.append(CubicTo(
            p1x + handle * t1x, p1y + handle * t1y,
            p2x - handle * t2x, p2y - handle * t2y,
            p2x, p2y,
        ))
    return out


def parse_path_data(text: str | None) -> list[PathSegment]:
    """Parse SVG path data. Malformed input truncates, it never raises."""
    if not text:
        return []
    scanner = _Scanner(text)
    segments: list[PathSegment] = []

    cur_x = cur_y = 0.0
    start_x = start_y = 0.0
    command: str | None = None
    prev_upper: str | None = None
    last_ctrl: tuple[float, float] | None = None
    needs_move = False
    drawing_commands = 0
    degenerate_arc: tuple[int, float, float] | None = None

    while not scanner.at_end():
        ch = scanner.peek()
        if ch in _COMMANDS:
            command = ch
            scanner.pos += 1
        elif command is None or command in "Zz":
            logger.debug("Path data stopped at offset %d: %r", scanner.pos, ch)
            break

        if not segments and command not in "Mm":
            logger.debug("Path data does not start with a move-to")
            return []

        upper = command.upper()
        relative = command.islower()

        if upper == "Z":
            if segments and not isinstance(segments[-1], (MoveTo, ClosePath)):
                segments.append(ClosePath(start_x, start_y))
            cur_x, cur_y = start_x, start_y
            needs_move = True
            prev_upper = "Z"
            last_ctrl = None
            continue

        args = scanner.read_args(command)
        if args is None:
            logger.debug("Path data truncated at offset %d", scanner.pos)
            break
        ox, oy = (cur_x, cur_y) if relative else (0.0, 0.0)

        if upper == "M":
            cur_x, cur_y = args[0] + ox, args[1] + oy
            start_x, start_y = cur_x, cur_y
            segments.append(MoveTo(cur_x, cur_y))
            needs_move = False
            # Further coordinate pairs are implicit line-tos
            command = "l" if relative else "L"
            prev_upper = "M"
            last_ctrl = None
            continue

        if needs_move:
            segments.append(MoveTo(cur_x, cur_y))
            needs_move = False
        drawing_commands += 1

        if upper == "L":
            cur_x, cur_y = args[0] + ox, args[1] + oy
            segments.append(LineTo(cur_x, cur_y))
            last_ctrl = None
        elif upper == "H":
            cur_x = args[0] + ox
            segments.append(LineTo(cur_x, cur_y))
            last_ctrl = None
        elif upper == "V":
            cur_y = args[0] + oy
            segments.append(LineTo(cur_x, cur_y))
            last_ctrl = None
        elif upper in ("C", "S"):
            if upper == "C":
                x1, y1 = args[0] + ox, args[1] + oy
                x2, y2, x, y = args[2] + ox, args[3] + oy, args[4] + ox, args[5] + oy
            else:
                if prev_upper in ("C", "S") and last_ctrl is not None:
                    x1, y1 = _reflect(*last_ctrl, cur_x, cur_y)
                else:
                    x1, y1 = cur_x, cur_y
                x2, y2, x, y = args[0] + ox, args[1] + oy, args[2] + ox, args[3] + oy
            segments.append(CubicTo(x1, y1, x2, y2, x, y))
            last_ctrl = (x2, y2)
            cur_x, cur_y = x, y
        elif upper in ("Q", "T"):
            if upper == "Q":
                qx, qy = args[0] + ox, args[1] + oy
                x, y = args[2] + ox, args[3] + oy
            else:
                if prev_upper in ("Q", "T") and last_ctrl is not None:
                    qx, qy = _reflect(*last_ctrl, cur_x, cur_y)
                else:
                    qx, qy = cur_x, cur_y
                x, y = args[0] + ox, args[1] + oy
            segments.append(CubicTo(
                cur_x + 2.0 / 3.0 * (qx - cur_x), cur_y + 2.0 / 3.0 * (qy - cur_y),
                x + 2.0 / 3.0 * (qx - x), y + 2.0 / 3.0 * (qy - y),
                x, y,
            ))
            last_ctrl = (qx, qy)
            cur_x, cur_y = x, y
        elif upper == "A":
            x, y = args[5] + ox, args[6] + oy
            pieces = arc_to_cubics(
                cur_x, cur_y, args[0], args[1], args[2],
                bool(args[3]), bool(args[4]), x, y,
            )
            if not pieces:
                degenerate_arc = (len(segments), x, y)
            segments.extend(pieces)
            last_ctrl = None
            cur_x, cur_y = x, y
        prev_upper = upper

    if degenerate_arc is not None and drawing_commands == 1:
        index, x, y = degenerate_arc
        segments.insert(index, LineTo(x, y))
    return segments


def transform_segments(segments: list[PathSegment], t: AffineTransform) -> list[PathSegment]:
    """Map every point of *segments* through *t*."""
    out: list[PathSegment] = []
    for seg in segments:
        if isinstance(seg, CubicTo):
            x1, y1 = t.map(seg.x1, seg.y1)
            x2, y2 = t.map(seg.x2, seg.y2)
            x, y = t.map(seg.x, seg.y)
            out.append(CubicTo(x1, y1, x2, y2, x, y))
        else:
            out.append(type(seg)(*t.map(seg.x, seg.y)))
    return out


def format_path_data(segments: list[PathSegment], precision: int = 6) -> str:
    """Serialize segments as "M x,y L x,y C x1,y1 x2,y2 x,y Z"."""

    def pt(x: float, y: float) -> str:
        return f"{format_number(x, precision)},{format_number(y, precision)}"

    parts: list[str] = []
    for seg in segments:
        if isinstance(seg, MoveTo):
            parts.append("M " + pt(seg.x, seg.y))
        elif isinstance(seg, LineTo):
            parts.append("L " + pt(seg.x, seg.y))
        elif isinstance(seg, CubicTo):
            parts.append(f"C {pt(seg.x1, seg.y1)} {pt(seg.x2, seg.y2)} {pt(seg.x, seg.y)}")
        else:
            parts.append("Z")
    return " ".join(parts)
