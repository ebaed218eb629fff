"""Affine transforms and the SVG transform-function list.

Coefficients follow the SVG column-vector convention:

    | a c e |
    | b d f |
    | 0 0 1 |

``t1 @ t2`` maps a point through ``t2`` first, then ``t1``. A transform list
such as ``translate(10,10) scale(2)`` composes as ``T @ S``: the first-listed
function is the outermost frame, matching document order.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)

_FUNC_RE = re.compile(r"([A-Za-z]+)\s*\(([^)]*)\)")
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_EPS = 1e-12


@dataclass(frozen=True)
class AffineTransform:
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    # ---- construction ----

    @classmethod
    def identity(cls) -> AffineTransform:
        return cls()

    @classmethod
    def from_matrix(cls, m: np.ndarray) -> AffineTransform:
        return cls(
            float(m[0, 0]), float(m[1, 0]), float(m[0, 1]),
            float(m[1, 1]), float(m[0, 2]), float(m[1, 2]),
        )

    @classmethod
    def translation(cls, tx: float, ty: float = 0.0) -> AffineTransform:
        return cls(e=tx, f=ty)

    @classmethod
    def scaling(cls, sx: float, sy: float | None = None) -> AffineTransform:
        return cls(a=sx, d=sx if sy is None else sy)

    @classmethod
    def rotation(cls, degrees: float, cx: float = 0.0, cy: float = 0.0) -> AffineTransform:
        rad = math.radians(degrees)
        cos, sin = math.cos(rad), math.sin(rad)
        rot = cls(cos, sin, -sin, cos, 0.0, 0.0)
        if cx == 0.0 and cy == 0.0:
            return rot
        return cls.translation(cx, cy) @ rot @ cls.translation(-cx, -cy)

    @classmethod
    def skew_x(cls, degrees: float) -> AffineTransform:
        return cls(c=math.tan(math.radians(degrees)))

    @classmethod
    def skew_y(cls, degrees: float) -> AffineTransform:
        return cls(b=math.tan(math.radians(degrees)))

    # ---- algebra ----

    def matrix(self) -> np.ndarray:
        return np.array(
            [[self.a, self.c, self.e], [self.b, self.d, self.f], [0.0, 0.0, 1.0]],
            dtype=float,
        )

    def __matmul__(self, other: AffineTransform) -> AffineTransform:
        if not isinstance(other, AffineTransform):
            return NotImplemented
        return AffineTransform.from_matrix(self.matrix() @ other.matrix())

    def translate(self, tx: float, ty: float = 0.0) -> AffineTransform:
        return self @ AffineTransform.translation(tx, ty)

    def scale(self, sx: float, sy: float | None = None) -> AffineTransform:
        return self @ AffineTransform.scaling(sx, sy)

    def rotate(self, degrees: float, cx: float = 0.0, cy: float = 0.0) -> AffineTransform:
        return self @ AffineTransform.rotation(degrees, cx, cy)

    def shear(self, sh_x: float, sh_y: float) -> AffineTransform:
        return self @ AffineTransform(1.0, sh_y, sh_x, 1.0, 0.0, 0.0)

    def determinant(self) -> float:
        return self.a * self.d - self.b * self.c

    def inverse(self) -> AffineTransform:
        det = self.determinant()
        if abs(det) < _EPS:
            raise ValueError("Transform is not invertible")
        return AffineTransform.from_matrix(np.linalg.inv(self.matrix()))

    def is_identity(self, tol: float = 1e-9) -> bool:
        return self.almost_equal(AffineTransform(), tol)

    def is_translation(self, tol: float = 1e-9) -> bool:
        return (
            abs(self.a - 1.0) < tol and abs(self.b) < tol
            and abs(self.c) < tol and abs(self.d - 1.0) < tol
        )

    def almost_equal(self, other: AffineTransform, tol: float = 1e-9) -> bool:
        return bool(np.allclose(self.coefficients(), other.coefficients(), atol=tol))

    def coefficients(self) -> tuple[float, float, float, float, float, float]:
        return (self.a, self.b, self.c, self.d, self.e, self.f)

    # ---- mapping ----

    def map(self, x: float, y: float) -> tuple[float, float]:
        return (
            self.a * x + self.c * y + self.e,
            self.b * x + self.d * y + self.f,
        )

    def map_points(self, points: np.ndarray) -> np.ndarray:
        """Map an (N, 2) array of points."""
        pts = np.asarray(points, dtype=float).reshape(-1, 2)
        linear = np.array([[self.a, self.c], [self.b, self.d]])
        return pts @ linear.T + np.array([self.e, self.f])


def _numbers(params: str) -> list[float]:
    return [float(tok) for tok in _NUMBER_RE.findall(params)]


def _function_matrix(name: str, args: list[float]) -> AffineTransform | None:
    n = len(args)
    if name == "translate" and n in (1, 2):
        return AffineTransform.translation(args[0], args[1] if n == 2 else 0.0)
    if name == "scale" and n in (1, 2):
        return AffineTransform.scaling(args[0], args[1] if n == 2 else None)
    if name == "rotate" and n in (1, 3):
        if n == 3:
            return AffineTransform.rotation(args[0], args[1], args[2])
        return AffineTransform.rotation(args[0])
    if name == "skewX" and n == 1:
        return AffineTransform.skew_x(args[0])
    if name == "skewY" and n == 1:
        return AffineTransform.skew_y(args[0])
    if name == "matrix" and n == 6:
        return AffineTransform(*args)
    return None


def parse_transform(text: str | None) -> AffineTransform:
    """Compose a transform-function list in document order.

    Unknown functions and calls with the wrong argument count are skipped.
    """
    result = AffineTransform()
    if not text:
        return result
    for m in _FUNC_RE.finditer(text):
        name, params = m.group(1), m.group(2)
        step = _function_matrix(name, _numbers(params))
        if step is None:
            logger.debug("Skipping transform function %s(%s)", name, params)
            continue
        result = result @ step
    return result


def format_number(value: float, precision: int = 6) -> str:
    """Shortest fixed-point form: 10.0 → "10", 0.1250 → "0.125"."""
    s = f"{value:.{precision}f}".rstrip("0").rstrip(".")
    if s in ("-0", ""):
        return "0"
    return s


def format_transform(t: AffineTransform, precision: int = 6) -> str:
    """Serialize *t*; empty for identity, translate() when possible, else matrix()."""
    if t.is_identity():
        return ""
    if t.is_translation():
        return f"translate({format_number(t.e, precision)},{format_number(t.f, precision)})"
    return "matrix(" + ",".join(format_number(v, precision) for v in t.coefficients()) + ")"
