"""Length literals: "12px", "1in", "50%" → pixel values on a 96 DPI basis.

A literal is a numeric prefix followed by an optional unit suffix made of
letters or a single "%". Anything unparseable resolves to 0.0.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass


class LengthUnit(str, enum.Enum):
    PIXEL = "px"
    POINT = "pt"
    PICA = "pc"
    INCH = "in"
    CENTIMETER = "cm"
    MILLIMETER = "mm"
    PERCENT = "%"
    NONE = ""


_UNIT_FACTORS: dict[LengthUnit, float] = {
    LengthUnit.PIXEL: 1.0,
    LengthUnit.POINT: 1.25,
    LengthUnit.PICA: 15.0,
    LengthUnit.INCH: 96.0,
    LengthUnit.CENTIMETER: 37.7953,
    LengthUnit.MILLIMETER: 3.77953,
    LengthUnit.NONE: 1.0,
}

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_SUFFIX_RE = re.compile(r"\s*([A-Za-z]+|%)?\s*$")


@dataclass(frozen=True)
class LengthValue:
    magnitude: float
    unit: LengthUnit = LengthUnit.NONE

    def to_pixels(self, reference: float = 0.0) -> float:
        if self.unit is LengthUnit.PERCENT:
            return self.magnitude * reference / 100.0
        return self.magnitude * _UNIT_FACTORS[self.unit]


def parse_length_value(text: str | None) -> LengthValue:
    """Split *text* into magnitude and unit. Bad input gives 0 with no unit."""
    if text is None:
        return LengthValue(0.0)
    s = text.strip()
    m = _NUMBER_RE.match(s)
    if not m:
        return LengthValue(0.0)
    magnitude = float(m.group())
    suffix = _SUFFIX_RE.match(s, m.end())
    if not suffix or not suffix.group(1):
        return LengthValue(magnitude)
    try:
        unit = LengthUnit(suffix.group(1).lower())
    except ValueError:
        # Unknown units (em, ex, ...) are taken as user units
        unit = LengthUnit.NONE
    return LengthValue(magnitude, unit)


def parse_length(text: str | None, reference: float = 0.0) -> float:
    """Parse a length literal to pixels. Percentages resolve against *reference*."""
    return parse_length_value(text).to_pixels(reference)


def parse_number(text: str | None, default: float = 0.0) -> float:
    """Parse a bare number attribute, falling back to *default*."""
    if text is None:
        return default
    m = _NUMBER_RE.match(text.strip())
    return float(m.group()) if m else default


def parse_fraction(text: str | None, default: float) -> float:
    """Parse "50%" as 0.5 and "0.5" as 0.5 (gradient coordinates, stop offsets)."""
    if text is None:
        return default
    value = parse_length_value(text)
    if not _NUMBER_RE.match(text.strip()):
        return default
    if value.unit is LengthUnit.PERCENT:
        return value.magnitude / 100.0
    return value.magnitude
