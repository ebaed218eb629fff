"""Write SVG markup from an ElementRecord tree."""

from __future__ import annotations

from xml.sax.saxutils import escape, quoteattr

from svgbridge.svg.reader import ElementRecord

_INDENT = "  "


def _open_tag(record: ElementRecord) -> str:
    attrs = "".join(f" {name}={quoteattr(value)}" for name, value in record.attributes.items())
    return f"<{record.tag}{attrs}"


def _write(record: ElementRecord, depth: int, lines: list[str]) -> None:
    pad = _INDENT * depth
    head = _open_tag(record)
    if not record.children and not record.text:
        lines.append(f"{pad}{head}/>")
        return
    if not record.children:
        lines.append(f"{pad}{head}>{escape(record.text)}</{record.tag}>")
        return
    lines.append(f"{pad}{head}>{escape(record.text.strip())}")
    for child in record.children:
        _write(child, depth + 1, lines)
    lines.append(f"{pad}</{record.tag}>")


def serialize_svg(root: ElementRecord, xml_declaration: bool = True) -> str:
    """Generate indented SVG markup for *root* and its descendants.

    Attribute order follows each record's attribute dict; tails are not
    written (the exporter never produces mixed content).
    """
    lines = ['<?xml version="1.0" encoding="UTF-8"?>'] if xml_declaration else []
    _write(root, 0, lines)
    return "\n".join(lines) + "\n"
