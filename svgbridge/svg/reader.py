"""SVG readers: adapt ElementTree output into uniform ElementRecord trees.

Two front ends produce the same record shape:
- read_tree(): parses the whole document with ElementTree.fromstring().
- read_events(): builds records incrementally from iterparse() start/end
  events and clears each consumed ElementTree node, so the parser's own tree
  never holds the full document.
Everything downstream (collector, importer) only sees ElementRecord.
"""

from __future__ import annotations

import io
import logging
import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import BinaryIO, Iterator, Union

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"
INKSCAPE_NS = "http://www.inkscape.org/namespaces/inkscape"
SODIPODI_NS = "http://sodipodi.sourceforge.net/DTD/sodipodi-0.0.dtd"

# Namespace URI → prefix used in normalized names ("" drops the prefix)
_PREFIXES = {
    SVG_NS: "",
    XLINK_NS: "xlink",
    INKSCAPE_NS: "inkscape",
    SODIPODI_NS: "sodipodi",
    "http://www.w3.org/XML/1998/namespace": "xml",
}

Source = Union[str, bytes, os.PathLike, BinaryIO]


class SvgReadError(Exception):
    """The document could not be read or is not well-formed XML."""


@dataclass
class ElementRecord:
    """One element of the source document in reader-independent form."""

    tag: str
    attributes: dict[str, str] = field(default_factory=dict)
    # Character data directly inside the element, before the first child
    text: str = ""
    # Character data following the element's end tag, inside its parent
    tail: str = ""
    children: list[ElementRecord] = field(default_factory=list)

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.attributes.get(name, default)

    @property
    def id(self) -> str:
        return self.attributes.get("id", "")

    def iter(self) -> Iterator[ElementRecord]:
        """Depth-first, document order, including self."""
        yield self
        for child in self.children:
            yield from child.iter()

    def full_text(self) -> str:
        """All character data of the element and its descendants (tspan runs)."""
        parts = [self.text]
        for child in self.children:
            parts.append(child.full_text())
            parts.append(child.tail)
        return "".join(parts)


def normalize_name(name: str) -> str:
    """'{http://www.w3.org/2000/svg}rect' → 'rect', xlink/inkscape/sodipodi → 'prefix:local'."""
    if not name.startswith("{"):
        return name
    uri, _, local = name[1:].partition("}")
    prefix = _PREFIXES.get(uri)
    if prefix is None:
        return name
    return f"{prefix}:{local}" if prefix else local


def _record_from_element(elem: ET.Element) -> ElementRecord:
    return ElementRecord(
        tag=normalize_name(elem.tag),
        attributes={normalize_name(k): v for k, v in elem.attrib.items()},
        text=elem.text or "",
    )


def _convert(elem: ET.Element) -> ElementRecord:
    record = _record_from_element(elem)
    for child in elem:
        if not isinstance(child.tag, str):
            continue  # comments, processing instructions
        converted = _convert(child)
        converted.tail = child.tail or ""
        record.children.append(converted)
    return record


def _open_bytes(source: Source) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, str) and source.lstrip().startswith("<"):
        return source.encode("utf-8")
    if hasattr(source, "read"):
        data = source.read()
        return data.encode("utf-8") if isinstance(data, str) else data
    try:
        with open(source, "rb") as fh:
            return fh.read()
    except (OSError, ValueError) as e:
        raise SvgReadError(f"Cannot open {source!r}: {e}") from e


def read_tree(source: Source) -> ElementRecord:
    """Parse a whole document (markup string, bytes, file object or path)."""
    data = _open_bytes(source)
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise SvgReadError(f"Malformed XML: {e}") from e
    return _convert(root)


def read_events(source: Source) -> ElementRecord:
    """Parse with iterparse(), building records as end tags arrive."""
    if isinstance(source, bytes):
        stream: BinaryIO = io.BytesIO(source)
    elif isinstance(source, str) and source.lstrip().startswith("<"):
        stream = io.BytesIO(source.encode("utf-8"))
    elif hasattr(source, "read"):
        stream = source  # type: ignore[assignment]
    else:
        try:
            stream = open(source, "rb")
        except (OSError, ValueError) as e:
            raise SvgReadError(f"Cannot open {source!r}: {e}") from e

    stack: list[ElementRecord] = []
    root: ElementRecord | None = None
    try:
        for event, elem in ET.iterparse(stream, events=("start", "end")):
            if event == "start":
                record = _record_from_element(elem)
                if stack:
                    stack[-1].children.append(record)
                else:
                    root = record
                stack.append(record)
                continue
            record = stack.pop()
            # text is complete only once the end tag is seen
            record.text = elem.text or ""
            # children's tails arrive after their own end events; the ended
            # element keeps its own tail until its parent ends
            for child_record, child in zip(record.children, elem):
                child_record.tail = child.tail or ""
            for child in list(elem):
                child.clear()
                elem.remove(child)
    except ET.ParseError as e:
        raise SvgReadError(f"Malformed XML: {e}") from e
    finally:
        if stream is not source:
            stream.close()

    if root is None:
        raise SvgReadError("Document has no root element")
    return root
