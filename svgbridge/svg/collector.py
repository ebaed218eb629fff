"""Single-pass element classifier.

One depth-first walk over the record tree sorts elements into bags by kind
and builds the id → record map the importer resolves references through.
Two scope flags ride along the walk:

- inside_defs: set for the whole subtree of a <defs> element.
- inside_group: set for the descendants of a plain (non-layer) <g>.

Shapes land in the flat top-level bags only when neither flag is set; shapes
nested in groups are built later by their group's own recursive construction.
The record tree is never modified.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from svgbridge.svg.reader import ElementRecord

logger = logging.getLogger(__name__)

SHAPE_TAGS = ("path", "rect", "circle", "ellipse", "line", "polyline", "polygon", "text", "use")
FILTER_PRIMITIVE_TAGS = ("feGaussianBlur", "feDropShadow")


@dataclass
class FilterPrimitiveRecord:
    """A filter child tagged with the id of the <filter> that owns it."""

    filter_id: str
    element: ElementRecord


@dataclass
class TopLevelItem:
    """A shape, group or layer to construct, with the layer it sits in (if any)."""

    element: ElementRecord
    layer: Optional[ElementRecord] = None


@dataclass
class CollectedElements:
    linear_gradients: list[ElementRecord] = field(default_factory=list)
    radial_gradients: list[ElementRecord] = field(default_factory=list)
    filters: list[ElementRecord] = field(default_factory=list)
    filter_primitives: list[FilterPrimitiveRecord] = field(default_factory=list)
    patterns: list[ElementRecord] = field(default_factory=list)
    markers: list[ElementRecord] = field(default_factory=list)
    # Top-level shapes per tag: "path", "rect", ... (only outside defs and groups)
    shapes: dict[str, list[ElementRecord]] = field(
        default_factory=lambda: {tag: [] for tag in SHAPE_TAGS}
    )
    groups: list[ElementRecord] = field(default_factory=list)
    layers: list[ElementRecord] = field(default_factory=list)
    # Shapes, groups and layers to construct, in document order
    top_level: list[TopLevelItem] = field(default_factory=list)
    definitions: dict[str, ElementRecord] = field(default_factory=dict)

    def shape_count(self) -> int:
        return sum(len(bag) for bag in self.shapes.values())


def is_layer(element: ElementRecord) -> bool:
    """Inkscape layer: explicit groupmode="layer" or a non-empty label."""
    if element.tag != "g":
        return False
    if element.get("inkscape:groupmode") == "layer":
        return True
    return bool((element.get("inkscape:label") or "").strip())


class _Collector:
    def __init__(self) -> None:
        self.out = CollectedElements()

    def visit(
        self,
        element: ElementRecord,
        inside_defs: bool,
        inside_group: bool,
        layer: Optional[ElementRecord],
        filter_id: str,
    ) -> None:
        out = self.out
        tag = element.tag

        element_id = element.id
        if element_id:
            if element_id in out.definitions:
                logger.debug("Duplicate id %r ignored, first occurrence kept", element_id)
            else:
                out.definitions[element_id] = element

        child_defs = inside_defs
        child_group = inside_group
        child_layer = layer
        child_filter = filter_id

        if tag == "defs":
            child_defs = True
        elif tag == "linearGradient":
            out.linear_gradients.append(element)
        elif tag == "radialGradient":
            out.radial_gradients.append(element)
        elif tag == "filter":
            out.filters.append(element)
            child_filter = element_id
        elif tag in FILTER_PRIMITIVE_TAGS:
            out.filter_primitives.append(FilterPrimitiveRecord(filter_id, element))
        elif tag == "pattern":
            out.patterns.append(element)
        elif tag == "marker":
            out.markers.append(element)
        elif tag in SHAPE_TAGS:
            if not inside_defs and not inside_group:
                out.shapes[tag].append(element)
                out.top_level.append(TopLevelItem(element, layer))
        elif tag == "g":
            if is_layer(element):
                if not inside_defs:
                    out.layers.append(element)
                    if not inside_group:
                        out.top_level.append(TopLevelItem(element, layer))
                    child_layer = element
            elif not inside_defs:
                out.groups.append(element)
                if not inside_group:
                    out.top_level.append(TopLevelItem(element, layer))
                child_group = True
            else:
                child_group = True

        for child in element.children:
            self.visit(child, child_defs, child_group, child_layer, child_filter)


def collect_elements(root: ElementRecord) -> CollectedElements:
    """Classify every element below *root* in one traversal."""
    collector = _Collector()
    collector.visit(root, inside_defs=False, inside_group=False, layer=None, filter_id="")
    out = collector.out
    logger.debug(
        "Collected %d shapes, %d groups, %d layers, %d ids",
        out.shape_count(), len(out.groups), len(out.layers), len(out.definitions),
    )
    return out
