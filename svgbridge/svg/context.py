"""ImportContext: the per-import state shared by builders and paint resolution.

Every definition map lives here and dies with the import call; nothing is
cached at module level between documents.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from svgbridge.config import Settings, settings as default_settings
from svgbridge.models.paint import FilterEffect, Gradient, Marker, Pattern
from svgbridge.models.scene import Group, SceneItem
from svgbridge.parsing.length import parse_length
from svgbridge.parsing.transform import parse_transform
from svgbridge.svg.collector import is_layer
from svgbridge.svg.reader import ElementRecord
from svgbridge.svg.registry import get_registry
from svgbridge.svg.style import Properties, build_style, cascade, is_hidden

logger = logging.getLogger(__name__)


@dataclass
class ImportContext:
    # id → first element carrying it
    definitions: dict[str, ElementRecord] = field(default_factory=dict)
    settings: Settings = field(default_factory=lambda: default_settings)
    # Percentage reference for geometry attributes: (width, height) of the viewport
    viewport: tuple[float, float] = (0.0, 0.0)

    gradients: dict[str, Gradient] = field(default_factory=dict)
    filters: dict[str, FilterEffect] = field(default_factory=dict)
    patterns: dict[str, Pattern] = field(default_factory=dict)
    markers: dict[str, Marker] = field(default_factory=dict)

    # ids of <use> targets currently being expanded (cycle guard)
    use_chain: list[str] = field(default_factory=list)
    # Elements that produced nothing, as "tag#id" labels
    skipped: list[str] = field(default_factory=list)

    def definition(self, ref: Optional[str]) -> Optional[ElementRecord]:
        if not ref:
            return None
        return self.definitions.get(ref)

    def lookup(self, ref: str) -> Optional[object]:
        """Resolve a url(#ref) target to its built paint/effect record."""
        for table in (self.gradients, self.patterns, self.filters, self.markers):
            if ref in table:
                return table[ref]
        return None

    def length(self, value: Optional[str], axis: str = "x", default: float = 0.0) -> float:
        """Geometry attribute to user units; percentages follow the viewport axis."""
        if value is None or not value.strip():
            return default
        w, h = self.viewport
        if axis == "x":
            reference = w
        elif axis == "y":
            reference = h
        else:
            reference = ((w * w + h * h) / 2.0) ** 0.5
        return parse_length(value, reference)

    def skip(self, element: ElementRecord, reason: str) -> None:
        label = f"{element.tag}#{element.id}" if element.id else element.tag
        self.skipped.append(label)
        logger.info("Skipping <%s>: %s", label, reason)


def build_element(
    element: ElementRecord, ctx: ImportContext, inherited: Properties
) -> Optional[SceneItem]:
    """Build the scene item for one element via its registered builder.

    Returns None for unsupported tags, hidden non-layer elements and
    elements whose geometry is invalid.
    """
    spec = get_registry().get(element.tag)
    if spec is None:
        logger.debug("No builder for <%s>", element.tag)
        return None

    props = cascade(inherited, element)
    if is_hidden(props) and not is_layer(element):
        ctx.skip(element, "not displayed")
        return None

    item = spec.fn(element, ctx, props)
    if item is None:
        return None
    if spec.finalize:
        finalize_item(item, element, ctx, props)
    return item


def finalize_item(
    item: SceneItem, element: ElementRecord, ctx: ImportContext, props: Properties
) -> None:
    """Give a freshly built item its id, computed style and own transform."""
    if not item.id:
        item.id = element.id
    item.set_style(build_style(props, ctx.lookup))
    item.apply_transform(parse_transform(element.get("transform")))


def build_children(
    element: ElementRecord, ctx: ImportContext, props: Properties, container: Group
) -> None:
    """Build each child of *element* into *container*, in document order."""
    for child in element.children:
        item = build_element(child, ctx, props)
        if item is not None:
            container.add(item)

