"""Containers and references: <g> (plain group or Inkscape layer) and <use>."""

from __future__ import annotations

import logging
from typing import Optional

from svgbridge.models.scene import Group, Layer, SceneItem
from svgbridge.parsing.transform import AffineTransform, parse_transform
from svgbridge.svg.collector import is_layer
from svgbridge.svg.context import ImportContext, build_children, build_element
from svgbridge.svg.reader import ElementRecord
from svgbridge.svg.registry import element_builder
from svgbridge.svg.style import Properties, build_style, element_properties, url_reference

logger = logging.getLogger(__name__)


def make_layer(element: ElementRecord) -> Layer:
    """Layer container for *element*, without its children."""
    own = element_properties(element)
    hidden = own.get("display") == "none" or own.get("visibility") in ("hidden", "collapse")
    return Layer(
        name=(element.get("inkscape:label") or "").strip() or element.id,
        visible=not hidden,
        # display:none layers are hidden and locked
        locked=hidden or element.get("sodipodi:insensitive") == "true",
    )


def layer_child_properties(props: Properties) -> Properties:
    # Layer visibility is carried by the layer itself, not pushed onto children
    return {k: v for k, v in props.items() if k != "visibility"}


@element_builder("g", description="Plain group or Inkscape layer")
def build_group(element: ElementRecord, ctx: ImportContext, props: Properties) -> Optional[SceneItem]:
    if is_layer(element):
        layer = make_layer(element)
        build_children(element, ctx, layer_child_properties(props), layer)
        return layer
    group = Group()
    build_children(element, ctx, props, group)
    return group


@element_builder("use", finalize=False, description="Instance of a referenced element")
def build_use(element: ElementRecord, ctx: ImportContext, props: Properties) -> Optional[SceneItem]:
    href = element.get("href") or element.get("xlink:href") or ""
    ref = href[1:] if href.startswith("#") else url_reference(href)
    target = ctx.definition(ref)
    if target is None:
        ctx.skip(element, f"unresolved reference {href!r}")
        return None
    if ref in ctx.use_chain:
        ctx.skip(element, f"circular reference to {href!r}")
        return None

    ctx.use_chain.append(ref)
    try:
        # The instance inherits the <use> element's computed properties
        instance = build_element(target, ctx, props)
    finally:
        ctx.use_chain.pop()
    if instance is None:
        return None

    offset = AffineTransform.translation(
        ctx.length(element.get("x"), "x"), ctx.length(element.get("y"), "y")
    )
    instance.apply_transform(offset)
    instance.apply_transform(parse_transform(element.get("transform")))

    own = build_style(props, ctx.lookup)
    instance.style.opacity *= own.opacity
    if instance.style.filter is None:
        instance.style.filter = own.filter
    instance.id = element.id
    logger.debug("Expanded <use> of #%s as %s", ref, instance.kind)
    return instance
