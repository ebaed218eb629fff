"""SVG → Scene import.

Two phases over one document:
1. collect_elements() classifies the whole record tree once.
2. Paint servers are built, then the collected top-level items are
   constructed strictly in document order and placed into the scene.
Whole-document failures come back as ImportResult(ok=False); anything wrong
with a single element only skips or defaults that element.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from svgbridge.config import Settings, settings as default_settings
from svgbridge.models.scene import Layer, Scene
from svgbridge.svg.builders.containers import layer_child_properties, make_layer
from svgbridge.svg.collector import CollectedElements, collect_elements, is_layer
from svgbridge.svg.context import ImportContext, build_element, finalize_item
from svgbridge.svg.paint import resolve_paint_servers
from svgbridge.svg.reader import ElementRecord, Source, SvgReadError, read_events, read_tree
from svgbridge.svg.registry import register_builders
from svgbridge.svg.style import Properties, cascade
from svgbridge.svg.viewport import document_transform, read_metadata

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    ok: bool
    scene: Optional[Scene] = None
    error: str = ""
    # "tag#id" labels of elements that were dropped
    skipped: list[str] = field(default_factory=list)
    collected: Optional[CollectedElements] = None


def _source_size(source: Source) -> int:
    if isinstance(source, bytes):
        return len(source)
    if isinstance(source, str) and source.lstrip().startswith("<"):
        return len(source)
    if isinstance(source, (str, os.PathLike)):
        try:
            return os.path.getsize(source)
        except (OSError, ValueError):
            return 0
    return 0


def read_document(
    source: Source, streaming: Optional[bool] = None, settings: Settings = default_settings
) -> ElementRecord:
    """Read *source* with the tree reader, or the event reader for large input."""
    if streaming is None:
        streaming = _source_size(source) > settings.streaming_threshold_bytes
    if streaming:
        logger.debug("Reading document with the event-based reader")
        return read_events(source)
    return read_tree(source)


def import_records(root: ElementRecord, settings: Settings = default_settings) -> ImportResult:
    """Build a Scene from an already-read record tree."""
    if root.tag != "svg":
        return ImportResult(ok=False, error=f"Root element is <{root.tag}>, expected <svg>")

    register_builders()
    collected = collect_elements(root)
    meta = read_metadata(root, settings)
    root_transform = document_transform(meta)

    width, height = meta.size
    viewport = (meta.view_box[2], meta.view_box[3]) if meta.view_box else (width, height)
    ctx = ImportContext(definitions=collected.definitions, settings=settings, viewport=viewport)
    resolve_paint_servers(collected, ctx)

    scene = Scene(
        width=width,
        height=height,
        view_box=meta.view_box,
        document_transform=root_transform,
    )
    root_props = cascade({}, root)
    # id(layer record) → (built layer, properties its children inherit)
    layers: dict[int, tuple[Layer, Properties]] = {}

    for entry in collected.top_level:
        element = entry.element
        container: Optional[Layer] = None
        inherited = root_props
        if entry.layer is not None:
            owner = layers.get(id(entry.layer))
            if owner is None:
                continue
            container, inherited = owner

        if is_layer(element):
            props = cascade(inherited, element)
            item = make_layer(element)
            finalize_item(item, element, ctx, props)
            layers[id(element)] = (item, layer_child_properties(props))
        else:
            built = build_element(element, ctx, inherited)
            if built is None:
                continue
            item = built

        if container is None:
            item.apply_transform(root_transform)
        scene.add(item, container)

    logger.info(
        "Imported %d top-level items (%d shapes) from %d collected elements, %d skipped",
        len(scene.items), len(scene.shapes()), collected.shape_count(), len(ctx.skipped),
    )
    return ImportResult(ok=True, scene=scene, skipped=ctx.skipped, collected=collected)


def import_svg(
    source: Source,
    *,
    streaming: Optional[bool] = None,
    settings: Settings = default_settings,
) -> ImportResult:
    """Import an SVG document from markup text, bytes, a file object or a path.

    Returns ImportResult(ok=False, error=...) when the source cannot be read,
    is not well-formed XML, or its root is not <svg>.
    """
    try:
        root = read_document(source, streaming=streaming, settings=settings)
    except SvgReadError as e:
        logger.warning("SVG import failed: %s", e)
        return ImportResult(ok=False, error=str(e))
    result = import_records(root, settings)
    if not result.ok:
        logger.warning("SVG import failed: %s", result.error)
    return result


def import_svg_file(path: str | os.PathLike, **kwargs) -> ImportResult:
    return import_svg(os.fspath(path), **kwargs)


def import_svg_string(text: str, **kwargs) -> ImportResult:
    return import_svg(text, **kwargs)
