"""POST /api/import and /api/convert: SVG in, scene summary or normalized SVG out."""

from __future__ import annotations

import logging
from collections import Counter

from fastapi import APIRouter, Depends, HTTPException

from svgbridge.config import Settings
from svgbridge.dependencies import get_settings
from svgbridge.models.requests import ConvertRequest, ImportRequest
from svgbridge.models.responses import ConvertResponse, ImportResponse, ItemSummary
from svgbridge.models.scene import shape_kind
from svgbridge.svg.exporter import export_svg_string
from svgbridge.svg.importer import ImportResult, import_svg

logger = logging.getLogger(__name__)

router = APIRouter()


def _import_or_422(svg: str, streaming: bool | None, settings: Settings) -> ImportResult:
    result = import_svg(svg, streaming=streaming, settings=settings)
    if not result.ok or result.scene is None:
        raise HTTPException(status_code=422, detail=result.error or "SVG import failed")
    return result


@router.post("/import", response_model=ImportResponse)
async def import_document(
    req: ImportRequest, settings: Settings = Depends(get_settings)
) -> ImportResponse:
    result = _import_or_422(req.svg, req.streaming, settings)
    scene = result.scene
    items = [
        ItemSummary(kind=shape_kind(item), id=item.id, depth=depth, bbox=item.mapped_bbox(outer))
        for item, depth, outer in scene.walk_transformed()
    ]
    counts = Counter(shape_kind(item) for item in scene.shapes())
    return ImportResponse(
        width=scene.width,
        height=scene.height,
        view_box=scene.view_box,
        document_transform=list(scene.document_transform.coefficients()),
        shape_counts=dict(counts),
        items=items,
        skipped=result.skipped,
        definitions=sorted(result.collected.definitions) if result.collected else [],
    )


@router.post("/convert", response_model=ConvertResponse)
async def convert_document(
    req: ConvertRequest, settings: Settings = Depends(get_settings)
) -> ConvertResponse:
    if req.precision is not None:
        settings = settings.model_copy(update={"number_precision": req.precision})
    result = _import_or_422(req.svg, None, settings)
    svg = export_svg_string(result.scene, settings)
    logger.debug("Converted document: %d bytes in, %d bytes out", len(req.svg), len(svg))
    return ConvertResponse(svg=svg, shape_count=len(result.scene.shapes()), skipped=result.skipped)
