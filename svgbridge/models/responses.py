"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    builders_registered: int = 0


class ItemSummary(BaseModel):
    kind: str
    id: str = ""
    depth: int = 0
    # (xmin, ymin, xmax, ymax) in scene coordinates, None for empty geometry
    bbox: tuple[float, float, float, float] | None = None


class ImportResponse(BaseModel):
    width: float
    height: float
    view_box: tuple[float, float, float, float] | None = None
    document_transform: list[float] = Field(default_factory=list)
    shape_counts: dict[str, int] = Field(default_factory=dict)
    items: list[ItemSummary] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    definitions: list[str] = Field(default_factory=list)


class ConvertResponse(BaseModel):
    svg: str
    shape_count: int = 0
    skipped: list[str] = Field(default_factory=list)
