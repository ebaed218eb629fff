"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ImportRequest(BaseModel):
    svg: str = Field(..., description="Raw SVG code")
    streaming: bool | None = Field(
        default=None,
        description="Force the event-based reader (true) or tree reader (false); auto when omitted",
    )


class ConvertRequest(BaseModel):
    svg: str = Field(..., description="Raw SVG code")
    precision: int | None = Field(
        default=None, ge=0, le=12, description="Decimal places for written numbers"
    )
