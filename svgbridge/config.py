"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    svgbridge_env: str = "development"
    svgbridge_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Document fallbacks when neither width/height nor viewBox is declared
    default_document_width: float = 1000.0
    default_document_height: float = 800.0

    # Export
    export_margin: float = 20.0
    empty_scene_width: float = 800.0
    empty_scene_height: float = 600.0
    number_precision: int = 8

    # Files above this size are read with the incremental (iterparse) reader
    streaming_threshold_bytes: int = 4 * 1024 * 1024

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
