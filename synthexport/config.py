"""
Configuration settings for synthetic-export.

Uses Pydantic Settings to load environment variables for logging, default export
sizing, and parallel execution. Library callers can bypass the environment entirely
by passing explicit values to ExportFile and ForkJoin.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Export defaults
    data_size_bytes: int = Field(1024 * 1024, alias="EXPORT_DATA_SIZE_BYTES", gt=0)
    number_of_files: int = Field(1, alias="EXPORT_NUMBER_OF_FILES", gt=0)
    output_dir: Path = Field(Path("output"), alias="EXPORT_OUTPUT_DIR")

    # Parallel execution
    backend: Literal["thread", "process"] = Field("thread", alias="EXPORT_BACKEND")
    workers: Optional[int] = Field(None, alias="EXPORT_WORKERS", gt=0)
    chunk_rows: int = Field(10_000, alias="EXPORT_CHUNK_ROWS", gt=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
