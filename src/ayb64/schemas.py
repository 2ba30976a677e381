"""Pydantic schemas for runtime validation of caller-supplied options."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RenderOptionsConfig(BaseModel):
    """Validated formatter options."""

    model_config = ConfigDict(extra="forbid")

    wrap_column: int | None = None
    data_uri: bool = False
    include_metadata: bool = False

    @field_validator("wrap_column")
    @classmethod
    def _disable_non_positive_wrap(cls, value: int | None) -> int | None:
        if value is None or value <= 0:
            return None
        return value


class EngineConfig(BaseModel):
    """Validated execution options."""

    model_config = ConfigDict(extra="forbid")

    mode: Literal["in_memory", "streaming"] = "in_memory"
    chunk_size: int = Field(default=64 * 1024, gt=0)
