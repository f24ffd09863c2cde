"""Pydantic schemas for runtime validation of run inputs."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from jxl_converter.types import CollisionMode, EncoderName, TargetFormat


class RunConfig(BaseModel):
    """Validated input for a directory conversion run."""

    model_config = ConfigDict(extra="forbid")

    input_root: Path
    output_root: Path
    recursive: bool = False
    jobs: int = 2
    copy_all: bool = False
    overwrite: bool = False
    collision: CollisionMode = "fail"
    queue_depth: int | None = Field(default=None, ge=1)
    encoder: EncoderName = "ffmpeg"
    encoder_binary: str | None = None
    target_format: TargetFormat = "jxl"
    effort: int = Field(default=7, ge=1, le=9)

    @field_validator("jobs")
    @classmethod
    def _clamp_jobs(cls, value: int) -> int:
        # A non-positive pool size still runs, one job at a time.
        return max(value, 1)

    @field_validator("encoder_binary")
    @classmethod
    def _normalize_binary(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped = value.strip()
        return stripped or None

    @field_validator("target_format", mode="before")
    @classmethod
    def _normalize_format(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower().lstrip(".")
        return value

    @model_validator(mode="after")
    def _check_encoder_format(self) -> RunConfig:
        if self.encoder == "cjxl" and self.target_format != "jxl":
            raise ValueError("the cjxl encoder only produces jxl output.")
        return self
