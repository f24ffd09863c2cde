"""Shared type aliases and enums for converter modules."""

from __future__ import annotations

from enum import Enum
from typing import Literal, TypeAlias

TargetFormat: TypeAlias = Literal["jxl", "webp", "png"]
EncoderName: TypeAlias = Literal["ffmpeg", "cjxl"]
CollisionMode: TypeAlias = Literal["fail", "suffix"]


class FileKind(str, Enum):
    """Classification of a discovered file."""

    IMAGE = "image"
    OTHER = "other"
