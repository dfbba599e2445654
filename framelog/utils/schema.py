"""Pydantic models for framelog configuration, metadata and stream schemas."""

from __future__ import annotations

import platform
from datetime import datetime, timezone
from typing import Any, Literal

import numpy as np
from pydantic import BaseModel, Field, field_validator


class SystemInfo(BaseModel):
    """Captured system information at session open."""

    python_version: str = Field(default_factory=lambda: platform.python_version())
    platform: str = Field(default_factory=lambda: platform.platform())
    hostname: str = Field(default_factory=lambda: platform.node())


class SessionConfig(BaseModel):
    """Options for opening a logging session."""

    mode: Literal["w", "x"] = "w"  # "w" truncates, "x" refuses an existing file
    flush_every: int = Field(default=0, ge=0)  # 0 = flush on close only
    create_parents: bool = True


class SessionMetadata(BaseModel):
    """Metadata stored on the root group of a log file."""

    name: str
    user_metadata: dict[str, Any] = Field(default_factory=dict)
    system_info: SystemInfo = Field(default_factory=SystemInfo)
    created_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    framelog_version: str = "0.1.0"

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, data: str) -> SessionMetadata:
        return cls.model_validate_json(data)


def _coerce_tuple(v: Any) -> Any:
    if isinstance(v, list):
        return tuple(v)
    return v


class StreamSchema(BaseModel):
    """Schema for a single registered stream."""

    name: str
    path: str
    dtype: str  # numpy dtype string, e.g. "float64"
    frame_shape: tuple[int, ...]  # shape per frame, () for scalars
    capacity: int
    frames_written: int = 0

    @field_validator("frame_shape", mode="before")
    @classmethod
    def coerce_shape(cls, v: Any) -> tuple[int, ...]:
        return _coerce_tuple(v)


class SessionSchema(BaseModel):
    """Schema describing all streams in a log file."""

    streams: dict[str, StreamSchema] = Field(default_factory=dict)

    def add_stream(self, stream: StreamSchema) -> None:
        self.streams[stream.name] = stream

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, data: str) -> SessionSchema:
        return cls.model_validate_json(data)


class StreamDeclaration(BaseModel):
    """A stream declared in a manifest file rather than from a sample frame."""

    path: str
    dtype: str = "float64"
    shape: tuple[int, ...] = ()
    frames: int = Field(gt=0)

    @field_validator("shape", mode="before")
    @classmethod
    def coerce_shape(cls, v: Any) -> tuple[int, ...]:
        return _coerce_tuple(v)

    @field_validator("dtype")
    @classmethod
    def check_dtype(cls, v: str) -> str:
        try:
            np.dtype(v)
        except TypeError as e:
            raise ValueError(f"Unknown dtype '{v}'") from e
        return v

    def sample(self) -> np.ndarray:
        """A zero frame with the declared dtype and shape."""
        return np.zeros(self.shape, dtype=self.dtype)
