"""Per-stream bookkeeping: frame shape, capacity and write cursor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import h5py
import numpy as np

from framelog.errors import FrameTypeError, ShapeMismatchError
from framelog.storage.format import SUPPORTED_DTYPE_KINDS


def describe_frame(sample: Any) -> tuple[np.dtype, tuple[int, ...]]:
    """Infer (dtype, frame_shape) from a sample frame.

    A bare scalar has shape ``()``, a sequence ``(n,)``, a sequence of
    sequences ``(rows, cols)``. Arrays of any rank are accepted.
    """
    try:
        arr = np.asarray(sample)
    except ValueError as e:
        raise FrameTypeError(f"Sample frame is not rectangular: {e}") from e

    if arr.dtype.kind not in SUPPORTED_DTYPE_KINDS:
        raise FrameTypeError(
            f"Unsupported frame dtype '{arr.dtype}'. "
            "Use booleans, integers, floats or complex numbers."
        )
    if any(dim == 0 for dim in arr.shape):
        raise FrameTypeError(f"Sample frame has an empty dimension: shape {arr.shape}")

    return arr.dtype, tuple(int(d) for d in arr.shape)


def frame_index(rank: int, slot: int) -> tuple[Any, ...]:
    """Hyperslab selector for one frame: every frame axis, one slot on the last axis."""
    return (slice(None),) * rank + (slot,)


@dataclass
class StreamHandle:
    """A declared, pre-allocated append target.

    The dataset has shape ``frame_shape + (capacity,)``; frame k (0-based)
    lives at ``dataset[..., k]``.
    """

    name: str
    path: str
    capacity: int
    frame_shape: tuple[int, ...]
    dtype: np.dtype
    dataset: h5py.Dataset
    cursor: int = 0

    @property
    def rank(self) -> int:
        """0 for scalars, 1 for vectors, 2 for matrices."""
        return len(self.frame_shape)

    @property
    def remaining(self) -> int:
        return self.capacity - self.cursor

    @property
    def is_full(self) -> bool:
        return self.cursor >= self.capacity

    def coerce(self, frame: Any) -> np.ndarray:
        """Convert a frame to an array and check it against dtype and frame_shape.

        Element types may widen (int into a float stream) but never change
        kind downwards (float into int, complex into float).
        """
        try:
            arr = np.asarray(frame)
        except ValueError as e:
            raise ShapeMismatchError(f"Stream '{self.name}': frame is not rectangular: {e}") from e

        if arr.dtype.kind not in SUPPORTED_DTYPE_KINDS:
            raise FrameTypeError(
                f"Stream '{self.name}': unsupported frame dtype '{arr.dtype}'"
            )
        if not np.can_cast(arr.dtype, self.dtype, "same_kind"):
            raise FrameTypeError(
                f"Stream '{self.name}': cannot store {arr.dtype} frame as {self.dtype}"
            )
        if arr.shape != self.frame_shape:
            raise ShapeMismatchError(
                f"Stream '{self.name}' shape mismatch: "
                f"expected {self.frame_shape}, got {arr.shape}"
            )
        return arr

    def __repr__(self) -> str:
        return (
            f"StreamHandle(name='{self.name}', shape={self.frame_shape}, "
            f"dtype={self.dtype}, frames={self.cursor}/{self.capacity})"
        )
