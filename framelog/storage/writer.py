"""Fixed-capacity stream registry on top of an open HDF5 file.

Each stream gets one dataset allocated up front with room for every frame
it will receive. Appends fill the dataset one slot at a time along its last
axis; nothing is ever resized.

Not thread-safe. A registry (and the session that owns it) must be used
from one thread of control at a time.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

import h5py
import numpy as np

from framelog.errors import (
    CapacityExceededError,
    DuplicateStreamError,
    InvalidPathError,
    StorageError,
    UnknownStreamError,
)
from framelog.storage.paths import resolve, split_path
from framelog.storage.streams import StreamHandle, describe_frame, frame_index
from framelog.utils.schema import SessionSchema, StreamSchema

logger = logging.getLogger(__name__)


class StreamRegistry:
    """Maps stream names to pre-allocated datasets and their write cursors.

    Streams are keyed by the leaf segment of their path, so ``"/a/pos"``
    and ``"/b/pos"`` cannot both be registered in one registry.
    """

    def __init__(self, root: h5py.Group) -> None:
        self._root = root
        self._streams: dict[str, StreamHandle] = {}

    def register(self, path: str, sample_frame: Any, frame_count: int) -> StreamHandle:
        """Declare a stream and allocate its dataset.

        Args:
            path: Logical path, e.g. ``"/robot/arm/joint_pos"``. Missing
                  groups along the way are created.
            sample_frame: Example frame. Its dtype and shape become the
                          stream's dtype and per-frame shape.
            frame_count: Total number of frames the stream will receive.

        Returns:
            The new StreamHandle, with cursor 0.
        """
        if isinstance(frame_count, bool) or not isinstance(frame_count, (int, np.integer)):
            raise ValueError(f"frame_count must be an integer, got {type(frame_count).__name__}")
        if frame_count <= 0:
            raise ValueError(f"frame_count must be positive, got {frame_count}")

        # Validate before touching the file so a rejected call creates no groups
        segments = split_path(path)
        leaf = segments[-1]
        if leaf in self._streams:
            raise DuplicateStreamError(
                f"Stream '{leaf}' is already registered "
                f"(at '{self._streams[leaf].path}'). Stream names must be unique."
            )
        dtype, frame_shape = describe_frame(sample_frame)

        group, leaf = resolve(self._root, path)
        if leaf in group:
            raise InvalidPathError(
                f"Cannot register {path!r}: '{group[leaf].name}' already exists in the file"
            )

        shape = (*frame_shape, int(frame_count))
        try:
            ds = group.create_dataset(leaf, shape=shape, dtype=dtype)
        except OSError as e:
            raise StorageError(f"Could not create dataset for {path!r}: {e}") from e

        handle = StreamHandle(
            name=leaf,
            path="/" + "/".join(segments),
            capacity=int(frame_count),
            frame_shape=frame_shape,
            dtype=dtype,
            dataset=ds,
        )
        self._streams[leaf] = handle
        logger.info(
            "Registered stream '%s' at '%s': frame shape %s, %s, %d frames.",
            leaf, ds.name, frame_shape, dtype, frame_count,
        )
        return handle

    def append(self, name: str, frame: Any) -> None:
        """Write the next frame of a stream.

        The cursor only advances once the write succeeded, so a failed
        append can be retried with the same frame.
        """
        handle = self.get(name)

        if handle.is_full:
            raise CapacityExceededError(
                f"Stream '{name}' has used up all of its allocated space "
                f"({handle.capacity} frames)."
            )

        arr = handle.coerce(frame)
        try:
            handle.dataset[frame_index(handle.rank, handle.cursor)] = arr
        except OSError as e:
            raise StorageError(f"Could not write frame {handle.cursor} of '{name}': {e}") from e

        handle.cursor += 1
        if handle.is_full:
            logger.debug("Stream '%s' is full (%d frames).", name, handle.capacity)

    def get(self, name: str) -> StreamHandle:
        """Look up a registered stream by name."""
        try:
            return self._streams[name]
        except (KeyError, TypeError):
            raise UnknownStreamError(
                f"Unknown stream '{name}'. Perhaps you need to register it first? "
                f"Known: {list(self._streams)}"
            ) from None

    def schema(self) -> SessionSchema:
        """Snapshot of every registered stream."""
        schema = SessionSchema()
        for handle in self._streams.values():
            schema.add_stream(StreamSchema(
                name=handle.name,
                path=handle.path,
                dtype=str(handle.dtype),
                frame_shape=handle.frame_shape,
                capacity=handle.capacity,
                frames_written=handle.cursor,
            ))
        return schema

    def __contains__(self, name: object) -> bool:
        return name in self._streams

    def __iter__(self) -> Iterator[StreamHandle]:
        return iter(self._streams.values())

    def __len__(self) -> int:
        return len(self._streams)
