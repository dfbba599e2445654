"""Log — the main interface for logging fixed-size streams to an HDF5 file.

Usage:
    from framelog import open_log

    with open_log("run_042.h5") as log:
        log.register("/robot/arm/joint_pos", np.zeros(7), 1000)
        log.register("/robot/reward", 0.0, 1000)

        for step in range(1000):
            log.append("joint_pos", arm.joint_positions())
            log.append("reward", reward)

Or without a context manager:

    log = open_log("run_042.h5")
    try:
        ...
    finally:
        log.close()
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import h5py

from framelog.errors import SessionClosedError, StorageError
from framelog.storage.format import (
    FILE_EXTENSION,
    FORMAT_VERSION,
    FORMAT_VERSION_ATTR,
    FRAMES_WRITTEN_ATTR,
    METADATA_ATTR,
    SCHEMA_ATTR,
)
from framelog.storage.streams import StreamHandle
from framelog.storage.writer import StreamRegistry
from framelog.utils.schema import SessionConfig, SessionMetadata

logger = logging.getLogger(__name__)


class Log:
    """A logging session bound to one open HDF5 file.

    The file is created (or truncated) when the Log is constructed and
    released exactly once by close(). After close, every operation raises
    SessionClosedError.

    Args:
        path: Output file. ``.h5`` is appended if the path has no suffix.
        config: Session options. Defaults to SessionConfig().
        metadata: Free-form metadata stored on the root group at close.
        name: Session name for the metadata. Defaults to the file stem.
    """

    def __init__(
        self,
        path: str | Path,
        config: SessionConfig | None = None,
        metadata: dict[str, Any] | None = None,
        name: str | None = None,
    ) -> None:
        self._path = Path(path)
        if not self._path.suffix:
            self._path = self._path.with_suffix(FILE_EXTENSION)

        self.config = config or SessionConfig()
        self.metadata = SessionMetadata(
            name=name or self._path.stem,
            user_metadata=dict(metadata or {}),
        )

        try:
            if self.config.create_parents:
                self._path.parent.mkdir(parents=True, exist_ok=True)
            self._file: h5py.File | None = h5py.File(str(self._path), self.config.mode)
        except OSError as e:
            raise StorageError(f"Could not open {self._path} for writing: {e}") from e

        self._file.attrs[FORMAT_VERSION_ATTR] = FORMAT_VERSION
        self._registry = StreamRegistry(self._file)
        self._appends = 0
        logger.info("Opened log file %s (mode=%s).", self._path, self.config.mode)

    def _check_open(self) -> h5py.File:
        if self._file is None:
            raise SessionClosedError(f"Log {self._path} is closed.")
        return self._file

    def register(self, path: str, sample_frame: Any, frame_count: int) -> StreamHandle:
        """Declare a stream and pre-allocate space for ``frame_count`` frames.

        Args:
            path: Slash-separated logical path. Intermediate groups are
                  created as needed; the last segment names the stream.
            sample_frame: Example frame (scalar, vector or matrix). Fixes
                          the stream's dtype and per-frame shape.
            frame_count: Total number of frames this stream will receive.

        Example:
            log.register("/pos", [0.0, 0.0, 0.0], 3)
        """
        self._check_open()
        return self._registry.register(path, sample_frame, frame_count)

    def append(self, name: str, frame: Any) -> None:
        """Write the next frame of the stream registered as ``name``.

        ``name`` is the last segment of the registered path, e.g. ``"pos"``
        for a stream registered at ``"/robot/pos"``.
        """
        file = self._check_open()
        self._registry.append(name, frame)

        self._appends += 1
        if self.config.flush_every and self._appends % self.config.flush_every == 0:
            file.flush()

    def close(self) -> None:
        """Write metadata and schema, then close the file.

        The file handle is released even if writing the attributes fails.
        """
        file = self._check_open()
        try:
            try:
                for handle in self._registry:
                    handle.dataset.attrs[FRAMES_WRITTEN_ATTR] = handle.cursor
                file.attrs[METADATA_ATTR] = self.metadata.to_json()
                file.attrs[SCHEMA_ATTR] = self._registry.schema().to_json()
                file.flush()
            except OSError as e:
                raise StorageError(f"Could not finalize {self._path}: {e}") from e
        finally:
            file.close()
            self._file = None
            logger.info("Closed log file %s.", self._path)

    # --- Properties ---

    @property
    def path(self) -> Path:
        """Output file path."""
        return self._path

    @property
    def closed(self) -> bool:
        return self._file is None

    @property
    def streams(self) -> dict[str, StreamHandle]:
        """Registered streams by name."""
        self._check_open()
        return {handle.name: handle for handle in self._registry}

    def __getitem__(self, name: str) -> StreamHandle:
        self._check_open()
        return self._registry.get(name)

    def __contains__(self, name: object) -> bool:
        return not self.closed and name in self._registry

    # Context manager support
    def __enter__(self) -> Log:
        return self

    def __exit__(self, *args: Any) -> None:
        if not self.closed:
            self.close()

    def __repr__(self) -> str:
        status = "closed" if self.closed else "open"
        return f"Log(path='{self._path}', streams={len(self._registry)}, status={status})"


def open_log(
    path: str | Path,
    config: SessionConfig | None = None,
    metadata: dict[str, Any] | None = None,
) -> Log:
    """Open a new log file for writing."""
    return Log(path, config=config, metadata=metadata)


def register(log: Log, path: str, sample_frame: Any, frame_count: int) -> StreamHandle:
    """Functional form of Log.register."""
    return log.register(path, sample_frame, frame_count)


def append(log: Log, name: str, frame: Any) -> None:
    """Functional form of Log.append."""
    log.append(name, frame)


def close(log: Log) -> None:
    """Functional form of Log.close."""
    log.close()
