"""framelog — fixed-capacity, append-only stream logging to HDF5.

Declare every stream up front with a sample frame and a frame count, then
append one frame at a time. Each stream is a pre-allocated dataset; nothing
is resized while logging.

Quick start:
    from framelog import open_log

    with open_log("my_file.h5") as log:
        log.register("/a/b/my_vector", [1.0, 2.0, 3.0], 100)
        log.append("my_vector", [4.0, 5.0, 6.0])

The resulting file holds group ``/a/b`` and dataset ``/a/b/my_vector`` of
shape ``(3, 100)``; frame k is ``dataset[:, k]``.
"""

__version__ = "0.1.0"

from framelog.errors import (
    CapacityExceededError,
    DuplicateStreamError,
    FrameLogError,
    FrameTypeError,
    InvalidPathError,
    SessionClosedError,
    ShapeMismatchError,
    StorageError,
    UnknownStreamError,
)
from framelog.session import Log, append, close, open_log, register
from framelog.storage.streams import StreamHandle
from framelog.utils.schema import SessionConfig

__all__ = [
    "Log",
    "StreamHandle",
    "SessionConfig",
    "open_log",
    "register",
    "append",
    "close",
    "FrameLogError",
    "InvalidPathError",
    "DuplicateStreamError",
    "UnknownStreamError",
    "ShapeMismatchError",
    "CapacityExceededError",
    "SessionClosedError",
    "FrameTypeError",
    "StorageError",
    "__version__",
]
