"""Exceptions raised by framelog.

Every error derives from FrameLogError and from the closest builtin, so
callers can catch either ``FrameLogError`` or e.g. ``KeyError``.
"""

from __future__ import annotations


class FrameLogError(Exception):
    """Base class for all framelog errors."""


class InvalidPathError(FrameLogError, ValueError):
    """A stream path has no leaf name or collides with an existing node."""


class DuplicateStreamError(FrameLogError, ValueError):
    """A stream with the same leaf name is already registered."""


class UnknownStreamError(FrameLogError, KeyError):
    """append() was called with a name that was never registered."""

    def __str__(self) -> str:
        # KeyError repr-quotes its argument; keep the message readable
        return str(self.args[0]) if self.args else ""


class ShapeMismatchError(FrameLogError, ValueError):
    """A frame does not match the shape declared at registration."""


class CapacityExceededError(FrameLogError, IndexError):
    """A stream has already received all of its declared frames."""


class SessionClosedError(FrameLogError, RuntimeError):
    """An operation was attempted on a closed session."""


class FrameTypeError(FrameLogError, TypeError):
    """A sample frame cannot be stored as a fixed-shape numeric dataset."""


class StorageError(FrameLogError, OSError):
    """The HDF5 layer failed (disk full, permission denied, ...)."""
