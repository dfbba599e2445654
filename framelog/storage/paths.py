"""Logical stream paths to HDF5 groups.

A stream path such as ``"/robot/arm/joint_pos"`` names a chain of groups
(``robot``, ``arm``) and a leaf (``joint_pos``) that becomes the dataset.
Groups are created on demand and reused when they already exist.

Group resolution is check-then-create and takes no locks. Two threads
resolving overlapping prefixes on the same file can race; serialize access
to a session externally.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import h5py

from framelog.errors import InvalidPathError, StorageError
from framelog.storage.format import PATH_SEPARATOR_PATTERN

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(PATH_SEPARATOR_PATTERN)


def split_path(path: Any) -> list[str]:
    """Split a logical path into segments, dropping empty ones.

    Leading, trailing and doubled separators are tolerated:
    ``"//a/ b/c/"`` gives ``["a", "b", "c"]``.
    """
    if not isinstance(path, str):
        raise InvalidPathError(f"Stream path must be a string, got {type(path).__name__}")

    segments = [s for s in _SEPARATORS.split(path) if s]
    if not segments:
        raise InvalidPathError(f"Stream path {path!r} has no name in it")
    return segments


def resolve(root: h5py.Group, path: str) -> tuple[h5py.Group, str]:
    """Ensure every group along ``path`` exists under ``root``.

    Args:
        root: Group to start from, normally the file's root group.
        path: Logical stream path.

    Returns:
        (parent group, leaf name). The leaf itself is not created.
    """
    *groups, leaf = split_path(path)

    group = root
    for name in groups:
        if name in group:
            child = group[name]
            if not isinstance(child, h5py.Group):
                raise InvalidPathError(
                    f"Cannot resolve {path!r}: '{child.name}' is a dataset, not a group"
                )
            logger.info("Group '%s' already exists.", child.name)
            group = child
        else:
            try:
                group = group.create_group(name)
            except OSError as e:
                raise StorageError(f"Could not create group '{name}' in '{group.name}': {e}") from e
            logger.info("Creating group '%s'.", group.name)

    return group, leaf
