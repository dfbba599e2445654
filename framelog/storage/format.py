"""framelog file format constants.

A framelog file is plain HDF5 with this structure:

    /<group>/.../<leaf>   — one dataset per stream, shape [*frame_shape, frame_count]
                            attr "frames_written": frames appended before close
    attrs on /
        format_version    — FORMAT_VERSION
        metadata          — JSON string with session info
        schema            — JSON string with stream definitions
"""

# Segments of a logical stream path are split on slashes and whitespace
PATH_SEPARATOR_PATTERN = r"[/\s]+"

# Root attributes
FORMAT_VERSION_ATTR = "format_version"
METADATA_ATTR = "metadata"
SCHEMA_ATTR = "schema"

# Per-dataset attributes
FRAMES_WRITTEN_ATTR = "frames_written"

# File extension
FILE_EXTENSION = ".h5"

# dtype kinds h5py stores natively: bool, int, uint, float, complex
SUPPORTED_DTYPE_KINDS = "biufc"

# Version of the format
FORMAT_VERSION = "1.0.0"
