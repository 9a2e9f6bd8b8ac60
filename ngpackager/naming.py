"""
Entry point naming for flattened build artifacts.

FESM files are emitted flat, with the module path encoded in the file
name: ``common__http.js`` is the ``common/http`` entry point. These
helpers recover the entry point name and the nested destination from
such a name.
"""

import re
from pathlib import PurePath
from typing import List, Tuple

SEGMENT_DELIMITER = "__"

_EXTENSION_RE = re.compile(r"\..*")


def split_segments(file_name: str) -> List[str]:
    """Split the base name of ``file_name`` on the segment delimiter."""
    return PurePath(file_name).name.split(SEGMENT_DELIMITER)


def entry_point_name_of(file_name: str) -> str:
    """
    Derive the entry point name from a FESM file name.

    Segments are joined with ``/`` and everything from the first ``.``
    onward is dropped.

    Example:
        >>> entry_point_name_of("out/common__http.umd.js")
        'common/http'
    """
    joined = "/".join(split_segments(file_name))
    return _EXTENSION_RE.sub("", joined, count=1)


def destination_segments(file_name: str) -> Tuple[List[str], str]:
    """
    Split a FESM file name into nested directories and a final file name.

    Example:
        >>> destination_segments("core__testing.js")
        (['core'], 'testing.js')
    """
    parts = split_segments(file_name)
    return parts[:-1], parts[-1]


def last_segment(entry_point: str) -> str:
    """Final ``/`` segment of an entry point name."""
    return entry_point.split("/")[-1]


def parent_segments(entry_point: str) -> List[str]:
    """All but the final ``/`` segment of an entry point name."""
    return entry_point.split("/")[:-1]
