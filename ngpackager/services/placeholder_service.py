"""
Version placeholder substitution for ngpackager.

Sources are written with a fixed version sentinel. When stamp data is
available the sentinel is replaced by the SCM version taken from it.
"""

import logging
from typing import Dict, Optional

from ..errors import StampFieldMissing

logger = logging.getLogger(__name__)

DEFAULT_STAMP_KEY = "BUILD_SCM_VERSION"

# Built from parts: this file must never contain the sentinel literally.
VERSION_PLACEHOLDER = "0.0.0" + "-PLACEHOLDER"


def parse_stamp_data(text: str) -> Dict[str, str]:
    """
    Parse workspace status output into a mapping.

    Each non-blank line is ``KEY value``; the key ends at the first
    space. Later duplicates do not replace earlier ones.

    Example:
        >>> parse_stamp_data("BUILD_SCM_VERSION 9.1.0\\nBUILD_USER ci\\n")
        {'BUILD_SCM_VERSION': '9.1.0', 'BUILD_USER': 'ci'}
    """
    stamp: Dict[str, str] = {}
    for line in text.splitlines():
        if not line.strip():
            continue
        key, _, value = line.partition(' ')
        stamp.setdefault(key, value.strip())
    return stamp


def extract_version(
    stamp: Dict[str, str],
    key: str = DEFAULT_STAMP_KEY,
    path: Optional[str] = None,
) -> str:
    """
    Get the version from parsed stamp data.

    Only the first whitespace-separated token of the value is used.

    Raises:
        StampFieldMissing: the key is absent or has no value
    """
    value = stamp.get(key, '')
    tokens = value.split()
    if not tokens:
        raise StampFieldMissing(key, path)
    return tokens[0].strip()


def substitute(content: str, version: Optional[str]) -> str:
    """Replace every version sentinel in ``content``; no-op without a version."""
    if version is None:
        return content
    return content.replace(VERSION_PLACEHOLDER, version)


class PlaceholderSubstitutor:
    """
    Applies the stamped version to artifact text.

    Example:
        substitutor = PlaceholderSubstitutor.from_stamp_text(stamp_text)
        content = substitutor.apply(content)
    """

    def __init__(self, version: Optional[str] = None):
        self.version = version

    @classmethod
    def from_stamp_text(
        cls,
        text: Optional[str],
        key: str = DEFAULT_STAMP_KEY,
        path: Optional[str] = None,
    ) -> 'PlaceholderSubstitutor':
        """Build a substitutor from raw stamp data; None means unstamped."""
        if text is None:
            return cls()
        version = extract_version(parse_stamp_data(text), key, path)
        logger.info(f"Stamping version {version}")
        return cls(version)

    def apply(self, content: str) -> str:
        return substitute(content, self.version)
