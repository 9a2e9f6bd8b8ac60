"""
Artifact domain objects for ngpackager.

An artifact is a build output file tagged with the role it plays in the
package. Content is not held here; it is read through storage when a
placement needs it.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

DECLARATION_EXT = ".d.ts"
METADATA_EXT = ".metadata.json"
BUNDLE_INDEX_MARKER = ".bundle_index"

# Compiler by-products that never ship in a package
EXCLUDED_MARKERS = (".ngfactory", ".ngsummary")


class ArtifactKind(Enum):
    """Kind of build artifact."""
    FESM_ES2015 = "fesm2015"
    FESM_ES5 = "fesm5"
    BUNDLE = "bundle"
    DECLARATION = "declaration"
    METADATA = "metadata"
    BUNDLE_INDEX_DECLARATION = "bundle_index_declaration"
    BUNDLE_INDEX_METADATA = "bundle_index_metadata"
    SOURCE = "source"
    README = "readme"

    @property
    def is_bundle_index(self) -> bool:
        return self in (
            ArtifactKind.BUNDLE_INDEX_DECLARATION,
            ArtifactKind.BUNDLE_INDEX_METADATA,
        )


@dataclass(frozen=True)
class Artifact:
    """A build output file and its kind."""
    kind: ArtifactKind
    path: Path


def is_excluded(path: str, ext: str) -> bool:
    """True for ``.ngfactory<ext>`` and ``.ngsummary<ext>`` files."""
    return any(path.endswith(f"{marker}{ext}") for marker in EXCLUDED_MARKERS)


def classify_build_output(path: Path) -> Optional[Artifact]:
    """
    Classify a file found in the build output tree.

    Returns None for files that are not declaration artifacts (compiled
    JavaScript, source maps) and for excluded compiler by-products.
    """
    kind = _build_output_kind(str(path))
    return Artifact(kind, Path(path)) if kind is not None else None


def _build_output_kind(name: str) -> Optional[ArtifactKind]:
    if name.endswith(DECLARATION_EXT):
        if is_excluded(name, DECLARATION_EXT):
            return None
        if name.endswith(BUNDLE_INDEX_MARKER + DECLARATION_EXT):
            return ArtifactKind.BUNDLE_INDEX_DECLARATION
        return ArtifactKind.DECLARATION
    if name.endswith(METADATA_EXT):
        if is_excluded(name, METADATA_EXT):
            return None
        if name.endswith(BUNDLE_INDEX_MARKER + METADATA_EXT):
            return ArtifactKind.BUNDLE_INDEX_METADATA
        return ArtifactKind.METADATA
    return None
