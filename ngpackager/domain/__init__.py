"""
Domain layer for ngpackager.

Contains pure domain objects with no I/O or side effects:
- Artifact: A build output file tagged with its kind
- ResolutionState: Primary and secondary entry points of a run
- PackageDescriptor: Typed view over package.json
- PlacedFile / PackagingSummary: What a run wrote

These objects provide serialization methods for JSONL output.
"""

from .artifact import Artifact, ArtifactKind, classify_build_output, is_excluded
from .entry_point import EntryPointRole, ResolutionState, classify
from .descriptor import PackageDescriptor, POINTER_FIELDS
from .operation import PlacedFile, PackagingSummary, WriteAction

__all__ = [
    'Artifact',
    'ArtifactKind',
    'classify_build_output',
    'is_excluded',
    'EntryPointRole',
    'ResolutionState',
    'classify',
    'PackageDescriptor',
    'POINTER_FIELDS',
    'PlacedFile',
    'PackagingSummary',
    'WriteAction',
]
