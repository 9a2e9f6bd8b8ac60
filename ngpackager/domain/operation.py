"""
Operation result domain objects for ngpackager.

Records what a packaging run wrote (or would write, in a dry run) so the
CLI can report it as JSONL or as a table.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional

from .artifact import ArtifactKind


class WriteAction(Enum):
    """How a file reached the output tree."""
    COPIED = "copied"
    WRITTEN = "written"
    SYNTHESIZED = "synthesized"
    DRY_RUN = "dry_run"


@dataclass
class PlacedFile:
    """
    One file placed in the output tree.

    ``source`` is None for synthesized redirect files.
    """
    target: str
    kind: ArtifactKind
    action: WriteAction
    source: Optional[str] = None
    entry_point: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            'target': self.target,
            'kind': self.kind.value,
            'action': self.action.value,
        }
        if self.source:
            result['source'] = self.source
        if self.entry_point:
            result['entry_point'] = self.entry_point
        return result


@dataclass
class PackagingSummary:
    """
    Summary of one packaging run.

    Collects every placed file plus the entry point resolution that
    drove the layout.
    """
    output: str
    primary: Optional[str] = None
    secondaries: List[str] = field(default_factory=list)
    dry_run: bool = False
    files: List[PlacedFile] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.files)

    def add(self, placed: PlacedFile) -> None:
        """Record a placed file."""
        self.files.append(placed)

    def counts(self) -> Dict[str, int]:
        """Number of placed files per artifact kind."""
        counts: Dict[str, int] = {}
        for placed in self.files:
            counts[placed.kind.value] = counts.get(placed.kind.value, 0) + 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'type': 'summary',
            'output': self.output,
            'primary': self.primary,
            'secondaries': list(self.secondaries),
            'total': self.total,
            'counts': self.counts(),
            'skipped': len(self.skipped),
            'dry_run': self.dry_run,
        }
