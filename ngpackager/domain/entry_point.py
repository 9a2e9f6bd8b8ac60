"""
Entry point resolution for ngpackager.

A package has exactly one primary entry point and any number of
secondary ones. The first FESM artifact seen decides the primary; every
other distinct name becomes secondary.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class EntryPointRole(Enum):
    """Role of an entry point within a package."""
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass
class ResolutionState:
    """
    Entry points encountered during one packaging run.

    ``secondaries`` keeps insertion order; bundle index relocation
    depends on it.
    """
    primary: Optional[str] = None
    secondaries: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'primary': self.primary,
            'secondaries': list(self.secondaries),
        }


def classify(name: str, state: ResolutionState) -> EntryPointRole:
    """
    Classify ``name`` and record it in ``state``.

    The primary is set once and never replaced; the primary name is
    never added to the secondaries, and secondaries are not duplicated.
    """
    if state.primary is None:
        state.primary = name
        return EntryPointRole.PRIMARY
    if name == state.primary:
        return EntryPointRole.PRIMARY
    if name not in state.secondaries:
        state.secondaries.append(name)
    return EntryPointRole.SECONDARY
