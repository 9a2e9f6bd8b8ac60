"""
Redirect stubs for secondary entry points.

Each secondary entry point gets a ``<name>.metadata.json`` marked as a
flat module index redirect and a ``<name>.d.ts`` that re-exports the
entry point's own typings. Downstream tooling diffs these files against
older build output, so their formatting is fixed.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict

from ..naming import last_segment


def redirect_metadata(entry_point: str) -> Dict[str, Any]:
    """Metadata document pointing at ``./<name>/<name>``."""
    base_name = last_segment(entry_point)
    return {
        '__symbolic': 'module',
        'version': 3,
        'metadata': {},
        'exports': [{'from': f'./{base_name}/{base_name}'}],
        'flatModuleIndexRedirect': True,
    }


def render_metadata(entry_point: str) -> str:
    """Single-line JSON, newline terminated."""
    return json.dumps(redirect_metadata(entry_point), separators=(',', ':'), ensure_ascii=False) + '\n'


def render_declaration(entry_point: str, license_banner: str = '') -> str:
    """
    Re-export stub for an entry point.

    The banner is followed by a space, a newline, then an indented
    ``export *`` line.
    """
    base_name = last_segment(entry_point)
    return f"{license_banner} \n export * from './{base_name}/{base_name}'\n"


@dataclass(frozen=True)
class RedirectFiles:
    """File names and contents synthesized for one secondary entry point."""
    entry_point: str
    metadata_name: str
    metadata: str
    declaration_name: str
    declaration: str


def synthesize(entry_point: str, license_banner: str = '') -> RedirectFiles:
    """Build both redirect files for ``entry_point``."""
    base_name = last_segment(entry_point)
    return RedirectFiles(
        entry_point=entry_point,
        metadata_name=f"{base_name}.metadata.json",
        metadata=render_metadata(entry_point),
        declaration_name=f"{base_name}.d.ts",
        declaration=render_declaration(entry_point, license_banner),
    )
