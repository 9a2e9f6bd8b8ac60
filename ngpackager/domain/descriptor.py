"""
Typed view over a package.json document.

Only ``name`` and the four module pointer fields are modelled. Every
other key is carried through untouched, in its original order.
"""

import json
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..errors import DescriptorParseError

POINTER_FIELDS = ('main', 'module', 'es2015', 'typings')


def _reject_constant(token: str):
    raise ValueError(f"{token} is not valid JSON")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"{text} is out of range")
    return value


@dataclass
class PackageDescriptor:
    """A package descriptor with its pointer fields lifted out."""
    name: str
    main: Optional[str] = None
    module: Optional[str] = None
    es2015: Optional[str] = None
    typings: Optional[str] = None
    document: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, content: str, path: Optional[str] = None) -> 'PackageDescriptor':
        """
        Parse descriptor text.

        Raises:
            DescriptorParseError: content is not a JSON object with a
                string ``name``
        """
        try:
            document = json.loads(
                content,
                parse_constant=_reject_constant,
                parse_float=_finite_float,
            )
        except ValueError as e:
            raise DescriptorParseError(f"invalid JSON: {e}", path) from e

        if not isinstance(document, dict):
            raise DescriptorParseError("descriptor must be a JSON object", path)

        name = document.get('name')
        if not isinstance(name, str) or not name:
            raise DescriptorParseError("descriptor has no 'name' field", path)

        pointers = {key: document.get(key) for key in POINTER_FIELDS}
        return cls(name=name, document=document, **pointers)

    def to_document(self) -> Dict[str, Any]:
        """Merge the typed fields back into the original document."""
        document = dict(self.document)
        document['name'] = self.name
        for key in POINTER_FIELDS:
            value = getattr(self, key)
            if value is not None:
                document[key] = value
        return document

    def to_json(self) -> str:
        """Pretty-print with 2-space indentation and a trailing newline."""
        return json.dumps(
            self.to_document(), indent=2, ensure_ascii=False, allow_nan=False
        ) + '\n'
