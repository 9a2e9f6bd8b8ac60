"""
Infrastructure layer for ngpackager.

Contains abstractions for external systems:
- Storage: Filesystem reads, atomic writes, copies and listings

These provide clean interfaces that can be mocked for testing.
"""

from .storage import Storage

__all__ = [
    'Storage',
]
