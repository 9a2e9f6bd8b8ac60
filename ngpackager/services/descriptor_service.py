"""
Descriptor rewriting for ngpackager.

Points the module fields of a package.json at the generated layout. A
descriptor for a nested package (``@scope/common/http``) lives one
directory down per extra name segment, so its pointers climb back to the
package root first.
"""

import logging
from typing import List, Optional, Tuple

from ..domain.descriptor import PackageDescriptor
from ..errors import DescriptorParseError

logger = logging.getLogger(__name__)


def package_segments(name: str) -> List[str]:
    """Name segments with any ``@scope`` segment dropped."""
    parts = name.split('/')
    # for scoped packages the scope is not part of the path
    if parts[0].startswith('@'):
        parts = parts[1:]
    return parts


def relative_root(segments: List[str]) -> str:
    """Path from the descriptor's directory back to the package root."""
    depth = len(segments) - 1
    return '/'.join(['..'] * depth) or '.'


def pointer_fields(name: str) -> Tuple[str, str, str, str]:
    """
    Compute ``(main, module, es2015, typings)`` for a package name.

    Example:
        >>> pointer_fields("@angular/common/http")
        ('../bundles/common-http.umd.js', '../esm5/http.js', '../esm2015/http.js', './http.d.ts')
    """
    segments = package_segments(name)
    if not segments or not segments[-1]:
        raise DescriptorParseError(f"package name has no path segments: {name!r}")
    rel = relative_root(segments)
    index_file = segments[-1]
    return (
        f"{rel}/bundles/{'-'.join(segments)}.umd.js",
        f"{rel}/esm5/{index_file}.js",
        f"{rel}/esm2015/{index_file}.js",
        f"./{index_file}.d.ts",
    )


def rewrite_descriptor(descriptor: PackageDescriptor) -> PackageDescriptor:
    """Set the four pointer fields of ``descriptor`` in place and return it."""
    main, module, es2015, typings = pointer_fields(descriptor.name)
    descriptor.main = main
    descriptor.module = module
    descriptor.es2015 = es2015
    descriptor.typings = typings
    return descriptor


def amend_package_json(content: str, path: Optional[str] = None) -> str:
    """
    Rewrite package.json text so it points at the generated artifacts.

    Unrelated keys keep their order. Raises DescriptorParseError for
    malformed content.
    """
    descriptor = rewrite_descriptor(PackageDescriptor.from_json(content, path))
    logger.debug(f"Rewrote descriptor {descriptor.name}: main={descriptor.main}")
    return descriptor.to_json()
