"""
Service layer for ngpackager.

Contains the packaging logic that orchestrates domain objects and
infrastructure:
- PackageService: Runs a full packaging pass
- ArtifactPlacer: Computes output paths and bundle index relocation
- PlaceholderSubstitutor: Stamps the SCM version into text artifacts
- Descriptor rewriting and redirect synthesis helpers

Services are the primary API for commands to use.
"""

from .package_service import PackageService, PackageOptions
from .placement_service import ArtifactPlacer, strip_amd_module
from .placeholder_service import PlaceholderSubstitutor, VERSION_PLACEHOLDER
from .descriptor_service import amend_package_json, pointer_fields
from .redirect_service import synthesize

__all__ = [
    'PackageService',
    'PackageOptions',
    'ArtifactPlacer',
    'strip_amd_module',
    'PlaceholderSubstitutor',
    'VERSION_PLACEHOLDER',
    'amend_package_json',
    'pointer_fields',
    'synthesize',
]
