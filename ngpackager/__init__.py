"""
ngpackager - Lay out compiled build artifacts as a publishable npm package.

ngpackager takes FESM bundles, UMD bundles, declarations, metadata, a README
and a package.json scattered across a build output tree and places them the
way package consumers expect, including packages with secondary entry points.

Quick Start:
    from pathlib import Path
    import ngpackager

    params = ngpackager.RunParameters(
        out=Path("dist/core"),
        src_dir=Path("packages/core"),
        bin_dir=Path("bin/packages/core"),
        fesms2015=[Path("bin/core.js"), Path("bin/core__testing.js")],
        fesms5=[Path("bin/esm5/core.js"), Path("bin/esm5/core__testing.js")],
        srcs=[Path("packages/core/package.json")],
    )

    summary = ngpackager.PackageService().run(params)
    print(summary.primary, summary.secondaries)   # core ['core/testing']

Domain Objects:
    Artifact - Build output file tagged with its kind
    ResolutionState - Primary and secondary entry points of a run
    PackageDescriptor - Typed view over package.json
    PackagingSummary - Files placed by a run

Services:
    PackageService - Full packaging pass
    ArtifactPlacer - Destination paths and bundle index relocation
"""

__version__ = "0.1.0"

# Domain objects
from .domain import (
    Artifact,
    ArtifactKind,
    EntryPointRole,
    ResolutionState,
    PackageDescriptor,
    PlacedFile,
    PackagingSummary,
)

# Services
from .services import (
    PackageService,
    PackageOptions,
    ArtifactPlacer,
)

from .params import RunParameters
from .naming import entry_point_name_of, destination_segments

# Configuration
from .config import load_config

__all__ = [
    # Version
    "__version__",
    # Domain objects
    "Artifact",
    "ArtifactKind",
    "EntryPointRole",
    "ResolutionState",
    "PackageDescriptor",
    "PlacedFile",
    "PackagingSummary",
    # Services
    "PackageService",
    "PackageOptions",
    "ArtifactPlacer",
    # Inputs
    "RunParameters",
    "entry_point_name_of",
    "destination_segments",
    # Configuration
    "load_config",
]
