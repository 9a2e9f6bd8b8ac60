"""
Artifact placement for ngpackager.

Computes where every artifact lands in the output tree. Destinations
depend only on the artifact kind, its path and the entry point
resolution so far; nothing here touches the filesystem.

Layout:
    <out>/esm2015/<entry-segments>/<name>.js
    <out>/esm5/<entry-segments>/<name>.js
    <out>/bundles/<bundle>
    <out>/<path relative to the source root>
    <out>/<path relative to the build output root>
    <out>/<entry point>.d.ts, <out>/<entry point>.metadata.json
"""

import logging
import re
from pathlib import Path, PurePath
from typing import Tuple

from ..domain.artifact import Artifact, ArtifactKind, DECLARATION_EXT, METADATA_EXT
from ..domain.entry_point import EntryPointRole, ResolutionState, classify
from ..errors import (
    MissingPrimaryEntryPoint,
    PackagingError,
    UnrecognizedBundleIndexExtension,
)
from ..naming import (
    destination_segments,
    entry_point_name_of,
    last_segment,
    parent_segments,
)

logger = logging.getLogger(__name__)

ESM_DIRS = {
    ArtifactKind.FESM_ES2015: 'esm2015',
    ArtifactKind.FESM_ES5: 'esm5',
}
BUNDLES_DIR = 'bundles'
README_NAME = 'README.md'

# Named AMD module line emitted by the compiler; not wanted outside bazel
_AMD_MODULE_RE = re.compile(r'\A/// <amd-module name=.*/>\n')


def strip_amd_module(content: str) -> str:
    """Drop a single leading ``/// <amd-module name=... />`` line."""
    return _AMD_MODULE_RE.sub('', content, count=1)


def bundle_index_extension(path: str) -> str:
    """
    Extension class of a bundle index file.

    Raises:
        UnrecognizedBundleIndexExtension: neither .d.ts nor .metadata.json
    """
    if path.endswith(DECLARATION_EXT):
        return DECLARATION_EXT
    if path.endswith(METADATA_EXT):
        return METADATA_EXT
    raise UnrecognizedBundleIndexExtension(path)


def _relative_posix(path: Path, root: Path) -> str:
    try:
        return PurePath(path).relative_to(root).as_posix()
    except ValueError as e:
        raise PackagingError(f"{path} is not under {root}") from e


class ArtifactPlacer:
    """
    Computes output paths for one packaging run.

    FESM placement also classifies the artifact's entry point, so the
    resolution state must see every FESM before any bundle index is
    placed.

    Example:
        placer = ArtifactPlacer(out, src_dir, bin_dir, ResolutionState())
        target, role = placer.place_fesm(Path("bin/core__testing.js"), ArtifactKind.FESM_ES5)
        # target == out/esm5/core/testing.js
    """

    def __init__(
        self,
        out: Path,
        src_dir: Path,
        bin_dir: Path,
        state: ResolutionState,
    ):
        self.out = Path(out)
        self.src_dir = Path(src_dir)
        self.bin_dir = Path(bin_dir)
        self.state = state

    def place_fesm(self, path: Path, kind: ArtifactKind) -> Tuple[Path, EntryPointRole]:
        """Destination of a FESM file; records its entry point."""
        role = classify(entry_point_name_of(str(path)), self.state)
        dir_segments, filename = destination_segments(str(path))
        target = self.out.joinpath(ESM_DIRS[kind], *dir_segments, filename)
        logger.debug(f"{kind.value} {path} -> {target} ({role.value})")
        return target, role

    def place_bundle(self, path: Path) -> Path:
        """Bundles are flat under ``bundles/``."""
        return self.out / BUNDLES_DIR / PurePath(path).name

    def place_source(self, path: Path) -> Path:
        """Sources keep their path relative to the source root."""
        return self.out / _relative_posix(path, self.src_dir)

    def place_readme(self) -> Path:
        return self.out / README_NAME

    def place_build_output(self, artifact: Artifact) -> Path:
        """Declarations and metadata keep their path relative to the build output root."""
        if artifact.kind.is_bundle_index:
            return self.relocate_bundle_index(artifact.path)
        return self.out / _relative_posix(artifact.path, self.bin_dir)

    def relocate_bundle_index(self, path: Path) -> Path:
        """
        Destination of a bundle index file.

        A file under a secondary entry point becomes
        ``<out>/<secondary>/<last segment><ext>``; the first secondary
        (in insertion order) whose name prefixes the relative path wins.
        Anything else becomes ``<out>/<primary><ext>``.

        Raises:
            UnrecognizedBundleIndexExtension: unknown extension
            MissingPrimaryEntryPoint: no secondary matched and no FESM
                artifact set a primary
        """
        ext = bundle_index_extension(str(path))
        relative = _relative_posix(path, self.bin_dir)

        for secondary in self.state.secondaries:
            if relative.startswith(secondary):
                return self.out / secondary / f"{last_segment(secondary)}{ext}"

        if self.state.primary is None:
            raise MissingPrimaryEntryPoint(str(path))
        return self.out / f"{self.state.primary}{ext}"

    def redirect_directory(self, entry_point: str) -> Path:
        """Directory that holds the redirect files of a secondary entry point."""
        return self.out.joinpath(*parent_segments(entry_point))

