"""
Package assembly service for ngpackager.

Lays out build artifacts as a publishable npm package: FESM bundles per
ECMAScript level, UMD bundles, declarations and metadata, copied sources
with a rewritten package.json, and redirect stubs for secondary entry
points.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional

from ..config import load_config
from ..domain.artifact import (
    ArtifactKind,
    DECLARATION_EXT,
    METADATA_EXT,
    classify_build_output,
    is_excluded,
)
from ..domain.entry_point import ResolutionState
from ..domain.operation import PackagingSummary, PlacedFile, WriteAction
from ..infra.storage import Storage
from ..params import RunParameters
from .descriptor_service import amend_package_json
from .placeholder_service import DEFAULT_STAMP_KEY, PlaceholderSubstitutor
from .placement_service import ArtifactPlacer, BUNDLES_DIR, strip_amd_module
from .redirect_service import synthesize

logger = logging.getLogger(__name__)


@dataclass
class PackageOptions:
    """Options for a packaging run."""
    dry_run: bool = False
    stamp_key: str = DEFAULT_STAMP_KEY
    descriptor_name: str = "package.json"
    binary_extensions: List[str] = field(default_factory=list)

    @classmethod
    def from_config(cls, config: Dict[str, Any], dry_run: bool = False) -> 'PackageOptions':
        packaging = config.get('packaging', {})
        extensions = packaging.get('binary_extensions', [])
        if isinstance(extensions, str):
            extensions = extensions.split(',')
        return cls(
            dry_run=dry_run,
            stamp_key=packaging.get('stamp_key', DEFAULT_STAMP_KEY),
            descriptor_name=packaging.get('descriptor_name', 'package.json'),
            binary_extensions=[ext.strip().lower() for ext in extensions if ext.strip()],
        )


class PackageService:
    """
    Service for assembling a package directory from build artifacts.

    Every FESM artifact is placed before any bundle index, because bundle
    index relocation depends on the full set of secondary entry points.

    Example:
        service = PackageService()
        params = RunParameters.from_file(Path("params.txt"))

        for progress in service.package(params):
            print(progress)  # "esm2015/core.js"

        result = service.last_result
        print(f"Primary entry point: {result.primary}")
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        storage: Optional[Storage] = None,
    ):
        """
        Initialize PackageService.

        Args:
            config: Configuration dict (loads default if None)
            storage: Filesystem access (host filesystem if None)
        """
        self.config = config if config is not None else load_config()
        self.storage = storage or Storage()
        self.last_result: Optional[PackagingSummary] = None

    def run(
        self,
        params: RunParameters,
        options: Optional[PackageOptions] = None,
    ) -> PackagingSummary:
        """Package without progress reporting and return the summary."""
        generator = self.package(params, options)
        while True:
            try:
                next(generator)
            except StopIteration as stop:
                return stop.value

    def package(
        self,
        params: RunParameters,
        options: Optional[PackageOptions] = None,
    ) -> Generator[str, None, PackagingSummary]:
        """
        Assemble the package described by ``params``.

        Yields progress messages, returns PackagingSummary. Any error
        aborts the run; files already written stay in place.
        """
        options = options or PackageOptions.from_config(self.config)
        state = ResolutionState()
        placer = ArtifactPlacer(params.out, params.src_dir, params.bin_dir, state)
        result = PackagingSummary(output=str(params.out), dry_run=options.dry_run)
        self.last_result = result

        # Read stamp and license up front so a bad stamp fails before any write
        substitutor = self._load_substitutor(params, options)
        license_banner = self.storage.read_text(params.license_file) if params.license_file else ''

        self._create_directory(placer.out, options)

        if params.readme:
            target = placer.place_readme()
            yield self._progress(target, placer.out)
            self._copy(params.readme, target, ArtifactKind.README, options, result)

        fesm_lists = (
            (ArtifactKind.FESM_ES2015, params.fesms2015),
            (ArtifactKind.FESM_ES5, params.fesms5),
        )
        for kind, fesms in fesm_lists:
            for fesm in fesms:
                target, _ = placer.place_fesm(fesm, kind)
                yield self._progress(target, placer.out)
                self._copy(fesm, target, kind, options, result)

        logger.info(
            f"Entry points: primary={state.primary}, secondaries={state.secondaries}"
        )

        self._create_directory(placer.out / BUNDLES_DIR, options)
        for bundle in params.bundles:
            target = placer.place_bundle(bundle)
            yield self._progress(target, placer.out)
            self._copy(bundle, target, ArtifactKind.BUNDLE, options, result)

        build_outputs = []
        for path in self.storage.list_files_recursive(params.bin_dir):
            artifact = classify_build_output(path)
            if artifact is not None:
                build_outputs.append(artifact)
            elif is_excluded(str(path), DECLARATION_EXT) or is_excluded(str(path), METADATA_EXT):
                logger.debug(f"Skipping compiler by-product {path}")
                result.skipped.append(str(path))

        for artifact in build_outputs:
            if artifact.kind is ArtifactKind.BUNDLE_INDEX_METADATA:
                continue
            target = placer.place_build_output(artifact)
            yield self._progress(target, placer.out)
            if artifact.kind is ArtifactKind.METADATA:
                self._copy(artifact.path, target, artifact.kind, options, result)
            else:
                content = strip_amd_module(self.storage.read_text(artifact.path))
                self._write(target, content, artifact.kind, options, result, source=artifact.path)

        for src in params.srcs:
            target = placer.place_source(src)
            yield self._progress(target, placer.out)
            if src.suffix.lower() in options.binary_extensions:
                self._copy(src, target, ArtifactKind.SOURCE, options, result)
                continue
            content = substitutor.apply(self.storage.read_text(src))
            if src.name == options.descriptor_name:
                content = amend_package_json(content, str(src))
            self._write(target, content, ArtifactKind.SOURCE, options, result, source=src)

        for artifact in build_outputs:
            if artifact.kind is not ArtifactKind.BUNDLE_INDEX_METADATA:
                continue
            target = placer.place_build_output(artifact)
            yield self._progress(target, placer.out)
            content = substitutor.apply(self.storage.read_text(artifact.path))
            self._write(target, content, artifact.kind, options, result, source=artifact.path)

        for secondary in state.secondaries:
            redirect = synthesize(secondary, license_banner)
            directory = placer.redirect_directory(secondary)
            for name, content, kind in (
                (redirect.metadata_name, redirect.metadata, ArtifactKind.METADATA),
                (redirect.declaration_name, redirect.declaration, ArtifactKind.DECLARATION),
            ):
                target = directory / name
                yield self._progress(target, placer.out)
                self._write(
                    target, content, kind, options, result,
                    action=WriteAction.SYNTHESIZED, entry_point=secondary,
                )

        result.primary = state.primary
        result.secondaries = list(state.secondaries)
        logger.info(f"Placed {result.total} files in {params.out}")
        return result

    def _load_substitutor(
        self,
        params: RunParameters,
        options: PackageOptions,
    ) -> PlaceholderSubstitutor:
        if not params.stamp_data:
            return PlaceholderSubstitutor()
        text = self.storage.read_text(params.stamp_data)
        return PlaceholderSubstitutor.from_stamp_text(
            text, options.stamp_key, str(params.stamp_data)
        )

    def _progress(self, target: Path, out: Path) -> str:
        try:
            return target.relative_to(out).as_posix()
        except ValueError:
            return str(target)

    def _create_directory(self, path: Path, options: PackageOptions) -> None:
        if not options.dry_run:
            self.storage.create_directory(path)

    def _copy(
        self,
        source: Path,
        target: Path,
        kind: ArtifactKind,
        options: PackageOptions,
        result: PackagingSummary,
    ) -> None:
        """Copy ``source`` byte for byte to ``target``."""
        if options.dry_run:
            action = WriteAction.DRY_RUN
        else:
            self.storage.copy_file(source, target.parent, target.name)
            action = WriteAction.COPIED
        result.add(PlacedFile(
            target=str(target), kind=kind, action=action, source=str(source),
        ))

    def _write(
        self,
        target: Path,
        content: str,
        kind: ArtifactKind,
        options: PackageOptions,
        result: PackagingSummary,
        source: Optional[Path] = None,
        action: WriteAction = WriteAction.WRITTEN,
        entry_point: Optional[str] = None,
    ) -> None:
        """Write transformed text to ``target``."""
        if options.dry_run:
            action = WriteAction.DRY_RUN
        else:
            self.storage.write_text(target, content)
        result.add(PlacedFile(
            target=str(target),
            kind=kind,
            action=action,
            source=str(source) if source else None,
            entry_point=entry_point,
        ))
