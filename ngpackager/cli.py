"""
Command line interface for ngpackager.

Commands:
    package      Assemble a package directory from build artifacts
    layout       Show entry point roles and FESM destinations
    config show  Print the effective configuration

Every command reports a CommandError on stderr and exits with its code.
"""

import click
import json
import sys
from pathlib import Path
from typing import Optional

from ngpackager.config import configure_logging, load_config
from ngpackager.domain.entry_point import ResolutionState
from ngpackager.domain.artifact import ArtifactKind
from ngpackager.exit_codes import CommandError, USAGE_ERROR
from ngpackager.naming import entry_point_name_of
from ngpackager.output import emit, emit_error, emit_summary
from ngpackager.params import RunParameters
from ngpackager.services.package_service import PackageOptions, PackageService
from ngpackager.services.placement_service import ArtifactPlacer


@click.group()
@click.version_option(package_name='ngpackager')
def cli():
    """ngpackager - Lay out compiled build artifacts as an npm package.

    Places FESM and UMD bundles, declarations, metadata and sources in the
    directory structure package consumers expect, and writes redirect stubs
    for secondary entry points.
    """
    pass


def _report_error(error: CommandError, output_json: bool) -> None:
    if output_json:
        emit_error(str(error), type=error.error_type)
    else:
        print(f"Error: {error}", file=sys.stderr)


def _optional(value: Optional[str]) -> Optional[Path]:
    return Path(value) if value else None


@cli.command('package')
@click.argument('params_file', required=False, type=click.Path(exists=True, dir_okay=False))
# Inputs (used when no parameter file is given)
@click.option('--out', help='Output package directory')
@click.option('--src-dir', help='Source root that --src paths are relative to')
@click.option('--bin-dir', help='Build output root holding declarations and metadata')
@click.option('--readme', help='README to copy to the package root')
@click.option('--fesm2015', multiple=True, help='ES2015 FESM file (repeatable, in order)')
@click.option('--fesm5', multiple=True, help='ES5 FESM file (repeatable, in order)')
@click.option('--bundle', multiple=True, help='UMD bundle (repeatable)')
@click.option('--src', multiple=True, help='Source file to copy (repeatable)')
@click.option('--stamp-data', help='Workspace status file holding the SCM version')
@click.option('--license', 'license_file', help='License banner for redirect typings')
# Output options
@click.option('--json', 'output_json', is_flag=True, help='Output placed files as JSONL')
@click.option('--pretty', is_flag=True, help='Display progress with rich formatting')
@click.option('--dry-run', is_flag=True, help='Compute the layout without writing files')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def package_handler(
    params_file: Optional[str],
    out: Optional[str],
    src_dir: Optional[str],
    bin_dir: Optional[str],
    readme: Optional[str],
    fesm2015: tuple,
    fesm5: tuple,
    bundle: tuple,
    src: tuple,
    stamp_data: Optional[str],
    license_file: Optional[str],
    output_json: bool,
    pretty: bool,
    dry_run: bool,
    debug: bool,
):
    """
    Assemble a package directory from build artifacts.

    Inputs come either from PARAMS_FILE, the newline-delimited parameter
    file written by the build rule, or from the options below.

    Examples:

        # Package from a parameter file
        ngpackager package bazel-out/core_package.params

        # Package from explicit options
        ngpackager package --out dist/core --src-dir packages/core \\
            --bin-dir bin/packages/core \\
            --fesm2015 bin/core.js --fesm2015 bin/core__testing.js \\
            --src packages/core/package.json

        # Preview the layout
        ngpackager package params.txt --dry-run --pretty
    """
    try:
        config = load_config()
        configure_logging(config, debug)

        if params_file:
            params = RunParameters.from_file(Path(params_file))
        else:
            missing = [flag for flag, value in
                       (('--out', out), ('--src-dir', src_dir), ('--bin-dir', bin_dir))
                       if not value]
            if missing:
                raise CommandError(
                    f"Missing {', '.join(missing)} (or give a parameter file)",
                    USAGE_ERROR,
                )
            params = RunParameters(
                out=Path(out),
                src_dir=Path(src_dir),
                bin_dir=Path(bin_dir),
                readme=_optional(readme),
                fesms2015=[Path(p) for p in fesm2015],
                fesms5=[Path(p) for p in fesm5],
                bundles=[Path(p) for p in bundle],
                srcs=[Path(p) for p in src],
                stamp_data=_optional(stamp_data),
                license_file=_optional(license_file),
            )

        options = PackageOptions.from_config(config, dry_run=dry_run)
        service = PackageService(config=config)

        if pretty:
            _package_pretty(service, params, options)
        elif output_json:
            _package_json(service, params, options)
        else:
            _package_simple(service, params, options)

    except CommandError as e:
        _report_error(e, output_json)
        sys.exit(e.exit_code)


def _package_simple(service: PackageService, params: RunParameters, options: PackageOptions):
    """Simple text output for package."""
    mode = "[dry run] " if options.dry_run else ""

    for progress in service.package(params, options):
        print(f"{mode}{progress}", file=sys.stderr)

    result = service.last_result
    if result:
        print(f"\n{mode}Package complete:", file=sys.stderr)
        print(f"  Primary entry point: {result.primary or '-'}", file=sys.stderr)
        if result.secondaries:
            print(f"  Secondary entry points: {', '.join(result.secondaries)}", file=sys.stderr)
        print(f"  Files placed: {result.total}", file=sys.stderr)
        if not options.dry_run:
            print(f"\nOutput: {params.out}", file=sys.stderr)


def _package_json(service: PackageService, params: RunParameters, options: PackageOptions):
    """JSONL output for package."""
    for _ in service.package(params, options):
        pass

    result = service.last_result
    if result:
        emit(result.files)
        emit_summary(result)


def _package_pretty(service: PackageService, params: RunParameters, options: PackageOptions):
    """Rich formatted output for package."""
    from rich.console import Console
    from rich.progress import Progress, SpinnerColumn, TextColumn

    console = Console(stderr=True)
    mode = "[bold yellow]DRY RUN[/bold yellow] " if options.dry_run else ""
    console.print(f"\n{mode}[bold]Packaging to:[/bold] {params.out}")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Starting...", total=None)
        for message in service.package(params, options):
            progress.update(task, description=message)

    result = service.last_result
    if result:
        emit_summary(result, pretty=True)
        if not options.dry_run:
            console.print(f"\n[bold green]✓[/bold green] Package complete: {params.out}")


@cli.command('layout')
@click.argument('fesm_files', nargs=-1, required=True)
@click.option('--out', default='.', show_default=True, help='Output directory to resolve against')
@click.option('--pretty', is_flag=True, help='Display as a table')
def layout_handler(fesm_files: tuple, out: str, pretty: bool):
    """
    Show entry point roles and FESM destinations without touching the disk.

    FESM_FILES are given in build order; the first one is the primary
    entry point.

    Example:

        ngpackager layout core.js core__testing.js --pretty
    """
    state = ResolutionState()
    placer = ArtifactPlacer(Path(out), Path('.'), Path('.'), state)

    rows = []
    for fesm in fesm_files:
        es2015, role = placer.place_fesm(Path(fesm), ArtifactKind.FESM_ES2015)
        es5, _ = placer.place_fesm(Path(fesm), ArtifactKind.FESM_ES5)
        rows.append({
            'file': fesm,
            'entry_point': entry_point_name_of(fesm),
            'role': role.value,
            'esm2015': es2015.as_posix(),
            'esm5': es5.as_posix(),
        })

    emit(rows, pretty=pretty, columns=['file', 'entry_point', 'role', 'esm2015', 'esm5'])
    if not pretty:
        print(json.dumps({'type': 'resolution', **state.to_dict()}), flush=True)


@cli.group('config')
def config_cmd():
    """Configuration commands."""
    pass


@config_cmd.command('show')
def config_show():
    """Print the effective configuration as JSON."""
    try:
        config = load_config()
    except CommandError as e:
        _report_error(e, output_json=False)
        sys.exit(e.exit_code)
    print(json.dumps(config, indent=2))


def main():
    cli()

if __name__ == "__main__":
    main()
