"""Datapackager CLI interface.

Commands:
- build: Run the processing scripts and build the data package
- check: Validate a package before building
- init: Create a data package skeleton
- version: Show a package's data version

Global options:
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log output
- --version: Show version and exit
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from datapackager import __version__
from datapackager.errors import DataPackagerError
from datapackager.utils.logging import configure_from_cli, get_logger

app = typer.Typer(
    name="datapackager",
    help="Reproducible data package builder",
    add_completion=False,
    no_args_is_help=True,
)

_logger = get_logger()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"datapackager {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output with timestamps",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress info messages (warnings and errors only)",
        ),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option(
            "--ci",
            help="Enable CI mode with JSON output",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Datapackager - reproducible data package builder.

    Runs processing scripts, fingerprints the data objects they create,
    tracks a data version, and keeps documentation stubs up to date.
    """
    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)


# =============================================================================
# build command
# =============================================================================


@app.command()
def build(
    path: Annotated[
        Path,
        typer.Argument(
            help="Package root",
            exists=True,
            file_okay=False,
        ),
    ] = Path("."),
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file (default: <package>/datapackager.yml)",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    strict_objects: Annotated[
        bool,
        typer.Option(
            "--strict-objects",
            help="Fail if a listed object is never created (overrides config)",
        ),
    ] = False,
    lenient_version: Annotated[
        bool,
        typer.Option(
            "--lenient-version",
            help="Keep a hand-bumped data_version even if data changed (overrides config)",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Run the processing scripts and report the decision without writing files",
        ),
    ] = False,
) -> None:
    """Build a data package.

    Exit codes:
        0: Package built (or dry run completed)
        1: Build failed, nothing was written
    """
    from datapackager.config import load_config
    from datapackager.models import DataPackage
    from datapackager.pipeline import BuildOptions, BuildPipeline

    package = DataPackage.from_path(path)
    _logger.info(f"Building data package: {package.path}")

    try:
        build_config = load_config(config_path=config, package_path=package.path)
        pipeline = BuildPipeline(package, build_config)
        result = pipeline.run(
            BuildOptions(
                strict_objects=True if strict_objects else None,
                strict_version=False if lenient_version else None,
                dry_run=dry_run,
            )
        )
    except DataPackagerError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    _logger.info(
        f"{result.decision.kind.value}: {result.package_name} data version {result.version}",
        extra={"extra_data": result.to_dict()},
    )
    if dry_run:
        typer.echo(f"Dry run: would write {result.package_name} at data version {result.version}")
    else:
        typer.echo(f"📦 {result.package_name} built at data version {result.version}")
    raise typer.Exit(0)


# =============================================================================
# check command
# =============================================================================


@app.command()
def check(
    path: Annotated[
        Path,
        typer.Argument(
            help="Package root",
            file_okay=False,
        ),
    ] = Path("."),
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            dir_okay=False,
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results as JSON",
        ),
    ] = False,
) -> None:
    """Validate a package before building.

    Exit codes:
        0: All checks passed
        1: One or more required checks failed
        2: Only optional checks failed (warnings)
    """
    from datapackager.utils.preflight import PreflightChecker

    result = PreflightChecker().check_all(path, config_path=config)

    if json_output:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        typer.echo("\n🔍 Preflight Check Results\n")

        for check_result in result.checks:
            status = "✅" if check_result.passed else ("❌" if check_result.required else "⚠️ ")
            detail = f" ({check_result.detail})" if check_result.detail else ""
            typer.echo(f"  {status} {check_result.name}{detail}")
            if not check_result.passed:
                typer.echo(f"     └─ {check_result.message}")

        typer.echo()

    if result.errors:
        if not json_output:
            typer.echo("❌ Preflight check FAILED")
            for error in result.errors:
                typer.echo(f"   • {error}")
        raise typer.Exit(1)
    elif result.warnings:
        if not json_output:
            typer.echo("⚠️  Preflight check passed with WARNINGS")
            for warning in result.warnings:
                typer.echo(f"   • {warning}")
        raise typer.Exit(2)
    else:
        if not json_output:
            typer.echo("✅ All preflight checks passed")
        raise typer.Exit(0)


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    name: Annotated[
        str,
        typer.Argument(help="Package name"),
    ],
    path: Annotated[
        Path,
        typer.Option(
            "--path",
            "-p",
            help="Directory to create the package in",
            file_okay=False,
        ),
    ] = Path("."),
    objects: Annotated[
        list[str] | None,
        typer.Option(
            "--object",
            "-o",
            help="Name of a data object created by the code files (repeatable)",
        ),
    ] = None,
    code_files: Annotated[
        list[Path] | None,
        typer.Option(
            "--code-file",
            "-f",
            help="Processing script to copy into data-raw/ (repeatable)",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Recreate an existing package skeleton",
        ),
    ] = False,
) -> None:
    """Create a data package skeleton."""
    from datapackager.skeleton import create_skeleton

    try:
        package = create_skeleton(
            name,
            path=path,
            objects=objects,
            code_files=code_files,
            force=force,
        )
    except DataPackagerError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    typer.echo(f"\n✅ Data package skeleton created: {package.path}")
    typer.echo(f"   Config: {package.config_file}")
    typer.echo(f"   Scripts: {package.raw_data_dir}/")
    raise typer.Exit(0)


# =============================================================================
# version command
# =============================================================================


@app.command("version")
def data_version(
    path: Annotated[
        Path,
        typer.Argument(
            help="Package root",
            exists=True,
            file_okay=False,
        ),
    ] = Path("."),
) -> None:
    """Show a package's data version."""
    from datapackager.manifest import PackageManifest
    from datapackager.models import DataPackage

    package = DataPackage.from_path(path)
    try:
        manifest = PackageManifest.load(package.manifest_file)
    except DataPackagerError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    typer.echo(str(manifest.get_version()))


if __name__ == "__main__":
    app()
