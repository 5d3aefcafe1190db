"""Typer CLI entrypoint for mapgate."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer

from apps.cli.io import OutputPaths, build_output_paths
from core.cache.gate import CacheGate
from core.cache.paths import PathResolver
from core.config.loader import load_config
from core.config.models import AppConfig
from core.hashing.digest import hash_all
from core.mapping.work_item import GenerateMappingsItem
from core.orchestrator.runner import run_cached
from core.utils.errors import ConfigError, HashError, MappingParseError

app = typer.Typer(help="Cached rename-table generation CLI", rich_markup_mode=None)

InSrgOption = Annotated[Path, typer.Option(..., exists=True, dir_okay=False, file_okay=True)]
CsvOption = Annotated[Path | None, typer.Option(exists=True, dir_okay=False, file_okay=True)]
OutDirOption = Annotated[Path, typer.Option(...)]
ConfigOption = Annotated[Path | None, typer.Option(help="YAML configuration file.")]
VerboseOption = Annotated[
    bool, typer.Option("--verbose", help="Log structured gate and transform events to stderr.")
]


@app.callback()
def cli_callback() -> None:
    """CLI root callback to keep subcommands explicit."""


@app.command("gensrg")
def gensrg_command(
    in_srg: InSrgOption,
    out_dir: OutDirOption,
    fields_csv: CsvOption = None,
    methods_csv: CsvOption = None,
    config: ConfigOption = None,
    no_cache: Annotated[
        bool, typer.Option("--no-cache", help="Always regenerate, ignoring fingerprints.")
    ] = False,
    verbose: VerboseOption = False,
) -> None:
    """Derive obf->final, final->intermediate and final->obf tables from one mapping table."""

    _configure_logging(verbose)
    app_config = _load_config_or_exit(config)
    cache_config = app_config.cache
    if no_cache:
        cache_config = cache_config.model_copy(update={"enabled": False})

    paths = build_output_paths(out_dir)
    item = _build_item(in_srg, fields_csv, methods_csv, paths, app_config)
    resolver = PathResolver()
    gate = CacheGate(resolver)

    try:
        outcome = run_cached(
            item,
            lambda: item.execute(resolver),
            gate=gate,
            config=cache_config,
        )
    except MappingParseError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=2) from exc
    except OSError as exc:
        typer.echo(f"ERROR: cannot read or write mapping files: {exc}")
        raise typer.Exit(code=1) from exc

    if not outcome.executed:
        typer.echo("SKIPPED: outputs are up to date")
        return

    summary = outcome.result
    typer.echo(
        "DONE: "
        f"packages={summary.packages} classes={summary.classes} "
        f"fields={summary.fields} methods={summary.methods} "
        f"renamed_fields={summary.renamed_fields} renamed_methods={summary.renamed_methods}"
    )


@app.command("check")
def check_command(
    in_srg: InSrgOption,
    out_dir: OutDirOption,
    fields_csv: CsvOption = None,
    methods_csv: CsvOption = None,
    config: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Report whether gensrg would run. Stale outputs are removed like a real run would."""

    _configure_logging(verbose)
    app_config = _load_config_or_exit(config)
    item = _build_item(in_srg, fields_csv, methods_csv, build_output_paths(out_dir), app_config)
    decision = CacheGate(PathResolver()).check(item, app_config.cache)

    state = "RUN" if decision.should_run else "SKIP"
    suffix = f" output={decision.output}" if decision.output else ""
    typer.echo(f"{state}: reason={decision.reason}{suffix}")


@app.command("hash")
def hash_command(
    path: Annotated[Path, typer.Argument(exists=True)],
    config: ConfigOption = None,
) -> None:
    """Print the digest tokens of a file or of every file in a directory."""

    app_config = _load_config_or_exit(config)
    try:
        tokens = hash_all(path, app_config.cache.hash_algorithm)
    except HashError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=1) from exc
    for token in tokens:
        typer.echo(token)


def _build_item(
    in_srg: Path,
    fields_csv: Path | None,
    methods_csv: Path | None,
    paths: OutputPaths,
    app_config: AppConfig,
) -> GenerateMappingsItem:
    return GenerateMappingsItem(
        in_srg=in_srg,
        obf_to_final=paths.obf_to_final,
        final_to_intermediate=paths.final_to_intermediate,
        final_to_obf=paths.final_to_obf,
        fields_csv=fields_csv,
        methods_csv=methods_csv,
        mapping_config=app_config.mapping,
    )


def _load_config_or_exit(path: Path | None) -> AppConfig:
    try:
        return load_config(path)
    except ConfigError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=1) from exc


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(level=logging.INFO, format="%(name)s %(levelname)s %(message)s")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
