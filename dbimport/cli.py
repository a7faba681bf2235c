#!/usr/bin/env python3
"""
dbimport – replay .sql dump files against a MariaDB / MySQL server.

• ``dbimport import PATH...``  import files and directories (recursively)
• ``dbimport files PATH...``   list the files an import would run, in order
• ``dbimport split FILE``      print the statements of one dump, nothing executed

Connection settings come from ``dbimport.config.yml`` (see ``-c``/``-e``).
"""
from __future__ import annotations

import logging
import pathlib
import sys

import click

from dbimport import __version__
from dbimport.config import ConfigError, Environment, load
from dbimport.constants import SUPPORTED_ENCODINGS
from dbimport.discovery import find_sql_files
from dbimport.errors import DumpImportError
from dbimport.importer import Importer
from dbimport.parser import ChunkFeeder, StatementSplitter
from dbimport.stream import open_stream


def _load_env(ctx, _param, value) -> Environment:
    try:
        return load(ctx.obj["config_path"], value)
    except ConfigError as exc:
        click.echo(f"Config error: {exc}", err=True)
        sys.exit(1)


def _fail(exc: Exception) -> None:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


@click.group()
@click.option(
    "-c", "--config", "config_path", type=click.Path(), help="env config YAML"
)
@click.option("-v", "--verbose", count=True, help="-v for progress, -vv for every statement")
@click.pass_context
def main(ctx, config_path, verbose):
    level = logging.WARNING if not verbose else logging.INFO if verbose == 1 else logging.DEBUG
    logging.basicConfig(level=level, format="[dbimport] %(levelname)s %(message)s")
    ctx.obj = {"config_path": pathlib.Path(config_path) if config_path else None}


@main.command()
def version():
    click.echo(__version__)


@main.command("import")
@click.option("-e", "--env", callback=_load_env, expose_value=True)
@click.option("-d", "--database", help="database to USE before importing")
@click.option("--encoding", type=click.Choice(SUPPORTED_ENCODINGS))
@click.argument("paths", nargs=-1, required=True, type=click.Path())
def import_cmd(env, database, encoding, paths):
    importer = Importer(env)
    if encoding:
        importer.set_encoding(encoding)
    if database:
        importer.use(database)

    try:
        batch = importer.import_(*paths)
    except DumpImportError as exc:
        for p in importer.get_imported():
            click.echo(f"  OK       {p}")
        importer.disconnect(graceful=False)
        _fail(exc)
        return

    for p in batch.imported:
        click.echo(f"  OK       {p}")
    click.echo(f"✅  Imported {len(batch.imported)} file(s).")


@main.command("files")
@click.argument("paths", nargs=-1, required=True, type=click.Path())
def files_cmd(paths):
    try:
        found = find_sql_files(*paths)
    except DumpImportError as exc:
        _fail(exc)
        return
    for p in found:
        click.echo(str(p))
    if not found:
        click.echo("No .sql files found.", err=True)


@main.command("split")
@click.option(
    "--encoding", type=click.Choice(SUPPORTED_ENCODINGS), default="utf8", show_default=True
)
@click.option("--delimiter", default=";", show_default=True, help="initial delimiter")
@click.argument("path", type=click.Path(dir_okay=False))
def split_cmd(encoding, delimiter, path):
    splitter = StatementSplitter(delimiter)
    feeder = ChunkFeeder(splitter)
    splitter.on_statement(lambda stmt: click.echo(f"{stmt}\n{splitter.delimiter}"))
    try:
        for chunk in open_stream(path, encoding):
            feeder.enqueue(chunk)
    except DumpImportError as exc:
        _fail(exc)
        return

    if splitter.residual.strip():
        click.echo(
            f"-- {len(splitter.residual.strip())} trailing characters without a delimiter",
            err=True,
        )


if __name__ == "__main__":
    main()
