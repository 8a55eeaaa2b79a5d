"""Command line entry point"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from .. import __version__
from ..common.exceptions import NestoreException
from ..common.options import JSON_IMPLS, JsonBackendOptions, SqlExportOptions
from ..core.storage import Database
from .shell import RootShell

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')


@dataclass
class CliSettings:
    data_dir: Path
    backend_options: JsonBackendOptions


def configure_logging(level: str) -> None:
    """Send library logs to stderr through rich."""
    logging.basicConfig(
        level=level.upper(),
        format='%(message)s',
        datefmt='[%X]',
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name='nestore')
@click.option('--data-dir', type=click.Path(file_okay=False, path_type=Path), default='.',
              envvar='NESTORE_DATA_DIR', show_default=True,
              help='Directory holding <database>.json and <database>.sql files')
@click.option('--json-impl', type=click.Choice(JSON_IMPLS), default='json', envvar='NESTORE_JSON_IMPL',
              show_default=True, help='JSON library used for save/load')
@click.option('--indent', type=int, default=None, help='Indent saved JSON files')
@click.option('--log-level', type=click.Choice(LOG_LEVELS, case_sensitive=False), default='WARNING',
              envvar='NESTORE_LOG_LEVEL', show_default=True)
@click.pass_context
def cli(ctx: click.Context, data_dir: Path, json_impl: str, indent: Optional[int], log_level: str) -> None:
    """Nestore - nested interactive tabular store

    Run without arguments to enter the interactive shell.
    """
    configure_logging(log_level)
    ctx.obj = CliSettings(
        data_dir=data_dir,
        backend_options=JsonBackendOptions(indent=indent, impl=json_impl),  # type: ignore[arg-type]
    )
    if ctx.invoked_subcommand is None:
        ctx.invoke(shell)


@cli.command()
@click.pass_obj
def shell(settings: CliSettings) -> None:
    """Start the interactive shell."""
    console = Console()
    try:
        RootShell(console, data_dir=settings.data_dir, backend_options=settings.backend_options).run()
    except NestoreException as e:
        raise click.ClickException(e.message) from e


@cli.command()
@click.argument('name')
@click.option('--no-drop', is_flag=True, help='Do not append DROP DATABASE to the script')
@click.pass_obj
def export(settings: CliSettings, name: str, no_drop: bool) -> None:
    """Write <name>.sql from the saved database <name>.json."""
    try:
        database = Database.load(name, settings.data_dir, settings.backend_options)
        path = database.export_sql(SqlExportOptions(include_drop=not no_drop))
    except NestoreException as e:
        raise click.ClickException(e.message) from e
    click.echo(f"Database exported to {path}")


def main() -> None:
    cli()
