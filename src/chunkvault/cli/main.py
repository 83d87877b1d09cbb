"""
Main CLI entry point for Chunkvault.
"""

import asyncio
import json

import click

from chunkvault.core import ChunkStorageError, Config
from chunkvault.core.contracts import LogLevel
from chunkvault.storage.backends import JsonFileStore
from chunkvault.vault import ChunkedStorage


def load_config(config_path, compress: bool = False) -> Config:
    """Build a Config from an optional JSON file of field overrides."""
    overrides = {}
    if config_path:
        with open(config_path, "r") as f:
            overrides = json.load(f)
        if not isinstance(overrides, dict):
            raise click.ClickException(f"Config file {config_path} must contain a JSON object")
    if compress:
        overrides["compression"] = "zstd"
    try:
        return Config(**overrides)
    except (TypeError, ValueError) as e:
        raise click.ClickException(f"Invalid config: {e}")


def echo_log(message: str, level: LogLevel):
    """Log callback: progress goes to stderr so stdout carries only values."""
    color = {"success": "green", "error": "red"}.get(level)
    click.secho(message, fg=color, err=True)


def echo_error(message: str):
    click.secho(message, fg="red", err=True)


def open_storage(ctx, names=None) -> ChunkedStorage:
    config = ctx.obj["config"]
    store = JsonFileStore(ctx.obj["store_path"], config)
    return ChunkedStorage(store, config, names=names)


@click.group()
@click.option("--store", "store_path", required=True, type=click.Path(dir_okay=False), help="JSON file acting as the host store")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="JSON file of Config overrides")
@click.option("--compress", is_flag=True, help="Compress values with zstd before chunking")
@click.pass_context
def cli(ctx, store_path, config_path, compress):
    """Chunkvault - chunked secret storage for size-limited key-value stores."""
    ctx.ensure_object(dict)
    ctx.obj["store_path"] = store_path
    ctx.obj["config"] = load_config(config_path, compress)


@cli.command()
@click.argument("name")
@click.argument("value", required=False)
@click.option("--file", "value_file", type=click.File("r"), help="Read the value from a file ('-' for stdin)")
@click.pass_context
def put(ctx, name, value, value_file):
    """Store VALUE under NAME."""
    if value_file is not None:
        value = value_file.read()
    if value is None:
        raise click.UsageError("Provide VALUE or --file")
    storage = open_storage(ctx)
    try:
        asyncio.run(storage.store_with_chunking(name, value, echo_log, echo_error))
    except ChunkStorageError as e:
        raise click.ClickException(str(e))


@cli.command()
@click.argument("name")
@click.pass_context
def get(ctx, name):
    """Print the value stored under NAME."""
    storage = open_storage(ctx)
    errors = []

    def on_error(message):
        errors.append(message)
        echo_error(message)

    try:
        value = asyncio.run(storage.retrieve_chunked_data(name, echo_log, on_error))
    except ChunkStorageError as e:
        raise click.ClickException(str(e))
    if value is None:
        # Absent exits 2, corrupt exits 1
        ctx.exit(1 if errors else 2)
    click.echo(value, nl=False)


@cli.command()
@click.argument("name")
@click.option("--format", "output_format", default="text", type=click.Choice(["text", "json"]))
@click.pass_context
def inspect(ctx, name, output_format):
    """Show metadata and chunk status of NAME."""
    storage = open_storage(ctx)
    try:
        report = asyncio.run(storage.inspect(name))
    except ChunkStorageError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    click.echo(f"Entry: {report.name}")
    click.echo(f"State: {report.state}")
    if report.metadata is not None:
        meta = report.metadata
        click.echo(f"Chunks: {meta.total_chunks} ({len(report.present_chunks)} present)")
        click.echo(f"Length: {meta.length}")
        click.echo(f"Encoding: {meta.encoding}")
        click.echo(f"Checksum: {meta.checksum}")
    for error in report.errors:
        click.echo(f"  ! {error}")


@cli.command()
@click.option("--name", "names", multiple=True, help="Entry to erase (repeatable, defaults to the configured known names)")
@click.pass_context
def clear(ctx, names):
    """Erase all chunks and metadata of the known entries."""
    storage = open_storage(ctx, names=names or None)
    success = asyncio.run(storage.clear_chunked_storage(echo_log, echo_error))
    if not success:
        raise click.ClickException("Some keys could not be removed")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
