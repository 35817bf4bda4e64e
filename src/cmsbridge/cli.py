"""CLI interface for cmsbridge."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from cmsbridge.config import BridgeConfig, load_config, merge_cli_overrides
from cmsbridge.deploy import Deployment
from cmsbridge.shared.errors import BridgeError, RegistryError
from cmsbridge.site import Payload, SiteService
from cmsbridge.site.builder import build_site

app = typer.Typer(
    name="cmsbridge",
    help="Sync headless-CMS entries into a Hugo site and publish it to S3.",
    no_args_is_help=True,
)
entry_app = typer.Typer(help="Create, update and remove content entries.", no_args_is_help=True)
app.add_typer(entry_app, name="entry")

console = Console()
err_console = Console(stderr=True)


class _State:
    config: BridgeConfig | None = None


_state = _State()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from cmsbridge import __version__

        console.print(f"cmsbridge {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a .cmsbridge.toml file."),
    ] = None,
    root: Annotated[
        Optional[Path],
        typer.Option("--root", help="Hugo site root (overrides the config)."),
    ] = None,
    build_dir: Annotated[
        Optional[Path],
        typer.Option("--build-dir", help="Build output directory (default <root>/public)."),
    ] = None,
    bucket: Annotated[
        Optional[str],
        typer.Option("--bucket", help="S3 bucket to deploy to."),
    ] = None,
    prefix: Annotated[
        Optional[str],
        typer.Option("--prefix", help="Key prefix for uploaded objects."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """cmsbridge - keep a Hugo site in step with a headless CMS."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        config = load_config(config_path)
        _state.config = merge_cli_overrides(
            config, root_dir=root, build_dir=build_dir, bucket=bucket, prefix=prefix
        )
    except BridgeError as exc:
        raise _fail(exc)


def _config() -> BridgeConfig:
    if _state.config is None:
        _state.config = load_config()
    return _state.config


def _fail(exc: BridgeError) -> typer.Exit:
    err_console.print(f"[red]Error ({exc.kind}):[/red] {exc}")
    if isinstance(exc, RegistryError) and exc.output_path is not None:
        err_console.print(f"[yellow]File left on disk:[/yellow] {exc.output_path}")
    return typer.Exit(1)


def _read_payload(source: str) -> Payload:
    """Load a payload from a JSON file, or stdin when ``source`` is '-'."""
    try:
        if source == "-":
            raw = json.load(sys.stdin)
        else:
            raw = json.loads(Path(source).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        err_console.print(f"[red]Error:[/red] cannot read payload {source}: {exc}")
        raise typer.Exit(1)
    return Payload.parse(raw)


PayloadArg = Annotated[
    str,
    typer.Argument(help="JSON payload file with 'metadata' and 'entry', or '-' for stdin."),
]


@entry_app.command("create")
def entry_create(payload: PayloadArg) -> None:
    """Render a new entry and register it."""
    try:
        data = _read_payload(payload)
        path = SiteService(_config().site).create_entry(data)
    except BridgeError as exc:
        raise _fail(exc)
    console.print(f"[green]Created[/green] {path}")


@entry_app.command("update")
def entry_update(payload: PayloadArg) -> None:
    """Re-render a registered entry, renaming it if its title changed."""
    try:
        data = _read_payload(payload)
        path = SiteService(_config().site).update_entry(data)
    except BridgeError as exc:
        raise _fail(exc)
    console.print(f"[green]Updated[/green] {path}")


@entry_app.command("remove")
def entry_remove(payload: PayloadArg) -> None:
    """Delete an entry's file and unregister it."""
    try:
        data = _read_payload(payload)
        path = SiteService(_config().site).remove_entry(data)
    except BridgeError as exc:
        raise _fail(exc)
    console.print(f"[green]Removed[/green] {path}")


@entry_app.command("list")
def entry_list() -> None:
    """Show every registered entry."""
    try:
        entries = SiteService(_config().site).registry.entries()
    except BridgeError as exc:
        raise _fail(exc)

    if not entries:
        console.print("[yellow]No entries registered.[/yellow]")
        return

    table = Table(title="Registered entries")
    table.add_column("Entry")
    table.add_column("Path")
    for entry_id in sorted(entries):
        table.add_row(entry_id, str(entries[entry_id]))
    console.print(table)


NoCacheOpt = Annotated[
    bool,
    typer.Option("--no-cache", help="Pass --ignoreCache to the site generator."),
]


@app.command()
def build(no_cache: NoCacheOpt = False) -> None:
    """Build the site with Hugo."""
    site = _config().site
    try:
        build_site(site.root, use_cache=not no_cache, command=site.build_command)
    except BridgeError as exc:
        raise _fail(exc)
    console.print(f"[green]Built[/green] {site.public_path}")


@app.command()
def deploy() -> None:
    """Upload the current build output to S3."""
    config = _config()
    try:
        result = Deployment(config.site, config.deployment).deploy()
    except BridgeError as exc:
        raise _fail(exc)
    console.print(
        f"[green]Uploaded {result.uploaded} file(s)[/green] to s3://{result.bucket}"
    )


@app.command()
def publish(no_cache: NoCacheOpt = False) -> None:
    """Build the site, then upload it to S3."""
    config = _config()
    try:
        build_site(
            config.site.root, use_cache=not no_cache, command=config.site.build_command
        )
        result = Deployment(config.site, config.deployment).deploy()
    except BridgeError as exc:
        raise _fail(exc)
    console.print(
        f"[green]Published {result.uploaded} file(s)[/green] to s3://{result.bucket}"
    )
