"""Visual inspector CLI entry point."""
from __future__ import annotations

import json
import logging
import sys

import click

from visual_inspector import __version__
from visual_inspector.client import DEFAULT_SERVER, InspectorClient, InspectorClientError


def _client(ctx: click.Context) -> InspectorClient:
    return InspectorClient(ctx.obj["server"])


def _echo_json(data: object) -> None:
    click.echo(json.dumps(data, indent=2))


def _call(func, *args, **kwargs):
    try:
        return func(*args, **kwargs)
    except InspectorClientError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.version_option(version=__version__, prog_name="visual-inspector")
@click.option(
    "--server",
    envvar="VISUAL_INSPECTOR_URL",
    default=DEFAULT_SERVER,
    show_default=True,
    help="Base URL of a running inspector",
)
@click.pass_context
def cli(ctx: click.Context, server: str) -> None:
    """Visual inspector: select elements in a live HTML view and edit their CSS."""
    ctx.ensure_object(dict)
    ctx.obj["server"] = server


@cli.command()
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", "http_port", default=None, type=int, help="HTTP port (0 picks a free one)")
@click.option("--ws-port", default=None, type=int, help="View channel port (default: OS-assigned)")
@click.option("--watch/--no-watch", default=None, help="Hot reload inspected files")
@click.option("--browser/--no-browser", default=None, help="Open the viewer on inspect")
@click.option("--log-level", default=None, help="Logging level")
@click.option("--selection-timeout", default=None, type=float, help="Seconds to wait for a selection")
def serve(
    host: str | None,
    http_port: int | None,
    ws_port: int | None,
    watch: bool | None,
    browser: bool | None,
    log_level: str | None,
    selection_timeout: float | None,
) -> None:
    """Start the inspector service."""
    from dataclasses import replace

    from visual_inspector.config import InspectorConfig
    from visual_inspector.runner import Inspector

    overrides = {
        "host": host,
        "http_port": http_port,
        "ws_port": ws_port,
        "watch": watch,
        "open_browser": browser,
        "log_level": log_level,
        "selection_timeout": selection_timeout,
    }
    config = replace(
        InspectorConfig.from_env(),
        **{k: v for k, v in overrides.items() if v is not None},
    )
    logging.basicConfig(
        level=config.log_level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    inspector = Inspector(config)
    http_port_bound, ws_port_bound = inspector.start()
    click.echo(f"Visual inspector on http://{config.host}:{http_port_bound} (views: {ws_port_bound})")
    try:
        inspector.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        inspector.stop()


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option("--watch/--no-watch", default=True, help="Hot reload on file changes")
@click.pass_context
def inspect(ctx: click.Context, file_path: str, watch: bool) -> None:
    """Open FILE_PATH in the viewer."""
    with _client(ctx) as client:
        data = _call(client.inspect, click.format_filename(file_path), watch=watch)
    click.echo(f"Viewer opened for: {data['file']}")
    click.echo(f"URL: {data['url']}")
    click.echo(f"Hot reload: {'on' if data['watch'] else 'off'}")


@cli.command()
@click.option("--wait", is_flag=True, help="Wait for the user to select an element")
@click.option("--timeout", default=30000, type=int, show_default=True, help="Wait timeout in ms")
@click.pass_context
def selection(ctx: click.Context, wait: bool, timeout: int) -> None:
    """Show the currently selected element."""
    with _client(ctx) as client:
        element = _call(client.selection, wait=wait, timeout_ms=timeout)
    if element is None:
        click.echo("No element selected. Click an element in the viewer.")
        return
    _echo_json(element)


@cli.command()
@click.argument("selector")
@click.pass_context
def highlight(ctx: click.Context, selector: str) -> None:
    """Highlight SELECTOR in the viewer."""
    with _client(ctx) as client:
        _call(client.highlight, selector)
    click.echo(f"Highlighted: {selector}")


@cli.command()
@click.argument("selector")
@click.argument("property")
@click.argument("value")
@click.pass_context
def apply(ctx: click.Context, selector: str, property: str, value: str) -> None:
    """Set PROPERTY to VALUE on SELECTOR in the inspected document."""
    with _client(ctx) as client:
        data = _call(client.apply_css, selector, property, value)
    click.echo(data["message"])
    click.echo(data["rule"])


@cli.command()
@click.argument("selector")
@click.pass_context
def styles(ctx: click.Context, selector: str) -> None:
    """Show the declarations that apply to SELECTOR."""
    with _client(ctx) as client:
        _echo_json(_call(client.styles, selector))


@cli.command()
@click.pass_context
def close(ctx: click.Context) -> None:
    """Stop watching and unload the inspected document."""
    with _client(ctx) as client:
        _call(client.close_inspector)
    click.echo("Inspector closed. Close the browser tab manually.")
