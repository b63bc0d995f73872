"""Command-line entry point for kubeview."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from .actions.catalog import register_default_actions
from .actions.registry import BindingRegistry
from .config import ConfigError, ViewConfig, load_config
from .kubectl.client import KubectlClient
from .orchestrator.dispatch import DispatchLoop, ViewRequest
from .orchestrator.events import DispatchEvent, EventBus
from .picker.app import Picker
from .utils.logging import configure_logging, get_logger
from .utils.rich_render import render_bindings

LOGGER = get_logger("kubeview.cli")

app = typer.Typer(
    help="Fuzzy-pick kubectl resources and act on them with key bindings.",
    add_completion=False,
)


def _build_registry(config: ViewConfig, kubectl: KubectlClient) -> BindingRegistry:
    registry = BindingRegistry()
    register_default_actions(
        registry,
        kubectl,
        chunk_size=config.log_chunk_size,
    )
    return registry


def _build_picker() -> Picker:
    return Picker()


def _log_event(event: DispatchEvent) -> None:
    LOGGER.debug(
        "[%s] %s %s",
        event.state,
        event.message,
        dict(event.payload) if event.payload else "",
    )


@app.command()
def view(
    resource: Optional[str] = typer.Argument(
        None,
        help="Resource type to list (defaults to 'pod').",
        show_default=False,
    ),
    query: Optional[List[str]] = typer.Argument(
        None,
        metavar="QUERY...",
        help="Initial filter query.",
        show_default=False,
    ),
    namespace: Optional[str] = typer.Option(
        None,
        "--namespace",
        "-n",
        help="Namespace to list and act in.",
    ),
    wide: bool = typer.Option(
        False,
        "--wide",
        "-w",
        help="List resources with '--output wide'.",
    ),
    stdin: bool = typer.Option(
        False,
        "--stdin",
        help="Read the listing from standard input instead of kubectl.",
    ),
    keys: bool = typer.Option(
        False,
        "--keys",
        help="Show the key bindings available for RESOURCE and exit.",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to a YAML configuration file.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log each dispatch step to stderr.",
    ),
) -> None:
    """Pick resources, then run the action bound to the accepting key."""

    configure_logging(verbose)
    try:
        config = load_config(config_path)
    except ConfigError as exc:
        typer.secho(str(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1) from None

    resource = resource or config.default_resource
    kubectl = KubectlClient(config.kubectl)
    registry = _build_registry(config, kubectl)

    if keys:
        render_bindings(registry, resource)
        return

    listing_text = None
    if stdin:
        listing_text = typer.get_text_stream("stdin", errors="replace").read()

    event_bus = EventBus()
    if verbose:
        event_bus.subscribe(_log_event)

    loop = DispatchLoop(
        ViewRequest(
            resource=resource,
            namespace=namespace,
            wide=wide,
            query=" ".join(query or []),
            listing_text=listing_text,
        ),
        registry=registry,
        kubectl=kubectl,
        picker=_build_picker(),
        config=config,
        event_bus=event_bus,
    )
    output = loop.run()
    if output is not None:
        typer.echo(output)


def main() -> None:
    """Entry point compatible with console_scripts."""

    app()


if __name__ == "__main__":
    main()
