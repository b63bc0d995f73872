"""Helpers for rendering rich output within the CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..actions.registry import BindingRegistry

_CONSOLE: Console | None = None


def get_console() -> Console:
    """Return a shared Rich console instance configured for plain output."""

    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console(soft_wrap=True, markup=False, highlight=False)
    return _CONSOLE


def bindings_table(registry: "BindingRegistry", resource: str) -> Table:
    """Build a table of the keys that work for ``resource``."""

    table = Table(title=f"Key bindings for {resource}")
    table.add_column("Key", style="yellow", no_wrap=True)
    table.add_column("Action", style="red")
    table.add_column("Resource types", style="dim")
    rows = sorted(
        (action for action in registry if action.applies_to(resource)),
        key=lambda action: action.description,
    )
    for action in rows:
        scope = ", ".join(sorted(action.resource_types)) or "all"
        table.add_row(action.key_label(), action.description, scope)
    return table


def render_bindings(
    registry: "BindingRegistry",
    resource: str,
    *,
    console: Optional[Console] = None,
) -> None:
    (console or get_console()).print(bindings_table(registry, resource))


__all__ = ["get_console", "bindings_table", "render_bindings"]
