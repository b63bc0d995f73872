"""Binding registry mapping picker keys to actions."""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Dict, Iterator, List, Optional, Sequence

from ..utils.logging import get_logger
from .base import (
    Action,
    BindingConfigurationError,
    format_preview,
    strip_ansi,
)
from .catalog import ColumnAction

LOGGER = get_logger("kubeview.actions.registry")

TOGGLE_PREVIEW_TRIGGER = "ctrl-p"
TOGGLE_ALL_TRIGGER = "ctrl-a"

# Keys consumed by the picker itself; actions may never claim them.
RESERVED_TRIGGERS = frozenset(
    {
        TOGGLE_PREVIEW_TRIGGER,
        TOGGLE_ALL_TRIGGER,
        "ctrl-c",
        "esc",
        "tab",
        "btab",
        "up",
        "down",
    }
)

DEFAULT_COLUMN_BINDING_LIMIT = 19
TAB_PADDING = 2


def align_tabs(lines: Sequence[str], *, padding: int = TAB_PADDING) -> List[str]:
    """Pad tab-separated cells so every column lines up.

    Widths ignore ANSI escapes; the last cell of a line is never padded.
    """

    rows = [line.split("\t") for line in lines]
    widths: Dict[int, int] = {}
    for cells in rows:
        for index, cell in enumerate(cells[:-1]):
            widths[index] = max(widths.get(index, 0), len(strip_ansi(cell)))
    aligned = []
    for cells in rows:
        parts = []
        for index, cell in enumerate(cells[:-1]):
            fill = widths[index] - len(strip_ansi(cell)) + padding
            parts.append(cell + " " * fill)
        parts.append(cells[-1])
        aligned.append("".join(parts))
    return aligned


class BindingRegistry:
    """Stores key-bound actions shared by the dispatcher and row previews.

    Registration is only allowed until :meth:`freeze` is called; the picker
    reads previews from other threads once it is running.
    """

    def __init__(self, *, reserved: frozenset[str] = RESERVED_TRIGGERS) -> None:
        self._actions: Dict[str, Action] = OrderedDict()
        self._lock = threading.RLock()
        self._reserved = reserved
        self._frozen = False

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register(self, action: Action) -> None:
        """Register an action under its trigger.

        Raises:
            BindingConfigurationError: if the trigger is taken, reserved by
                the picker, or the registry is already frozen.
        """

        trigger = action.trigger
        with self._lock:
            if self._frozen:
                raise BindingConfigurationError(
                    f"Cannot register '{action.description}' after the "
                    "registry was frozen"
                )
            if trigger in self._reserved:
                raise BindingConfigurationError(
                    f"Trigger '{trigger}' is reserved by the picker"
                )
            if trigger in self._actions:
                existing = self._actions[trigger]
                raise BindingConfigurationError(
                    f"Trigger '{trigger}' already bound to "
                    f"'{existing.description}'"
                )
            self._actions[trigger] = action
        LOGGER.debug("Bound %r to %s", trigger, action.description)

    def register_column_bindings(
        self,
        header: str,
        *,
        limit: int = DEFAULT_COLUMN_BINDING_LIMIT,
    ) -> List[Action]:
        """Bind one function key per header column after the name column."""

        tokens = header.split()
        registered: List[Action] = []
        for position, title in enumerate(tokens[1 : limit + 1], start=2):
            action = ColumnAction(position, title)
            self.register(action)
            registered.append(action)
        return registered

    def freeze(self) -> None:
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def lookup(self, trigger: str) -> Optional[Action]:
        with self._lock:
            return self._actions.get(trigger)

    def triggers(self) -> List[str]:
        with self._lock:
            return list(self._actions.keys())

    def __contains__(self, trigger: object) -> bool:
        with self._lock:
            return trigger in self._actions

    def __iter__(self) -> Iterator[Action]:
        with self._lock:
            return iter(list(self._actions.values()))

    def __len__(self) -> int:
        with self._lock:
            return len(self._actions)

    # ------------------------------------------------------------------
    # Preview
    # ------------------------------------------------------------------
    def preview_lines(self, resource: str) -> List[str]:
        """Return the sorted, aligned key help shown beside each row."""

        with self._lock:
            previews = [
                action.preview()
                for action in self._actions.values()
                if action.applies_to(resource)
            ]
        previews.append(format_preview("Toggle Preview", TOGGLE_PREVIEW_TRIGGER))
        previews.sort()
        return align_tabs(previews)

    def preview_for(self, resource: str) -> str:
        return "\n".join(self.preview_lines(resource))


__all__ = [
    "BindingRegistry",
    "RESERVED_TRIGGERS",
    "TOGGLE_PREVIEW_TRIGGER",
    "TOGGLE_ALL_TRIGGER",
    "DEFAULT_COLUMN_BINDING_LIMIT",
    "align_tabs",
]
