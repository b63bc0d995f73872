"""Base classes and typing primitives for kubeview actions."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, Optional

DEFAULT_TRIGGER = ""
DEFAULT_KEY_LABEL = "enter"

PREVIEW_DESCRIPTION_STYLE = "\x1b[31m"
PREVIEW_KEY_STYLE = "\x1b[33m"
PREVIEW_RESET = "\x1b[0m"

POD_RESOURCES = frozenset({"pod", "pods", "po"})
NODE_RESOURCES = frozenset({"node", "nodes", "no"})

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")


class BindingConfigurationError(ValueError):
    """Raised when the binding table is assembled incorrectly."""


def format_preview(description: str, key_label: str) -> str:
    """Return a single coloured ``description<TAB>key`` preview line."""

    return (
        f"{PREVIEW_DESCRIPTION_STYLE}{description}\t"
        f"{PREVIEW_KEY_STYLE}{key_label}{PREVIEW_RESET}"
    )


def strip_ansi(text: str) -> str:
    return _ANSI_ESCAPE.sub("", text)


@dataclass(frozen=True, slots=True)
class ActionMetadata:
    """Describes how an action is bound and where it applies."""

    trigger: str
    description: str
    resource_types: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True, slots=True)
class SelectionContext:
    """Snapshot of the rows picked by the user for a single dispatch."""

    resource: str
    namespace: Optional[str] = None
    names: tuple[str, ...] = ()
    columns: tuple[tuple[str, ...], ...] = ()

    @classmethod
    def from_rows(
        cls,
        resource: str,
        rows: Iterable[str],
        *,
        namespace: Optional[str] = None,
    ) -> "SelectionContext":
        columns = tuple(tuple(row.split()) for row in rows)
        names = tuple(tokens[0] if tokens else "" for tokens in columns)
        return cls(
            resource=resource,
            namespace=namespace,
            names=names,
            columns=columns,
        )

    def joined_names(self) -> str:
        return "\n".join(self.names)


class Action(ABC):
    """A key-bound unit of work executed against a selection."""

    def __init__(self, metadata: ActionMetadata) -> None:
        self.metadata = metadata

    @property
    def trigger(self) -> str:
        return self.metadata.trigger

    @property
    def description(self) -> str:
        return self.metadata.description

    @property
    def resource_types(self) -> frozenset[str]:
        return self.metadata.resource_types

    def applies_to(self, resource: str) -> bool:
        """Return True when the action may run for ``resource``."""

        return not self.resource_types or resource in self.resource_types

    def key_label(self) -> str:
        if self.trigger == DEFAULT_TRIGGER:
            return DEFAULT_KEY_LABEL
        return self.trigger

    def preview(self) -> str:
        return format_preview(self.description, self.key_label())

    @abstractmethod
    def execute(self, context: SelectionContext) -> Optional[str]:
        """Run the action, returning text for stdout or None."""

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(trigger={self.trigger!r}, "
            f"description={self.description!r})"
        )


__all__ = [
    "Action",
    "ActionMetadata",
    "BindingConfigurationError",
    "SelectionContext",
    "DEFAULT_TRIGGER",
    "DEFAULT_KEY_LABEL",
    "POD_RESOURCES",
    "NODE_RESOURCES",
    "format_preview",
    "strip_ansi",
]
