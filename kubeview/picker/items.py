"""Selectable rows handed to the picker."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List

from ..kubectl.listing import ListingOutput

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..actions.registry import BindingRegistry


@dataclass(frozen=True, slots=True)
class PickerItem:
    """One listing row plus what it needs to render its own preview.

    The registry reference is shared and read-only; rows never register
    bindings themselves.
    """

    text: str
    resource: str
    registry: "BindingRegistry" = field(repr=False, compare=False)
    index: int = 0

    @property
    def columns(self) -> List[str]:
        return self.text.split()

    @property
    def name(self) -> str:
        tokens = self.text.split(maxsplit=1)
        return tokens[0] if tokens else self.text

    def preview(self) -> str:
        return self.registry.preview_for(self.resource)


def items_from_listing(
    listing: ListingOutput,
    resource: str,
    registry: "BindingRegistry",
) -> List[PickerItem]:
    return [
        PickerItem(text=line, resource=resource, registry=registry, index=index)
        for index, line in enumerate(listing.lines)
    ]


__all__ = ["PickerItem", "items_from_listing"]
