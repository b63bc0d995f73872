"""Parsing helpers for ``kubectl get`` table output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True, slots=True)
class ListingOutput:
    """Header line and data rows of a resource listing."""

    header: str
    lines: tuple[str, ...] = ()

    @property
    def columns(self) -> List[str]:
        return self.header.split()

    def __len__(self) -> int:
        return len(self.lines)


def parse_listing(text: str) -> Optional[ListingOutput]:
    """Split listing text into header and rows; None when there is nothing."""

    lines = text.splitlines()
    while lines and not lines[-1].strip():
        lines.pop()
    if not lines:
        return None
    return ListingOutput(header=lines[0], lines=tuple(lines[1:]))


__all__ = ["ListingOutput", "parse_listing"]
