"""Listing, picking and dispatch orchestration."""

from .dispatch import DispatchLoop, DispatchState, ViewRequest
from .events import DispatchEvent, EventBus

__all__ = [
    "DispatchEvent",
    "DispatchLoop",
    "DispatchState",
    "EventBus",
    "ViewRequest",
]
