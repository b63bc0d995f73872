"""Listing -> picking -> dispatch state machine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Dict, Optional, Protocol, Sequence

from ..actions.base import SelectionContext
from ..actions.registry import BindingRegistry
from ..config import ViewConfig
from ..kubectl.client import KubectlClient
from ..kubectl.listing import ListingOutput, parse_listing
from ..picker.app import PickerOptions, PickerResult
from ..picker.items import PickerItem, items_from_listing
from ..utils.logging import get_logger
from .events import DispatchEvent, EventBus, EventKind

LOGGER = get_logger("kubeview.orchestrator")

PROMPT_SUFFIX = " ⎈  "


class DispatchState(str, Enum):
    LISTING = "listing"
    PICKING = "picking"
    DISPATCHING = "dispatching"
    DONE = "done"


class PickerLike(Protocol):
    def run(
        self,
        items: Sequence[PickerItem],
        options: PickerOptions,
    ) -> PickerResult:
        ...  # pragma: no cover - structural type


@dataclass(slots=True)
class ViewRequest:
    """What the user asked to browse in this run."""

    resource: str = "pod"
    namespace: Optional[str] = None
    wide: bool = False
    query: str = ""
    listing_text: Optional[str] = None


class DispatchLoop:
    """Runs one listing, one picker session and at most one action."""

    def __init__(
        self,
        request: ViewRequest,
        *,
        registry: BindingRegistry,
        kubectl: KubectlClient,
        picker: PickerLike,
        config: Optional[ViewConfig] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.request = request
        self.registry = registry
        self.kubectl = kubectl
        self.picker = picker
        self.config = config or ViewConfig()
        self._event_bus = event_bus
        self.state = DispatchState.LISTING

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------
    def fetch_listing(self) -> Optional[ListingOutput]:
        """Return the listing to pick from, or None when there is none."""

        text = self.request.listing_text
        if text is None:
            args = ["--output", "wide"] if self.request.wide else []
            text = self.kubectl.capture(
                "get",
                self.request.resource,
                *args,
                namespace=self.request.namespace,
            )
        if text is None:
            return None
        return parse_listing(text)

    def run(self) -> Optional[str]:
        """Execute the full loop and return the text to print, if any."""

        self._transition(DispatchState.LISTING)
        listing = self.fetch_listing()
        if listing is None:
            self._emit("warning", "Listing produced no output")
            return self._finish(None)

        columns = self.registry.register_column_bindings(
            listing.header, limit=self.config.column_binding_limit
        )
        self.registry.freeze()
        LOGGER.debug("Registered %d column binding(s)", len(columns))

        self._transition(DispatchState.PICKING)
        items = items_from_listing(listing, self.request.resource, self.registry)
        result = self.picker.run(items, self.picker_options(listing))
        if result.aborted:
            self._emit("info", "Picker aborted")
            return self._finish(None)

        return self._finish(
            self.dispatch(result.accept_key, [item.text for item in result.selected])
        )

    def picker_options(self, listing: ListingOutput) -> PickerOptions:
        return PickerOptions(
            prompt=f"{self.request.resource}{PROMPT_SUFFIX}",
            header=listing.header,
            accept_keys=self.registry.triggers(),
            query=self.request.query,
            height_percent=self.config.picker_height_percent,
            show_preview=self.config.show_preview,
            score_cutoff=self.config.score_cutoff,
        )

    def dispatch(self, trigger: str, rows: Sequence[str]) -> Optional[str]:
        """Resolve ``trigger`` and run its action against ``rows``."""

        self._transition(DispatchState.DISPATCHING, trigger=trigger, rows=len(rows))
        context = SelectionContext.from_rows(
            self.request.resource,
            rows,
            namespace=self.request.namespace,
        )
        action = self.registry.lookup(trigger)
        if action is None:
            self._emit("warning", f"No action bound to {trigger!r}")
            return None
        if not action.applies_to(context.resource):
            return (
                f"{action.description} does not work for resource type "
                f"{context.resource}"
            )
        return action.execute(context)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _finish(self, output: Optional[str]) -> Optional[str]:
        self._transition(DispatchState.DONE, produced=output is not None)
        return output

    def _transition(self, state: DispatchState, **payload: Any) -> None:
        self.state = state
        self._emit("progress", f"Entering {state.value}", payload or None)

    def _emit(
        self,
        kind: EventKind,
        message: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        if not self._event_bus:
            return
        event = DispatchEvent(
            kind=kind,
            message=message,
            timestamp=datetime.now(UTC),
            state=self.state.value,
            payload=payload,
        )
        self._event_bus.emit(event)


__all__ = ["DispatchLoop", "DispatchState", "ViewRequest", "PickerLike"]
