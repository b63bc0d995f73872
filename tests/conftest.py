"""Shared fakes for kubectl, the picker and the clipboard."""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence

import pytest

from kubeview.actions.catalog import register_default_actions
from kubeview.actions.registry import BindingRegistry
from kubeview.picker.app import PickerOptions, PickerResult
from kubeview.picker.items import PickerItem


class FakeKubectl:
    """Records every kubectl invocation instead of spawning processes."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.outputs: Dict[str, Optional[str]] = {}
        self.stream_chunks: List[bytes] = []

    def _record(self, mode: str, verb: str, resource, args, namespace) -> None:
        self.calls.append(
            {
                "mode": mode,
                "verb": verb,
                "resource": resource,
                "args": tuple(args),
                "namespace": namespace,
            }
        )

    def capture(self, verb, resource=None, *args, namespace=None):
        self._record("capture", verb, resource, args, namespace)
        return self.outputs.get(verb)

    def passthrough(self, verb, resource=None, *args, namespace=None):
        self._record("passthrough", verb, resource, args, namespace)
        return 0

    def stream(
        self,
        verb,
        resource=None,
        *args,
        sink,
        namespace=None,
        chunk_size=1024,
    ):
        self._record("stream", verb, resource, args, namespace)
        for chunk in self.stream_chunks:
            sink.write(chunk)
        return True


class StubPicker:
    """Picker double that answers with a scripted choice."""

    def __init__(
        self,
        choose: Optional[Callable[[Sequence[PickerItem]], PickerResult]] = None,
    ) -> None:
        self.choose = choose or (lambda items: PickerResult())
        self.calls: List[Dict[str, Any]] = []

    def run(self, items: Sequence[PickerItem], options: PickerOptions) -> PickerResult:
        self.calls.append({"items": list(items), "options": options})
        return self.choose(items)


def select_all(trigger: str) -> Callable[[Sequence[PickerItem]], PickerResult]:
    return lambda items: PickerResult(selected=list(items), accept_key=trigger)


class ClipboardRecorder:
    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.copied: List[str] = []

    def __call__(self, text: str) -> bool:
        self.copied.append(text)
        return self.succeed


@pytest.fixture
def fake_kubectl() -> FakeKubectl:
    return FakeKubectl()


@pytest.fixture
def clipboard() -> ClipboardRecorder:
    return ClipboardRecorder()


@pytest.fixture
def registry(fake_kubectl: FakeKubectl, clipboard: ClipboardRecorder) -> BindingRegistry:
    registry = BindingRegistry()
    register_default_actions(registry, fake_kubectl, clipboard=clipboard)
    return registry


@pytest.fixture
def picker_for() -> Callable[..., StubPicker]:
    """Build a picker that selects every row and accepts with ``trigger``.

    ``trigger=None`` simulates the user aborting.
    """

    def _make(trigger: Optional[str] = None, choose=None) -> StubPicker:
        if choose is not None:
            return StubPicker(choose)
        if trigger is None:
            return StubPicker()
        return StubPicker(select_all(trigger))

    return _make
