"""Action contract and selection context behaviour."""

from __future__ import annotations

from typing import Optional

import pytest

from kubeview.actions.base import (
    Action,
    ActionMetadata,
    SelectionContext,
    strip_ansi,
)


class _EchoAction(Action):
    def execute(self, context: SelectionContext) -> Optional[str]:
        return ",".join(context.names)


def _action(trigger: str = "ctrl-t", types: frozenset[str] = frozenset()) -> _EchoAction:
    return _EchoAction(
        ActionMetadata(trigger=trigger, description="Echo", resource_types=types)
    )


@pytest.mark.parametrize("resource", ["pod", "node", "deployment", "cm"])
def test_universal_action_applies_to_everything(resource: str) -> None:
    assert _action().applies_to(resource)


def test_restricted_action_applies_only_to_members() -> None:
    action = _action(types=frozenset({"pod", "po"}))
    assert action.applies_to("pod")
    assert action.applies_to("po")
    assert not action.applies_to("node")
    assert not action.applies_to("pods")


def test_preview_pairs_description_and_key() -> None:
    assert strip_ansi(_action("ctrl-t").preview()) == "Echo\tctrl-t"


def test_default_trigger_is_labelled_enter() -> None:
    action = _action("")
    assert action.key_label() == "enter"
    assert strip_ansi(action.preview()) == "Echo\tenter"


def test_selection_context_splits_rows_into_columns() -> None:
    context = SelectionContext.from_rows(
        "pod",
        ["a   Running  1d", "b Pending 2d"],
        namespace="default",
    )
    assert context.names == ("a", "b")
    assert context.columns == (("a", "Running", "1d"), ("b", "Pending", "2d"))
    assert context.namespace == "default"
    assert context.joined_names() == "a\nb"


def test_selection_context_keeps_lengths_aligned_for_blank_rows() -> None:
    rows = ["web-1 Running", "", "web-2"]
    context = SelectionContext.from_rows("pod", rows)
    assert len(context.names) == len(context.columns) == len(rows)
    assert context.names[1] == ""
    for name, columns in zip(context.names, context.columns):
        if columns:
            assert columns[0] == name


def test_selection_context_is_immutable() -> None:
    context = SelectionContext.from_rows("pod", ["a"])
    with pytest.raises(AttributeError):
        context.resource = "node"  # type: ignore[misc]
