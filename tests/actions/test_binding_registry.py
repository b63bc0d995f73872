"""Binding registry registration, gating and preview tests."""

from __future__ import annotations

import threading

import pytest

from kubeview.actions.base import BindingConfigurationError, strip_ansi
from kubeview.actions.catalog import NamesAction, NodeAction
from kubeview.actions.registry import BindingRegistry, align_tabs


def test_duplicate_trigger_is_rejected(fake_kubectl) -> None:
    registry = BindingRegistry()
    registry.register(NamesAction("ctrl-n"))
    with pytest.raises(BindingConfigurationError, match="already bound"):
        registry.register(NodeAction(fake_kubectl, "cordon", "ctrl-n"))
    assert len(registry) == 1


def test_reserved_trigger_is_rejected() -> None:
    registry = BindingRegistry()
    with pytest.raises(BindingConfigurationError, match="reserved"):
        registry.register(NamesAction("ctrl-p"))


def test_registration_after_freeze_fails() -> None:
    registry = BindingRegistry()
    registry.register(NamesAction())
    registry.freeze()
    assert registry.frozen
    with pytest.raises(BindingConfigurationError, match="frozen"):
        registry.register(NamesAction("ctrl-q"))
    with pytest.raises(BindingConfigurationError):
        registry.register_column_bindings("NAME STATUS")


def test_default_catalog_triggers_are_distinct(registry: BindingRegistry) -> None:
    triggers = registry.triggers()
    assert len(triggers) == len(set(triggers))
    assert "" in registry
    assert registry.lookup("ctrl-n").description == "Names"
    assert registry.lookup("ctrl-missing") is None


def test_preview_is_sorted_and_contains_toggle_line(registry: BindingRegistry) -> None:
    lines = [strip_ansi(line) for line in registry.preview_lines("pod")]
    descriptions = [line.split()[0] for line in lines]
    assert descriptions == sorted(descriptions)
    assert any(line.startswith("Toggle Preview") for line in lines)
    assert any(line.startswith("Logs") for line in lines)
    assert not any(line.startswith("Cordon") for line in lines)


def test_preview_filters_by_resource_type(registry: BindingRegistry) -> None:
    lines = [strip_ansi(line) for line in registry.preview_lines("node")]
    assert any(line.startswith("Cordon") for line in lines)
    assert any(line.startswith("Uncordon") for line in lines)
    assert not any(line.startswith("Logs") for line in lines)


def test_empty_registry_preview_still_lists_toggle() -> None:
    lines = BindingRegistry().preview_lines("pod")
    assert [strip_ansi(line).split("  ")[0] for line in lines] == ["Toggle Preview"]
    assert strip_ansi(lines[0]).endswith("ctrl-p")


def test_preview_keys_are_aligned(registry: BindingRegistry) -> None:
    lines = [strip_ansi(line) for line in registry.preview_lines("pod")]
    key_offsets = {len(line) - len(line.split()[-1]) for line in lines}
    assert len(key_offsets) == 1
    assert all("\t" not in line for line in lines)


def test_align_tabs_ignores_ansi_width() -> None:
    aligned = align_tabs(["\x1b[31mab\tX", "abcd\tY"])
    assert [strip_ansi(line) for line in aligned] == ["ab    X", "abcd  Y"]


def test_column_bindings_follow_header_positions() -> None:
    registry = BindingRegistry()
    added = registry.register_column_bindings("NAME STATUS AGE")
    assert [action.trigger for action in added] == ["f2", "f3"]
    assert registry.lookup("f2").description == "Column STATUS"
    assert registry.lookup("f3").description == "Column AGE"
    assert registry.lookup("f1") is None


def test_column_bindings_are_capped() -> None:
    header = " ".join(f"C{index}" for index in range(1, 30))
    registry = BindingRegistry()
    added = registry.register_column_bindings(header, limit=19)
    assert len(added) == 19
    assert added[-1].trigger == "f20"
    assert BindingRegistry().register_column_bindings(header, limit=0) == []


def test_concurrent_preview_reads_are_consistent(registry: BindingRegistry) -> None:
    registry.freeze()
    expected = registry.preview_for("pod")
    results: list[str] = []

    def _read() -> None:
        for _ in range(50):
            results.append(registry.preview_for("pod"))

    threads = [threading.Thread(target=_read) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert set(results) == {expected}
