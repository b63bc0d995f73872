"""Shared fixtures for CLI interaction tests."""
from __future__ import annotations

import pytest
from typer.testing import CliRunner


@pytest.fixture(scope="session")
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("KUBEVIEW_CONFIG", str(tmp_path / "missing.yaml"))


@pytest.fixture
def install_picker(monkeypatch: pytest.MonkeyPatch, picker_for):
    def _install(trigger=None):
        picker = picker_for(trigger)
        monkeypatch.setattr("kubeview.__main__._build_picker", lambda: picker)
        return picker

    return _install
