"""YAML configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from kubeview.config import ConfigError, ViewConfig, load_config, resolve_config_path


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "absent.yaml")
    assert config == ViewConfig()
    assert config.column_binding_limit == 19
    assert config.default_resource == "pod"


def test_values_override_defaults(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "kubectl: /usr/local/bin/kubectl\n"
        "column_binding_limit: 12\n"
        "show_preview: true\n"
        "score_cutoff: 75\n",
    )
    config = load_config(path)
    assert config.kubectl == "/usr/local/bin/kubectl"
    assert config.column_binding_limit == 12
    assert config.show_preview is True
    assert config.score_cutoff == 75.0


def test_unknown_keys_are_ignored(tmp_path: Path) -> None:
    config = load_config(_write(tmp_path, "theme: dark\nlog_chunk_size: 4096\n"))
    assert config.log_chunk_size == 4096


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    assert load_config(_write(tmp_path, "")) == ViewConfig()


@pytest.mark.parametrize(
    "text",
    [
        "log_chunk_size: big\n",
        "show_preview: 1\n",
        "column_binding_limit: true\n",
        "column_binding_limit: -1\n",
        "picker_height_percent: 0\n",
        "- just\n- a list\n",
        "kubectl: [unclosed\n",
    ],
)
def test_invalid_files_raise(tmp_path: Path, text: str) -> None:
    with pytest.raises(ConfigError):
        load_config(_write(tmp_path, text))


def test_environment_variable_selects_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write(tmp_path, "default_resource: node\n")
    monkeypatch.setenv("KUBEVIEW_CONFIG", str(path))
    assert resolve_config_path() == path
    assert load_config().default_resource == "node"
