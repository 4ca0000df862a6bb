"""Functional tests for configuration loading and precedence."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from formlogic.config import EngineConfig, load_config


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("FORMLOGIC_MAX_CONDITION_DEPTH", raising=False)
    monkeypatch.delenv("FORMLOGIC_API_PREFIX", raising=False)
    return tmp_path


def test_defaults_without_any_source(workdir):
    """Verifies defaults apply when no file or variable is present."""
    cfg = load_config()
    assert cfg.engine.max_condition_depth == 32
    assert cfg.api.prefix == "/api/v1"


def test_root_json_is_read(workdir):
    """Verifies formlogic_config.json supplies base values."""
    (workdir / "formlogic_config.json").write_text(
        json.dumps({"engine": {"max_condition_depth": 8}, "api": {"prefix": "/forms/"}}),
        encoding="utf-8",
    )
    cfg = load_config()
    assert cfg.engine.max_condition_depth == 8
    assert cfg.api.prefix == "/forms"


def test_precedence_env_over_files_over_json(workdir, monkeypatch):
    """Verifies environment beats config/ files, which beat the root JSON."""
    (workdir / "formlogic_config.json").write_text(
        json.dumps({"engine": {"max_condition_depth": 8}}), encoding="utf-8"
    )
    (workdir / "config").mkdir()
    (workdir / "config" / "engine.max_condition_depth").write_text("12\n", encoding="utf-8")
    assert load_config().engine.max_condition_depth == 12
    monkeypatch.setenv("FORMLOGIC_MAX_CONDITION_DEPTH", "5")
    assert load_config().engine.max_condition_depth == 5


def test_empty_prefix_from_env_is_allowed(workdir, monkeypatch):
    """Verifies the API can be mounted at the root."""
    monkeypatch.setenv("FORMLOGIC_API_PREFIX", "")
    assert load_config().api.prefix == ""


def test_invalid_values_are_rejected(workdir, monkeypatch, caplog):
    """Verifies invalid settings raise and are logged."""
    monkeypatch.setenv("FORMLOGIC_MAX_CONDITION_DEPTH", "0")
    with caplog.at_level("ERROR", logger="formlogic.config"):
        with pytest.raises(ValidationError):
            load_config()
    assert any("Invalid application configuration" in r.getMessage() for r in caplog.records)
    with pytest.raises(ValidationError):
        EngineConfig(max_condition_depth=-1)


def test_unreadable_json_falls_back_to_defaults(workdir):
    """Verifies a corrupt root JSON is logged and ignored."""
    (workdir / "formlogic_config.json").write_text("{not json", encoding="utf-8")
    assert load_config().engine.max_condition_depth == 32
