"""Tests for the YAML runtime config loader."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from qc_inspector.common.errors import ConfigError
from qc_inspector.mllm.factory import get_llm_client
from qc_inspector.mllm.gemini_client import GeminiClient
from qc_inspector.service.settings import load_runtime_config, load_yaml

REPO_ROOT = Path(__file__).resolve().parents[2]


def _write_yaml(path: Path, data: dict) -> Path:
    path.write_text(yaml.dump(data, allow_unicode=True), encoding="utf-8")
    return path


def test_env_expansion_with_default(tmp_path, monkeypatch):
    monkeypatch.delenv("QC_TEST_UNSET", raising=False)
    monkeypatch.setenv("QC_TEST_SET", "value")
    p = tmp_path / "c.yaml"
    p.write_text("a: ${QC_TEST_SET}\nb: ${QC_TEST_UNSET:-fallback}\nc: ${QC_TEST_UNSET}\n", encoding="utf-8")

    assert load_yaml(p) == {"a": "value", "b": "fallback", "c": None}


def test_shipped_config_loads(monkeypatch):
    monkeypatch.delenv("QC_MLLM", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    cfg = load_runtime_config(REPO_ROOT / "configs" / "runtime.yaml")

    assert cfg.mllm_name == "echo"
    assert cfg.history_limit == 50
    assert cfg.sources == []
    assert cfg.report["schema_path"] == "configs/report_schema.json"


def test_shipped_gemini_kwargs_drop_blank_api_key(monkeypatch):
    monkeypatch.setenv("QC_MLLM", "gemini")
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    cfg = load_runtime_config(REPO_ROOT / "configs" / "runtime.yaml")

    kwargs = cfg.mllm_kwargs
    assert "api_key" not in kwargs
    assert kwargs["temperature"] == 0.1
    assert kwargs["top_p"] == 0.9
    assert kwargs["max_retries"] == 1


def test_path_from_env(tmp_path, monkeypatch):
    p = _write_yaml(tmp_path / "rt.yaml", {"mllm": {"name": "echo"}, "report": {"schema_path": "s.json"}})
    monkeypatch.setenv("RUNTIME_CFG", str(p))
    assert load_runtime_config().report["schema_path"] == "s.json"


def test_missing_section_raises(tmp_path):
    p = _write_yaml(tmp_path / "rt.yaml", {"mllm": {"name": "echo"}})
    with pytest.raises(ConfigError, match="report"):
        load_runtime_config(p)


def test_bad_history_limit_raises(tmp_path):
    p = _write_yaml(tmp_path / "rt.yaml", {
        "mllm": {"name": "echo"},
        "report": {},
        "history": {"limit": 0},
    })
    with pytest.raises(ConfigError):
        load_runtime_config(p)


def test_logging_and_sources_sections(tmp_path):
    p = _write_yaml(tmp_path / "rt.yaml", {
        "mllm": {"name": "echo"},
        "report": {},
        "sources": [{"id": "x", "name": "매뉴얼", "kind": "pdf"}],
        "logging": {"level": "DEBUG", "log_prefix": "qc"},
    })
    cfg = load_runtime_config(p)
    assert cfg.sources == [{"id": "x", "name": "매뉴얼", "kind": "pdf"}]
    assert cfg.logging.level == "DEBUG"
    assert cfg.logging.log_prefix == "qc"
    assert cfg.logging.log_dir is None


# ---------------------------------------------------------------------------
# model aliases
# ---------------------------------------------------------------------------

def test_shipped_config_alias_reads_gemini_section(monkeypatch):
    monkeypatch.setenv("QC_MLLM", "gemini-2.5-flash")
    monkeypatch.setenv("GOOGLE_API_KEY", "k")
    cfg = load_runtime_config(REPO_ROOT / "configs" / "runtime.yaml")

    kwargs = cfg.mllm_kwargs
    assert kwargs["max_image_size"] == [1024, 1024]
    assert kwargs["api_key"] == "k"
    assert kwargs["structured_output"] is False
    # alias keeps its own model id
    assert "model" not in kwargs


def test_alias_builds_client_with_its_model(monkeypatch):
    monkeypatch.setenv("QC_MLLM", "gemini-2.5-flash")
    monkeypatch.setenv("GOOGLE_API_KEY", "k")
    cfg = load_runtime_config(REPO_ROOT / "configs" / "runtime.yaml")

    client = get_llm_client(cfg.mllm_name, **cfg.mllm_kwargs)
    assert isinstance(client, GeminiClient)
    assert client.model_name == "gemini-2.5-flash"
    assert client.max_image_size == (1024, 1024)


def test_section_named_after_model_wins(tmp_path):
    p = _write_yaml(tmp_path / "rt.yaml", {
        "mllm": {
            "name": "gemini-2.5-pro",
            "gemini": {"temperature": 0.1},
            "gemini-2.5-pro": {"temperature": 0.4, "model": "gemini-2.5-pro-exp"},
        },
        "report": {},
    })
    assert load_runtime_config(p).mllm_kwargs == {"temperature": 0.4, "model": "gemini-2.5-pro-exp"}


def test_unknown_model_name_raises(tmp_path):
    p = _write_yaml(tmp_path / "rt.yaml", {"mllm": {"name": "gpt-4o"}, "report": {}})
    with pytest.raises(ConfigError, match="gpt-4o"):
        load_runtime_config(p)


def test_unknown_log_level_raises(tmp_path):
    p = _write_yaml(tmp_path / "rt.yaml", {
        "mllm": {"name": "echo"},
        "report": {},
        "logging": {"level": "LOUD"},
    })
    with pytest.raises(ConfigError, match="LOUD"):
        load_runtime_config(p)
