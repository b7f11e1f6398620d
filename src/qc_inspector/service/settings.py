from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
import os
import re
import yaml

from ..common.errors import ConfigError
from ..mllm.factory import config_section
from ..utils.log import LoggingConfig, resolve_level

_env_pattern = re.compile(r"\$\{([^:}]+)(?::-(.*?))?\}")

DEFAULT_CONFIG_PATH = "configs/runtime.yaml"


def _expand_env(text: str) -> str:
    def repl(m):
        key = m.group(1)
        default = m.group(2) if m.group(2) is not None else ""
        return os.environ.get(key, default)
    return _env_pattern.sub(repl, text)


def load_yaml(path: str | Path) -> dict:
    raw = Path(path).read_text(encoding="utf-8")
    raw = _expand_env(raw)
    return yaml.safe_load(raw) or {}


@dataclass
class RuntimeConfig:
    mllm: dict
    report: dict
    history_limit: int = 50
    sources: list[dict] = field(default_factory=list)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def mllm_name(self) -> str:
        return str(self.mllm.get("name", "echo"))

    @property
    def mllm_kwargs(self) -> dict:
        """Client kwargs for the selected model; blank values are dropped so defaults apply.

        A section named exactly after the model wins. Otherwise aliases such as
        ``gemini-2.5-flash`` read their client's section (``gemini``) but keep
        their own model id, so the section's ``model`` is not applied.
        """
        name = self.mllm_name
        own = self.mllm.get(name)
        if isinstance(own, dict):
            kwargs = dict(own)
        else:
            section = config_section(name)
            kwargs = dict(self.mllm.get(section) or {})
            if section != name.lower():
                kwargs.pop("model", None)
        return {k: v for k, v in kwargs.items() if v not in (None, "")}


def load_runtime_config(path: str | Path | None = None) -> RuntimeConfig:
    path = path or os.environ.get("RUNTIME_CFG", DEFAULT_CONFIG_PATH)
    d = load_yaml(path)
    for section in ("mllm", "report"):
        if not isinstance(d.get(section), dict):
            raise ConfigError(f"'{path}' is missing the '{section}' section")

    name = str(d["mllm"].get("name", "echo"))
    try:
        config_section(name)
    except ValueError as e:
        raise ConfigError(f"mllm.name: {e}") from e

    history = d.get("history", {}) or {}
    limit = int(history.get("limit", 50))
    if limit < 1:
        raise ConfigError(f"history.limit must be >= 1, got {limit}")

    log = d.get("logging", {}) or {}
    logging_cfg = LoggingConfig(
        level=str(log.get("level") or "INFO"),
        log_dir=log.get("log_dir") or None,
        log_prefix=log.get("log_prefix") or None,
        console=bool(log.get("console", True)),
    )
    resolve_level(logging_cfg.level)

    return RuntimeConfig(
        mllm=d["mllm"],
        report=d["report"],
        history_limit=limit,
        sources=list(d.get("sources") or []),
        logging=logging_cfg,
    )
