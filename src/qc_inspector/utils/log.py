from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..common.errors import ConfigError
from .path import get_logs_dir

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(name)s - %(levelname)s - %(message)s"


@dataclass
class LoggingConfig:
    """``logging:`` section of the runtime config.

    No file is written unless ``log_prefix`` is set; ``log_dir`` defaults to
    ``<project root>/logs``.
    """
    level: str = "INFO"
    log_dir: Optional[str] = None
    log_prefix: Optional[str] = None
    console: bool = True


def resolve_level(level: str) -> int:
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ConfigError(f"Unknown log level: {level!r}")
    return value


def log_file_path(config: LoggingConfig, now: Optional[datetime] = None) -> Optional[Path]:
    """로그 파일 경로 (``<prefix>_<YYYYmmdd_HHMMSS>.log``). prefix가 없으면 None."""
    if config.log_prefix is None:
        return None
    if config.log_dir is None:
        log_dir = get_logs_dir()
    else:
        log_dir = Path(config.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return log_dir / f"{config.log_prefix}_{timestamp}.log"


def setup_logger(config: Optional[LoggingConfig] = None, name: str = "qc_inspector") -> logging.Logger:
    """Configure the ``qc_inspector`` logger tree from the runtime config.

    Modules log through ``logging.getLogger(__name__)``, so configuring the
    package logger covers every module under it. Calling it
    again replaces the handlers instead of stacking them.
    """
    config = config or LoggingConfig()
    level = resolve_level(config.level)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False  # root logger로 전파 방지 (중복 출력 방지)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    log_file = log_file_path(config)
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    if config.console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(console_handler)

    return logger
