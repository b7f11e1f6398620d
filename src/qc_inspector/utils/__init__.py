from .log import LoggingConfig, setup_logger
from .path import get_project_root, get_logs_dir

__all__ = [
    "LoggingConfig",
    "setup_logger",
    "get_project_root",
    "get_logs_dir",
]
