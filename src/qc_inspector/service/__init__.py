from .pipeline import InspectionPipeline
from .session import HISTORY_LIMIT, InspectionSession
from .settings import RuntimeConfig, load_runtime_config

__all__ = [
    "InspectionPipeline",
    "HISTORY_LIMIT",
    "InspectionSession",
    "RuntimeConfig",
    "load_runtime_config",
]
