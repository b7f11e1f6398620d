from .errors import AnalysisError, ConfigError, NotConnectedError, QCInspectorError
from .types import (
    AnalysisResult,
    InspectionRecord,
    KnowledgeConnection,
    ReferenceSource,
    SourceKind,
)

__all__ = [
    "AnalysisError",
    "ConfigError",
    "NotConnectedError",
    "QCInspectorError",
    "AnalysisResult",
    "InspectionRecord",
    "KnowledgeConnection",
    "ReferenceSource",
    "SourceKind",
]
