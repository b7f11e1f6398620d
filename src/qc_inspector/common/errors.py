"""Exception types shared across the inspector."""
from __future__ import annotations


class QCInspectorError(Exception):
    """Base class for inspector errors."""


class NotConnectedError(QCInspectorError):
    """Analysis was requested before any reference source was designated."""


class AnalysisError(QCInspectorError):
    """The model call failed. Carries no partial result."""


class ConfigError(ValueError):
    """Raised when the runtime config is missing a section or holds a bad value."""
