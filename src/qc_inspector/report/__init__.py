"""Reply parsing, rendering and export of defect reports."""
from .parser import extract_analysis_result, result_from_mapping
from .schema import export_history, load_schema, validate_report

__all__ = [
    "extract_analysis_result",
    "result_from_mapping",
    "export_history",
    "load_schema",
    "validate_report",
]
