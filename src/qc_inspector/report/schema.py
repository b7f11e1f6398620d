from __future__ import annotations
from pathlib import Path
import json
from typing import List

from jsonschema import validate

from ..common.types import InspectionRecord


def load_schema(path: str | Path) -> dict:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def validate_report(report: dict, schema: dict) -> None:
    validate(instance=report, schema=schema)


def record_to_dict(record: InspectionRecord, *, include_image: bool = False) -> dict:
    d = {
        "id": record.id,
        "captured_at": record.captured_at.isoformat(),
        "result": record.result.to_dict(),
    }
    if include_image:
        d["image_data"] = record.image_data
    return d


def export_history(records: List[InspectionRecord], schema: dict, *, include_image: bool = False) -> List[dict]:
    """Serialize records newest-first, validating each against ``schema``."""
    out = []
    for rec in records:
        d = record_to_dict(rec, include_image=include_image)
        validate_report(d, schema)
        out.append(d)
    return out
