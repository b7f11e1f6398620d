"""Tests for history export and report rendering."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import jsonschema
import pytest

from qc_inspector.common.types import AnalysisResult, InspectionRecord, ReferenceSource, SourceKind
from qc_inspector.report.render import (
    render_connection_markdown,
    render_history_markdown,
    render_result_markdown,
    render_source_choice,
    source_label,
)
from qc_inspector.report.schema import export_history, load_schema, record_to_dict, validate_report
from qc_inspector.service.session import InspectionSession

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "configs" / "report_schema.json"


@pytest.fixture
def schema():
    return load_schema(SCHEMA_PATH)


@pytest.fixture
def record():
    return InspectionRecord(
        id="REC-1740821400000",
        captured_at=datetime(2025, 3, 1, 9, 30),
        image_data="data:image/jpeg;base64,AAAA",
        result=AnalysisResult("표면 스크래치", "표면 결함", "매뉴얼 3장과 일치", "재연마 후 재검사\n2차 확인 필요"),
    )


# ------------------------------------------------------------------
# export
# ------------------------------------------------------------------


def test_record_to_dict_without_image(record):
    d = record_to_dict(record)
    assert d == {
        "id": "REC-1740821400000",
        "captured_at": "2025-03-01T09:30:00",
        "result": {
            "defect_type": "표면 스크래치",
            "category": "표면 결함",
            "evidence": "매뉴얼 3장과 일치",
            "recommendations": "재연마 후 재검사\n2차 확인 필요",
        },
    }


def test_export_history_validates_and_keeps_order(record, schema):
    items = export_history([record, record], schema, include_image=True)
    assert len(items) == 2
    assert items[0]["image_data"] == record.image_data


def test_schema_rejects_missing_field(schema, record):
    d = record_to_dict(record)
    del d["result"]["evidence"]
    with pytest.raises(jsonschema.ValidationError):
        validate_report(d, schema)


def test_schema_rejects_bad_id(schema, record):
    d = record_to_dict(record)
    d["id"] = "42"
    with pytest.raises(jsonschema.ValidationError):
        validate_report(d, schema)


# ------------------------------------------------------------------
# render
# ------------------------------------------------------------------


def test_render_result_contains_all_fields(record):
    md = render_result_markdown(record.result)
    for value in ("표면 스크래치", "표면 결함", "매뉴얼 3장과 일치", "2차 확인 필요"):
        assert value in md


def test_render_connection_states(sources):
    session = InspectionSession()
    assert "미지정" in render_connection_markdown(session.connection)

    session.complete_setup(sources)
    md = render_connection_markdown(session.connection)
    assert "2 Sources" in md
    assert "- 2024_생산라인_표준_매뉴얼 (폴더)" in md
    assert "- A구역_용접_불량_판독기준.pdf (2.4MB)" in md


def test_render_history(record):
    assert render_history_markdown([]) == "판독 이력이 없습니다."
    md = render_history_markdown([record])
    assert "#0000 | 표면 스크래치 | 09:30" in md


def test_source_label_falls_back_to_kind():
    assert source_label(ReferenceSource("f", "라인", SourceKind.FOLDER, size="9MB")) == "폴더"
    assert source_label(ReferenceSource("a", "기준.pdf", SourceKind.PDF, "2.4MB")) == "2.4MB"
    assert source_label(ReferenceSource("b", "메모.txt", SourceKind.TEXT)) == "text"


def test_source_choice_omits_missing_date():
    dated = ReferenceSource("a", "기준.pdf", SourceKind.PDF, "2.4MB", "2025-02-10")
    bare = ReferenceSource("b", "사진.jpg", SourceKind.IMAGE)

    assert render_source_choice(dated) == "기준.pdf (2.4MB · 수정일: 2025-02-10)"
    assert render_source_choice(bare) == "사진.jpg (image)"
    assert "None" not in render_source_choice(bare)
