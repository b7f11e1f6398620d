"""Tagged-section parser for the model's Korean defect report.

The system instruction asks for four bracketed headers, each followed by a
colon. The first three fields end at the first newline or the next ``[``;
the recommendations field is last and runs to the end of the text with its
line breaks intact. A header that is missing gets a fixed fallback value.
"""
from __future__ import annotations

import re
from typing import Any, Mapping, Optional

from ..common.types import AnalysisResult

HEADER_DEFECT_TYPE = "결함 유형"
HEADER_CATEGORY = "결함 카테고리"
HEADER_EVIDENCE = "유사 사례 근거"
HEADER_RECOMMENDATIONS = "권장 조치 사항"

FALLBACK_DEFECT_TYPE = "미판별 (분석 데이터 부족)"
FALLBACK_CATEGORY = "미분류"
FALLBACK_EVIDENCE = "드라이브 데이터와 일치하는 사례를 찾을 수 없음"
FALLBACK_RECOMMENDATIONS = "현장 관리자 확인 필요"


def _line_field(header: str) -> re.Pattern:
    return re.compile(r"\[" + re.escape(header) + r"\]\s*:\s*(.*?)(?=\n|\[|$)")


_DEFECT_TYPE_RE = _line_field(HEADER_DEFECT_TYPE)
_CATEGORY_RE = _line_field(HEADER_CATEGORY)
_EVIDENCE_RE = _line_field(HEADER_EVIDENCE)
_RECOMMENDATIONS_RE = re.compile(r"\[" + re.escape(HEADER_RECOMMENDATIONS) + r"\]\s*:\s*([\s\S]*)")


def _capture(pattern: re.Pattern, text: str, fallback: str) -> str:
    m = pattern.search(text)
    return m.group(1).strip() if m else fallback


def extract_analysis_result(text: Optional[str]) -> AnalysisResult:
    """Map a raw model reply to an ``AnalysisResult``. Never raises."""
    text = text or ""
    return AnalysisResult(
        defect_type=_capture(_DEFECT_TYPE_RE, text, FALLBACK_DEFECT_TYPE),
        category=_capture(_CATEGORY_RE, text, FALLBACK_CATEGORY),
        evidence=_capture(_EVIDENCE_RE, text, FALLBACK_EVIDENCE),
        recommendations=_capture(_RECOMMENDATIONS_RE, text, FALLBACK_RECOMMENDATIONS),
    )


def result_from_mapping(data: Mapping[str, Any]) -> AnalysisResult:
    """Build a result from a JSON object (schema-constrained reply).

    Missing, null or blank values get the same fallbacks as the tagged parser.
    """
    def pick(key: str, fallback: str) -> str:
        value = data.get(key)
        if value is None:
            return fallback
        value = str(value).strip()
        return value or fallback

    return AnalysisResult(
        defect_type=pick("defect_type", FALLBACK_DEFECT_TYPE),
        category=pick("category", FALLBACK_CATEGORY),
        evidence=pick("evidence", FALLBACK_EVIDENCE),
        recommendations=pick("recommendations", FALLBACK_RECOMMENDATIONS),
    )
