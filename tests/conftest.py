"""Shared pytest fixtures."""

from __future__ import annotations

import base64

import cv2
import numpy as np
import pytest

from qc_inspector.common.types import ReferenceSource, SourceKind
from qc_inspector.service.session import InspectionSession

SAMPLE_REPLY = (
    "[결함 유형]: 표면 스크래치\n"
    "[결함 카테고리]: 표면 결함\n"
    "[유사 사례 근거]: 매뉴얼 3장과 일치\n"
    "[권장 조치 사항]: 재연마 후 재검사\n"
    "2차 확인 필요"
)


@pytest.fixture
def sources():
    return [
        ReferenceSource("f1", "2024_생산라인_표준_매뉴얼", SourceKind.FOLDER, last_modified="2024-12-01"),
        ReferenceSource("ref1", "A구역_용접_불량_판독기준.pdf", SourceKind.PDF, "2.4MB", "2025-02-10"),
    ]


@pytest.fixture
def connected_session(sources):
    session = InspectionSession()
    session.complete_setup(sources)
    return session


def _png_data_uri(width: int, height: int) -> str:
    image = np.full((height, width, 3), 128, dtype=np.uint8)
    ok, encoded = cv2.imencode(".png", image)
    assert ok
    return "data:image/png;base64," + base64.b64encode(encoded.tobytes()).decode("utf-8")


@pytest.fixture
def image_data_uri():
    """Small grey PNG as a browser-style data URI."""
    return _png_data_uri(64, 48)


@pytest.fixture
def large_image_data_uri():
    return _png_data_uri(2000, 1000)


@pytest.fixture
def sample_reply():
    return SAMPLE_REPLY
