"""Base class for defect-analysis LLM clients.

Holds the fixed system instruction, the grounding-context and prompt
builders, and the request/parse flow shared by every backend.
"""
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional, Tuple

from ..common.io import decode_data_uri, prepare_image_bytes
from ..common.types import AnalysisResult, ReferenceSource, SourceKind
from ..report.parser import extract_analysis_result, result_from_mapping

logger = logging.getLogger(__name__)

# Sole mechanism that keeps the reply parseable; must not vary per call.
SYSTEM_INSTRUCTION = '''
당신은 품질 관리(QC) 판독 전문가입니다.
사용자가 업로드한 이미지를 분석하여 결함을 판별하는 것이 임무입니다.

[판독 기준]
- 반드시 연동된 구글 드라이브 아카이브 정보를 최우선 근거로 활용하십시오.
- 드라이브에는 공식 공정 매뉴얼, 결함 사례집, 품질 기준서가 포함되어 있습니다.
- 시각적 증거와 매뉴얼의 텍스트 설명을 대조하여 결론을 도출하십시오.

[결함 카테고리 분류 지침]
모든 결함은 다음 중 하나로 분류하십시오:
1. 표면 결함 (Surface Defects): 스크래치, 오염, 얼룩 등
2. 구조 결함 (Structural Defects): 크랙, 파손, 변형 등
3. 외관 결함 (Cosmetic Defects): 색상 불일치, 광택 불량 등
4. 치수 결함 (Dimensional Defects): 크기 오차, 간격 불량 등
5. 기타 결함 (Others): 위 카테고리에 속하지 않는 경우

[답변 필수 형식]
반드시 아래 태그를 사용하여 한국어로 답변하십시오:

[결함 유형]: (구체적인 결함 명칭)
[결함 카테고리]: (위에 정의된 5가지 카테고리 중 하나 선택)
[유사 사례 근거]: (연동된 드라이브 파일 중 어떤 기준이나 사례와 가장 일치하는지 설명)
[권장 조치 사항]: (품질 기준에 따른 현장 대응 지침 및 공정 개선 제안)
'''

REFERENCE_CONTEXT_TEMPLATE = (
    "사용자가 지정한 지식 베이스 소스 목록: {source_list}.\n"
    "AI는 위 파일들의 내용을 인덱싱하여 품질 판독의 최우선 기준으로 삼고 있습니다.\n"
    "만약 이미지의 결함이 위 자료 중 어느 지침에 해당하는지 명확히 밝혀주십시오."
)

PROMPT_WITH_CONTEXT = (
    "[연동 데이터 정보]\n{reference_context}\n\n"
    "위의 사내 아카이브 데이터를 기반으로 다음 이미지의 품질을 판독하십시오."
)

PROMPT_WITHOUT_CONTEXT = "다음 이미지의 품질 결함을 분석하고 판독 결과를 제공하십시오."

IMAGE_MIME_TYPE = "image/jpeg"


def source_marker(source: ReferenceSource) -> str:
    return "[폴더]" if source.kind == SourceKind.FOLDER else "[파일]"


def build_reference_context(sources: Iterable[ReferenceSource]) -> str:
    """Describe the designated sources as one grounding paragraph."""
    source_list = ", ".join(f"{source_marker(s)} {s.name}" for s in sources)
    return REFERENCE_CONTEXT_TEMPLATE.format(source_list=source_list)


def build_prompt(reference_context: Optional[str] = None) -> str:
    if reference_context:
        return PROMPT_WITH_CONTEXT.format(reference_context=reference_context)
    return PROMPT_WITHOUT_CONTEXT


class BaseLLMClient(ABC):
    """Base class for defect analysis.

    Subclasses only talk to their backend (``send_request``); prompt
    composition and reply parsing live here.
    """

    def __init__(
        self,
        max_image_size: Tuple[int, int] = (1024, 1024),
        max_retries: int = 1,
        structured_output: bool = False,
    ):
        self.max_image_size = tuple(max_image_size)
        self.max_retries = max(1, int(max_retries))
        self.structured_output = structured_output
        self.api_time_cost = 0.0

    def encode_image(self, image_data: str) -> bytes:
        """Decode a data URI (or bare base64) and fit it to ``max_image_size``."""
        return prepare_image_bytes(decode_data_uri(image_data), self.max_image_size)

    def build_payload(self, image_data: str, reference_context: Optional[str] = None) -> Dict:
        return {
            "image": {"mime_type": IMAGE_MIME_TYPE, "data": self.encode_image(image_data)},
            "prompt": build_prompt(reference_context),
            "system_instruction": SYSTEM_INSTRUCTION,
        }

    @abstractmethod
    def send_request(self, payload: dict) -> str:
        """Send the payload and return the raw reply text ("" if none).

        Must raise ``AnalysisError`` on any backend failure.
        """
        pass

    def parse_response(self, text: str) -> AnalysisResult:
        """Map reply text to a result.

        With structured output on, a JSON object reply is read directly;
        anything else goes through the tagged-section parser.
        """
        if self.structured_output:
            try:
                data = json.loads(text)
            except (TypeError, ValueError):
                data = None
            if isinstance(data, dict):
                return result_from_mapping(data)
            logger.debug("Structured reply was not a JSON object; using tagged parser")
        return extract_analysis_result(text)

    def analyze(self, image_data: str, sources: Iterable[ReferenceSource]) -> AnalysisResult:
        """Compose the request for ``image_data`` grounded on ``sources`` and parse the reply."""
        payload = self.build_payload(image_data, build_reference_context(sources))
        text = self.send_request(payload)
        return self.parse_response(text)
