from __future__ import annotations
from typing import Optional

from .base import BaseLLMClient

DEFAULT_REPLY = (
    "[결함 유형]: 표면 스크래치\n"
    "[결함 카테고리]: 표면 결함 (Surface Defects)\n"
    "[유사 사례 근거]: 지정된 지식 베이스의 스크래치 허용 기준과 대조 (오프라인 응답)\n"
    "[권장 조치 사항]: 해당 부품을 라인에서 분리 후 재검사\n"
    "반복 발생 시 공정 담당자에게 보고"
)


class EchoMLLM(BaseLLMClient):
    """Offline placeholder.

    Returns a fixed tagged reply (or ``reply`` if given) without any network
    call, so the dashboard runs without a Google API key. Only the most
    recent payload is kept, in ``last_request``.
    """

    def __init__(self, reply: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.reply = DEFAULT_REPLY if reply is None else reply
        self.last_request: Optional[dict] = None

    def send_request(self, payload: dict) -> str:
        self.last_request = payload
        return self.reply
