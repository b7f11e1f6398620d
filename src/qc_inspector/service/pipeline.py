from __future__ import annotations
import logging
import time
from datetime import datetime
from typing import Callable

from ..common.errors import AnalysisError, NotConnectedError
from ..common.types import InspectionRecord
from ..mllm.base import BaseLLMClient
from .session import InspectionSession

logger = logging.getLogger(__name__)


def _record_id(now: datetime) -> str:
    return f"REC-{int(now.timestamp() * 1000)}"


class InspectionPipeline:
    """Gate check → model call → record → history.

    Raises ``NotConnectedError`` before anything is sent when the session
    has no designated sources, and lets ``AnalysisError`` from the client
    propagate; in both cases the session is left untouched.
    """

    def __init__(self, *, mllm_client: BaseLLMClient, clock: Callable[[], datetime] = datetime.now):
        self.mllm = mllm_client
        self.clock = clock

    def inspect(self, session: InspectionSession, image_data: str) -> InspectionRecord:
        try:
            session.require_connected()
        except NotConnectedError:
            logger.warning("Inspection rejected: knowledge base not designated")
            raise

        logger.info("Analyzing image against %d source(s)", len(session.sources))
        before = time.time()
        try:
            result = self.mllm.analyze(image_data, session.sources)
        except AnalysisError:
            logger.exception("Analysis failed")
            raise
        except Exception as e:
            # undecodable upload, bad payload: same uniform failure for the caller
            logger.exception("Analysis failed")
            raise AnalysisError(str(e)) from e
        logger.info("Analysis done in %.2fs: %s / %s", time.time() - before, result.defect_type, result.category)

        now = self.clock()
        record = InspectionRecord(
            id=self._unique_id(session, _record_id(now)),
            captured_at=now,
            image_data=image_data,
            result=result,
        )
        session.add_record(record)
        return record

    @staticmethod
    def _unique_id(session: InspectionSession, base: str) -> str:
        taken = {r.id for r in session.history}
        if base not in taken:
            return base
        n = 1
        while f"{base}-{n}" in taken:
            n += 1
        return f"{base}-{n}"
