"""Per-user inspection session: knowledge connection gate and capped history.

A session starts disconnected with an empty history. ``complete_setup`` is
the only transition; it can be repeated to replace the designated sources
but never disconnects. Nothing here outlives the session object.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from ..common.errors import NotConnectedError
from ..common.types import InspectionRecord, KnowledgeConnection, ReferenceSource

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 50


class InspectionSession:
    def __init__(self, history_limit: int = HISTORY_LIMIT):
        if history_limit < 1:
            raise ValueError("history_limit must be >= 1")
        self.history_limit = history_limit
        self.connection = KnowledgeConnection()
        self.history: List[InspectionRecord] = []

    @property
    def connected(self) -> bool:
        return self.connection.connected

    @property
    def sources(self) -> List[ReferenceSource]:
        return list(self.connection.sources)

    def complete_setup(self, sources: Sequence[ReferenceSource]) -> KnowledgeConnection:
        """Designate ``sources`` as the grounding set and mark the session connected."""
        sources = list(sources)
        if not sources:
            raise ValueError("at least one reference source must be designated")
        self.connection = KnowledgeConnection(
            connected=True,
            sources=sources,
            last_synced_at=datetime.now(),
        )
        logger.info("Knowledge base set: %d source(s)", len(sources))
        return self.connection

    def require_connected(self) -> None:
        if not self.connection.connected:
            raise NotConnectedError("no reference sources designated")

    def add_record(self, record: InspectionRecord) -> None:
        self.history = [record, *self.history][: self.history_limit]

    def search_history(self, query: str = "", category: Optional[str] = None) -> List[InspectionRecord]:
        """Case-insensitive text search over the report fields, newest first.

        ``category`` matches when it is contained in the record's category,
        so "표면 결함" also finds "표면 결함 (Surface Defects)".
        """
        q = query.strip().lower()
        out = []
        for rec in self.history:
            r = rec.result
            if category and category.lower() not in r.category.lower():
                continue
            if q and not any(
                q in field.lower()
                for field in (r.defect_type, r.category, r.evidence, r.recommendations)
            ):
                continue
            out.append(rec)
        return out

    def close(self) -> None:
        self.connection = KnowledgeConnection()
        self.history = []
