"""Reference source catalogs.

The inspector never reads source content; a catalog only lists descriptors
for the user to designate. ``MockDriveCatalog`` stands in for a Google Drive
listing until a real index exists.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Protocol, Sequence

from ..common.types import ReferenceSource, SourceKind

MOCK_DRIVE_CONTENTS: List[ReferenceSource] = [
    ReferenceSource("f1", "2024_생산라인_표준_매뉴얼", SourceKind.FOLDER, last_modified="2024-12-01"),
    ReferenceSource("f2", "품질관리_결함_데이터베이스", SourceKind.FOLDER, last_modified="2025-01-15"),
    ReferenceSource("ref1", "A구역_용접_불량_판독기준.pdf", SourceKind.PDF, "2.4MB", "2025-02-10"),
    ReferenceSource("ref2", "사출성형_기포_발생_사례.txt", SourceKind.TEXT, "15KB", "2024-11-20"),
    ReferenceSource("ref3", "스크래치_허용_범위_이미지.img", SourceKind.IMAGE, "4.1MB", "2025-01-05"),
    ReferenceSource("ref4", "B라인_조립_체크리스트.pdf", SourceKind.PDF, "1.2MB", "2025-02-28"),
]


class SourceCatalog(Protocol):
    def list_available_sources(self) -> List[ReferenceSource]:
        ...

    def confirm_selection(self, ids: Iterable[str]) -> List[ReferenceSource]:
        ...


class MockDriveCatalog:
    """In-memory catalog over a fixed list of descriptors."""

    def __init__(self, items: Optional[Sequence[ReferenceSource]] = None):
        items = list(MOCK_DRIVE_CONTENTS if items is None else items)
        ids = [s.id for s in items]
        if len(set(ids)) != len(ids):
            raise ValueError("source ids must be unique")
        self._items = items

    @classmethod
    def from_config(cls, items: Optional[list[dict]]) -> "MockDriveCatalog":
        if not items:
            return cls()
        return cls([ReferenceSource.from_dict(d) for d in items])

    def list_available_sources(self) -> List[ReferenceSource]:
        return list(self._items)

    def confirm_selection(self, ids: Iterable[str]) -> List[ReferenceSource]:
        """Return the selected sources in catalog order. Unknown ids are ignored."""
        wanted = set(ids)
        return [s for s in self._items if s.id in wanted]

    def search(self, query: str) -> List[ReferenceSource]:
        q = query.strip().lower()
        if not q:
            return self.list_available_sources()
        return [s for s in self._items if q in s.name.lower()]
