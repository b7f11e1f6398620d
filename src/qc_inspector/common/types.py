from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class SourceKind(str, Enum):
    IMAGE = "image"
    TEXT = "text"
    PDF = "pdf"
    FOLDER = "folder"


@dataclass(frozen=True)
class ReferenceSource:
    """A user-designated reference item (file or folder descriptor).

    Only the name and kind ever reach the model; content is never read.
    """
    id: str
    name: str
    kind: SourceKind
    size: Optional[str] = None
    last_modified: Optional[str] = None

    @classmethod
    def from_dict(cls, d: dict) -> "ReferenceSource":
        return cls(
            id=str(d["id"]),
            name=str(d["name"]),
            kind=SourceKind(d.get("kind", d.get("type", "text"))),
            size=d.get("size"),
            last_modified=d.get("last_modified", d.get("lastModified")),
        )


@dataclass
class KnowledgeConnection:
    connected: bool = False
    sources: List[ReferenceSource] = field(default_factory=list)
    last_synced_at: Optional[datetime] = None


@dataclass(frozen=True)
class AnalysisResult:
    defect_type: str
    category: str
    evidence: str
    recommendations: str

    def to_dict(self) -> dict:
        return {
            "defect_type": self.defect_type,
            "category": self.category,
            "evidence": self.evidence,
            "recommendations": self.recommendations,
        }


@dataclass(frozen=True)
class InspectionRecord:
    id: str
    captured_at: datetime
    image_data: str  # data URI as uploaded
    result: AnalysisResult
