from __future__ import annotations
from typing import List

from ..common.types import AnalysisResult, InspectionRecord, KnowledgeConnection, ReferenceSource, SourceKind


def render_result_markdown(result: AnalysisResult) -> str:
    return "\n".join([
        "## 품질 관리 판독 리포트",
        f"**결함 카테고리**: `{result.category}`",
        "",
        "### 결함 유형",
        result.defect_type,
        "",
        "### 유사 사례 근거",
        result.evidence,
        "",
        "### 권장 조치 사항",
        result.recommendations,
    ])


def source_label(source: ReferenceSource) -> str:
    """폴더 for folders; otherwise the size, falling back to the kind."""
    if source.kind == SourceKind.FOLDER:
        return "폴더"
    return source.size or source.kind.value


def render_source_choice(source: ReferenceSource) -> str:
    parts = [source_label(source)]
    if source.last_modified:
        parts.append(f"수정일: {source.last_modified}")
    return f"{source.name} ({' · '.join(parts)})"


def render_connection_markdown(connection: KnowledgeConnection) -> str:
    if not connection.connected:
        return "**지식 베이스 미지정**: 자료를 지정해야 판독할 수 있습니다."
    lines = [f"**{len(connection.sources)} Sources** 연동됨"]
    if connection.last_synced_at is not None:
        lines.append(f"마지막 동기화: {connection.last_synced_at:%Y-%m-%d %H:%M:%S}")
    for s in connection.sources:
        lines.append(f"- {s.name} ({source_label(s)})")
    return "\n".join(lines)


def render_history_markdown(records: List[InspectionRecord]) -> str:
    if not records:
        return "판독 이력이 없습니다."
    md_lines = []
    for rec in records:
        md_lines.append(f"### #{rec.id[-4:]} | {rec.result.defect_type} | {rec.captured_at:%H:%M}")
        md_lines.append(f"- 카테고리: {rec.result.category}")
        md_lines.append(f"- 근거: {rec.result.evidence}")
        md_lines.append("---")
    return "\n".join(md_lines)
