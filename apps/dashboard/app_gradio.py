from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

import gradio as gr

from qc_inspector.common.errors import AnalysisError, NotConnectedError
from qc_inspector.common.io import file_to_data_uri
from qc_inspector.mllm.factory import get_llm_client
from qc_inspector.report.parser import FALLBACK_CATEGORY
from qc_inspector.report.render import (
    render_connection_markdown,
    render_history_markdown,
    render_result_markdown,
    render_source_choice,
)
from qc_inspector.report.schema import export_history, load_schema
from qc_inspector.service.pipeline import InspectionPipeline
from qc_inspector.service.session import InspectionSession
from qc_inspector.service.settings import RuntimeConfig, load_runtime_config
from qc_inspector.sources.catalog import MockDriveCatalog, SourceCatalog
from qc_inspector.utils.log import setup_logger
from qc_inspector.utils.path import get_project_root

logger = logging.getLogger("qc_inspector.dashboard")

NOTICE_NOT_CONNECTED = "품질 판독을 위해 먼저 지식 베이스(구글 드라이브 자료)를 지정해야 합니다."
NOTICE_ANALYSIS_FAILED = "판독 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요."
NOTICE_NO_SELECTION = "지식 베이스로 사용할 자료를 하나 이상 선택하세요."
NOTICE_NO_IMAGE = "이미지를 업로드해주세요."

ALL_CATEGORIES = "전체"
CATEGORIES = [
    ALL_CATEGORIES,
    "표면 결함",
    "구조 결함",
    "외관 결함",
    "치수 결함",
    "기타 결함",
    FALLBACK_CATEGORY,
]


class Dashboard:
    """Event handlers for the gradio UI.

    Per-user state lives in the ``InspectionSession`` passed in through
    ``gr.State``; the catalog, pipeline and schema are shared read-only.
    """

    def __init__(self, *, catalog: SourceCatalog, pipeline: InspectionPipeline, report_schema: dict):
        self.catalog = catalog
        self.pipeline = pipeline
        self.report_schema = report_schema

    def source_choices(self, query: str = ""):
        return [(render_source_choice(s), s.id) for s in self.catalog.search(query)]

    def filter_sources(self, query, selected):
        """파일명/폴더명 검색"""
        return gr.update(choices=self.source_choices(query or ""), value=selected)

    def confirm_sources(self, selected_ids, session: InspectionSession):
        """선택한 자료를 지식 베이스로 지정"""
        sources = self.catalog.confirm_selection(selected_ids or [])
        if not sources:
            gr.Warning(NOTICE_NO_SELECTION)
            return session, render_connection_markdown(session.connection)
        session.complete_setup(sources)
        return session, render_connection_markdown(session.connection)

    def run_inspection(self, image_path, session: InspectionSession):
        """이미지 판독 실행.

        Returns (session, report, status, history, tabs update).
        """
        history = render_history_markdown(session.history)
        if image_path is None:
            return session, gr.update(), NOTICE_NO_IMAGE, history, gr.update()

        try:
            record = self.pipeline.inspect(session, file_to_data_uri(image_path))
        except NotConnectedError:
            # 자료 지정 탭으로 이동
            gr.Warning(NOTICE_NOT_CONNECTED)
            return session, gr.update(), NOTICE_NOT_CONNECTED, history, gr.update(selected="sources")
        except AnalysisError:
            gr.Warning(NOTICE_ANALYSIS_FAILED)
            return session, gr.update(), NOTICE_ANALYSIS_FAILED, history, gr.update()

        return (
            session,
            render_result_markdown(record.result),
            "판독 완료",
            render_history_markdown(session.history),
            gr.update(),
        )

    def search_history(self, query, category, session: InspectionSession):
        """판독 이력 검색"""
        cat = None if category in (None, "", ALL_CATEGORIES) else category
        return render_history_markdown(session.search_history(query or "", cat))

    def export_records(self, session: InspectionSession) -> str:
        """판독 이력을 JSON 파일로 내보내기"""
        items = export_history(session.history, self.report_schema)
        with tempfile.NamedTemporaryFile(
            "w", suffix=".json", prefix="qc_history_", delete=False, encoding="utf-8"
        ) as f:
            json.dump(items, f, indent=2, ensure_ascii=False)
        logger.info("Exported %d record(s) to %s", len(items), f.name)
        return f.name


def _resolve(path: str) -> Path:
    p = Path(path)
    if p.is_absolute() or p.exists():
        return p
    return get_project_root() / p


def build_dashboard(cfg: RuntimeConfig) -> Dashboard:
    mllm = get_llm_client(cfg.mllm_name, **cfg.mllm_kwargs)
    logger.info("Using model client %s (%s)", cfg.mllm_name, type(mllm).__name__)
    return Dashboard(
        catalog=MockDriveCatalog.from_config(cfg.sources),
        pipeline=InspectionPipeline(mllm_client=mllm),
        report_schema=load_schema(_resolve(cfg.report["schema_path"])),
    )


def build_app(cfg: RuntimeConfig) -> gr.Blocks:
    dash = build_dashboard(cfg)

    # Gradio UI 구성
    with gr.Blocks(title="QC Insight Pro", theme=gr.themes.Soft()) as demo:
        gr.Markdown("# 사내 지식 기반 품질 AI 판독 시스템")
        session_state = gr.State(InspectionSession(history_limit=cfg.history_limit))

        with gr.Tabs() as tabs:
            with gr.Tab("1) 지식 베이스 지정", id="sources"):
                source_query = gr.Textbox(label="파일명 또는 폴더명 검색...")
                source_picker = gr.CheckboxGroup(choices=dash.source_choices(), label="Google Drive Archive")
                confirm_btn = gr.Button("지식 베이스로 추가하기", variant="primary")
                connection_md = gr.Markdown(render_connection_markdown(InspectionSession().connection))

            with gr.Tab("2) 검사 이미지 판독", id="inspect"):
                with gr.Row():
                    with gr.Column(scale=1):
                        input_image = gr.Image(label="검사할 이미지를 업로드하세요", type="filepath")
                        inspect_btn = gr.Button("판독 실행", variant="primary")
                        status_text = gr.Textbox(label="상태", interactive=False)
                    with gr.Column(scale=1):
                        report_md = gr.Markdown("분석 결과를 기다리는 중입니다...")

            with gr.Tab("3) 판독 이력", id="history"):
                with gr.Row():
                    history_query = gr.Textbox(label="검색어")
                    history_category = gr.Dropdown(choices=CATEGORIES, value=ALL_CATEGORIES, label="카테고리")
                history_md = gr.Markdown(render_history_markdown([]))
                export_btn = gr.Button("이력 데이터 내보내기")
                export_file = gr.File(label="내보낸 이력")

        # 이벤트 연결
        source_query.change(fn=dash.filter_sources, inputs=[source_query, source_picker], outputs=[source_picker])
        confirm_btn.click(
            fn=dash.confirm_sources,
            inputs=[source_picker, session_state],
            outputs=[session_state, connection_md],
        )
        # "once": a second click while a request is pending is ignored
        inspect_btn.click(
            fn=dash.run_inspection,
            inputs=[input_image, session_state],
            outputs=[session_state, report_md, status_text, history_md, tabs],
            trigger_mode="once",
        )
        for trigger in (history_query.change, history_category.change):
            trigger(
                fn=dash.search_history,
                inputs=[history_query, history_category, session_state],
                outputs=[history_md],
            )
        export_btn.click(fn=dash.export_records, inputs=[session_state], outputs=[export_file])

    return demo


def main() -> None:
    cfg = load_runtime_config()
    setup_logger(cfg.logging)
    build_app(cfg).launch(server_port=7860)


if __name__ == "__main__":
    main()
