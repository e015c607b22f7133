"""
Streamlit application for doc-preview.
"""
import asyncio
import base64
from typing import List

import pandas as pd
import streamlit as st

from doc_preview.config.logging_config import setup_logging
from doc_preview.config.settings import ACCEPTED_EXTENSIONS
from doc_preview.core.autosave import SessionAutosaver
from doc_preview.core.registry import DocumentRegistry
from doc_preview.core.render_dispatcher import RenderPlan, RenderStrategy, ViewMode, dispatch
from doc_preview.core.summarization import SummarizationLifecycle
from doc_preview.models.document import DocumentKind, DocumentRecord, IncomingFile, SummarizationState
from doc_preview.services.session_store import SessionStore
from doc_preview.services.summarizer_service import SummarizerService

FILE_ICONS = {
    "pdf": "📕",
    "markdown": "📝",
    "xml": "🧾",
    "text": "📄",
    "presentation": "📊",
    "unknown": "📁",
}


@st.cache_resource
def get_session_store() -> SessionStore:
    """Get or create the session store instance."""
    return SessionStore()


@st.cache_resource
def get_summarizer_service() -> SummarizerService:
    """Get or create the summarizer service instance."""
    return SummarizerService()


def init_session_state():
    """Create the registry for this browser session and restore the saved documents."""
    if "registry" in st.session_state:
        return

    registry = DocumentRegistry()
    autosaver = SessionAutosaver(registry, get_session_store())
    autosaver.restore()
    autosaver.start()

    st.session_state.registry = registry
    st.session_state.autosaver = autosaver
    st.session_state.lifecycle = SummarizationLifecycle(registry, get_summarizer_service())
    st.session_state.view_modes = {}
    st.session_state.ingested_uploads = set()


def ingest_uploads(uploaded_files) -> List[DocumentRecord]:
    """Ingest uploader files not seen before in this session."""
    seen = st.session_state.ingested_uploads
    fresh = [file for file in uploaded_files if file.file_id not in seen]
    if not fresh:
        return []

    files = [
        IncomingFile(
            name=file.name,
            mime_type=file.type or "",
            size_bytes=file.size,
            raw_bytes=file.getvalue()
        )
        for file in fresh
    ]
    records = asyncio.run(st.session_state.registry.ingest(files))
    seen.update(file.file_id for file in fresh)
    return records


def render_plan(plan: RenderPlan, record: DocumentRecord):
    """Render a dispatched plan with the matching Streamlit element."""
    registry: DocumentRegistry = st.session_state.registry

    if plan.strategy is RenderStrategy.SUMMARY:
        st.markdown("**🤖 AI Summary**")
        if plan.pending:
            st.info(plan.message)
        elif plan.state is SummarizationState.FAILED:
            st.error(plan.text)
        elif plan.text:
            st.write(plan.text)
        else:
            st.caption(plan.message)

    elif plan.strategy is RenderStrategy.PDF_VIEWER:
        data = base64.b64encode(registry.resources.read(plan.resource)).decode("ascii")
        st.markdown(
            f'<iframe src="data:application/pdf;base64,{data}#toolbar=0" '
            f'width="100%" height="500" style="border:none" title="{record.name}"></iframe>',
            unsafe_allow_html=True
        )

    elif plan.strategy is RenderStrategy.MARKDOWN:
        st.markdown(plan.text)

    elif plan.strategy is RenderStrategy.TEXT_BLOCK:
        st.code(plan.text, language="xml" if record.kind is DocumentKind.XML else None)

    elif plan.strategy is RenderStrategy.PRESENTATION_PLACEHOLDER:
        st.info(plan.message)
        if plan.resource is not None:
            st.download_button(
                "Download file",
                data=registry.resources.read(plan.resource),
                file_name=record.name,
                mime=record.mime_type,
                key=f"download_{record.id}"
            )

    else:
        st.warning(plan.message)


def display_document_card(record: DocumentRecord):
    """Display one document with its preview/summary toggle and actions."""
    registry: DocumentRegistry = st.session_state.registry
    lifecycle: SummarizationLifecycle = st.session_state.lifecycle
    view_modes = st.session_state.view_modes

    with st.container(border=True):
        col1, col2, col3, col4 = st.columns([6, 2, 2, 1])
        with col1:
            st.markdown(f"{FILE_ICONS[record.kind.value]} **{record.name}**")
            st.caption(f"{record.size_bytes / 1024:.1f} KB · {record.mime_type}")
        with col2:
            show_summary = st.toggle(
                "Summary",
                value=view_modes.get(record.id) is ViewMode.SUMMARY,
                key=f"view_{record.id}"
            )
            view_modes[record.id] = ViewMode.SUMMARY if show_summary else ViewMode.PREVIEW
        with col3:
            in_flight = record.summarization_state is SummarizationState.IN_FLIGHT
            label = "Summarize" if record.summarization_state is SummarizationState.IDLE else "Re-summarize"
            if st.button(label, key=f"summarize_{record.id}", disabled=in_flight):
                with st.spinner("Analyzing document..."):
                    asyncio.run(lifecycle.summarize(record.id))
                st.rerun()
        with col4:
            if st.button("✕", key=f"remove_{record.id}", help="Remove document"):
                registry.remove(record.id)
                view_modes.pop(record.id, None)
                st.rerun()

        render_plan(dispatch(record, view_modes[record.id]), record)


def display_session_overview(records: List[DocumentRecord]):
    """Display the document list in the sidebar."""
    st.subheader(f"Recent Files ({len(records)})")
    if not records:
        st.write("No files attached yet.")
        return

    overview = pd.DataFrame({
        "Name": [record.name for record in records],
        "Size (KB)": [round(record.size_bytes / 1024) for record in records],
        "Type": [record.kind.value for record in records],
        "Summary": [record.summarization_state.value for record in records],
    })
    st.dataframe(overview, hide_index=True)


def main():
    """Main function to run the Streamlit app."""
    setup_logging()
    st.set_page_config(
        page_title="doc-preview",
        page_icon="📚",
        layout="wide"
    )

    init_session_state()
    registry: DocumentRegistry = st.session_state.registry
    autosaver: SessionAutosaver = st.session_state.autosaver

    st.title("doc-preview")

    # Sidebar
    with st.sidebar:
        st.title("📚 doc-preview")
        st.write("Drop documents to preview them and generate AI summaries. Your files stay in this session.")

        display_session_overview(registry.records())

        if st.button("Clear Session"):
            registry.clear()
            st.session_state.view_modes = {}
            st.rerun()

        if autosaver.last_save_failed:
            st.warning("Storage limit reached. Recent changes are not saved and will be lost on reload.")

    uploaded_files = st.file_uploader(
        "Upload documents",
        type=[ext.lstrip(".") for ext in ACCEPTED_EXTENSIONS],
        accept_multiple_files=True,
        help="PDF, Markdown, XML, text and PowerPoint files"
    )
    if uploaded_files:
        ingest_uploads(uploaded_files)

    records = registry.records()
    if not records:
        st.info("Ready to start? Drop your PDF, Markdown, XML or PPTX documents above for an instant preview.")
        return

    columns = st.columns(2)
    for index, record in enumerate(records):
        with columns[index % 2]:
            display_document_card(record)


if __name__ == "__main__":
    main()
