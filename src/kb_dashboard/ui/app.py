"""Streamlit dashboard for the knowledge base: statistics, graph and PDF upload."""

from __future__ import annotations

import streamlit as st

from kb_dashboard.api.client import KBClient
from kb_dashboard.api.errors import KBClientError
from kb_dashboard.config import get_settings
from kb_dashboard.ui.graph_view import render_graph_view
from kb_dashboard.ui.session import reset_views
from kb_dashboard.ui.stats_view import (
    load_kb_data,
    render_documents,
    render_error,
    render_stats_tiles,
)
from kb_dashboard.ui.upload_flow import KB_PAGE, UploadFlow, render_upload_flow
from kb_dashboard.utils.logging import get_logger, setup_logging

UPLOAD_PAGE = "upload"
PAGES = {KB_PAGE: "Knowledge Base", UPLOAD_PAGE: "Upload"}


@st.cache_resource
def _client() -> KBClient:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    get_logger(__name__).info("dashboard_started", api_base_url=settings.KB_API_BASE_URL)
    return KBClient.from_settings(settings)


def _render_kb_page(client: KBClient) -> None:
    result = load_kb_data(client)
    if isinstance(result, KBClientError):
        render_error(result)
        return

    render_stats_tiles(result)
    st.subheader("Knowledge Graph")
    render_graph_view(client)
    render_documents(result)


def _render_upload_page(client: KBClient) -> None:
    if "upload_flow" not in st.session_state:
        st.session_state["upload_flow"] = UploadFlow(client)

    outcome = render_upload_flow(st.session_state["upload_flow"])
    if outcome is not None and outcome.navigate_to:
        st.session_state["navigate_to"] = outcome.navigate_to
        st.rerun()


def main() -> None:
    st.set_page_config(page_title="Knowledge Base", layout="wide")
    client = _client()

    pending = st.session_state.pop("navigate_to", None)
    if pending in PAGES:
        st.session_state["page"] = pending

    st.sidebar.title("Knowledge Base")
    page = st.sidebar.radio(
        "Section",
        options=list(PAGES),
        format_func=PAGES.__getitem__,
        key="page",
        label_visibility="collapsed",
    )

    if st.session_state.get("mounted_page") != page:
        reset_views()
        st.session_state["mounted_page"] = page

    if page == UPLOAD_PAGE:
        _render_upload_page(client)
    else:
        _render_kb_page(client)


if __name__ == "__main__":
    main()
