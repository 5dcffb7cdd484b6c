"""Aggregate knowledge-base statistics and the document table."""

from __future__ import annotations

from datetime import datetime

import pandas as pd
import streamlit as st

from kb_dashboard.api.client import KBClient
from kb_dashboard.api.errors import KBClientError, KBTimeoutError
from kb_dashboard.api.models import KBDataResponse, KBStats
from kb_dashboard.ui.session import fetch_once

DOCUMENT_COLUMNS = ["Title", "Type", "Chunks", "Entities", "Relationships", "Created"]


def _parse_timestamp(value: str) -> datetime | None:
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_date(value: str) -> str:
    parsed = _parse_timestamp(value)
    return parsed.strftime("%Y-%m-%d") if parsed else value


def format_timestamp(value: str) -> str:
    parsed = _parse_timestamp(value)
    return parsed.strftime("%Y-%m-%d %H:%M:%S") if parsed else value


def documents_frame(stats: KBStats) -> pd.DataFrame:
    """One row per document, in backend order."""

    rows = [
        {
            "Title": doc.title,
            "Type": doc.file_type,
            "Chunks": doc.total_chunks,
            "Entities": doc.total_entities,
            "Relationships": doc.total_relationships,
            "Created": format_date(doc.created_at),
        }
        for doc in stats.documents
    ]
    return pd.DataFrame(rows, columns=DOCUMENT_COLUMNS)


def load_kb_data(client: KBClient) -> KBDataResponse | KBClientError:
    with st.spinner("Loading knowledge base statistics…"):
        return fetch_once("kb_data", client.get_kb_data)


def render_error(error: KBClientError) -> None:
    if isinstance(error, KBTimeoutError):
        st.warning(f"Timed out: {error}")
    else:
        st.error(f"Error: {error}")


def render_stats_tiles(response: KBDataResponse) -> None:
    stats = response.stats
    st.header("Knowledge Base Statistics")
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Documents", stats.total_documents)
    col2.metric("Total Chunks", stats.total_chunks)
    col3.metric("Total Entities", stats.total_entities)
    col4.metric("Total Relationships", stats.total_relationships)
    st.caption(f"Fetched in {response.execution_time:.2f}s")


def render_documents(response: KBDataResponse) -> None:
    st.subheader("Documents")
    frame = documents_frame(response.stats)
    if frame.empty:
        st.info("No documents have been processed yet.")
    else:
        st.dataframe(frame, use_container_width=True, hide_index=True)

    st.caption(f"Last updated: {format_timestamp(response.stats.last_updated)}")
