"""Per-session caching of one-shot backend reads."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import streamlit as st

from kb_dashboard.api.errors import KBClientError

T = TypeVar("T")

VIEW_KEYS = ("kb_data", "graph_data", "graph_selected", "upload_flow", "upload_seen")


def fetch_once(
    key: str,
    loader: Callable[[], T],
    state: Any | None = None,
) -> T | KBClientError:
    """Run ``loader`` once per mount, remembering either its result or its failure."""

    store = st.session_state if state is None else state
    if key not in store:
        try:
            store[key] = loader()
        except KBClientError as exc:
            store[key] = exc
    return store[key]


def reset_views(state: Any | None = None) -> None:
    """Forget cached reads so the next render behaves like a fresh mount."""

    store = st.session_state if state is None else state
    for key in VIEW_KEYS:
        if key in store:
            del store[key]
