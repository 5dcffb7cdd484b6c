from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("streamlit")

from streamlit.testing.v1 import AppTest

from kb_dashboard.api.client import KBClient
from kb_dashboard.api.errors import KBRequestError
from kb_dashboard.ui import upload_flow
from kb_dashboard.ui.upload_flow import KB_PAGE, UploadOutcome

APP_PATH = str(Path(__file__).resolve().parents[1] / "src" / "kb_dashboard" / "ui" / "app.py")


@pytest.fixture
def offline_backend(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    calls: list[str] = []

    def fail(self: KBClient) -> None:
        calls.append("kb_data")
        raise KBRequestError("backend offline", status_code=503)

    monkeypatch.setattr(KBClient, "get_kb_data", fail)
    return calls


def test_pending_navigation_lands_on_kb_page_and_resets_views(offline_backend: list[str]) -> None:
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.session_state["page"] = "upload"
    at.session_state["mounted_page"] = "upload"
    at.session_state["navigate_to"] = KB_PAGE
    at.session_state["upload_seen"] = ("a.pdf", 4)
    at.session_state["graph_selected"] = frozenset({"ORG"})

    at.run()

    assert not at.exception
    assert at.radio[0].value == KB_PAGE
    assert at.session_state["mounted_page"] == KB_PAGE
    assert "navigate_to" not in at.session_state
    assert "upload_seen" not in at.session_state
    assert "graph_selected" not in at.session_state
    assert offline_backend == ["kb_data"]
    assert "backend offline" in at.error[0].value


def test_successful_upload_redirects_to_kb_page(
    monkeypatch: pytest.MonkeyPatch,
    offline_backend: list[str],
) -> None:
    def started(flow: upload_flow.UploadFlow) -> UploadOutcome:
        return UploadOutcome(success=True, navigate_to=KB_PAGE)

    monkeypatch.setattr(upload_flow, "render_upload_flow", started)
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.session_state["page"] = "upload"

    at.run()

    assert not at.exception
    assert at.radio[0].value == KB_PAGE
    assert at.session_state["mounted_page"] == KB_PAGE
    assert "upload_flow" not in at.session_state
    assert offline_backend == ["kb_data"]


def test_kb_page_fetches_once_across_reruns(offline_backend: list[str]) -> None:
    at = AppTest.from_file(APP_PATH, default_timeout=30)

    at.run()
    at.run()

    assert at.radio[0].value == KB_PAGE
    assert offline_backend == ["kb_data"]
    assert isinstance(at.session_state["kb_data"], KBRequestError)
