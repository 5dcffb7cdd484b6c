"""Single-PDF upload with client-side validation and a double-submit guard."""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

import streamlit as st

from kb_dashboard.api.errors import KBClientError
from kb_dashboard.api.models import UploadResponse
from kb_dashboard.utils.logging import get_logger

logger = get_logger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
MAX_UPLOAD_BYTES = 50 * 1024 * 1024
KB_PAGE = "kb"


class UploadClient(Protocol):
    def upload_pdf(self, filename: str, data: bytes, content_type: str) -> UploadResponse: ...


class UploadPhase(str, Enum):
    IDLE = "idle"
    FILE_SELECTED = "file-selected"
    UPLOADING = "uploading"


@dataclass(frozen=True)
class UploadCandidate:
    name: str
    content_type: str
    size: int
    data: bytes

    @classmethod
    def from_uploaded_file(cls, uploaded: Any) -> UploadCandidate:
        """Build a candidate from a Streamlit ``UploadedFile``."""

        data = uploaded.getvalue()
        return cls(
            name=uploaded.name,
            content_type=uploaded.type or "",
            size=int(uploaded.size),
            data=data,
        )


@dataclass(frozen=True)
class UploadOutcome:
    success: bool
    navigate_to: str | None = None
    response: UploadResponse | None = None


def validate_pdf(candidate: UploadCandidate) -> str | None:
    """Return an error message, or ``None`` when the file may be uploaded."""

    if candidate.content_type != PDF_CONTENT_TYPE:
        return "Only PDF files are allowed"
    if candidate.size > MAX_UPLOAD_BYTES:
        return "File size must be less than 50MB"
    return None


class UploadFlow:
    """Upload state for one component instance; at most one upload in flight."""

    def __init__(self, client: UploadClient) -> None:
        self._client = client
        self.file: UploadCandidate | None = None
        self.error: str | None = None
        self.dragging = False
        self.uploading = False

    @property
    def phase(self) -> UploadPhase:
        if self.uploading:
            return UploadPhase.UPLOADING
        if self.file is not None:
            return UploadPhase.FILE_SELECTED
        return UploadPhase.IDLE

    def drag_enter(self) -> None:
        self.dragging = True

    def drag_leave(self) -> None:
        self.dragging = False

    def select_file(self, candidate: UploadCandidate) -> bool:
        """Handle a drop or file-pick; returns whether the file was accepted."""

        self.dragging = False
        message = validate_pdf(candidate)
        if message:
            logger.info(
                "upload_rejected",
                filename=candidate.name,
                content_type=candidate.content_type,
                size=candidate.size,
                reason=message,
            )
            self.error = message
            return False

        self.file = candidate
        self.error = None
        return True

    def clear_file(self) -> None:
        """The user removed the file from the picker."""

        self.file = None
        self.error = None

    def submit(self) -> UploadOutcome | None:
        if self.file is None or self.uploading:
            return None

        candidate = self.file
        self.uploading = True
        self.error = None
        logger.info("upload_started", filename=candidate.name, size=candidate.size)

        try:
            response = self._client.upload_pdf(
                candidate.name,
                candidate.data,
                candidate.content_type,
            )
        except KBClientError as exc:
            self.error = str(exc) or "An error occurred during upload"
            logger.warning("upload_failed", filename=candidate.name, error=self.error)
            return UploadOutcome(success=False)
        finally:
            self.uploading = False

        if response.started:
            self.file = None
            logger.info("upload_accepted", task_id=response.task_id, doc_id=response.doc_id)
            return UploadOutcome(success=True, navigate_to=KB_PAGE, response=response)

        self.error = response.message or "Upload failed"
        logger.warning("upload_failed", filename=candidate.name, status=response.status)
        return UploadOutcome(success=False, response=response)


def sync_uploaded_file(
    flow: UploadFlow,
    uploaded: Any | None,
    state: MutableMapping[str, Any],
) -> None:
    """Mirror the uploader widget's current file into ``flow``.

    Each distinct file is validated once; removing it from the widget drops
    the selection so the Upload button cannot post a file no longer shown.
    """

    if uploaded is None:
        state.pop("upload_seen", None)
        if flow.file is not None and not flow.uploading:
            flow.clear_file()
        return

    marker = (uploaded.name, uploaded.size)
    if state.get("upload_seen") != marker:
        state["upload_seen"] = marker
        flow.select_file(UploadCandidate.from_uploaded_file(uploaded))


def render_upload_flow(flow: UploadFlow) -> UploadOutcome | None:
    st.header("Upload Document")
    st.caption("Drag and drop a PDF here, or browse for one. Maximum size 50MB.")

    uploaded = st.file_uploader(
        "PDF document",
        type=["pdf"],
        accept_multiple_files=False,
        disabled=flow.uploading,
        key="upload_file",
    )
    sync_uploaded_file(flow, uploaded, st.session_state)

    if flow.file is not None:
        st.markdown(f"**Selected:** {flow.file.name} ({flow.file.size / (1024 * 1024):.2f} MB)")

    error_slot = st.empty()
    outcome: UploadOutcome | None = None
    clicked = st.button(
        "Upload",
        type="primary",
        disabled=flow.file is None or flow.uploading,
    )
    if clicked:
        with st.spinner("Uploading…"):
            outcome = flow.submit()
        if outcome is not None and outcome.success:
            st.session_state.pop("upload_seen", None)

    if flow.error:
        error_slot.error(flow.error)
    return outcome
