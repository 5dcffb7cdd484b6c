"""Client for the knowledge-base backend HTTP endpoints."""

from __future__ import annotations

from typing import Any, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from kb_dashboard.api.errors import KBRequestError, KBResponseError, KBTimeoutError
from kb_dashboard.api.models import GraphResponse, KBDataResponse, UploadResponse
from kb_dashboard.config import Settings, get_settings
from kb_dashboard.utils.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        for key in ("detail", "message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value

    reason = response.reason or "HTTP error"
    return f"{response.status_code} {reason}"


class KBClient:
    """One typed method per backend endpoint, with explicit per-call timeouts."""

    def __init__(
        self,
        base_url: str,
        *,
        api_token: str | None = None,
        stats_path: str = "/kb-data",
        graph_path: str = "/graph-data",
        upload_path: str = "/upload",
        timeout_seconds: float = 30.0,
        upload_timeout_seconds: float = 300.0,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_token = (api_token or "").strip() or None
        self._stats_path = stats_path
        self._graph_path = graph_path
        self._upload_path = upload_path
        self._timeout_seconds = timeout_seconds
        self._upload_timeout_seconds = upload_timeout_seconds
        self._session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> KBClient:
        """Build a client from environment-backed dashboard settings."""

        resolved = settings or get_settings()
        return cls(
            resolved.KB_API_BASE_URL,
            api_token=resolved.KB_API_TOKEN,
            stats_path=resolved.KB_STATS_PATH,
            graph_path=resolved.KB_GRAPH_PATH,
            upload_path=resolved.KB_UPLOAD_PATH,
            timeout_seconds=resolved.KB_REQUEST_TIMEOUT_SECONDS,
            upload_timeout_seconds=resolved.KB_UPLOAD_TIMEOUT_SECONDS,
        )

    @property
    def _headers(self) -> dict[str, str]:
        if self._api_token is None:
            return {}
        return {"Authorization": f"Bearer {self._api_token}"}

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, *, timeout: float, **kwargs: Any) -> Any:
        logger.debug("kb_request", method=method, path=path)
        try:
            response = self._session.request(
                method,
                self._url(path),
                headers=self._headers,
                timeout=timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            logger.warning("kb_request_timeout", method=method, path=path, timeout=timeout)
            raise KBTimeoutError(f"Request to {path} timed out after {timeout:g}s") from exc
        except requests.RequestException as exc:
            logger.warning("kb_request_failed", method=method, path=path, error=str(exc))
            raise KBRequestError(str(exc) or "Network request failed") from exc

        if not response.ok:
            message = _error_message(response)
            logger.warning(
                "kb_request_rejected",
                method=method,
                path=path,
                status=response.status_code,
                error=message,
            )
            raise KBRequestError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise KBResponseError(f"Response from {path} was not valid JSON") from exc

    @staticmethod
    def _parse(model: type[ModelT], payload: Any, path: str) -> ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            logger.warning("kb_response_invalid", path=path, errors=exc.error_count())
            raise KBResponseError(f"Unexpected response shape from {path}") from exc

    def get_kb_data(self) -> KBDataResponse:
        """GET the aggregate statistics and per-document table."""

        payload = self._request("GET", self._stats_path, timeout=self._timeout_seconds)
        return self._parse(KBDataResponse, payload, self._stats_path)

    def get_graph_data(self) -> GraphResponse:
        """GET the entity graph together with its category list."""

        payload = self._request("GET", self._graph_path, timeout=self._timeout_seconds)
        return self._parse(GraphResponse, payload, self._graph_path)

    def upload_pdf(self, filename: str, data: bytes, content_type: str) -> UploadResponse:
        """POST a single file as multipart form data under the ``file`` field."""

        payload = self._request(
            "POST",
            self._upload_path,
            timeout=self._upload_timeout_seconds,
            files={"file": (filename, data, content_type)},
        )
        return self._parse(UploadResponse, payload, self._upload_path)
