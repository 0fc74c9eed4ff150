"""HTTP client for the analysis and order endpoints."""

from __future__ import annotations

import json
import mimetypes
from typing import Any, Dict, Optional, Protocol, Sequence

import httpx

from core.exceptions import OrderClientError
from logging_config import get_logger
from models.order import AnalysisResult

logger = get_logger(__name__)


class OrderClient(Protocol):
    """What the quote workflow needs from the server."""

    def analyze_document(self, file_name: str, content: bytes) -> AnalysisResult:
        ...

    def submit_order(
        self,
        file_name: str,
        content: bytes,
        user_email: str,
        services: Sequence[str],
        delivery_label: str,
        total_price: str,
    ) -> str:
        ...


class HttpOrderClient:
    """
    Talks to /analyze-document and /submit-order over HTTP.

    Any transport error, non-2xx status or ``success: false`` body raises
    OrderClientError carrying the server's ``message`` when there is one,
    otherwise the given fallback. No retries.
    """

    def __init__(
        self,
        base_url: str = "",
        client: Optional[httpx.Client] = None,
        timeout: float = 60.0,
        analysis_fallback: str = "Failed to analyze document.",
        submit_fallback: str = "Failed to submit order.",
    ) -> None:
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)
        self.analysis_fallback = analysis_fallback
        self.submit_fallback = submit_fallback

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpOrderClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @staticmethod
    def _file_part(file_name: str, content: bytes):
        content_type = mimetypes.guess_type(file_name)[0] or "application/octet-stream"
        return {"document": (file_name, content, content_type)}

    def _post(self, path: str, fallback: str, files: Dict[str, Any],
              data: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        try:
            response = self._client.post(path, files=files, data=data)
        except httpx.HTTPError as exc:
            logger.error(f"POST {path} failed: {exc}")
            raise OrderClientError(fallback, details={"cause": str(exc)}) from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.is_error:
            message = body.get("message") or fallback
            logger.warning(f"POST {path} returned {response.status_code}: {message}")
            raise OrderClientError(message, status_code=response.status_code)

        return body

    def analyze_document(self, file_name: str, content: bytes) -> AnalysisResult:
        body = self._post("/analyze-document", self.analysis_fallback,
                          files=self._file_part(file_name, content))
        try:
            return AnalysisResult.from_dict(body)
        except (KeyError, TypeError, ValueError) as exc:
            raise OrderClientError(self.analysis_fallback, details={"body": body}) from exc

    def submit_order(
        self,
        file_name: str,
        content: bytes,
        user_email: str,
        services: Sequence[str],
        delivery_label: str,
        total_price: str,
    ) -> str:
        body = self._post(
            "/submit-order",
            self.submit_fallback,
            files=self._file_part(file_name, content),
            data={
                "userEmail": user_email,
                "services": json.dumps(list(services), ensure_ascii=False),
                "deliveryTime": delivery_label,
                "totalPrice": total_price,
            },
        )
        if not body.get("success"):
            raise OrderClientError(body.get("message") or self.submit_fallback)
        return body.get("message", "")
