from __future__ import annotations

import logging
import uuid
from typing import Any, Optional, Protocol

import requests

from ..auth import CredentialStore
from ..config import BackendConfig
from ..errors import TransportError
from ..logging_utils import log_extra, sql_preview
from .models import TransportResponse


class QueryTransport(Protocol):
    def post(self, payload: dict[str, Any], request_id: str | None = None) -> TransportResponse: ...


class HttpQueryTransport:
    """Posts ``{"sql": ...}`` to the db-helper endpoint with a bearer token."""

    def __init__(
        self,
        backend: BackendConfig,
        credentials: CredentialStore,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._backend = backend
        self._credentials = credentials
        self._session = session or requests.Session()
        self._log = logging.getLogger(__name__)

    def post(self, payload: dict[str, Any], request_id: str | None = None) -> TransportResponse:
        call_id = str(uuid.uuid4())
        headers = {"Content-Type": "application/json"}
        token = self._credentials.get()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        else:
            self._log.warning(
                "No access token available, sending unauthenticated request",
                extra=log_extra(request_id=request_id, call_id=call_id),
            )

        timeout = (
            self._backend.timeout_seconds if self._backend.timeout_seconds != -1 else None
        )
        try:
            response = self._session.post(
                self._backend.query_url, json=payload, headers=headers, timeout=timeout
            )
        except requests.RequestException as exc:
            self._log.warning(
                "Query endpoint unreachable",
                extra=log_extra(request_id=request_id, call_id=call_id, error_message=str(exc)),
            )
            raise TransportError(f"Failed to contact query endpoint: {exc}") from exc

        if not 200 <= response.status_code < 300:
            self._log.warning(
                "Query endpoint rejected request",
                extra=log_extra(
                    request_id=request_id,
                    call_id=call_id,
                    status_code=response.status_code,
                ),
            )
            raise TransportError(
                f"Query endpoint returned {response.status_code}",
                status_code=response.status_code,
            )

        parsed = self._parse(response)
        self._log.debug(
            "Query endpoint answered",
            extra=log_extra(
                request_id=request_id,
                call_id=call_id,
                sql_preview=sql_preview(str(payload.get("sql", ""))),
                row_count=len(parsed.rows),
                backend_error=parsed.error,
            ),
        )
        return parsed

    def _parse(self, response: requests.Response) -> TransportResponse:
        try:
            body = response.json()
        except ValueError as exc:
            raise TransportError(
                "Query endpoint returned a non-JSON body", status_code=response.status_code
            ) from exc

        if not isinstance(body, dict):
            raise TransportError(
                "Query endpoint returned an unexpected payload", status_code=response.status_code
            )

        error = body.get("error")
        if error:
            return TransportResponse(rows=[], error=str(error))

        rows = body.get("rows")
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            raise TransportError(
                "Query endpoint response has no row list", status_code=response.status_code
            )
        return TransportResponse(rows=rows, error=None)
