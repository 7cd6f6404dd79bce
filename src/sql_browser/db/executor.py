from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable

from ..logging_utils import log_extra, sql_preview
from .models import ERROR_PREFIX, SUCCESS_MESSAGE, QueryResult
from .transport import QueryTransport


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QueryExecutor:
    def __init__(
        self, transport: QueryTransport, clock: Callable[[], datetime] | None = None
    ) -> None:
        self._transport = transport
        self._clock = clock or _utcnow
        self._log = logging.getLogger(__name__)

    def execute(self, sql: str, request_id: str | None = None) -> QueryResult | None:
        """
        Run operator SQL verbatim and wrap the outcome in a result envelope.

        A blank statement is not sent and yields None. A backend-reported
        error becomes an envelope with an ``Error: ...`` message and no rows.

        Parameters:
        sql (str): Statement to send
        request_id (str | None): Request tracking ID

        Returns:
        QueryResult | None: The new envelope, or None for a blank statement

        Raises:
        TransportError: If the query endpoint cannot be used
        """
        if not sql or not sql.strip():
            self._log.debug("Ignoring blank query", extra=log_extra(request_id=request_id))
            return None

        query_id = str(uuid.uuid4())
        response = self._transport.post({"sql": sql}, request_id=request_id)

        if response.error:
            self._log.info(
                "Query rejected by backend",
                extra=log_extra(
                    request_id=request_id,
                    query_id=query_id,
                    sql_preview=sql_preview(sql),
                    error_message=response.error,
                ),
            )
            return QueryResult(
                executed_at=self._clock(),
                message=ERROR_PREFIX + response.error,
                rows=(),
                sql=sql,
            )

        self._log.info(
            "Query executed",
            extra=log_extra(
                request_id=request_id,
                query_id=query_id,
                sql_preview=sql_preview(sql),
                row_count=len(response.rows),
            ),
        )
        return QueryResult(
            executed_at=self._clock(),
            message=SUCCESS_MESSAGE,
            rows=tuple(response.rows),
            sql=sql,
        )
