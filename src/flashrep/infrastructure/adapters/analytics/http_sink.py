"""
HTTP analytics sink: posts session events to a remote analytics service.

Endpoints (relative to base_url):
    POST /sessions                     -> {"sessionId": "..."}
    POST /sessions/{id}/answers
    POST /sessions/{id}/end            -> summary JSON
"""

import logging
from typing import Any

import httpx

from flashrep.domain.constants import ANALYTICS_TIMEOUT
from flashrep.domain.errors import AnalyticsUnavailableError
from flashrep.domain.session.models import SessionSummary
from flashrep.domain.session.ports import AnalyticsSink


class HttpAnalyticsSink(AnalyticsSink):
    """Adapter for an analytics service reachable over HTTP."""

    def __init__(
        self,
        base_url: str,
        timeout: float = ANALYTICS_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def start_session(self, user_id: str, context: dict[str, Any]) -> str:
        data = await self._post("/sessions", {"userId": user_id, "context": context})
        session_id = data.get("sessionId") if isinstance(data, dict) else None
        if not session_id:
            raise AnalyticsUnavailableError("Analytics service returned no sessionId")
        return str(session_id)

    async def record_card_answer(self, session_id: str, payload: dict[str, Any]) -> None:
        await self._post(f"/sessions/{session_id}/answers", payload)

    async def end_session(
        self, session_id: str, user_id: str, summary: SessionSummary
    ) -> dict[str, Any] | None:
        data = await self._post(
            f"/sessions/{session_id}/end", {"userId": user_id, **_camel(summary)}
        )
        return data if isinstance(data, dict) else None

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _post(self, path: str, payload: dict[str, Any]) -> Any:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)

        url = f"{self.base_url}{path}"
        try:
            resp = await self._client.post(url, json=payload)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            self.logger.debug(f"Analytics request to {url} failed: {e}")
            raise AnalyticsUnavailableError(f"Analytics request to {url} failed: {e}") from e

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return None


def _camel(summary: SessionSummary) -> dict[str, Any]:
    return {
        "sessionId": summary.session_id,
        "cardsStudied": summary.answered_count,
        "cardsCorrect": summary.correct_count,
        "accuracy": summary.accuracy,
        "totalTime": summary.total_time_seconds,
        "averageTimePerCard": summary.average_time_per_card,
        "duration": summary.duration_seconds,
    }
