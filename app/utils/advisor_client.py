"""
Remote Advisor Client
Talks to the external analytics service that answers finance questions and
produces insights. Every failure is reported as AdvisorUnavailable so callers
can fall back to local computation.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx
from fastapi import Request

from app.core.exceptions import AdvisorUnavailable

logger = logging.getLogger(__name__)


class AdvisorClient:
    def __init__(
        self,
        base_url: Optional[str],
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/") if base_url else ""
        self._client: Optional[httpx.Client] = None
        if self.base_url:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=timeout,
                transport=transport,
                headers={"Content-Type": "application/json"},
            )

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def close(self) -> None:
        if self._client is not None:
            self._client.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        if self._client is None:
            raise AdvisorUnavailable("Advisor service is not configured")
        logger.debug(f"Calling advisor: {method} {path}")
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            raise AdvisorUnavailable(f"Advisor request {method} {path} failed: {e}") from e
        except ValueError as e:
            raise AdvisorUnavailable(f"Advisor returned an invalid body for {path}") from e

    def answer_question(self, user_id: str, question: str) -> str:
        data = self._request("POST", "/ai/ask", json={"user_id": user_id, "question": question})
        answer = data.get("answer") if isinstance(data, dict) else None
        if not isinstance(answer, str) or not answer:
            raise AdvisorUnavailable("Advisor response is missing an answer")
        return answer

    def get_insights(self, user_id: str) -> List[str]:
        data = self._request("GET", "/ai/insights", params={"user_id": user_id})
        insights = data.get("insights") if isinstance(data, dict) else None
        if not isinstance(insights, list) or not all(isinstance(item, str) for item in insights):
            raise AdvisorUnavailable("Advisor response is missing insights")
        if not insights:
            raise AdvisorUnavailable("Advisor returned no insights")
        return insights

    def import_transactions(self, user_id: str, transactions: List[Dict[str, Any]]) -> Dict[str, Any]:
        data = self._request(
            "POST",
            "/transactions/import",
            json={"user_id": user_id, "transactions": transactions},
        )
        return data if isinstance(data, dict) else {"result": data}


def get_advisor_client(request: Request) -> AdvisorClient:
    """FastAPI dependency returning the client created in the app lifespan."""
    return request.app.state.advisor_client
