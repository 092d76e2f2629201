"""Async HTTP client for the question bank API."""
import logging
from typing import Any, Dict, List, Optional

import httpx

from questionbank.client.config import ClientSettings
from questionbank.client.errors import RequestError
from questionbank.schemas.knowledge_area import (
    ChildOfKnowledgeArea,
    KnowledgeAreaResponse,
    KnowledgeAreaSummary,
)
from questionbank.schemas.topic import TopicDetail, TopicResponse

logger = logging.getLogger(__name__)


class QuestionBankClient:
    """Async client for knowledge area and topic operations."""

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.settings = settings or ClientSettings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.API_URL,
                headers={"Accept": "application/json"},
                timeout=httpx.Timeout(self.settings.API_TIMEOUT),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "QuestionBankClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None
    ) -> httpx.Response:
        if params is not None:
            params = {k: v for k, v in params.items() if v is not None and v != ""}

        logger.debug("%s %s params=%s", method, path, params)
        response = await self.client.request(method, path, params=params, json=body)

        if response.status_code >= 400:
            raise self._to_request_error(response)
        return response

    @staticmethod
    def _to_request_error(response: httpx.Response) -> RequestError:
        """Parse an error response into a RequestError."""
        request = response.request
        name = f"HTTP {response.status_code}"
        message = response.reason_phrase or "Request failed"
        details = None

        try:
            payload = response.json()
        except ValueError:
            payload = None

        detail = payload.get("detail") if isinstance(payload, dict) else None
        if isinstance(detail, dict):
            name = detail.get("error", name)
            message = detail.get("message", message)
            details = detail.get("details")
        elif isinstance(detail, list):
            # Request validation failure
            name = "ValidationError"
            message = "; ".join(str(item.get("msg", item)) for item in detail if isinstance(item, dict)) or message
            details = detail
        elif isinstance(detail, str):
            message = detail

        return RequestError(
            path=request.url.path,
            method=request.method,
            status=response.status_code,
            name=name,
            message=message,
            details=details
        )

    # ------------------------------------------------------------------
    # Knowledge areas
    # ------------------------------------------------------------------

    async def get_top_level_knowledge_areas(self, name_filter: Optional[str] = None) -> List[KnowledgeAreaSummary]:
        response = await self._request("GET", "/knowledgearea/toplevel", params={"nameFilter": name_filter})
        return [KnowledgeAreaSummary.model_validate(a) for a in response.json()["areas"]]

    async def create_knowledge_area(self, name: str, parent_id: Optional[int] = None) -> int:
        """Create a top-level area, or a child area when `parent_id` is given."""
        path = "/knowledgearea/toplevel" if parent_id is None else f"/knowledgearea/{parent_id}"
        response = await self._request("POST", path, body={"name": name})
        return response.json()["id"]

    async def get_knowledge_area(self, area_id: int) -> KnowledgeAreaResponse:
        response = await self._request("GET", f"/knowledgearea/{area_id}")
        return KnowledgeAreaResponse.model_validate(response.json())

    async def update_knowledge_area(self, area_id: int, name: str, parent_id: Optional[int]) -> None:
        await self._request("PUT", f"/knowledgearea/{area_id}", body={"name": name, "parentId": parent_id})

    async def delete_knowledge_area(self, area_id: int) -> None:
        await self._request("DELETE", f"/knowledgearea/{area_id}")

    async def get_children_of_knowledge_area(
        self,
        area_id: int,
        name_filter: Optional[str] = None,
        type: Optional[str] = None
    ) -> List[ChildOfKnowledgeArea]:
        response = await self._request(
            "GET",
            f"/knowledgearea/{area_id}/children",
            params={"nameFilter": name_filter, "type": type}
        )
        return [ChildOfKnowledgeArea.model_validate(c) for c in response.json()["children"]]

    async def get_knowledge_area_ancestors(self, area_id: int) -> List[KnowledgeAreaResponse]:
        response = await self._request("GET", f"/knowledgearea/{area_id}/ancestors")
        return [KnowledgeAreaResponse.model_validate(a) for a in response.json()["ancestors"]]

    # ------------------------------------------------------------------
    # Topics
    # ------------------------------------------------------------------

    async def get_topics(self, area_id: Optional[int] = None, topic_name: Optional[str] = None) -> List[TopicResponse]:
        response = await self._request("GET", "/topic/", params={"areaId": area_id, "topicName": topic_name})
        return [TopicResponse.model_validate(t) for t in response.json()["topics"]]

    async def create_topic(self, area_id: int, topic_name: str) -> int:
        response = await self._request("POST", "/topic/", body={"areaId": area_id, "topicName": topic_name})
        return response.json()["topicId"]

    async def get_topic(self, topic_id: int) -> TopicDetail:
        response = await self._request("GET", f"/topic/{topic_id}")
        return TopicDetail.model_validate(response.json())

    async def update_topic(self, topic_id: int, area_id: int, topic_name: str) -> None:
        await self._request("PUT", f"/topic/{topic_id}", body={"areaId": area_id, "topicName": topic_name})

    async def delete_topic(self, topic_id: int) -> None:
        await self._request("DELETE", f"/topic/{topic_id}")
