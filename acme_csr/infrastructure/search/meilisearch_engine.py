"""Meilisearch search engine over its HTTP API"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from ...core.config import settings
from ...domain.exceptions import SearchException
from ...domain.repositories.search_engine import ISearchEngine
from ...domain.value_objects.search import SearchQuery, SearchResult
from .indexes import SUGGEST_ATTRIBUTES, entity_for_index, index_name

logger = logging.getLogger(__name__)

BULK_BATCH_SIZE = 1000
_FINISHED_TASK_STATUSES = ("succeeded", "failed", "canceled")


class MeilisearchSearchEngine(ISearchEngine):

    def __init__(
        self,
        host: Optional[str] = None,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.host = (host or settings.MEILISEARCH_HOST).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.MEILISEARCH_KEY
        self.transport = transport
        self.timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return httpx.AsyncClient(base_url=self.host, headers=headers, timeout=self.timeout, transport=self.transport)

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        async with self._client() as client:
            response = await client.request(method, path, **kwargs)
        return response

    async def _wait_for_task(self, task_uid: Optional[int]) -> Dict[str, Any]:
        """Poll an enqueued task until Meilisearch finishes it"""
        if task_uid is None:
            return {}
        deadline = asyncio.get_running_loop().time() + settings.MEILISEARCH_TASK_TIMEOUT
        while True:
            response = await self._request("GET", f"/tasks/{task_uid}")
            response.raise_for_status()
            task = response.json()
            if task.get("status") in _FINISHED_TASK_STATUSES:
                return task
            if asyncio.get_running_loop().time() > deadline:
                return task
            await asyncio.sleep(0.05)

    def _search_body(self, query: SearchQuery, entity) -> Dict[str, Any]:
        body: Dict[str, Any] = {"q": query.query, "limit": query.limit, "offset": query.offset}
        expression = query.filter_expression(entity)
        if expression:
            body["filter"] = expression
        if query.sort:
            body["sort"] = [str(sort) for sort in query.sort]
        if query.facets:
            body["facets"] = list(query.facets)
        if query.highlight:
            body["attributesToHighlight"] = ["*"]
        return body

    async def search(self, query: SearchQuery) -> SearchResult:
        try:
            if query.is_multi_index():
                return await self._multi_search(query)
            uid = index_name(query.indexes[0])
            response = await self._request("POST", f"/indexes/{uid}/search", json=self._search_body(query, query.indexes[0]))
            if response.status_code == 404:
                raise SearchException.index_not_found(uid)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Search failed: {e}", extra={"query": query.query})
            raise SearchException.search_failed(query.query, str(e))

        payload = response.json()
        return SearchResult(
            hits=payload.get("hits", []),
            total_hits=payload.get("estimatedTotalHits", payload.get("totalHits", 0)),
            processing_time_ms=float(payload.get("processingTimeMs", 0)),
            query=query.query,
            limit=query.limit,
            offset=query.offset,
            facets=payload.get("facetDistribution", {}),
        )

    async def _multi_search(self, query: SearchQuery) -> SearchResult:
        """Hits are concatenated in index order; each index is asked for the whole prefix up to the page end"""
        queries = [
            {"indexUid": index_name(entity), **self._search_body(query, entity), "offset": 0, "limit": query.offset + query.limit}
            for entity in query.indexes
        ]
        response = await self._request("POST", "/multi-search", json={"queries": queries})
        response.raise_for_status()

        hits: List[Dict[str, Any]] = []
        total = 0
        processing = 0.0
        facets: Dict[str, Any] = {}
        for result in response.json().get("results", []):
            entity = entity_for_index(result.get("indexUid", ""))
            for hit in result.get("hits", []):
                hits.append({**hit, "_index": entity.value if entity else result.get("indexUid")})
            total += result.get("estimatedTotalHits", result.get("totalHits", 0))
            processing = max(processing, float(result.get("processingTimeMs", 0)))
            for facet, distribution in result.get("facetDistribution", {}).items():
                merged = facets.setdefault(facet, {})
                for value, count in distribution.items():
                    merged[value] = merged.get(value, 0) + count
        return SearchResult(
            hits=hits[query.offset:query.offset + query.limit],
            total_hits=total,
            processing_time_ms=processing,
            query=query.query,
            limit=query.limit,
            offset=query.offset,
            facets=facets,
        )

    async def index(self, index_name: str, documents: List[Dict[str, Any]]) -> bool:
        if not documents:
            return True
        try:
            response = await self._request("POST", f"/indexes/{index_name}/documents", json=documents)
            response.raise_for_status()
            task = await self._wait_for_task(response.json().get("taskUid"))
        except httpx.HTTPError as e:
            logger.error(f"Indexing into {index_name} failed: {e}")
            raise SearchException.indexing_failed(index_name, str(e))
        if task.get("status") == "failed":
            raise SearchException.indexing_failed(index_name, str(task.get("error")))
        return True

    async def bulk_index(self, index_name: str, documents: List[Dict[str, Any]], batch_size: int = BULK_BATCH_SIZE) -> bool:
        for start in range(0, len(documents), batch_size):
            await self.index(index_name, documents[start:start + batch_size])
        logger.info(f"Indexed {len(documents)} documents into {index_name}")
        return True

    async def delete(self, index_name: str, document_id: str) -> bool:
        try:
            response = await self._request("DELETE", f"/indexes/{index_name}/documents/{document_id}")
            if response.status_code == 404:
                return False
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise SearchException.indexing_failed(index_name, str(e))
        return True

    async def delete_index(self, index_name: str) -> bool:
        try:
            response = await self._request("DELETE", f"/indexes/{index_name}")
            if response.status_code == 404:
                return False
            response.raise_for_status()
            await self._wait_for_task(response.json().get("taskUid"))
        except httpx.HTTPError as e:
            raise SearchException.indexing_failed(index_name, str(e))
        return True

    async def create_index(self, index_name: str, settings: Dict[str, Any], primary_key: str = "id") -> bool:
        try:
            response = await self._request("POST", "/indexes", json={"uid": index_name, "primaryKey": primary_key})
            response.raise_for_status()
            await self._wait_for_task(response.json().get("taskUid"))
        except httpx.HTTPError as e:
            raise SearchException.indexing_failed(index_name, str(e))
        if settings:
            await self.update_index_settings(index_name, settings)
        return True

    async def update_index_settings(self, index_name: str, settings: Dict[str, Any]) -> bool:
        try:
            response = await self._request("PATCH", f"/indexes/{index_name}/settings", json=settings)
            response.raise_for_status()
            await self._wait_for_task(response.json().get("taskUid"))
        except httpx.HTTPError as e:
            raise SearchException.indexing_failed(index_name, str(e))
        return True

    async def index_exists(self, index_name: str) -> bool:
        try:
            response = await self._request("GET", f"/indexes/{index_name}")
        except httpx.HTTPError as e:
            raise SearchException.search_failed(index_name, str(e))
        return response.status_code == 200

    async def suggest(self, index_name: str, query: str, limit: int = 10, filter_expression: Optional[str] = None) -> List[str]:
        entity = entity_for_index(index_name)
        attribute = SUGGEST_ATTRIBUTES.get(entity, "title")
        body: Dict[str, Any] = {"q": query, "limit": limit, "attributesToRetrieve": [attribute]}
        if filter_expression:
            body["filter"] = filter_expression
        try:
            response = await self._request("POST", f"/indexes/{index_name}/search", json=body)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise SearchException.search_failed(query, str(e))

        suggestions: List[str] = []
        for hit in response.json().get("hits", []):
            value = hit.get(attribute)
            if value and value not in suggestions:
                suggestions.append(value)
        return suggestions

    async def health(self) -> Dict[str, Any]:
        try:
            response = await self._request("GET", "/health")
            return {"healthy": response.status_code == 200, "status": response.json().get("status", "unknown")}
        except (httpx.HTTPError, ValueError) as e:
            return {"healthy": False, "status": "unavailable", "error": str(e)}
