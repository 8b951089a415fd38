"""Search queries, index naming and the Meilisearch adapter over a mock transport"""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from acme_csr.application.use_cases.search_use_cases import SearchUseCase, SuggestUseCase
from acme_csr.core.context import TenantContext, tenant_scope
from acme_csr.domain.enums import SearchableEntity
from acme_csr.domain.exceptions import SearchException
from acme_csr.domain.value_objects.search import SearchQuery, SearchResult
from acme_csr.infrastructure.search.indexes import index_name
from acme_csr.infrastructure.search.meilisearch_engine import MeilisearchSearchEngine

pytestmark = pytest.mark.unit


def _engine(handler):
    return MeilisearchSearchEngine(host="http://meili.test", api_key="secret", transport=httpx.MockTransport(handler))


class TestSearchQuery:

    def test_filter_expression(self):
        query = SearchQuery(
            "  water ",
            (SearchableEntity.CAMPAIGNS,),
            filters={"status": "active", "is_active": True, "category": ["health", "education"], "goal_amount": {"min": 100}, "city": None},
        )

        assert query.query == "water"
        assert query.filter_expression() == (
            'status = "active" AND is_active = true AND category IN ["health", "education"] AND goal_amount >= 100'
        )

    @pytest.mark.parametrize("kwargs", [{"indexes": ()}, {"limit": 0}, {"offset": -1}])
    def test_invalid_queries(self, kwargs):
        params = {"query": "water", "indexes": ("campaigns",), **kwargs}

        with pytest.raises(ValueError):
            SearchQuery(**params)

    def test_page_from_offset(self):
        assert SearchQuery("water", ("campaigns",), limit=20, offset=40).page == 3


class TestIndexNames:

    def test_central_and_tenant_names(self):
        assert index_name(SearchableEntity.CAMPAIGNS) == "acme_campaigns"

        with tenant_scope(TenantContext(tenant_id="t1", subdomain="hands", database="tenant_hands")):
            assert index_name(SearchableEntity.CAMPAIGNS) == "acme_t1_campaigns"


@pytest.mark.asyncio
class TestMeilisearchEngine:

    async def test_single_index_search(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"hits": [{"id": "1", "title": "Clean Water"}], "estimatedTotalHits": 1, "processingTimeMs": 3})

        result = await _engine(handler).search(SearchQuery("water", ("campaigns",), filters={"status": "active"}))

        assert seen["path"] == "/indexes/acme_campaigns/search"
        assert seen["auth"] == "Bearer secret"
        assert seen["body"]["filter"] == 'status = "active"'
        assert result.total_hits == 1
        assert result.hits[0]["title"] == "Clean Water"

    async def test_multi_search_tags_hits_with_their_index(self):
        def handler(request):
            assert request.url.path == "/multi-search"
            return httpx.Response(200, json={"results": [
                {"indexUid": "acme_campaigns", "hits": [{"id": "c1"}], "estimatedTotalHits": 1, "processingTimeMs": 2},
                {"indexUid": "acme_organizations", "hits": [{"id": "o1"}], "estimatedTotalHits": 4, "processingTimeMs": 5},
            ]})

        result = await _engine(handler).search(SearchQuery("water", ("campaigns", "organizations")))

        assert [hit["_index"] for hit in result.hits] == ["campaigns", "organizations"]
        assert result.total_hits == 5
        assert result.processing_time_ms == 5.0

    async def test_paging_through_two_indexes_returns_every_hit_once(self):
        documents = {"acme_campaigns": [f"c{i}" for i in range(15)], "acme_organizations": [f"o{i}" for i in range(15)]}

        def handler(request):
            results = []
            for sub in json.loads(request.content)["queries"]:
                ids = documents[sub["indexUid"]][sub["offset"]:sub["offset"] + sub["limit"]]
                results.append({"indexUid": sub["indexUid"], "hits": [{"id": id_} for id_ in ids], "estimatedTotalHits": 15})
            return httpx.Response(200, json={"results": results})

        engine = _engine(handler)
        seen, offset = [], 0
        while True:
            result = await engine.search(SearchQuery("x", ("campaigns", "organizations"), limit=10, offset=offset))
            seen.extend(hit["id"] for hit in result.hits)
            if not result.has_more:
                break
            offset += 10

        assert result.total_hits == 30
        assert seen == documents["acme_campaigns"] + documents["acme_organizations"]

    async def test_index_filters_only_reach_their_index(self):
        sent = {}

        def handler(request):
            for sub in json.loads(request.content)["queries"]:
                sent[sub["indexUid"]] = sub.get("filter")
            return httpx.Response(200, json={"results": []})

        query = SearchQuery("water", ("campaigns", "organizations")).restricted(SearchableEntity.CAMPAIGNS, status=["active"])
        await _engine(handler).search(query)

        assert sent == {"acme_campaigns": 'status IN ["active"]', "acme_organizations": None}

    async def test_missing_index(self):
        engine = _engine(lambda request: httpx.Response(404, json={"code": "index_not_found"}))

        with pytest.raises(SearchException) as exc_info:
            await engine.search(SearchQuery("water", ("campaigns",)))

        assert exc_info.value.code == "index_not_found"

    async def test_unreachable_server(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(SearchException) as exc_info:
            await _engine(handler).search(SearchQuery("water", ("campaigns",)))

        assert exc_info.value.status_code == 502
        assert (await _engine(handler).health())["healthy"] is False

    async def test_index_waits_for_task(self):
        calls = []

        def handler(request):
            calls.append((request.method, request.url.path))
            if request.url.path.startswith("/tasks/"):
                return httpx.Response(200, json={"uid": 7, "status": "succeeded"})
            return httpx.Response(202, json={"taskUid": 7})

        assert await _engine(handler).index("acme_campaigns", [{"id": "c1"}]) is True
        assert calls == [("POST", "/indexes/acme_campaigns/documents"), ("GET", "/tasks/7")]

    async def test_failed_task_raises(self):
        def handler(request):
            if request.url.path.startswith("/tasks/"):
                return httpx.Response(200, json={"status": "failed", "error": {"message": "bad document"}})
            return httpx.Response(202, json={"taskUid": 8})

        with pytest.raises(SearchException) as exc_info:
            await _engine(handler).index("acme_campaigns", [{"id": "c1"}])

        assert exc_info.value.code == "indexing_failed"

    async def test_suggest_deduplicates(self):
        def handler(request):
            assert json.loads(request.content)["attributesToRetrieve"] == ["title"]
            return httpx.Response(200, json={"hits": [{"title": "Clean Water"}, {"title": "Clean Water"}, {"title": "Clean Air"}]})

        assert await _engine(handler).suggest("acme_campaigns", "clean") == ["Clean Water", "Clean Air"]


@pytest.mark.asyncio
class TestSearchUseCases:

    def _user(self, admin=False, manager=False):
        user = MagicMock()
        user.is_admin.return_value = admin
        user.has_permission.return_value = admin or manager
        return user

    def _engine(self):
        engine = AsyncMock()
        engine.search.return_value = SearchResult(hits=[], total_hits=0, processing_time_ms=1.0, query="water", limit=20, offset=0)
        return engine

    async def test_employees_only_find_published_campaigns(self):
        engine = self._engine()

        result = await SearchUseCase(engine).execute(SearchQuery("water", ("campaigns", "organizations")), self._user())

        assert result.total_hits == 0
        sent = engine.search.await_args.args[0]
        assert sent.filter_expression(SearchableEntity.CAMPAIGNS) == 'status IN ["active", "completed"]'
        assert sent.filter_expression(SearchableEntity.ORGANIZATIONS) is None

    async def test_campaign_managers_see_every_status(self):
        engine = self._engine()

        await SearchUseCase(engine).execute(SearchQuery("water", ("campaigns",)), self._user(manager=True))

        assert engine.search.await_args.args[0].filter_expression(SearchableEntity.CAMPAIGNS) is None

    async def test_employee_suggestions_skip_unpublished_campaigns(self):
        engine = AsyncMock()
        engine.suggest.return_value = ["Clean Water"]

        result = await SuggestUseCase(engine).execute("clean", SearchableEntity.CAMPAIGNS, self._user())

        assert result.suggestions == ["Clean Water"]
        engine.suggest.assert_awaited_once_with("acme_campaigns", "clean", 10, 'status IN ["active", "completed"]')

    async def test_restricted_indexes_need_admin(self):
        engine = AsyncMock()

        with pytest.raises(SearchException) as exc_info:
            await SearchUseCase(engine).execute(SearchQuery("ana", ("users",)), self._user())

        assert exc_info.value.status_code == 422
        engine.search.assert_not_awaited()

    async def test_blank_suggestion_query_skips_engine(self):
        engine = AsyncMock()

        result = await SuggestUseCase(engine).execute("  ", SearchableEntity.CAMPAIGNS, self._user())

        assert result.suggestions == []
        engine.suggest.assert_not_awaited()
