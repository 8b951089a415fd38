"""Redis cache repository against a mocked client"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
import redis

from acme_csr.core.context import TenantContext, tenant_scope
from acme_csr.domain.exceptions import CacheWarmingException
from acme_csr.domain.value_objects.cache import CacheKey
from acme_csr.infrastructure.cache.redis_cache_repository import RedisCacheRepository

pytestmark = [pytest.mark.unit, pytest.mark.asyncio]


def _repository(client=None, **kwargs):
    return RedisCacheRepository(client or MagicMock(), prefix="csr:", **kwargs)


def _fake_store(client):
    store = {}
    client.setex.side_effect = lambda key, ttl, value: store.__setitem__(key, value)
    client.get.side_effect = store.get
    client.delete.side_effect = lambda *keys: sum(1 for key in keys if store.pop(key, None) is not None)
    return store


class TestNamespaces:

    async def test_central_namespace(self):
        assert _repository().namespace() == "csr:central:"

    async def test_tenant_namespace(self):
        with tenant_scope(TenantContext(tenant_id="t1", subdomain="hands", database="tenant_hands")):
            assert _repository().redis_key(CacheKey("total_donations")) == "csr:tenant_t1:total_donations"

    async def test_localized_keys_are_stored_per_locale(self):
        client = MagicMock()
        store = _fake_store(client)

        await _repository(client, locale="fr").set(CacheKey("campaign_categories"), [{"name": "Santé"}])
        await _repository(client, locale="en").set(CacheKey("campaign_categories"), [{"name": "Health"}])

        assert json.loads(store["csr:central:campaign_categories:fr"]) == [{"name": "Santé"}]
        assert json.loads(store["csr:central:campaign_categories:en"]) == [{"name": "Health"}]
        assert await _repository(client, locale="fr").get(CacheKey("campaign_categories")) == [{"name": "Santé"}]

    async def test_plain_widgets_are_shared_between_locales(self):
        assert _repository(locale="fr").redis_key(CacheKey("total_donations")) == "csr:central:total_donations"
        assert _repository(locale="fr").redis_key(CacheKey.campaign_page(2)) == "csr:central:campaigns:page:2:fr"

    async def test_locale_defaults_to_the_data_generator(self):
        assert _repository(data_generator=MagicMock(locale="de")).locale == "de"


class TestReadsAndWrites:

    async def test_set_stores_json_with_ttl(self):
        client = MagicMock()

        await _repository(client).set(CacheKey("total_donations"), {"total": 12}, ttl=60)

        client.setex.assert_called_once_with("csr:central:total_donations", 60, '{"total": 12}')

    async def test_get_survives_redis_errors(self):
        client = MagicMock()
        client.get.side_effect = redis.ConnectionError("down")

        assert await _repository(client).get(CacheKey("total_donations")) is None

    @pytest.mark.parametrize("raw,expected", [(-2, None), (-1, None), (120, 120)])
    async def test_get_ttl(self, raw, expected):
        client = MagicMock()
        client.ttl.return_value = raw

        assert await _repository(client).get_ttl(CacheKey("total_donations")) == expected

    async def test_warm_cache_rejects_empty_payloads(self):
        generator = AsyncMock()
        generator.locale = "en"
        generator.generate.return_value = {}

        with pytest.raises(CacheWarmingException):
            await _repository(data_generator=generator).warm_cache(CacheKey("total_donations"))


class TestDeletion:

    async def test_flush_deletes_the_namespace_only(self):
        client = MagicMock()
        client.scan_iter.return_value = iter(["csr:central:total_donations", "csr:central:page:home:en"])
        client.delete.return_value = 2

        assert await _repository(client).flush() == 2
        client.scan_iter.assert_called_once_with(match="csr:central:*", count=500)
        client.delete.assert_called_once_with("csr:central:total_donations", "csr:central:page:home:en")

    async def test_invalidation_covers_every_locale(self):
        client = MagicMock()
        found = {
            "csr:central:campaign_categories:*": ["csr:central:campaign_categories:en", "csr:central:campaign_categories:fr"],
            "csr:central:campaigns:page:*": ["csr:central:campaigns:page:1:en"],
        }
        client.scan_iter.side_effect = lambda match, count: iter(found.get(match, []))
        client.delete.side_effect = lambda *keys: len(keys)

        deleted = await _repository(client).invalidate_patterns(["campaign_categories", "campaigns:page:*"])

        assert deleted == 3
        scanned = [call.kwargs["match"] for call in client.scan_iter.call_args_list]
        assert scanned == [
            "csr:central:campaign_categories",
            "csr:central:campaign_categories:*",
            "csr:central:campaigns:page:*",
        ]

    async def test_nothing_to_delete(self):
        client = MagicMock()
        client.scan_iter.return_value = iter([])

        assert _repository(client).invalidate_patterns_sync(["total_donations"]) == 0
        client.delete.assert_not_called()


class TestHealth:

    async def test_round_trip_is_healthy(self):
        client = MagicMock()
        store = _fake_store(client)

        assert await _repository(client).is_healthy() is True
        assert store == {}

    async def test_connection_errors_are_unhealthy(self):
        client = MagicMock()
        client.setex.side_effect = redis.ConnectionError("down")

        assert await _repository(client).is_healthy() is False
