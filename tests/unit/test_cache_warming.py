"""Cache keys, warming progress and the warming orchestrator"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
import redis

from acme_csr.application.dtos.cache_dtos import CacheWarmRequestDTO
from acme_csr.application.services.cache_warming_orchestrator import CacheWarmingOrchestrator
from acme_csr.application.use_cases.cache_use_cases import (
    GetCacheRecommendationsUseCase,
    GetCacheWarmingJobUseCase,
    GetDashboardWidgetsUseCase,
    RunCacheWarmingUseCase,
    StartCacheWarmingUseCase,
)
from acme_csr.domain.enums import CacheWarmingStatus, WarmingJobStatus
from acme_csr.domain.exceptions import CacheWarmingException
from acme_csr.domain.value_objects.cache import SYSTEM_KEYS, WIDGET_KEYS, CacheKey, CacheWarmingProgress
from acme_csr.infrastructure.cache.warming_job_tracker import WarmingJobTracker

pytestmark = pytest.mark.unit


def _repository(healthy=True, failing=()):
    repository = AsyncMock()
    repository.is_healthy.return_value = healthy

    async def warm(key):
        if str(key) in failing:
            raise RuntimeError("generator exploded")

    repository.warm_cache.side_effect = warm
    return repository


class TestCacheKey:

    def test_known_keys(self):
        assert CacheKey("total_donations").is_widget()
        assert CacheKey("system:active_currencies").is_system()
        assert CacheKey("page:home").is_page()

    def test_campaign_page_keys(self):
        key = CacheKey.campaign_page(3)
        assert key.is_page()
        assert key.page_number == 3

    def test_localized_keys(self):
        assert CacheKey("campaign_categories").is_localized()
        assert CacheKey.campaign_page(2).is_localized()
        assert not CacheKey("total_donations").is_localized()
        assert not CacheKey("system:active_currencies").is_localized()

    @pytest.mark.parametrize("value", ["", "campaigns:page:0", "unknown_widget"])
    def test_unknown_keys_are_rejected(self, value):
        with pytest.raises(ValueError):
            CacheKey(value)


class TestCacheWarmingProgress:

    def test_percentage(self):
        progress = CacheWarmingProgress.create(4).start().with_progress(1)
        assert progress.percentage == 25.0
        assert progress.remaining_items == 3

    def test_progress_is_clamped(self):
        progress = CacheWarmingProgress.create(2).start().with_progress(10)
        assert progress.current_item == 2

    def test_cannot_complete_early(self):
        progress = CacheWarmingProgress.create(2).start().with_progress(1)
        with pytest.raises(ValueError):
            progress.complete()

    def test_completed_cannot_fail(self):
        progress = CacheWarmingProgress.create(1).start().with_progress(1).complete()
        with pytest.raises(CacheWarmingException):
            progress.with_failure()

    def test_pending_cannot_progress(self):
        with pytest.raises(CacheWarmingException):
            CacheWarmingProgress.create(3).with_progress(1)

    def test_total_must_be_positive(self):
        with pytest.raises(ValueError):
            CacheWarmingProgress(total_items=0)


class TestCacheWarmingOrchestrator:

    @pytest.mark.asyncio
    async def test_unhealthy_repository_fails_immediately(self):
        repository = _repository(healthy=False)
        progress = await CacheWarmingOrchestrator(repository).warm_system()
        assert progress.status == CacheWarmingStatus.FAILED
        repository.warm_cache.assert_not_called()

    @pytest.mark.asyncio
    async def test_warms_every_key(self):
        repository = _repository()
        calls = []
        progress = await CacheWarmingOrchestrator(repository).warm_widgets(on_progress=lambda p, k: calls.append(str(k)))
        assert progress.is_complete()
        assert calls == list(WIDGET_KEYS)

    @pytest.mark.asyncio
    async def test_stops_early_without_continue_on_failure(self):
        keys = CacheKey.system_keys()
        repository = _repository(failing={str(keys[1])})
        orchestrator = CacheWarmingOrchestrator(repository)
        progress = await orchestrator.warm_caches(keys, continue_on_failure=False)
        assert progress.is_failed()
        assert progress.current_item == 1
        assert repository.warm_cache.await_count == 2

    @pytest.mark.asyncio
    async def test_partial_failures_still_complete(self):
        keys = CacheKey.system_keys()
        orchestrator = CacheWarmingOrchestrator(_repository(failing={str(keys[0])}))
        progress = await orchestrator.warm_caches(keys)
        assert progress.is_complete()
        assert progress.failed_keys == (str(keys[0]),)

    @pytest.mark.asyncio
    async def test_failures_do_not_leak_between_runs(self):
        keys = CacheKey.system_keys()
        repository = _repository(failing={str(keys[0])})
        orchestrator = CacheWarmingOrchestrator(repository)
        first = await orchestrator.warm_caches(keys)
        repository.warm_cache.side_effect = None
        second = await orchestrator.warm_caches(keys)
        assert first.failed_keys == (str(keys[0]),)
        assert second.failed_keys == ()
        assert not hasattr(orchestrator, "failed_keys")

    @pytest.mark.asyncio
    async def test_empty_key_list_is_rejected(self):
        with pytest.raises(CacheWarmingException):
            await CacheWarmingOrchestrator(_repository()).warm_caches([])

    @pytest.mark.parametrize("strategy,expected", [
        ("system", len(SYSTEM_KEYS)),
        ("widgets", len(WIDGET_KEYS)),
        ("priority", len(SYSTEM_KEYS) + 2),
        ("all", len(SYSTEM_KEYS) + len(WIDGET_KEYS)),
    ])
    def test_strategies(self, strategy, expected):
        assert len(CacheWarmingOrchestrator(_repository()).create_warming_strategy(strategy)) == expected

    def test_unknown_strategy(self):
        with pytest.raises(CacheWarmingException):
            CacheWarmingOrchestrator(_repository()).create_warming_strategy("everything")

    @pytest.mark.asyncio
    async def test_recommendations_prioritise_cold_system_keys(self):
        repository = _repository()
        repository.exists.side_effect = lambda key: key.value == "page:home"
        result = await GetCacheRecommendationsUseCase(repository).execute()
        assert "page:home" in result.skip_keys
        assert "system:active_currencies" in result.priority_keys
        assert "total_donations" in result.optional_keys


class TestWarmingJobTracker:

    def test_update_stores_clamped_record(self):
        client = MagicMock()
        record = WarmingJobTracker(client, ttl=300).update("job-1", WarmingJobStatus.WARMING, 3, 2)
        assert record["percentage"] == 100.0
        key, ttl, payload = client.setex.call_args.args
        assert key == "cache_warming_progress:job-1"
        assert ttl == 300
        assert json.loads(payload)["status"] == "warming"

    def test_get_survives_redis_errors(self):
        client = MagicMock()
        client.get.side_effect = redis.ConnectionError("down")
        assert WarmingJobTracker(client).get("job-1") is None


class TestCacheWarmingUseCases:

    @pytest.mark.asyncio
    async def test_start_queues_job(self):
        tracker, job_queue = MagicMock(), MagicMock()
        result = await StartCacheWarmingUseCase(_repository(), job_queue, tracker).execute(
            CacheWarmRequestDTO(strategy="system"), "fr"
        )
        assert result.status == "starting"
        assert tracker.update.call_args.args[1] == WarmingJobStatus.STARTING
        job_queue.enqueue.assert_called_once_with("warm_cache", job_id=result.job_id, strategy="system", keys=None, locale="fr")

    @pytest.mark.asyncio
    async def test_start_rejects_unknown_keys(self):
        with pytest.raises(CacheWarmingException) as exc_info:
            await StartCacheWarmingUseCase(_repository(), MagicMock(), MagicMock()).execute(
                CacheWarmRequestDTO(keys=["nope"])
            )
        assert exc_info.value.status_code == 422

    @pytest.mark.asyncio
    async def test_run_reports_partial(self):
        result = await RunCacheWarmingUseCase(_repository(failing={"page:home"})).execute("system")
        assert result.status == WarmingJobStatus.PARTIAL.value
        assert result.failed_keys == ["page:home"]

    @pytest.mark.asyncio
    async def test_run_reports_failure_when_everything_fails(self):
        result = await RunCacheWarmingUseCase(_repository(failing=set(SYSTEM_KEYS))).execute("system")
        assert result.status == WarmingJobStatus.FAILED.value

    @pytest.mark.asyncio
    async def test_run_updates_tracker(self):
        tracker = MagicMock()
        tracker.update.side_effect = lambda job_id, status, current, total, message=None, failed_keys=None: {
            "job_id": job_id, "status": status.value, "current_item": current, "total_items": total,
        }
        result = await RunCacheWarmingUseCase(_repository(), tracker).execute("system", job_id="job-9")
        assert result.job_id == "job-9"
        assert result.status == "completed"
        statuses = [call.args[1] for call in tracker.update.call_args_list]
        assert statuses[0] == WarmingJobStatus.WARMING
        assert statuses[-1] == WarmingJobStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_unknown_job(self):
        tracker = MagicMock()
        tracker.get.return_value = None
        with pytest.raises(CacheWarmingException):
            await GetCacheWarmingJobUseCase(tracker).execute("missing")

    @pytest.mark.asyncio
    async def test_dashboard_warms_missing_widgets(self):
        repository = _repository()
        repository.get.side_effect = lambda key: None if key.value == "total_donations" else {"value": key.value}
        widgets = await GetDashboardWidgetsUseCase(repository).execute()
        assert set(widgets) == set(WIDGET_KEYS)
        repository.warm_cache.assert_awaited_once_with(CacheKey("total_donations"))
