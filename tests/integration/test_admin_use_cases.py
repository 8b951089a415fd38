"""Currencies, categories, organization states and the audit trail they leave"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from acme_csr.application.use_cases.audit_use_cases import (
    GetAuditStatsUseCase,
    GetEntityHistoryUseCase,
    ListAuditLogsUseCase,
)
from acme_csr.application.use_cases.category_use_cases import DeleteCategoryUseCase
from acme_csr.application.use_cases.currency_use_cases import (
    ListCurrenciesUseCase,
    SetDefaultCurrencyUseCase,
    UpdateExchangeRatesUseCase,
)
from acme_csr.application.use_cases.organization_use_cases import ChangeOrganizationStateUseCase
from acme_csr.domain.entities.category import Category
from acme_csr.domain.entities.currency import Currency
from acme_csr.domain.enums import UserRole
from acme_csr.domain.exceptions import CategoryException, CurrencyException, OrganizationException
from acme_csr.domain.repositories.audit_repository import AuditFilters
from acme_csr.domain.value_objects.email import Email
from acme_csr.domain.value_objects.pagination import PageRequest
from acme_csr.domain.value_objects.translatable import TranslatableText

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


@pytest_asyncio.fixture
async def currencies(uow_factory):
    uow = uow_factory()
    async with uow:
        for currency in (
            Currency("EUR", "Euro", "€", is_default=True),
            Currency("USD", "US Dollar", "$", exchange_rate=Decimal("1.10")),
            Currency("GBP", "Pound Sterling", "£", exchange_rate=Decimal("0.85")),
            Currency("CHF", "Swiss Franc", "CHF", exchange_rate=Decimal("0.95")),
            Currency("SEK", "Swedish Krona", "kr", is_active=False),
        ):
            await uow.currencies.add(currency)
        await uow.commit()


@pytest_asyncio.fixture
async def category(uow_factory):
    category = Category.create(TranslatableText({"en": "Health"}))
    uow = uow_factory()
    async with uow:
        await uow.categories.add(category)
        await uow.commit()
    return category


class TestCurrencies:

    async def _defaults(self, uow_factory):
        currencies = await ListCurrenciesUseCase(uow_factory()).execute(active_only=False)
        return [currency.code for currency in currencies if currency.is_default]

    async def test_switching_default_keeps_a_single_default(self, uow_factory, currencies):
        result = await SetDefaultCurrencyUseCase(uow_factory()).execute("usd")

        assert result.code == "USD"
        assert result.is_default is True
        assert await self._defaults(uow_factory) == ["USD"]

    async def test_setting_the_current_default_again(self, uow_factory, currencies):
        await SetDefaultCurrencyUseCase(uow_factory()).execute("EUR")

        assert await self._defaults(uow_factory) == ["EUR"]

    async def test_inactive_currency_cannot_be_default(self, uow_factory, currencies):
        with pytest.raises(CurrencyException):
            await SetDefaultCurrencyUseCase(uow_factory()).execute("SEK")

        assert await self._defaults(uow_factory) == ["EUR"]

    async def test_exchange_rate_update_reports_each_currency(self, uow_factory, currencies):
        rate_service = AsyncMock()
        rate_service.fetch_rates.return_value = {"USD": 1.08, "GBP": -1}

        result = await UpdateExchangeRatesUseCase(uow_factory(), rate_service).execute()

        rate_service.fetch_rates.assert_awaited_once_with("EUR")
        assert result.updated == ["USD"]
        assert sorted(result.failed) == ["CHF", "GBP"]
        assert result.skipped == ["EUR"]
        uow = uow_factory()
        async with uow:
            assert (await uow.currencies.get_by_code("USD")).exchange_rate == Decimal("1.08")
            assert (await uow.currencies.get_by_code("GBP")).exchange_rate == Decimal("0.85")


class TestCategoryDeletion:

    async def test_category_with_campaigns_cannot_be_deleted(self, uow_factory, make_organization, make_user, make_campaign, category):
        organization = await make_organization()
        owner = await make_user("owner@example.com", UserRole.MANAGER, organization.id)
        campaign = await make_campaign(organization.id, owner.id)
        campaign.category_id = category.id
        uow = uow_factory()
        async with uow:
            await uow.campaigns.update(campaign)
            await uow.commit()

        with pytest.raises(CategoryException) as exc_info:
            await DeleteCategoryUseCase(uow_factory()).execute(category.id.value)

        assert exc_info.value.code == "category_has_campaigns"
        assert exc_info.value.status_code == 409

    async def test_unused_category_is_deleted(self, uow_factory, category):
        assert await DeleteCategoryUseCase(uow_factory()).execute(category.id.value) is True

        uow = uow_factory()
        async with uow:
            assert await uow.categories.get_by_id(category.id) is None


@pytest_asyncio.fixture
async def organization(make_organization):
    return await make_organization(
        registration_number="RC-2024-118",
        tax_id="TX-99",
        email=Email("contact@acme.org"),
        category="environment",
    )


class TestOrganizationStateAndAudit:

    async def test_repeated_transition_is_rejected(self, uow_factory, organization):
        await ChangeOrganizationStateUseCase(uow_factory()).execute(organization.id.value, "verify", "en")

        with pytest.raises(OrganizationException) as exc_info:
            await ChangeOrganizationStateUseCase(uow_factory()).execute(organization.id.value, "verify", "en")

        assert exc_info.value.code == "already_verified"

    async def test_entity_history_is_chronological(self, uow_factory, organization):
        for action in ("verify", "deactivate", "activate"):
            await ChangeOrganizationStateUseCase(uow_factory()).execute(organization.id.value, action, "en")

        history = await GetEntityHistoryUseCase(uow_factory()).execute("organization", str(organization.id))

        assert [entry.action for entry in history] == [
            "organization.verified", "organization.deactivated", "organization.activated",
        ]
        assert history[1].changes["is_active"] == {"old": True, "new": False}

    async def test_list_filters_by_action(self, uow_factory, organization, currencies):
        await ChangeOrganizationStateUseCase(uow_factory()).execute(organization.id.value, "verify", "en")
        await SetDefaultCurrencyUseCase(uow_factory()).execute("USD")

        page = await ListAuditLogsUseCase(uow_factory()).execute(AuditFilters(action="currency.default_changed"), PageRequest())

        assert page.total == 1
        assert page.items[0].entity_id == "USD"
        assert page.items[0].new_values == {"default": "USD"}

    async def test_stats_count_actions_in_the_window(self, uow_factory, organization, currencies):
        await ChangeOrganizationStateUseCase(uow_factory()).execute(organization.id.value, "verify", "en")
        await ChangeOrganizationStateUseCase(uow_factory()).execute(organization.id.value, "unverify", "en")
        await SetDefaultCurrencyUseCase(uow_factory()).execute("USD")

        stats = await GetAuditStatsUseCase(uow_factory()).execute(days=1)

        assert stats.by_action == {
            "organization.verified": 1,
            "organization.unverified": 1,
            "currency.default_changed": 1,
        }
        assert stats.total == 3
