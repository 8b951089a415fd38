"""Search and indexing use cases"""

import logging
from typing import Any, Dict, List, Optional

from ...domain.entities.user import User
from ...domain.enums import CampaignStatus, Permission, SearchableEntity
from ...domain.exceptions import SearchException
from ...domain.repositories.campaign_repository import CampaignFilters
from ...domain.repositories.search_engine import ISearchEngine
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import CampaignId, CategoryId, DonationId, OrganizationId, UserId
from ...domain.value_objects.pagination import PageRequest
from ...domain.value_objects.search import SearchQuery, build_filter_expression
from ...infrastructure.search.indexes import (
    campaign_document,
    donation_document,
    index_name,
    organization_document,
    user_document,
)
from ..dtos.search_dtos import ReindexResultDTO, SearchResultDTO, SuggestionsDTO

logger = logging.getLogger(__name__)

PUBLIC_ENTITIES = (SearchableEntity.CAMPAIGNS, SearchableEntity.ORGANIZATIONS)
REINDEX_PAGE_SIZE = 500


def _check_access(entities, user: User) -> None:
    restricted = [entity.value for entity in entities if entity not in PUBLIC_ENTITIES]
    if restricted and not user.is_admin():
        raise SearchException.invalid_query(f"Not allowed to search {', '.join(restricted)}")


def _hides_unpublished_campaigns(user: User) -> bool:
    return not user.has_permission(Permission.MANAGE_CAMPAIGNS)


def _public_campaign_statuses() -> List[str]:
    return [status.value for status in CampaignStatus.public_statuses()]


class SearchUseCase:

    def __init__(self, search_engine: ISearchEngine):
        self.search_engine = search_engine

    async def execute(self, query: SearchQuery, user: User) -> SearchResultDTO:
        _check_access(query.indexes, user)
        if SearchableEntity.CAMPAIGNS in query.indexes and _hides_unpublished_campaigns(user):
            query = query.restricted(SearchableEntity.CAMPAIGNS, status=_public_campaign_statuses())
        return SearchResultDTO.from_result(await self.search_engine.search(query))


class SuggestUseCase:

    def __init__(self, search_engine: ISearchEngine):
        self.search_engine = search_engine

    async def execute(self, query: str, entity: SearchableEntity, user: User, limit: int = 10) -> SuggestionsDTO:
        _check_access((entity,), user)
        if not query.strip():
            return SuggestionsDTO(query=query, suggestions=[])
        expression = None
        if entity == SearchableEntity.CAMPAIGNS and _hides_unpublished_campaigns(user):
            expression = build_filter_expression({"status": _public_campaign_statuses()})
        suggestions = await self.search_engine.suggest(index_name(entity), query, limit, expression)
        return SuggestionsDTO(query=query, suggestions=suggestions)


class _DocumentBuilder:
    """Builds index documents, memoizing the related names it looks up"""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work
        self._organization_names: Dict[Any, str] = {}
        self._category_names: Dict[Any, Optional[str]] = {}
        self._campaign_titles: Dict[Any, str] = {}

    async def _organization_name(self, organization_id: OrganizationId) -> str:
        if organization_id not in self._organization_names:
            organization = await self.unit_of_work.organizations.get_by_id(organization_id, with_trashed=True)
            self._organization_names[organization_id] = organization.display_name if organization else ""
        return self._organization_names[organization_id]

    async def _category_name(self, category_id: Optional[CategoryId]) -> Optional[str]:
        if category_id is None:
            return None
        if category_id not in self._category_names:
            category = await self.unit_of_work.categories.get_by_id(category_id)
            self._category_names[category_id] = category.name.get() if category else None
        return self._category_names[category_id]

    async def _campaign_title(self, campaign_id: CampaignId) -> str:
        if campaign_id not in self._campaign_titles:
            campaign = await self.unit_of_work.campaigns.get_by_id(campaign_id, with_trashed=True)
            self._campaign_titles[campaign_id] = campaign.title.get() if campaign else ""
        return self._campaign_titles[campaign_id]

    async def campaign(self, campaign) -> Dict[str, Any]:
        return campaign_document(
            campaign,
            organization_name=await self._organization_name(campaign.organization_id),
            category=await self._category_name(campaign.category_id),
        )

    async def donation(self, donation) -> Dict[str, Any]:
        return donation_document(donation, campaign_title=await self._campaign_title(donation.campaign_id))

    async def load(self, entity: SearchableEntity, entity_id: str) -> Optional[Dict[str, Any]]:
        if entity == SearchableEntity.CAMPAIGNS:
            campaign = await self.unit_of_work.campaigns.get_by_id(CampaignId.from_str(entity_id))
            return await self.campaign(campaign) if campaign else None
        if entity == SearchableEntity.ORGANIZATIONS:
            organization = await self.unit_of_work.organizations.get_by_id(OrganizationId.from_str(entity_id))
            return organization_document(organization) if organization else None
        if entity == SearchableEntity.USERS:
            user = await self.unit_of_work.users.get_by_id(UserId.from_str(entity_id))
            return user_document(user) if user else None
        donation = await self.unit_of_work.donations.get_by_id(DonationId.from_str(entity_id))
        return await self.donation(donation) if donation else None

    async def page(self, entity: SearchableEntity, page: PageRequest):
        if entity == SearchableEntity.CAMPAIGNS:
            result = await self.unit_of_work.campaigns.list(CampaignFilters(), page)
            return [await self.campaign(campaign) for campaign in result.items], result.has_next
        if entity == SearchableEntity.ORGANIZATIONS:
            result = await self.unit_of_work.organizations.list(page)
            return [organization_document(organization) for organization in result.items], result.has_next
        if entity == SearchableEntity.USERS:
            result = await self.unit_of_work.users.list(page)
            return [user_document(user) for user in result.items], result.has_next
        result = await self.unit_of_work.donations.list(page)
        return [await self.donation(donation) for donation in result.items], result.has_next


class IndexEntityUseCase:
    """Pushes one entity to its index; a missing row is removed from the index"""

    def __init__(self, unit_of_work: IUnitOfWork, search_engine: ISearchEngine):
        self.unit_of_work = unit_of_work
        self.search_engine = search_engine

    async def execute(self, entity: SearchableEntity, entity_id: str) -> bool:
        async with self.unit_of_work:
            document = await _DocumentBuilder(self.unit_of_work).load(entity, entity_id)
        name = index_name(entity)
        if document is None:
            return await self.search_engine.delete(name, entity_id)
        return await self.search_engine.index(name, [document])


class RemoveEntityUseCase:

    def __init__(self, search_engine: ISearchEngine):
        self.search_engine = search_engine

    async def execute(self, entity: SearchableEntity, entity_id: str) -> bool:
        return await self.search_engine.delete(index_name(entity), entity_id)


class ReindexEntityUseCase:
    """Rebuilds an index from the database, page by page"""

    def __init__(self, unit_of_work: IUnitOfWork, search_engine: ISearchEngine):
        self.unit_of_work = unit_of_work
        self.search_engine = search_engine

    async def execute(self, entity: SearchableEntity) -> ReindexResultDTO:
        name = index_name(entity)
        total = 0
        async with self.unit_of_work:
            builder = _DocumentBuilder(self.unit_of_work)
            page_number = 1
            while True:
                documents, has_next = await builder.page(entity, PageRequest(page=page_number, per_page=REINDEX_PAGE_SIZE))
                if documents:
                    await self.search_engine.bulk_index(name, documents)
                    total += len(documents)
                if not has_next:
                    break
                page_number += 1

        logger.info(f"Reindexed {total} {entity.value} into {name}")
        return ReindexResultDTO(entity=entity.value, index=name, documents=total)


def entities_for(option: Optional[str]) -> List[SearchableEntity]:
    if not option:
        return list(SearchableEntity)
    return [SearchableEntity(option)]
