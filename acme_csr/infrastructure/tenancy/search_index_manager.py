"""Creates the per-tenant search indexes"""

import logging
from typing import Dict

from ...domain.enums import SearchableEntity
from ...domain.exceptions import SearchException, TenantException
from ...domain.repositories.search_engine import ISearchEngine
from ..search.indexes import INDEX_SETTINGS, index_name

logger = logging.getLogger(__name__)


class TenantSearchIndexManager:

    def __init__(self, engine: ISearchEngine):
        self.engine = engine

    async def create_indexes(self, tenant_id: str) -> Dict[str, bool]:
        created: Dict[str, bool] = {}
        for entity in SearchableEntity:
            name = index_name(entity, tenant_id)
            try:
                if await self.engine.index_exists(name):
                    await self.engine.update_index_settings(name, INDEX_SETTINGS[entity])
                else:
                    await self.engine.create_index(name, INDEX_SETTINGS[entity])
            except SearchException as e:
                raise TenantException.index_creation_failed(tenant_id, e.message)
            created[name] = True
        logger.info("Search indexes ready for tenant", extra={"tenant_id": tenant_id})
        return created

    async def delete_indexes(self, tenant_id: str) -> None:
        for entity in SearchableEntity:
            await self.engine.delete_index(index_name(entity, tenant_id))
