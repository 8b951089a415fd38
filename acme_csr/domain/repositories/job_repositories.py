"""Export and import job repository interfaces"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from ..entities.export_job import ExportJob
from ..entities.import_job import ImportJob
from ..value_objects.entity_ids import ExportId, ImportId, UserId
from ..value_objects.pagination import Page, PageRequest


class IExportJobRepository(ABC):

    @abstractmethod
    async def get_by_id(self, export_id: ExportId) -> Optional[ExportJob]:
        pass

    @abstractmethod
    async def add(self, job: ExportJob) -> ExportJob:
        pass

    @abstractmethod
    async def update(self, job: ExportJob) -> ExportJob:
        pass

    @abstractmethod
    async def delete(self, export_id: ExportId) -> bool:
        pass

    @abstractmethod
    async def list_for_user(self, user_id: UserId, page: PageRequest) -> Page[ExportJob]:
        pass

    @abstractmethod
    async def count_active_for_user(self, user_id: UserId) -> int:
        pass

    @abstractmethod
    async def list_expired(self, now: datetime) -> List[ExportJob]:
        pass


class IImportJobRepository(ABC):

    @abstractmethod
    async def get_by_id(self, import_id: ImportId) -> Optional[ImportJob]:
        pass

    @abstractmethod
    async def add(self, job: ImportJob) -> ImportJob:
        pass

    @abstractmethod
    async def update(self, job: ImportJob) -> ImportJob:
        pass

    @abstractmethod
    async def list_for_user(self, user_id: UserId, page: PageRequest) -> Page[ImportJob]:
        pass
