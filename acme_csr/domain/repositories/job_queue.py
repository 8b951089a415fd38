"""Background job queue interface"""

from abc import ABC, abstractmethod
from typing import Optional


class IJobQueue(ABC):
    """Dispatches named background jobs"""

    @abstractmethod
    def enqueue(self, task_name: str, countdown: Optional[int] = None, **kwargs) -> Optional[str]:
        """Queue a job and return its id"""
        pass
