"""Cache warming DTOs"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class CacheWarmRequestDTO(BaseModel):
    strategy: str = "all"
    keys: Optional[List[str]] = None


class CacheWarmJobDTO(BaseModel):
    job_id: str
    strategy: str
    status: str = "starting"


class CacheWarmJobStatusDTO(BaseModel):
    job_id: str
    status: str
    percentage: float = Field(0, ge=0, le=100)
    current_item: int = 0
    total_items: int = 0
    message: Optional[str] = None
    failed_keys: List[str] = []


class CacheStatusDTO(BaseModel):
    warmed: List[str]
    cold: List[str]
    stats: Dict[str, Any] = {}


class CacheRecommendationsDTO(BaseModel):
    priority_keys: List[str]
    optional_keys: List[str]
    skip_keys: List[str]
