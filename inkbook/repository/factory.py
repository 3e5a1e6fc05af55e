"""Select the repository implementation configured for this process."""

from __future__ import annotations

from typing import Optional

from inkbook.repository.base import StudioRepository
from inkbook.repository.data_repository import DataRepository
from inkbook.repository.memory_repository import InMemoryRepository
from inkbook.utils.config import Settings, get_settings


def build_repository(settings: Optional[Settings] = None) -> StudioRepository:
    resolved = settings or get_settings()
    if resolved.storage_backend == "memory":
        return InMemoryRepository()
    return DataRepository(resolved)
