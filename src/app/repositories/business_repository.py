from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from uuid import UUID

from src.domain.entities import Business


class IBusinessRepository(ABC):
    """Business repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, business_id: UUID) -> Optional[Business]:
        """Get business by ID"""
        pass

    @abstractmethod
    async def get_by_ids(self, business_ids: Iterable[UUID]) -> List[Business]:
        """Get all businesses whose ID is in business_ids"""
        pass

    @abstractmethod
    async def list_by_owner(self, owner_id: UUID) -> List[Business]:
        """Businesses owned by a user"""
        pass
