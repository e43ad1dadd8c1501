from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entities import StaffMembership


class IStaffMembershipRepository(ABC):
    """StaffMembership repository interface - application layer"""

    @abstractmethod
    async def get_by_user_and_business(
        self, user_id: UUID, business_id: UUID
    ) -> Optional[StaffMembership]:
        """Get membership by user and business"""
        pass

    @abstractmethod
    async def get_active_elsewhere(
        self, user_id: UUID, business_id: UUID
    ) -> Optional[StaffMembership]:
        """Get an active membership of the user in a business other than business_id"""
        pass

    @abstractmethod
    async def list_by_business(self, business_id: UUID) -> List[StaffMembership]:
        """Memberships of a business, active first, then newest first"""
        pass

    @abstractmethod
    async def create(self, membership: StaffMembership) -> StaffMembership:
        """Create a new membership"""
        pass

    @abstractmethod
    async def update(self, membership: StaffMembership) -> StaffMembership:
        """Update existing membership"""
        pass
