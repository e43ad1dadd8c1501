from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Invitation, InvitationStatus


class IInvitationRepository(ABC):
    """Invitation repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, invitation_id: UUID) -> Optional[Invitation]:
        """Get invitation by ID"""
        pass

    @abstractmethod
    async def get_by_token(self, token: str) -> Optional[Invitation]:
        """Get invitation by token"""
        pass

    @abstractmethod
    async def get_pending_by_business_and_email(
        self, business_id: UUID, email: str
    ) -> Optional[Invitation]:
        """Get the pending invitation (expired or not) for a business and email"""
        pass

    @abstractmethod
    async def list_active_by_email(self, email: str, now: datetime) -> List[Invitation]:
        """Pending, unexpired invitations for an email, newest first"""
        pass

    @abstractmethod
    async def list_by_business(self, business_id: UUID) -> List[Invitation]:
        """All invitations of a business, newest first"""
        pass

    @abstractmethod
    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation"""
        pass

    @abstractmethod
    async def transition(
        self,
        invitation_id: UUID,
        to_status: InvitationStatus,
        now: datetime,
        require_unexpired: bool = True,
        **values,
    ) -> Optional[Invitation]:
        """
        Atomically move a pending invitation to to_status.

        The write only applies while the stored status is still pending (and,
        with require_unexpired, the deadline is still ahead of now). Returns
        the refreshed invitation, or None when another writer got there first.
        """
        pass

    @abstractmethod
    async def expire_stale(self, now: datetime) -> int:
        """Rewrite pending invitations past their deadline to expired"""
        pass

    @abstractmethod
    async def expire_pending_by_email(self, email: str, exclude_id: UUID) -> int:
        """Rewrite every other pending invitation for an email to expired"""
        pass
