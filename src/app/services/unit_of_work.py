from abc import ABC, abstractmethod

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.app.repositories.business_repository import IBusinessRepository
from src.app.repositories.invitation_repository import IInvitationRepository
from src.app.repositories.staff_membership_repository import IStaffMembershipRepository
from src.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """
    Abstract UnitOfWork - defines repository access and transaction management.

    Everything written through the repositories between entering the unit and
    commit() is applied atomically; leaving the unit without committing rolls
    the work back. Implementations raise StorageFailure for store errors.
    """

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    businesses: IBusinessRepository
    memberships: IStaffMembershipRepository
    invitations: IInvitationRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
