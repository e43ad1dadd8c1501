from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.audit_event_repository import AuditEventRepository
from src.adapter.repositories.base import DEFAULT_STORAGE_TIMEOUT, storage_guard
from src.adapter.repositories.business_repository import BusinessRepository
from src.adapter.repositories.invitation_repository import InvitationRepository
from src.adapter.repositories.staff_membership_repository import StaffMembershipRepository
from src.adapter.repositories.user_repository import UserRepository
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession, timeout: float = DEFAULT_STORAGE_TIMEOUT):
        self.session = session
        self.timeout = timeout

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session, self.timeout)
        self.businesses = BusinessRepository(self.session, self.timeout)
        self.memberships = StaffMembershipRepository(self.session, self.timeout)
        self.invitations = InvitationRepository(self.session, self.timeout)
        self.audit_events = AuditEventRepository(self.session, self.timeout)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        async with storage_guard(self.timeout):
            await self.session.commit()

    async def rollback(self):
        async with storage_guard(self.timeout):
            await self.session.rollback()
