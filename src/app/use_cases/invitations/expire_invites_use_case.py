"""
Expire Invites Use Case

Optional sweep that records passive expiry in the stored status.
"""

import logging
from datetime import datetime
from typing import Callable

from libs.result import Result, Return
from src.app.services.storage_errors import storage_errors_as_result
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import AuditEvent

from .dtos import ExpireInvitesResponse

logger = logging.getLogger(__name__)


class ExpireInvitesUseCase:
    """
    Rewrites pending invitations past their deadline to expired.

    Nothing depends on this running: every read and write path already
    judges expiry against the clock. It only keeps stored status honest
    for reporting.
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utc_now):
        self.uow = uow
        self.clock = clock

    @storage_errors_as_result
    async def execute(self) -> Result[ExpireInvitesResponse]:
        async with self.uow:
            now = self.clock()
            expired = await self.uow.invitations.expire_stale(now)

            if expired:
                audit = AuditEvent(
                    action="invitations_expired",
                    event_metadata={"count": expired, "swept_at": now.isoformat()},
                )
                await self.uow.audit_events.create(audit)

            await self.uow.commit()

            logger.info(f"Expiry sweep marked {expired} invitation(s) expired")

            return Return.ok(ExpireInvitesResponse(expired=expired))
