from src.adapter.repositories.base import SqlRepository
from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.domain.entities import AuditEvent


class AuditEventRepository(SqlRepository, IAuditEventRepository):
    """AuditEvent repository implementation using SQLModel"""

    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Create a new audit event (immutable)"""
        return await self._add(audit_event)
