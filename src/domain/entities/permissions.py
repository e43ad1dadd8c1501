"""
StaffPermissions Value Object

Fixed set of boolean capabilities grantable to staff.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StaffPermissions(BaseModel):
    """
    Capability flags carried by an invitation and granted on acceptance.

    Serialized in camelCase (canManageBookings, ...) on the HTTP surface and
    stored as a JSON document in snake_case.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    can_manage_services: bool = False
    can_manage_bookings: bool = True
    can_manage_customers: bool = False
    can_view_reports: bool = False
    can_manage_staff: bool = False
    can_manage_business: bool = False

    @classmethod
    def all_granted(cls) -> "StaffPermissions":
        return cls(**{name: True for name in cls.model_fields})

    def to_storage(self) -> dict:
        return self.model_dump()
