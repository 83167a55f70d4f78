"""
Explicit caller context for the booking services.

Views build an Actor from the user the auth middleware resolved and pass it
to every service call. Services never look at the request.
"""
from dataclasses import dataclass
from uuid import UUID

from accounts.models import STAFF_ROLES
from SeatDesk.exceptions import StaffOnlyError


@dataclass(frozen=True)
class Actor:
    user_id: UUID
    role: str
    name: str = ""
    email: str = ""

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    def require_staff(self) -> None:
        if not self.is_staff:
            raise StaffOnlyError()

    @classmethod
    def from_user(cls, user) -> "Actor":
        return cls(
            user_id=user.user_id,
            role=user.role,
            name=user.name,
            email=user.email,
        )
