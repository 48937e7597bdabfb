"""The user on whose behalf a use case runs.

Authentication happens outside this package; callers hand the resolved
identity to the application handlers as an ``Actor``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    ADMIN = "admin"
    WAREHOUSE_STAFF = "warehouse_staff"
    SUPPLIER = "supplier"
    INTERNAL_USER = "internal_user"


@dataclass(frozen=True)
class Actor:
    user_id: str
    name: str
    role: Role
    email: str | None = None

    @property
    def is_staff(self) -> bool:
        return self.role in (Role.ADMIN, Role.WAREHOUSE_STAFF)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
