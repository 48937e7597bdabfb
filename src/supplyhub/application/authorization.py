"""Role checks shared by the application handlers."""

from __future__ import annotations

from supplyhub.domain.exceptions import UnauthorizedError
from supplyhub.domain.model.actor import Actor, Role


def require_staff(actor: Actor, action: str) -> None:
    if not actor.is_staff:
        raise UnauthorizedError(f"Only admin or warehouse staff can {action}")


def require_role(actor: Actor, role: Role, action: str) -> None:
    if actor.role != role:
        raise UnauthorizedError(f"Only {role.value.replace('_', ' ')} users can {action}")
