from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import ALL_STORES
from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a staff member, manager or admin.

    Note: plain data object (no DB access code here).
    """

    user_id: int
    full_name: str
    username: str
    role: Role
    assigned_store: str = ALL_STORES
    is_active: bool = True

    @property
    def is_store_restricted(self) -> bool:
        """Staff tied to one store type only see stores of that type."""
        return self.role == Role.STAFF and self.assigned_store != ALL_STORES
