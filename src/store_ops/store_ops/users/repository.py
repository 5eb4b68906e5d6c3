from __future__ import annotations

from typing import Collection, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def list_by_roles(
        self,
        *,
        roles: Collection[Role],
        store_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[User]:
        """Users with one of ``roles``, optionally assigned to ``store_id``; ordered by full name."""

        raise NotImplementedError
