from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import UserStatus
from .model import NewUser, User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        """Case-insensitive username lookup."""

        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        """All users ordered by name."""

        raise NotImplementedError

    def list_by_status(self, status: UserStatus) -> Sequence[User]:
        raise NotImplementedError

    def create_user(self, new_user: NewUser) -> int:
        raise NotImplementedError

    def update_user(self, user_id: int, changes: dict) -> bool:
        """Apply column changes; `profile` replaces the whole profile dict."""

        raise NotImplementedError

    def set_status(self, user_id: int, status: UserStatus) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError
