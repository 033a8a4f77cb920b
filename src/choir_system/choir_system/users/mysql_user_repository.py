from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role, UserStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import NewUser, User
from .repository import UserRepository

_COLUMNS = """
    user_id, username, name, email, phone_number, profile_picture_url,
    role, status, password_hash, profile, created_at
"""

_UPDATABLE = {
    "username",
    "name",
    "email",
    "phone_number",
    "profile_picture_url",
    "role",
    "password_hash",
    "profile",
}


def _row_to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        username=row["username"],
        name=row["name"],
        email=row["email"],
        role=Role(row["role"]),
        status=UserStatus(row["status"]),
        password_hash=row["password_hash"],
        phone_number=row.get("phone_number"),
        profile_picture_url=row.get("profile_picture_url"),
        profile=load_json(row.get("profile"), default={}) or {},
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE {where}", params)
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("user_id=%s", (int(user_id),))

    def get_by_username(self, username: str) -> Optional[User]:
        return self._get_one("LOWER(username)=LOWER(%s)", (username,))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email=%s", (email.lower(),))

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY name")
            return [_row_to_user(r) for r in fetchall(cur)]

    def list_by_status(self, status: UserStatus) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE status=%s ORDER BY name",
                (status.value,),
            )
            return [_row_to_user(r) for r in fetchall(cur)]

    def create_user(self, new_user: NewUser) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(
                    username, name, email, phone_number, profile_picture_url,
                    role, status, password_hash, profile
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    new_user.username,
                    new_user.name,
                    new_user.email.lower(),
                    new_user.phone_number,
                    new_user.profile_picture_url,
                    new_user.role.value,
                    new_user.status.value,
                    new_user.password_hash,
                    dump_json(new_user.profile),
                ),
            )
            return int(cur.lastrowid)

    def update_user(self, user_id: int, changes: dict) -> bool:
        unknown = set(changes) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unsupported user columns: {sorted(unknown)}")
        if not changes:
            return True

        assignments: list[str] = []
        params: list[object] = []
        for column, value in changes.items():
            if column == "role":
                value = Role(value).value
            elif column == "profile":
                value = dump_json(value or {})
            elif column == "email":
                value = str(value).lower()
            assignments.append(f"{column}=%s")
            params.append(value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE users SET {', '.join(assignments)} WHERE user_id=%s",
                tuple(params + [int(user_id)]),
            )
            # rowcount is 0 when values did not change; existence is checked by the service.
            return cur.rowcount >= 0

    def set_status(self, user_id: int, status: UserStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET status=%s WHERE user_id=%s", (status.value, int(user_id)))
            return cur.rowcount >= 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0
