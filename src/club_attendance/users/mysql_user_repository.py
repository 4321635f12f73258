from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import UserDisplayInfo
from .repository import UserDirectory


class MySQLUserDirectory(UserDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_display_info(self, user_id: int) -> Optional[UserDisplayInfo]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, email, student_id
                FROM users
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return UserDisplayInfo(
                user_id=int(row["user_id"]),
                name=row["full_name"],
                email=row.get("email"),
                student_id=row.get("student_id"),
            )
