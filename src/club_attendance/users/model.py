from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UserDisplayInfo:
    """Thông tin hiển thị của người dùng, dùng để gắn lên hồ sơ điểm danh.

    Lưu ý: Đây là đối tượng dữ liệu thuần (không chứa code truy cập DB).
    """

    user_id: int
    name: str
    email: Optional[str] = None
    student_id: Optional[str] = None
