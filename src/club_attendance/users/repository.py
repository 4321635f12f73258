from __future__ import annotations

from typing import Optional, Protocol

from .model import UserDisplayInfo


class UserDirectory(Protocol):
    """Giao diện đọc thông tin người dùng.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp DB cụ thể.
    """

    def get_display_info(self, user_id: int) -> Optional[UserDisplayInfo]:
        raise NotImplementedError
