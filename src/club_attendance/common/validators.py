from __future__ import annotations

import math
from typing import Any, Optional

from ..core.constants import MAX_TEXT_LENGTH
from ..core.exceptions import PreconditionError


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise PreconditionError(f"Thiếu thông tin bắt buộc ({field_name})")
    return value.strip()


def require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise PreconditionError(f"Thiếu thông tin bắt buộc ({field_name})")
    return value


def require_coordinate(value: Any, field_name: str, *, bound: float) -> float:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PreconditionError("Vị trí không hợp lệ. Vui lòng thử lại.")

    number = float(value)
    if not math.isfinite(number) or abs(number) > bound:
        raise PreconditionError(f"Vị trí không hợp lệ ({field_name})")
    return number


def clean_optional_text(value: Any, *, max_len: int = MAX_TEXT_LENGTH) -> Optional[str]:
    """Trim free text; empty or non-string input becomes None.

    Text longer than ``max_len`` is refused rather than cut.
    """
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value:
        return None
    if len(value) > max_len:
        raise PreconditionError(f"Nội dung quá dài (tối đa {max_len} ký tự)")
    return value


def require_photo_url(value: Any) -> Optional[str]:
    url = clean_optional_text(value, max_len=2048)
    if url is None:
        return None
    if not url.startswith(("http://", "https://")):
        raise PreconditionError("URL ảnh phải bắt đầu bằng http:// hoặc https://")
    return url
