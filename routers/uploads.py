from __future__ import annotations

from typing import Optional, Tuple

from fastapi import UploadFile

from utils.s3_storage import check_upload


async def read_upload(
    file: Optional[UploadFile], *, allowed: set, max_bytes: int, label: str
) -> Optional[Tuple[bytes, str, str]]:
    """Return (data, content_type, filename) or None when the field was left empty."""
    if file is None or not file.filename:
        return None
    data = await file.read()
    if not data:
        return None
    content_type = (file.content_type or "").lower().strip()
    check_upload(data=data, content_type=content_type, allowed=allowed, max_bytes=max_bytes, label=label)
    return data, content_type, file.filename
