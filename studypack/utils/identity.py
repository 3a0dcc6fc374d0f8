from typing import Optional

from fastapi import Header

from studypack.services.file_storage import is_safe_id
from studypack.utils.error_handler import Unauthorized


async def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """
    Caller identity, set by the auth gateway in front of this service.
    """
    if not x_user_id:
        raise Unauthorized()
    if not is_safe_id(x_user_id):
        raise Unauthorized("Invalid X-User-Id header")
    return x_user_id
