"""
Request-scoped dependencies shared by the routers.

Authentication happens upstream; the caller's identity arrives in the
header named by ``settings.requester_header``.
"""
from typing import Optional

from fastapi import Header, HTTPException, status

from appraisal_manager.core.config import settings


def get_requester_id(
    requester_id: Optional[str] = Header(default=None, alias=settings.requester_header),
) -> str:
    if not requester_id or not requester_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {settings.requester_header} header",
        )
    return requester_id.strip()
