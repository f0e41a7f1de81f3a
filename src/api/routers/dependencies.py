"""Request identity dependencies shared by the routers."""

from typing import Optional

from fastapi import Header, HTTPException, status

from utils.logging import logger


async def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Caller identity, resolved upstream and forwarded as ``X-User-Id``."""
    if not x_user_id:
        logger.warning("Rejected request without X-User-Id header")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail={"message": "Authentication required"})
    return x_user_id


async def get_workflow_id(x_workflow_id: Optional[str] = Header(None)) -> Optional[str]:
    """Wizard workflow the request belongs to, if the client already has one."""
    return x_workflow_id or None
