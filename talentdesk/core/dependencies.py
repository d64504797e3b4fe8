"""
FastAPI dependencies for the application.
"""

from uuid import UUID

from fastapi import Header, HTTPException, status

from talentdesk.db.session import get_db

__all__ = ["get_db", "get_organization_id"]


async def get_organization_id(x_organization_id: str = Header(None)) -> UUID:
    """
    Extract and validate the organization id from the request header.
    
    Every query-producing service call receives this value explicitly.
    Raises 400 if the X-Organization-ID header is missing or malformed.
    """
    if not x_organization_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Organization-ID header is required"
        )
    try:
        return UUID(x_organization_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Organization-ID must be a UUID"
        )
