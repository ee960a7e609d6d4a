"""Global FastAPI dependencies for tenant context.

Identity and authorization are handled upstream (API gateway / auth service),
which forwards the caller's organization in the X-Org-ID header. Every
matching endpoint is scoped to that organization.
"""

from typing import Optional
from uuid import UUID

from fastapi import Header, HTTPException, status


def get_org_id(x_org_id: Optional[UUID] = Header(None, alias="X-Org-ID")) -> UUID:
    """Extract org_id from the X-Org-ID request header.

    Args:
        x_org_id: Organization UUID forwarded by the gateway

    Returns:
        UUID: Organization ID for the current request context

    Raises:
        HTTPException 400: If the header is missing
    """
    if x_org_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Org-ID header is required",
        )
    return x_org_id
