"""Request dependencies shared by routers.

Authentication happens upstream (gateway or middleware); by the time a
request reaches this service ``request.state.user_id`` holds the caller.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status


def get_current_user_id(request: Request) -> UUID:
    """Return the authenticated user id.

    Raises:
        HTTPException: 401 if no (valid) user id is attached to the request.
    """
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    if isinstance(user_id, UUID):
        return user_id
    try:
        return UUID(str(user_id))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        ) from None


CurrentUserId = Annotated[UUID, Depends(get_current_user_id)]
