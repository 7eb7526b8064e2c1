"""Request dependencies shared by the routers."""
from fastapi import Header, HTTPException, status


def get_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """
    Identity of the calling user.

    The upstream gateway authenticates the request and forwards the user id
    in the ``X-User-Id`` header. A request without it never reached the
    gateway's authentication and is rejected.
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    return x_user_id
