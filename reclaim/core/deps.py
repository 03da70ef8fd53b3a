"""
Request-scoped dependencies shared by the routers.
"""
from typing import Optional

from fastapi import Header

from reclaim.core.errors import MissingUserError


def get_current_user_id(
    x_user_id: Optional[str] = Header(
        default=None,
        description="Id of the requesting user. Every row is scoped by it.",
    ),
) -> str:
    """Resolve the requesting user, set upstream by the session layer."""
    if x_user_id is None or not x_user_id.strip():
        raise MissingUserError()
    return x_user_id.strip()
