"""Caller identity for notification routes.

Authentication happens upstream; the gateway forwards the authenticated
user id in a trusted header (X-User-Id by default).
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from infrastructure.services import SettingsDep


def get_current_user_id(request: Request, settings: SettingsDep) -> str:
    user_id = request.headers.get(settings.server.USER_ID_HEADER, "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user identity",
        )
    return user_id


CurrentUserId = Annotated[str, Depends(get_current_user_id)]
