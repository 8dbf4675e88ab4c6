from __future__ import annotations

from fastapi import Depends, Header, HTTPException

from backend.deps import services
from mastery.models import User
from mastery.services import Services
from mastery.settings import get_settings


async def require_backend_token(
    x_backend_token: str | None = Header(default=None, alias="X-Backend-Token"),
) -> None:
    secret = get_settings().backend_session_secret
    if secret and x_backend_token != secret:
        raise HTTPException(status_code=401, detail="Invalid backend token")


def require_user(
    _: None = Depends(require_backend_token),
    svc: Services = Depends(services),
) -> User:
    user = svc.sessions.current_user()
    if user is None:
        raise HTTPException(status_code=401, detail="Not logged in")
    return user
