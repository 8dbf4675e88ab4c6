from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from backend.auth import require_backend_token, require_user
from backend.deps import services
from backend.schemas import LoginPayload
from mastery.models import User
from mastery.services import Services

router = APIRouter(dependencies=[Depends(require_backend_token)])


@router.post("/v1/session")
def login(payload: LoginPayload, svc: Services = Depends(services)):
    user = svc.sessions.login(payload.username, payload.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid username or password")
    return user.to_json_dict()


@router.get("/v1/session")
def current_session(user: User = Depends(require_user)):
    return user.to_json_dict()


@router.delete("/v1/session")
def logout(_: User = Depends(require_user), svc: Services = Depends(services)):
    svc.sessions.logout()
    return {"ok": True}
