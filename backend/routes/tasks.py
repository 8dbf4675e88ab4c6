from __future__ import annotations

from fastapi import APIRouter, Depends

from backend.auth import require_user
from backend.deps import services
from backend.schemas import TaskCreate
from mastery.services import Services

router = APIRouter(dependencies=[Depends(require_user)])


@router.get("/v1/tasks")
def list_tasks(svc: Services = Depends(services)):
    return {"items": [task.to_json_dict() for task in svc.store.list_tasks()]}


@router.post("/v1/tasks", status_code=201)
def create_task(payload: TaskCreate, svc: Services = Depends(services)):
    task = svc.store.add_task(
        payload.name,
        payload.category,
        value_kind=payload.value_kind,
        description=payload.description,
    )
    return task.to_json_dict()
