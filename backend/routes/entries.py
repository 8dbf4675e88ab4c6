from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from backend.auth import require_user
from backend.deps import services
from backend.schemas import EntryValuePayload
from mastery.models import TaskEntry
from mastery.services import Services

router = APIRouter(dependencies=[Depends(require_user)])


def _require_task(svc: Services, task_id: str) -> None:
    if svc.store.get_task(task_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown task {task_id}")


@router.get("/v1/entries")
def list_entries(day: date | None = Query(default=None, alias="date"), svc: Services = Depends(services)):
    if day is None:
        items = svc.store.list_entries()
    else:
        items = svc.store.list_entries_for_date(day)
    return {"items": [entry.to_json_dict() for entry in items]}


@router.put("/v1/entries")
def upsert_entry(entry: TaskEntry, svc: Services = Depends(services)):
    _require_task(svc, entry.task_id)
    svc.store.upsert_entry(entry)
    return entry.to_json_dict()


@router.post("/v1/entries/{day}/{task_id}/toggle")
def toggle_entry(day: date, task_id: str, svc: Services = Depends(services)):
    _require_task(svc, task_id)
    return svc.store.toggle_entry(task_id, day).to_json_dict()


@router.put("/v1/entries/{day}/{task_id}/value")
def set_entry_value(day: date, task_id: str, payload: EntryValuePayload, svc: Services = Depends(services)):
    _require_task(svc, task_id)
    return svc.store.record_value(task_id, day, payload.value).to_json_dict()
