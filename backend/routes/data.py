from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from backend.auth import require_user
from backend.deps import services
from backend.schemas import ImportResponse
from mastery import transfer
from mastery.services import Services

router = APIRouter(dependencies=[Depends(require_user)])


@router.get("/v1/data/export")
def export_data(svc: Services = Depends(services)):
    return Response(
        transfer.export_snapshot(svc.store),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="self-mastery-backup.json"'},
    )


@router.post("/v1/data/import", response_model=ImportResponse)
async def import_data(request: Request, svc: Services = Depends(services)):
    snapshot = transfer.import_snapshot(svc.store, await request.body())
    return ImportResponse(tasks=len(snapshot.tasks), entries=len(snapshot.entries))


@router.delete("/v1/data/entries")
def clear_entries(svc: Services = Depends(services)):
    transfer.clear_entries(svc.store)
    return {"ok": True}
