from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from backend.auth import require_user
from backend.deps import services
from backend.schemas import ReportResponse
from mastery.reports import ReportKind, ReportOrdering
from mastery.services import Services

router = APIRouter(dependencies=[Depends(require_user)])


def _csv_response(content: str, filename: str) -> PlainTextResponse:
    return PlainTextResponse(
        content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/v1/reports/tasks/csv")
def tasks_csv(svc: Services = Depends(services)):
    return _csv_response(svc.reports.tasks_csv(), "self-mastery-tasks.csv")


@router.get("/v1/reports/{kind}", response_model=ReportResponse)
def get_report(
    kind: ReportKind,
    ordering: ReportOrdering | None = Query(default=None),
    svc: Services = Depends(services),
):
    report = svc.reports.generate(kind, ordering)
    return ReportResponse(kind=report.kind.value, ordering=report.ordering.value, rows=report.rows)


@router.get("/v1/reports/{kind}/csv")
def get_report_csv(
    kind: ReportKind,
    ordering: ReportOrdering | None = Query(default=None),
    svc: Services = Depends(services),
):
    report = svc.reports.generate(kind, ordering)
    return _csv_response(report.to_csv(), report.filename)
