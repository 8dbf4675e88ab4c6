from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from backend.auth import require_user
from backend.deps import services
from backend.schemas import ProgressSummaryResponse
from mastery import progress as stats
from mastery.dates import iter_days
from mastery.services import Services
from mastery.settings import get_settings

router = APIRouter(dependencies=[Depends(require_user)])

MAX_SUMMARY_DAYS = 366


@router.get("/v1/progress/day/{day}")
def daily_progress(day: date, svc: Services = Depends(services)):
    return svc.progress.daily_progress(day).to_json_dict()


@router.get("/v1/progress/week/{week_start}")
def weekly_progress(week_start: date, svc: Services = Depends(services)):
    return {"items": [item.to_json_dict() for item in svc.progress.weekly_progress(week_start)]}


@router.get("/v1/progress/month/{year}/{month}")
def monthly_progress(year: int, month: int, svc: Services = Depends(services)):
    if not 1 <= month <= 12:
        raise HTTPException(status_code=400, detail="Month must be between 1 and 12")
    return {"items": [item.to_json_dict() for item in svc.progress.monthly_progress(year, month)]}


@router.get("/v1/progress/categories/{day}")
def category_completion(day: date, svc: Services = Depends(services)):
    return {
        "date": day.isoformat(),
        "items": [
            {"category": item.category, "name": item.label, "value": item.completion_percent}
            for item in svc.progress.category_completion(day)
        ],
    }


@router.get("/v1/progress/summary", response_model=ProgressSummaryResponse, response_model_by_alias=True)
def progress_summary(
    start: date = Query(...),
    end: date = Query(...),
    threshold: float | None = Query(default=None, ge=0, le=1),
    svc: Services = Depends(services),
):
    if end < start:
        raise HTTPException(status_code=400, detail="End date must be after start date")
    day_count = (end - start).days + 1
    if day_count > MAX_SUMMARY_DAYS:
        raise HTTPException(status_code=400, detail=f"Range is limited to {MAX_SUMMARY_DAYS} days")
    if threshold is None:
        threshold = get_settings().streak_threshold
    series = svc.progress.progress_for_days(iter_days(start, day_count))
    best = stats.best_day(series)
    return ProgressSummaryResponse(
        start=start,
        end=end,
        average_completion_rate=stats.average_completion_rate(series),
        best_day={"day": best.day, "rate": best.rate},
        streak=stats.streak(series, threshold),
        threshold=threshold,
    )
