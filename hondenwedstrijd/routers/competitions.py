from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from hondenwedstrijd.auth import require_api_key
from hondenwedstrijd.schemas import CalendarStatusOut, CompetitionEventOut, RegistrationStatus
from hondenwedstrijd.services.calendar import CompetitionCalendar

router = APIRouter(prefix="/api", tags=["competitions"])


def get_calendar(request: Request) -> CompetitionCalendar:
    return request.app.state.calendar


@router.get("/competitions", response_model=list[CompetitionEventOut])
async def list_competitions(
    category: str | None = Query(None),
    status: RegistrationStatus | None = Query(None),
    calendar: CompetitionCalendar = Depends(get_calendar),
):
    category = category.strip() if category and category.strip() else None
    return [CompetitionEventOut.from_event(e) for e in calendar.filter(category, status)]


@router.get("/competitions/categories", response_model=list[str])
async def list_categories(calendar: CompetitionCalendar = Depends(get_calendar)):
    return calendar.categories


@router.get("/status", response_model=CalendarStatusOut)
async def calendar_status(calendar: CompetitionCalendar = Depends(get_calendar)):
    snap = calendar.snapshot
    return CalendarStatusOut(
        loading=snap.is_loading,
        last_error=snap.last_error,
        events=len(snap.events),
        updated_at=snap.updated_at,
    )


@router.post("/refresh", status_code=202, dependencies=[Depends(require_api_key)])
async def trigger_refresh(calendar: CompetitionCalendar = Depends(get_calendar)):
    """Start a refresh in the background and return immediately.

    A refresh that is already running is reused rather than duplicated.
    """
    calendar.start_refresh()
    return {"started": True}


@router.post("/refresh/cancel", dependencies=[Depends(require_api_key)])
async def cancel_refresh(calendar: CompetitionCalendar = Depends(get_calendar)):
    if calendar.cancel_refresh():
        return {"cancelled": True}
    raise HTTPException(status_code=404, detail="No refresh in progress")
