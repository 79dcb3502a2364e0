"""System endpoints: health, public configuration and monthly rollover."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from tutorbook.core.settings import settings
from tutorbook.services import Done

from ..dependencies import RolloverDep

router = APIRouter(prefix="/system", tags=["system"])


class RolloverStatusResponse(BaseModel):
    month_key: str
    done: bool


class RolloverRunResponse(BaseModel):
    month_key: str
    already_done: bool
    created: list[int]
    skipped_students: list[str]


@router.get("/health")
async def get_health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/config")
async def get_public_config() -> dict[str, object]:
    """Return a sanitized snapshot of public runtime configuration.

    Excludes connection strings and local file paths.
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
            "debug": settings.debug,
        },
        "calendar": {
            "opening_time": settings.opening_time.strftime("%H:%M"),
            "closing_time": settings.closing_time.strftime("%H:%M"),
            "slot_minutes": settings.slot_minutes,
            "max_per_slot": settings.max_per_slot,
            "week_starts_on": settings.week_starts_on,
            "default_session_title": settings.default_session_title,
        },
        "recurrence": {"default_weeks": settings.recurrence_default_weeks},
        "rollover": {"on_startup": settings.rollover_on_startup},
    }


@router.get("/rollover", response_model=RolloverStatusResponse)
async def get_rollover_status(scheduler: RolloverDep) -> RolloverStatusResponse:
    state = scheduler.state()
    return RolloverStatusResponse(month_key=state.month_key, done=isinstance(state, Done))


@router.post("/rollover", response_model=RolloverRunResponse)
async def run_rollover(scheduler: RolloverDep) -> RolloverRunResponse:
    """Carry unpaid balances into the current month unless already done."""
    result = await scheduler.run()
    return RolloverRunResponse(
        month_key=result.month_key,
        already_done=result.already_done,
        created=result.created,
        skipped_students=result.skipped_students,
    )
