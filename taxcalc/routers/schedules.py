"""Routers for rate-schedule editing:
    GET   /taxcalc/v1/schedules:default
    POST  /taxcalc/v1/schedules:add
    POST  /taxcalc/v1/schedules:remove
    POST  /taxcalc/v1/schedules:update
    POST  /taxcalc/v1/schedules:reset
    POST  /taxcalc/v1/schedules:validate

The server keeps no schedule: each call receives the caller's schedule
and answers with the edited copy.
"""

from __future__ import annotations
import logging
from fastapi import APIRouter, HTTPException

from taxcalc.models.schemas import (
    ScheduleRemoveRequest,
    ScheduleRequest,
    ScheduleResponse,
    ScheduleUpdateRequest,
    ScheduleValidationResponse,
)
from taxcalc.services.schedule_service import (
    add_bracket,
    default_schedule,
    remove_bracket,
    reset_schedule,
    update_bracket,
)
from taxcalc.services.tax_service import find_schedule_issues

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/taxcalc/v1",
    tags=["Schedules"],
)


@router.get(
    "/schedules:default",
    response_model=ScheduleResponse,
    summary="The canonical default rate schedule",
)
async def schedules_default() -> ScheduleResponse:
    return ScheduleResponse(brackets=list(default_schedule()))


@router.post(
    "/schedules:add",
    response_model=ScheduleResponse,
    summary="Append an unbounded 0 % band",
)
async def schedules_add(body: ScheduleRequest) -> ScheduleResponse:
    return ScheduleResponse(brackets=list(add_bracket(body.brackets)))


@router.post(
    "/schedules:remove",
    response_model=ScheduleResponse,
    summary="Remove a band by id",
)
async def schedules_remove(body: ScheduleRemoveRequest) -> ScheduleResponse:
    return ScheduleResponse(brackets=list(remove_bracket(body.brackets, body.id)))


@router.post(
    "/schedules:update",
    response_model=ScheduleResponse,
    summary="Change a band's upper bound or rate",
)
async def schedules_update(body: ScheduleUpdateRequest) -> ScheduleResponse:
    """``value`` may be ``"∞"``, ``"inf"`` or ``null`` to make the band unbounded."""
    try:
        edited = update_bracket(body.brackets, body.id, body.field, body.value)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return ScheduleResponse(brackets=list(edited))


@router.post(
    "/schedules:reset",
    response_model=ScheduleResponse,
    summary="Discard edits and return the default schedule",
)
async def schedules_reset() -> ScheduleResponse:
    return ScheduleResponse(brackets=list(reset_schedule()))


@router.post(
    "/schedules:validate",
    response_model=ScheduleValidationResponse,
    summary="Report duplicate bounds and other degenerate bands",
)
async def schedules_validate(body: ScheduleRequest) -> ScheduleValidationResponse:
    issues = find_schedule_issues(body.brackets)
    if issues:
        logger.info("Schedule with %d band(s) has %d issue(s)", len(body.brackets), len(issues))
    return ScheduleValidationResponse(valid=not issues, issues=issues)
