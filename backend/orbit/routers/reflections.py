"""Reflection router: the remote procedures behind the reflection client.

getAll, getById, getByDateRange, getMoodTrends, create, update and delete,
all scoped to the authenticated owner.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, col, select

from orbit.config import get_settings
from orbit.db import get_session
from orbit.dependencies import require_owner
from orbit.models.reflection import (
    DeleteResult,
    MoodSample,
    Reflection,
    ReflectionCreate,
    ReflectionRead,
    ReflectionUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reflections", tags=["reflections"])


def _to_utc(value: datetime) -> datetime:
    """Aware UTC; naive values are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _next_update_time(previous: datetime) -> datetime:
    """Current time, bumped past *previous* so updated_at always moves forward."""
    now = datetime.now(timezone.utc)
    floor = _to_utc(previous) + timedelta(microseconds=1)
    return now if now >= floor else floor


def _check_range(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    start, end = _to_utc(start), _to_utc(end)
    if start > end:
        raise HTTPException(status_code=422, detail="startDate must not be after endDate")
    return start, end


def _get_owned(reflection_id: str, owner_id: str, session: Session) -> Reflection:
    reflection = session.get(Reflection, reflection_id)
    # Other owners' reflections are indistinguishable from missing ones
    if not reflection or reflection.owner_id != owner_id:
        raise HTTPException(status_code=404, detail="Reflection not found")
    return reflection


def _in_range(owner_id: str, start: datetime, end: datetime, session: Session) -> list[Reflection]:
    statement = (
        select(Reflection)
        .where(Reflection.owner_id == owner_id)
        .where(Reflection.created_at >= start)  # type: ignore[arg-type]
        .where(Reflection.created_at <= end)  # type: ignore[arg-type]
        .order_by(col(Reflection.created_at).asc())
    )
    return list(session.exec(statement).all())


@router.get("", response_model=list[ReflectionRead])
async def get_all(
    owner_id: str = Depends(require_owner),
    session: Session = Depends(get_session),
) -> list[ReflectionRead]:
    statement = (
        select(Reflection)
        .where(Reflection.owner_id == owner_id)
        .order_by(col(Reflection.created_at).desc())
    )
    return [ReflectionRead.model_validate(r) for r in session.exec(statement).all()]


@router.get("/range", response_model=list[ReflectionRead])
async def get_by_date_range(
    start_date: datetime = Query(..., alias="startDate"),
    end_date: datetime = Query(..., alias="endDate"),
    owner_id: str = Depends(require_owner),
    session: Session = Depends(get_session),
) -> list[ReflectionRead]:
    start, end = _check_range(start_date, end_date)
    return [ReflectionRead.model_validate(r) for r in _in_range(owner_id, start, end, session)]


@router.get("/mood-trends", response_model=list[MoodSample])
async def get_mood_trends(
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
    owner_id: str = Depends(require_owner),
    session: Session = Depends(get_session),
) -> list[MoodSample]:
    """Mood/energy samples in [startDate, endDate], oldest first.

    A missing endDate means now; a missing startDate means
    ``mood_trend_default_days`` before endDate.
    """
    end = end_date or datetime.now(timezone.utc)
    start = start_date or end - timedelta(days=get_settings().mood_trend_default_days)
    start, end = _check_range(start, end)
    return [
        MoodSample(timestamp=r.created_at, mood=r.mood, energy=r.energy)
        for r in _in_range(owner_id, start, end, session)
    ]


@router.get("/{reflection_id}", response_model=ReflectionRead)
async def get_by_id(
    reflection_id: str,
    owner_id: str = Depends(require_owner),
    session: Session = Depends(get_session),
) -> ReflectionRead:
    return ReflectionRead.model_validate(_get_owned(reflection_id, owner_id, session))


@router.post("", response_model=ReflectionRead, status_code=201)
async def create(
    body: ReflectionCreate,
    owner_id: str = Depends(require_owner),
    session: Session = Depends(get_session),
) -> ReflectionRead:
    now = datetime.now(timezone.utc)
    reflection = Reflection(
        owner_id=owner_id,
        mood=body.mood,
        energy=body.energy,
        wins=body.wins,
        challenges=body.challenges,
        journal_entry=body.journal_entry,
        tags=json.dumps(body.tags),
        created_at=now,
        updated_at=now,
    )
    session.add(reflection)
    session.commit()
    session.refresh(reflection)
    logger.info("Created reflection %s for owner %s", reflection.id, owner_id)
    return ReflectionRead.model_validate(reflection)


@router.patch("/{reflection_id}", response_model=ReflectionRead)
async def update(
    reflection_id: str,
    body: ReflectionUpdate,
    owner_id: str = Depends(require_owner),
    session: Session = Depends(get_session),
) -> ReflectionRead:
    reflection = _get_owned(reflection_id, owner_id, session)

    changes = body.model_dump(exclude_unset=True)
    if "tags" in changes:
        changes["tags"] = json.dumps(changes["tags"])
    for field, value in changes.items():
        setattr(reflection, field, value)

    reflection.updated_at = _next_update_time(reflection.updated_at)
    session.add(reflection)
    session.commit()
    session.refresh(reflection)
    return ReflectionRead.model_validate(reflection)


@router.delete("/{reflection_id}", response_model=DeleteResult)
async def delete(
    reflection_id: str,
    owner_id: str = Depends(require_owner),
    session: Session = Depends(get_session),
) -> DeleteResult:
    reflection = _get_owned(reflection_id, owner_id, session)
    session.delete(reflection)
    session.commit()
    logger.info("Deleted reflection %s for owner %s", reflection_id, owner_id)
    return DeleteResult(id=reflection_id)
