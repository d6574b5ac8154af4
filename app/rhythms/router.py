"""Rhythm HTTP routers — day statuses, chains, nudges, progress."""

from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import verify_api_key
from app.config import settings
from app.db import get_session
from app.rhythms import service
from app.rhythms.chain_config import TIERS, get_chain_config, list_chain_configs
from app.rhythms.connector import RhythmConfigError
from app.rhythms.models import ChainStat, ChainType, DayStatus, RhythmProgress

router = APIRouter(prefix="/users/{user_id}/rhythms", tags=["rhythms"])
catalog_router = APIRouter(prefix="/rhythms", tags=["rhythms"])


def _parse_date(value: str, name: str) -> date:
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid date for '{name}': {value}")
    if parsed >= date.max:
        raise HTTPException(status_code=422, detail=f"Date out of range for '{name}': {value}")
    return parsed


def _check_range_days(n_days: int) -> None:
    if n_days > settings.max_range_days:
        raise HTTPException(
            status_code=422,
            detail=f"Range of {n_days} days exceeds the limit of {settings.max_range_days}",
        )


def _parse_as_of(value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid datetime for 'as_of': {value}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _tz_name(tz: str | None) -> str:
    name = tz or settings.default_tz
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise HTTPException(status_code=422, detail=f"Unknown timezone: {name}")
    return name


def _not_found(rhythm_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Unknown rhythm: {rhythm_id}")


# ---------------------------------------------------------------------------
# /users/{user_id}/rhythms/{rhythm_id}/...
# ---------------------------------------------------------------------------


@router.get("/{rhythm_id}/days", response_model=list[DayStatus])
async def rhythm_days(
    user_id: str,
    rhythm_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    from_date: str = Query(..., alias="from", description="Start date (YYYY-MM-DD)"),
    to_date: str = Query(..., alias="to", description="End date (YYYY-MM-DD), inclusive"),
    tz: str = Query(default=None, description="Timezone (e.g. Europe/London)"),
    as_of: str | None = Query(default=None, description="Evaluate as of this instant (ISO 8601)"),
) -> list[DayStatus]:
    start = _parse_date(from_date, "from")
    end = _parse_date(to_date, "to")
    _check_range_days((end - start).days + 1)
    try:
        return await service.get_day_statuses(
            session, user_id, rhythm_id, start, end, _tz_name(tz), _parse_as_of(as_of)
        )
    except service.RhythmNotFoundError:
        raise _not_found(rhythm_id)
    except RhythmConfigError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.get("/{rhythm_id}/chains", response_model=list[ChainStat])
async def rhythm_chains(
    user_id: str,
    rhythm_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    tz: str = Query(default=None, description="Timezone"),
    as_of: str | None = Query(default=None, description="Evaluate as of this instant (ISO 8601)"),
) -> list[ChainStat]:
    try:
        return await service.get_chain_stats(session, user_id, rhythm_id, _tz_name(tz), _parse_as_of(as_of))
    except service.RhythmNotFoundError:
        raise _not_found(rhythm_id)
    except RhythmConfigError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.get("/{rhythm_id}/nudge")
async def rhythm_nudge(
    user_id: str,
    rhythm_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    tz: str = Query(default=None, description="Timezone"),
    as_of: str | None = Query(default=None, description="Evaluate as of this instant (ISO 8601)"),
) -> dict[str, str | None]:
    try:
        message = await service.get_nudge(session, user_id, rhythm_id, _tz_name(tz), _parse_as_of(as_of))
    except service.RhythmNotFoundError:
        raise _not_found(rhythm_id)
    except RhythmConfigError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return {"nudge": message}


@router.get("/{rhythm_id}/progress", response_model=RhythmProgress)
async def rhythm_progress(
    user_id: str,
    rhythm_id: str,
    session: AsyncSession = Depends(get_session),
    _: str = Depends(verify_api_key),
    tz: str = Query(default=None, description="Timezone"),
    as_of: str | None = Query(default=None, description="Evaluate as of this instant (ISO 8601)"),
    days: int | None = Query(default=None, ge=1, description="Trailing days of day statuses"),
) -> RhythmProgress:
    if days is not None:
        _check_range_days(days)
    try:
        return await service.get_progress(
            session, user_id, rhythm_id, _tz_name(tz), _parse_as_of(as_of), window_days=days
        )
    except service.RhythmNotFoundError:
        raise _not_found(rhythm_id)
    except RhythmConfigError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


# ---------------------------------------------------------------------------
# /rhythms/chain-types
# ---------------------------------------------------------------------------


def _chain_type_payload(chain_type: ChainType) -> dict:
    cfg = get_chain_config(chain_type)
    return {
        "type": cfg.type.value,
        "label": cfg.label,
        "short_label": cfg.short_label,
        "description": cfg.description,
        "unit": cfg.unit.value,
        "min_days_per_period": cfg.min_days_per_period,
    }


@catalog_router.get("/chain-types")
async def chain_types_list(
    _: str = Depends(verify_api_key),
) -> list[dict]:
    return [_chain_type_payload(cfg.type) for cfg in list_chain_configs()]


@catalog_router.get("/chain-types/{chain_type}")
async def chain_type_detail(
    chain_type: str,
    _: str = Depends(verify_api_key),
) -> dict:
    try:
        parsed = ChainType(chain_type)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown chain type: {chain_type}")
    return _chain_type_payload(parsed)


@catalog_router.get("/tiers")
async def tiers_list(
    _: str = Depends(verify_api_key),
) -> list[dict]:
    """Weekly frequency tiers, most frequent first."""
    return [
        {
            "tier": cfg.name.value,
            "label": cfg.label,
            "short_label": cfg.short_label,
            "min_days": cfg.min_days,
            "max_days": cfg.max_days,
        }
        for cfg in TIERS.values()
    ]
