"""Database connector — async reads of entries and rhythms.

entries: id, user_id, type, name, category, subcategory, timestamp
(timestamptz, the canonical timeline position), duration_seconds, data
(JSONB; tallies keep their count under data->>'count'), deleted_at.

rhythms: id, user_id, name, goal_type, goal_unit, chain_type, match_type,
match_category, match_subcategory, match_name, duration_threshold_seconds,
count_threshold, weekly_target_minutes, monthly_target_minutes.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pydantic import ValidationError
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.rhythms.matcher import match_filters
from app.rhythms.models import Entry, RhythmDefinition

logger = logging.getLogger(__name__)


class RhythmConfigError(ValueError):
    """A stored rhythm cannot be evaluated (missing or invalid thresholds)."""


async def fetch_rhythm(
    session: AsyncSession,
    user_id: str,
    rhythm_id: str,
) -> RhythmDefinition | None:
    """Load one rhythm owned by user_id. None when it doesn't exist.

    Raises RhythmConfigError when the row doesn't validate.
    """
    query = (
        "SELECT CAST(id AS TEXT) AS id, CAST(user_id AS TEXT) AS user_id, "
        "name, goal_type, goal_unit, chain_type, "
        "match_type, match_category, match_subcategory, match_name, "
        "duration_threshold_seconds, count_threshold, "
        "weekly_target_minutes, monthly_target_minutes "
        "FROM rhythms "
        "WHERE id = :rhythm_id AND user_id = :user_id"
    )
    result = await session.execute(text(query), {"rhythm_id": rhythm_id, "user_id": user_id})
    row = result.fetchone()
    if row is None:
        return None
    data = dict(zip(result.keys(), row))
    try:
        return RhythmDefinition.model_validate(data)
    except ValidationError as exc:
        logger.warning("Rhythm %s has an invalid configuration: %s", rhythm_id, exc)
        raise RhythmConfigError(f"Rhythm {rhythm_id} is misconfigured") from exc


async def fetch_entries(
    session: AsyncSession,
    user_id: str,
    rhythm: RhythmDefinition,
    start: datetime | None,
    end_exclusive: datetime,
) -> list[Entry]:
    """Fetch the user's live entries matching the rhythm in [start, end_exclusive).

    start=None reads from the beginning of history. Returns an empty list
    when nothing is found.
    """
    query = (
        "SELECT CAST(id AS TEXT) AS id, timestamp, duration_seconds, "
        "CAST(data->>'count' AS INTEGER) AS count, "
        "type, category, subcategory, name "
        "FROM entries "
        "WHERE user_id = :user_id AND deleted_at IS NULL "
        "AND timestamp < :end"
    )
    params: dict[str, Any] = {"user_id": user_id, "end": end_exclusive}
    if start is not None:
        query += " AND timestamp >= :start"
        params["start"] = start
    for column, value in match_filters(rhythm).items():
        query += f" AND {column} = :{column}"
        params[column] = value
    query += " ORDER BY timestamp"

    result = await session.execute(text(query), params)
    columns = result.keys()
    return [Entry.model_validate(dict(zip(columns, r))) for r in result.fetchall()]
