"""Entry-to-rhythm matching.

A rhythm matches an entry when every configured match field equals the
entry's field. Unset match fields match anything. The connector applies the
same filter in SQL; this predicate covers entries already in memory.
"""

from __future__ import annotations

from typing import Iterable

from app.rhythms.models import Entry, RhythmDefinition

# rhythm attribute → entry attribute
MATCH_FIELDS: dict[str, str] = {
    "match_type": "type",
    "match_category": "category",
    "match_subcategory": "subcategory",
    "match_name": "name",
}


def match_filters(rhythm: RhythmDefinition) -> dict[str, str]:
    """Entry field → required value, for the match fields the rhythm sets."""
    filters: dict[str, str] = {}
    for rhythm_attr, entry_attr in MATCH_FIELDS.items():
        value = getattr(rhythm, rhythm_attr)
        if value:
            filters[entry_attr] = value
    return filters


def entry_matches(entry: Entry, rhythm: RhythmDefinition) -> bool:
    return all(getattr(entry, field) == value for field, value in match_filters(rhythm).items())


def filter_entries(entries: Iterable[Entry], rhythm: RhythmDefinition) -> list[Entry]:
    return [e for e in entries if entry_matches(e, rhythm)]
