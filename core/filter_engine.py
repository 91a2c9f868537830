# core/filter_engine.py

from datetime import date, datetime, time, timezone
from typing import Callable, List, Optional, Sequence

from .errors import InvalidFilterError
from .models import FieldRecord, FilterCriteria

END_OF_DAY = time(23, 59, 59)


def _parse_date(raw: str, label: str) -> Optional[date]:
    raw = raw.strip()
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError as e:
        raise InvalidFilterError(f"Invalid {label} date '{raw}', expected YYYY-MM-DD.") from e


def as_utc(ts: datetime) -> datetime:
    # Naive timestamps are stored as UTC.
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()


def build_predicates(criteria: FilterCriteria) -> List[Callable[[FieldRecord], bool]]:
    """
    Turns the non-empty criteria into record predicates.
    Dates are parsed up front so a malformed bound fails even for an empty record list.
    """
    date_from = _parse_date(criteria.date_from, "from")
    date_to = _parse_date(criteria.date_to, "to")

    predicates = []
    term = criteria.search_term.strip()
    if term:
        predicates.append(
            lambda r: _contains(r.field, term) or _contains(r.value, term) or _contains(r.location, term)
        )
    field = criteria.field.strip()
    if field:
        predicates.append(lambda r: _contains(r.field, field))
    location = criteria.location.strip()
    if location:
        predicates.append(lambda r: _contains(r.location, location))
    if date_from:
        start = datetime.combine(date_from, time.min, tzinfo=timezone.utc)
        predicates.append(lambda r: as_utc(r.timestamp) >= start)
    if date_to:
        # the end date covers the whole day
        end = datetime.combine(date_to, END_OF_DAY, tzinfo=timezone.utc)
        predicates.append(lambda r: as_utc(r.timestamp) <= end)
    return predicates


def filter_records(records: Sequence[FieldRecord], criteria: FilterCriteria) -> List[FieldRecord]:
    """Returns the records matching every criterion, in their original order."""
    predicates = build_predicates(criteria)
    if not predicates:
        return list(records)
    return [r for r in records if all(p(r) for p in predicates)]
