# core/dashboard.py

from datetime import datetime, time, timezone
from typing import Dict, List, Sequence

from .config import settings
from .errors import RecordOrderError, StoreError
from .filter_engine import as_utc
from .models import DashboardStats, FieldRecord, FieldSummary, Session
from .record_store import RecordStore


def ensure_newest_first(records: Sequence[FieldRecord]) -> None:
    for newer, older in zip(records, records[1:]):
        if as_utc(newer.timestamp) < as_utc(older.timestamp):
            raise RecordOrderError(
                f"Records must be ordered newest first; {newer.id} precedes the newer {older.id}."
            )


def aggregate(recent_records: Sequence[FieldRecord], limit: int) -> List[FieldSummary]:
    """
    Groups newest-first records by field name. Each group keeps the value of its
    first (most recent) record; groups appear in first-seen order.
    """
    if limit < 0:
        raise ValueError("limit must not be negative")
    ensure_newest_first(recent_records)

    groups: Dict[str, FieldSummary] = {}
    for record in recent_records:
        summary = groups.get(record.field)
        if summary is None:
            summary = groups[record.field] = FieldSummary(field=record.field, count=0, last_value=record.value)
        summary.count += 1
    return list(groups.values())[:limit]


class DashboardService:
    """Builds the dashboard overview for the signed-in user."""

    def __init__(self, store: RecordStore,
                 recent_window: int = settings.dashboard_recent_window,
                 field_limit: int = settings.dashboard_field_limit):
        self.store = store
        self.recent_window = recent_window
        self.field_limit = field_limit

    def load(self, session: Session) -> DashboardStats:
        print("---DASHBOARD: Loading stats---")
        midnight = datetime.combine(datetime.now(timezone.utc).date(), time.min, tzinfo=timezone.utc)
        try:
            total = self.store.count_records(session)
            today = self.store.count_records(session, since=midnight)
            recent = self.store.get_records(session, limit=self.recent_window)
        except StoreError as e:
            print(f"---DASHBOARD: Failed to load stats: {e}---")
            return DashboardStats(sync_status="error")

        return DashboardStats(
            total_records=total,
            today_records=today,
            recent_fields=aggregate(recent, self.field_limit),
            sync_status="synced",
        )
