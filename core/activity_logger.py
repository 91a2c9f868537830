# core/activity_logger.py

from typing import List
from .models import ActivityLogEntry, Session
from .record_store import RecordStore, ACTIVITY_LOGS

DATA_ENTRY = "DATA_ENTRY"
DATA_DELETE = "DATA_DELETE"

class ActivityLogger:
    """Appends audit entries for the session's user. Entries are never updated or removed."""
    def __init__(self, store: RecordStore):
        self.store = store

    def log(self, session: Session, action: str, details: str) -> ActivityLogEntry:
        entry = ActivityLogEntry(user_id=session.user_id, action=action, details=details)
        self.store.insert(session, ACTIVITY_LOGS, [entry.model_dump()])
        print(f"---ACTIVITY LOGGER: {action} for user {session.user_id}---")
        return entry

    def get_recent_entries(self, session: Session, limit: int = 20) -> List[ActivityLogEntry]:
        rows = self.store.select(session, ACTIVITY_LOGS, limit=limit)
        return [ActivityLogEntry(**row) for row in rows]
