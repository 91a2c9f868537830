# core/field_data_service.py

from datetime import date, datetime
from typing import List, Optional, Tuple

from .activity_logger import ActivityLogger, DATA_DELETE, DATA_ENTRY
from .errors import StoreError
from .export_serializer import export_filename, serialize
from .filter_engine import filter_records
from .models import FieldRecord, FilterCriteria, Session, validate_entry
from .record_store import RecordStore


class FieldDataService:
    """Writes field records and records every write in the activity log."""

    def __init__(self, store: RecordStore, activity_logger: ActivityLogger):
        self.store = store
        self.activity = activity_logger

    def submit_record(self, session: Session, field: str, value: str, location: str,
                      timestamp: Optional[datetime] = None) -> FieldRecord:
        validate_entry(field, value, location)
        record = self.store.add_record(session, field.strip(), value.strip(), location.strip(), timestamp)
        self._log_activity(session, DATA_ENTRY, f"Added field record: {record.field} = {record.value}")
        return record

    def delete_record(self, session: Session, record_id: str) -> None:
        self.store.delete_record(session, record_id)
        self._log_activity(session, DATA_DELETE, f"Deleted field record with ID: {record_id}")

    def _log_activity(self, session: Session, action: str, details: str) -> None:
        # the record write is already committed; a lost audit entry must not be reported as a failed write
        try:
            self.activity.log(session, action, details)
        except StoreError as e:
            print(f"---FIELD DATA SERVICE: Failed to log activity: {e}---")

    def load_records(self, session: Session) -> List[FieldRecord]:
        return self.store.get_records(session)


class RecordsBrowser:
    """
    In-memory state behind the records view: the loaded records (newest first),
    the active filter and the visible subset.
    """

    def __init__(self, service: FieldDataService, session: Session):
        self.service = service
        self.session = session
        self.records: List[FieldRecord] = []
        self.criteria = FilterCriteria()

    def load(self) -> List[FieldRecord]:
        self.records = self.service.load_records(self.session)
        return self.records

    def apply(self, criteria: FilterCriteria) -> List[FieldRecord]:
        # filter first so a malformed date leaves the current criteria in place
        visible = filter_records(self.records, criteria)
        self.criteria = criteria
        return visible

    @property
    def visible(self) -> List[FieldRecord]:
        return filter_records(self.records, self.criteria)

    def clear_filters(self) -> None:
        self.criteria = FilterCriteria.reset()

    def delete(self, record_id: str) -> None:
        # the local copy only changes once the store has accepted the delete
        self.service.delete_record(self.session, record_id)
        self.records = [r for r in self.records if r.id != record_id]

    def export(self, fmt: str, today: Optional[date] = None) -> Tuple[str, str]:
        """Returns (filename, content) for the visible records."""
        return export_filename(fmt, prefix="filtered_records", today=today), serialize(self.visible, fmt)
