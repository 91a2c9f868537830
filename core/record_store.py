# core/record_store.py

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from .config import settings
from .errors import StoreError
from .models import FieldRecord, Session, validate_entry

FIELD_RECORDS = "field_records"
ACTIVITY_LOGS = "activity_logs"
CHATBOT_LOGS = "chatbot_logs"

# Rows in these tables may be read and appended but never removed.
APPEND_ONLY_TABLES = {ACTIVITY_LOGS}

NEWEST_FIRST = ("timestamp", -1)


class RecordStore:
    """
    Handles all database operations for field records and the log tables.
    Every call is scoped to the owner carried by the session, mirroring the
    row-level policy of the backing store.
    """

    def __init__(self, db=None, db_name: str = settings.db_name):
        if db is None:
            client = MongoClient(settings.final_mongo_uri, tz_aware=True)
            db = client[db_name]
        self.db = db
        print("---RECORD STORE: Connected to MongoDB---")

    # --- generic, owner-scoped table operations ---

    def insert(self, session: Session, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        docs = []
        for row in rows:
            doc = dict(row)
            doc["id"] = doc.get("id") or str(uuid.uuid4())
            doc["user_id"] = session.user_id
            if doc.get("timestamp") is None:
                doc["timestamp"] = datetime.now(timezone.utc)
            docs.append(doc)
        try:
            # insert_many adds "_id" to the dicts it is given
            self.db[table].insert_many([dict(d) for d in docs])
        except PyMongoError as e:
            raise StoreError(f"Failed to insert into {table}: {e}", e) from e
        print(f"---RECORD STORE: Inserted {len(docs)} row(s) into {table} for user {session.user_id}---")
        return docs

    def select(
        self,
        session: Session,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order: Optional[Tuple[str, int]] = NEWEST_FIRST,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        query = self._scoped(session, filters)
        try:
            cursor = self.db[table].find(query, {"_id": 0})
            if order:
                cursor = cursor.sort(*order)
            if limit:
                cursor = cursor.limit(limit)
            return list(cursor)
        except PyMongoError as e:
            raise StoreError(f"Failed to read {table}: {e}", e) from e

    def delete(self, session: Session, table: str, row_id: str) -> None:
        if table in APPEND_ONLY_TABLES:
            raise StoreError(f"Rows in {table} cannot be deleted.")
        try:
            result = self.db[table].delete_one({"id": row_id, "user_id": session.user_id})
        except PyMongoError as e:
            raise StoreError(f"Failed to delete from {table}: {e}", e) from e
        if result.deleted_count == 0:
            raise StoreError(f"No row {row_id} in {table} for this user.")
        print(f"---RECORD STORE: Deleted {row_id} from {table}---")

    def count(self, session: Session, table: str, filters: Optional[Dict[str, Any]] = None) -> int:
        try:
            return self.db[table].count_documents(self._scoped(session, filters))
        except PyMongoError as e:
            raise StoreError(f"Failed to count {table}: {e}", e) from e

    def _scoped(self, session: Session, filters: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        query = dict(filters or {})
        query["user_id"] = session.user_id
        return query

    # --- field records ---

    def add_record(self, session: Session, field: str, value: str, location: str,
                   timestamp: Optional[datetime] = None) -> FieldRecord:
        validate_entry(field, value, location)
        row = {"field": field.strip(), "value": value.strip(), "location": location.strip(), "timestamp": timestamp}
        doc = self.insert(session, FIELD_RECORDS, [row])[0]
        return _to_record(doc)

    def get_records(self, session: Session, limit: Optional[int] = None,
                    since: Optional[datetime] = None) -> List[FieldRecord]:
        """Field records for the session's user, newest first."""
        filters = {"timestamp": {"$gte": since}} if since else None
        return [_to_record(d) for d in self.select(session, FIELD_RECORDS, filters, limit=limit)]

    def delete_record(self, session: Session, record_id: str) -> None:
        self.delete(session, FIELD_RECORDS, record_id)

    def count_records(self, session: Session, since: Optional[datetime] = None) -> int:
        filters = {"timestamp": {"$gte": since}} if since else None
        return self.count(session, FIELD_RECORDS, filters)


def _to_record(doc: Dict[str, Any]) -> FieldRecord:
    return FieldRecord(
        id=doc["id"],
        field=doc["field"],
        value=doc["value"],
        location=doc["location"],
        timestamp=doc["timestamp"],
        owner=doc["user_id"],
    )
