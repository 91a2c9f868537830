# core/export_serializer.py

import csv
import io
import json
from datetime import date
from typing import List, Optional, Sequence

from .models import FieldRecord

CSV_HEADER = ["ID", "Field", "Value", "Location", "Timestamp"]
FORMATS = ("csv", "json")
MIME_TYPES = {"csv": "text/csv", "json": "application/json"}


def to_csv(records: Sequence[FieldRecord]) -> str:
    buffer = io.StringIO()
    # QUOTE_MINIMAL quotes only cells holding a comma, quote or newline (RFC 4180).
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(CSV_HEADER)
    for r in records:
        writer.writerow([r.id, r.field, r.value, r.location, r.timestamp.isoformat()])
    return buffer.getvalue()


def to_json(records: Sequence[FieldRecord]) -> str:
    return json.dumps([r.model_dump(mode="json") for r in records], indent=2, ensure_ascii=False)


def serialize(records: Sequence[FieldRecord], fmt: str) -> str:
    """Renders records as CSV or pretty-printed JSON, preserving input order."""
    if fmt == "csv":
        return to_csv(records)
    if fmt == "json":
        return to_json(records)
    raise ValueError(f"Unsupported export format '{fmt}'. Choose one of {FORMATS}.")


def deserialize_json(text: str) -> List[FieldRecord]:
    return [FieldRecord(**item) for item in json.loads(text)]


def export_filename(fmt: str, prefix: str = "field_data", today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{prefix}_{today.isoformat()}.{fmt}"
