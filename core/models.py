# core/models.py

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime, timezone
import uuid
from .errors import ValidationError

REQUIRED_FIELDS = {
    "field": "Field name is required",
    "value": "Value is required",
    "location": "Location is required",
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def validate_entry(field: str, value: str, location: str) -> None:
    """Raises ValidationError naming every required entry field that is blank after trimming."""
    entry = {"field": field, "value": value, "location": location}
    errors = {name: msg for name, msg in REQUIRED_FIELDS.items() if not (entry[name] or "").strip()}
    if errors:
        raise ValidationError(errors)


class FieldRecord(BaseModel):
    """A single field observation as stored in the record store."""
    id: str
    field: str
    value: str
    location: str
    timestamp: datetime = Field(default_factory=utc_now)
    owner: str

    @field_validator("field", "value", "location")
    @classmethod
    def not_blank(cls, v: str, info) -> str:
        if not v.strip():
            raise ValueError(REQUIRED_FIELDS[info.field_name])
        return v

class FilterCriteria(BaseModel):
    """Transient, client-only filter state for the records view. All criteria are ANDed."""
    search_term: str = ""
    field: str = ""
    location: str = ""
    date_from: str = ""
    date_to: str = ""

    def is_empty(self) -> bool:
        return not any(v.strip() for v in (self.search_term, self.field, self.location, self.date_from, self.date_to))

    @classmethod
    def reset(cls) -> "FilterCriteria":
        return cls()

class ChatMessage(BaseModel):
    """One turn of the assistant conversation."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    content: str
    is_from_user: bool
    timestamp: datetime = Field(default_factory=utc_now)

class ChatLogEntry(BaseModel):
    """A persisted user/assistant exchange."""
    user_id: str
    message: str
    response: str
    timestamp: datetime = Field(default_factory=utc_now)

class ActivityLogEntry(BaseModel):
    """Append-only audit trail entry."""
    user_id: str
    action: str  # "DATA_ENTRY", "DATA_DELETE"
    details: str
    timestamp: datetime = Field(default_factory=utc_now)

class Session(BaseModel):
    """The authenticated caller. Passed explicitly into every ownership-scoped operation."""
    user_id: str
    email: str
    username: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)

class UserAccount(BaseModel):
    """Stored credentials for a field user."""
    user_id: str
    email: str
    username: Optional[str] = None
    hashed_password: str
    role: str = "user"  # "admin", "user"
    created_at: datetime = Field(default_factory=utc_now)

class FieldSummary(BaseModel):
    """Per-field row of the dashboard's recent data overview."""
    field: str
    count: int
    last_value: str

class DashboardStats(BaseModel):
    total_records: int = 0
    today_records: int = 0
    recent_fields: List[FieldSummary] = []
    sync_status: str = "synced"  # "synced", "pending", "error"
    last_sync: datetime = Field(default_factory=utc_now)

class ChatbotRequest(BaseModel):
    """Body accepted by the assistant. `api_key` overrides the configured Gemini key."""
    message: Optional[str] = None
    user_id: Optional[str] = None
    api_key: Optional[str] = Field(default=None, alias="apiKey")

    model_config = {"populate_by_name": True}
