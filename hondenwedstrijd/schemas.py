from __future__ import annotations

import re
import uuid
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, computed_field, field_validator, model_validator

# Namespace for deterministic event ids; changing it changes every id.
EVENT_ID_NAMESPACE = uuid.UUID("6f1c5b7e-2a43-4d0e-9a57-0c8d3e1f4b21")

_WS_RE = re.compile(r"\s+")


def collapse_ws(text: str | None) -> str:
    """Trim and collapse runs of whitespace to a single space."""
    if not text:
        return ""
    return _WS_RE.sub(" ", text).strip()


def event_id(event_date: date, event_type: str) -> uuid.UUID:
    """Stable id for the identity key ``(date, type)``."""
    return uuid.uuid5(EVENT_ID_NAMESPACE, f"{event_date.isoformat()}|{event_type}")


class RegistrationStatus(str, Enum):
    OPEN = "open"
    NOT_YET_AVAILABLE = "not_yet_available"
    CLOSED = "closed"

    @property
    def label(self) -> str:
        """Dutch label as shown on the source calendar."""
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    RegistrationStatus.OPEN: "Inschrijven",
    RegistrationStatus.NOT_YET_AVAILABLE: "Nog niet beschikbaar",
    RegistrationStatus.CLOSED: "Gesloten",
}


class StrategyPolicy(str, Enum):
    UNION = "union"
    FIRST_SUCCESS = "first-success"


# --- Extraction ---
class Candidate(BaseModel):
    """Tentative record produced by a markup strategy.

    Purely extractive: every field is the raw text found in the markup.
    Date normalisation, status classification and rejection happen when
    the candidate is finalised into a CompetitionEvent.
    """
    date_text: str = ""
    type: str = ""
    category: str = ""
    organizer: str = ""
    location: str = ""
    status_text: str = ""
    notes: str = ""
    strategy: str = ""

    @field_validator(
        "date_text", "type", "category", "organizer", "location", "status_text", "notes",
        mode="before",
    )
    @classmethod
    def _collapse(cls, v: str | None) -> str:
        return collapse_ws(v)

    @property
    def has_key_fields(self) -> bool:
        return bool(self.type or self.category or self.location)


class CompetitionEvent(BaseModel):
    """One competition on the calendar.

    Immutable once built. ``id`` is derived from ``(date, type)`` so the
    same event fetched twice (other endpoint, other run) gets the same id.
    """
    model_config = ConfigDict(frozen=True)

    date: date
    type: str
    category: str = ""
    organizer: str = ""
    location: str = ""
    notes: str = ""
    registration_status: RegistrationStatus = RegistrationStatus.NOT_YET_AVAILABLE

    @field_validator("type", "category", "organizer", "location", "notes", mode="before")
    @classmethod
    def _collapse(cls, v: str | None) -> str:
        return collapse_ws(v)

    @field_validator("registration_status", mode="before")
    @classmethod
    def _default_status(cls, v):
        if v is None or v == "":
            return RegistrationStatus.NOT_YET_AVAILABLE
        return v

    @model_validator(mode="before")
    @classmethod
    def _require_identity(cls, data):
        if isinstance(data, dict):
            if not data.get("date") and not collapse_ws(data.get("type")):
                raise ValueError("an event needs a date or a type")
        return data

    @computed_field
    @property
    def id(self) -> uuid.UUID:
        return event_id(self.date, self.type)

    @property
    def identity_key(self) -> tuple[date, str]:
        return (self.date, self.type)


class CompletedEntry(BaseModel):
    """A finished competition annotated by the user.

    Owned and persisted by the presentation side; the core only builds it
    from an event.
    """
    id: uuid.UUID
    type: str
    category: str = ""
    location: str = ""
    completion_date: date
    notes: str = ""
    ranking: int | None = None

    @classmethod
    def from_event(
        cls, event: CompetitionEvent, notes: str = "", ranking: int | None = None
    ) -> CompletedEntry:
        return cls(
            id=event.id,
            type=event.type,
            category=event.category,
            location=event.location,
            completion_date=event.date,
            notes=notes,
            ranking=ranking,
        )


# --- API ---
class CompetitionEventOut(BaseModel):
    id: uuid.UUID
    date: date
    type: str
    category: str
    organizer: str
    location: str
    notes: str
    registration_status: RegistrationStatus
    registration_label: str

    @classmethod
    def from_event(cls, event: CompetitionEvent) -> CompetitionEventOut:
        return cls(
            **event.model_dump(),
            registration_label=event.registration_status.label,
        )


class CalendarStatusOut(BaseModel):
    loading: bool
    last_error: str | None
    events: int
    updated_at: datetime | None


class NotificationPreferences(BaseModel):
    push: bool = False
    sms: bool = False
    email: bool = False
