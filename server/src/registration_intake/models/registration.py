"""Registration record model"""

from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, Field

# Keys assigned by the store; caller-supplied values under these names are replaced
ID_KEY = "id"
REGISTRATION_DATE_KEY = "registrationDate"
SYSTEM_KEYS = (ID_KEY, REGISTRATION_DATE_KEY)


def utc_timestamp(moment: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a trailing Z"""
    moment = moment or datetime.now(timezone.utc)
    return (
        moment.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


class RegistrationRecord(BaseModel):
    """One submission plus its store-assigned id and timestamp.

    On disk and over HTTP a record is a flat document: the submitted fields
    followed by ``registrationDate`` and ``id``.
    """

    id: int = Field(..., ge=1)
    registration_date: str
    fields: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def create(
        cls, record_id: int, fields: Dict[str, Any], moment: datetime | None = None
    ) -> "RegistrationRecord":
        """Build a new record, dropping caller keys that collide with system keys"""
        submitted = {k: v for k, v in fields.items() if k not in SYSTEM_KEYS}
        return cls(
            id=record_id, registration_date=utc_timestamp(moment), fields=submitted
        )

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "RegistrationRecord":
        """Parse a persisted flat document"""
        fields = {k: v for k, v in document.items() if k not in SYSTEM_KEYS}
        return cls(
            id=document[ID_KEY],
            registration_date=document.get(REGISTRATION_DATE_KEY, ""),
            fields=fields,
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            **self.fields,
            REGISTRATION_DATE_KEY: self.registration_date,
            ID_KEY: self.id,
        }


class RegistrationResponse(BaseModel):
    message: str = Field(..., description="Human readable outcome")
    id: int = Field(..., description="Id assigned to the new registration")
