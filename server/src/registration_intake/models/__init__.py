"""Data models for the registration intake service"""

from registration_intake.models.registration import (
    RegistrationRecord,
    RegistrationResponse,
)

__all__ = [
    "RegistrationRecord",
    "RegistrationResponse",
]
