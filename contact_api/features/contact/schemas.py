from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

INVALID_INPUT_MESSAGE = "Invalid input"

MAX_EMAIL_LENGTH = 120


class ContactSubmission(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    name: str = Field(min_length=1, max_length=80)
    email: str = Field(min_length=1, max_length=MAX_EMAIL_LENGTH)
    message: str = Field(min_length=1, max_length=3000)
    honeypot: str | None = Field(default=None, alias="_hp")

    @field_validator("email")
    @classmethod
    def _check_email_syntax(cls, value: str) -> str:
        # Syntax only. The submitted address is kept as typed, not normalized,
        # and display-name forms like "Bob <bob@example.com>" are rejected.
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError as exc:
            raise ValueError("invalid email address") from exc
        return value


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    submission: ContactSubmission | None = None
    reason: str | None = None


def validate_submission(raw: Any) -> ValidationResult:
    """Check an untyped request body against the contact form schema.

    Bad input is an expected outcome, so it comes back as a failed result with
    a generic reason rather than an exception. Field-level errors are dropped.
    """
    if not isinstance(raw, dict):
        return ValidationResult(ok=False, reason=INVALID_INPUT_MESSAGE)

    try:
        submission = ContactSubmission.model_validate(raw)
    except ValidationError:
        return ValidationResult(ok=False, reason=INVALID_INPUT_MESSAGE)

    return ValidationResult(ok=True, submission=submission)


class ContactSuccessResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str
