"""Pydantic models validating request bodies before they reach the DAOs.

Every handler parses its JSON body into one of these models; a
pydantic.ValidationError is reported to the caller as VALIDATION_ERROR.
Field names accept both snake_case and the camelCase used by the web client.
"""

from datetime import datetime, UTC
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints, field_validator

from linktoqr.constants import Limits
from linktoqr.exceptions import InvalidDestinationError
from linktoqr.utils.validators import validate_destination


def _check_destination(value: str) -> str:
    try:
        return validate_destination(value)
    except InvalidDestinationError as e:
        raise ValueError(str(e)) from e


def _check_password(value: str | None) -> str | None:
    if value is None:
        return None
    if len(value) < Limits.MIN_PASSWORD_LENGTH:
        raise ValueError(f'Password must be at least {Limits.MIN_PASSWORD_LENGTH} characters')
    if len(value.encode('utf-8')) > Limits.MAX_PASSWORD_LENGTH:
        raise ValueError(f'Password must be at most {Limits.MAX_PASSWORD_LENGTH} bytes')
    return value


# Passwords are hashed exactly as typed: only destinations and emails are trimmed
Destination = Annotated[str, StringConstraints(strip_whitespace=True), AfterValidator(_check_destination)]
Email = Annotated[str, StringConstraints(strip_whitespace=True, max_length=254, pattern=r'^[^@\s]+@[^@\s]+$')]
Password = Annotated[str, AfterValidator(_check_password)]


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class CreateCodeRequest(_Request):
    """Body of POST /codes."""

    destination: Destination
    expires_at: datetime | None = Field(None, alias='expiresAt')
    password: Annotated[str | None, AfterValidator(_check_password)] = None

    @field_validator('password', 'expires_at', mode='before')
    @classmethod
    def blank_to_none(cls, value: object) -> object:
        return None if value == '' else value

    @field_validator('expires_at')
    @classmethod
    def as_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class UpdateDestinationRequest(_Request):
    """Body of PUT /codes/{code}."""

    destination: Destination


class CredentialsRequest(_Request):
    """Body of POST /auth/signup and POST /auth/login."""

    email: Email
    password: Password
