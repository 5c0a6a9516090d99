"""Credential payloads."""

from __future__ import annotations

from pydantic import Field, field_validator

from ...services.auth import MIN_PASSWORD_LENGTH
from ..common import RequestModel, ResponseModel


class Credentials(RequestModel):
    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=256)


class RegisterRequest(Credentials):
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=256)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if any(char.isspace() for char in value):
            raise ValueError("Username cannot contain whitespace.")
        return value


class UserOut(ResponseModel):
    id: str
    username: str


__all__ = ["Credentials", "RegisterRequest", "UserOut"]
