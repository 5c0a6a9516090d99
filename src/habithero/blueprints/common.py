"""Request parsing and response helpers shared by the API blueprints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, TypeVar

from flask import jsonify, request
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


class RequestModel(BaseModel):
    """Incoming payload; accepts camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
        validate_default=True,
        extra="ignore",
    )


class ResponseModel(BaseModel):
    """Outgoing payload built from ORM rows or dataclasses."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def date_only(value: Any) -> Any:
    """Accept ``YYYY-MM-DD`` as well as full ISO timestamps for date parameters."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value) > 10 and value[10] in "T ":
        return value[:10]
    if value == "":
        return None
    return value


def parse_body(model: type[ModelT]) -> ModelT:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return model.model_validate(payload)


def parse_query(model: type[ModelT]) -> ModelT:
    return model.model_validate(request.args.to_dict())


def dump(model: ResponseModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)


def dump_many(schema: type[ResponseModel], items: Iterable[Any]) -> list[dict[str, Any]]:
    return [dump(schema.model_validate(item)) for item in items]


def respond(data: Any, status: int = 200):
    """Wrap ``data`` in the ``{"data": ...}`` envelope."""

    return jsonify({"data": data}), status


__all__ = [
    "RequestModel",
    "ResponseModel",
    "date_only",
    "dump",
    "dump_many",
    "parse_body",
    "parse_query",
    "respond",
]
