"""Bearer-token guard for API routes."""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, TypeVar, cast

from flask import g, request

from .context import get_context
from .errors import AuthenticationError
from .services import auth

F = TypeVar("F", bound=Callable[..., Any])


def _bearer_token() -> str:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Unauthorized")
    return token.strip()


def login_required(view: F) -> F:
    """Resolve the bearer token to a user id and expose it as ``g.user_id``."""

    @wraps(view)
    def wrapped(*args: Any, **kwargs: Any) -> Any:
        ctx = get_context()
        user_id = auth.decode_token(_bearer_token(), ctx.config)
        if auth.get_user(user_id, ctx.session_factory) is None:
            raise AuthenticationError("Unauthorized")
        g.user_id = user_id
        return view(*args, **kwargs)

    return cast(F, wrapped)


def current_user_id() -> str:
    """Id of the user authenticated for this request."""

    user_id = g.get("user_id")
    if user_id is None:
        raise AuthenticationError("Unauthorized")
    return user_id
