"""Registration and token issuance."""

from __future__ import annotations

from ...context import get_context
from ...errors import AuthenticationError
from ...models.user import User
from ...services import auth
from ..common import dump, parse_body, respond
from . import bp
from .schemas import Credentials, RegisterRequest, UserOut


def _token_payload(user: User) -> dict:
    config = get_context().config
    return {
        "token": auth.issue_token(user, config),
        "tokenType": "Bearer",
        "expiresIn": config.TOKEN_TTL_MINUTES * 60,
        "user": dump(UserOut.model_validate(user)),
    }


@bp.post("/register")
def register():
    form = parse_body(RegisterRequest)
    user = auth.create_user(
        username=form.username,
        password=form.password,
        session_factory=get_context().session_factory,
    )
    return respond(_token_payload(user), 201)


@bp.post("/token")
def token():
    form = parse_body(Credentials)
    user = auth.authenticate(
        username=form.username,
        password=form.password,
        session_factory=get_context().session_factory,
    )
    if user is None:
        raise AuthenticationError("Invalid username or password")
    return respond(_token_payload(user))
