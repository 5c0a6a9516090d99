"""Liveness route."""

from __future__ import annotations

from sqlalchemy import text

from ...context import get_context
from ..common import respond
from . import bp


@bp.get("/health")
def health():
    """Report that the app is up and the database answers."""

    with get_context().session_factory() as session:
        session.exec(text("SELECT 1"))
    return respond({"status": "ok"})
