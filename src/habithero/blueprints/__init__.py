"""Blueprint exports."""

from . import auth, dashboard, goals, habits, home

__all__ = [
    "auth",
    "dashboard",
    "goals",
    "habits",
    "home",
]
