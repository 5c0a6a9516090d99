"""Habit Hero application factory."""

from __future__ import annotations

import os
from datetime import datetime
from importlib import import_module
from typing import Callable, Iterable, Optional

from flask import Flask

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestConfig
from .context import EXTENSION_KEY, create_app_context
from .errors import register_error_handlers
from .logging_config import get_logger, setup_logging
from .models.base import utcnow

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths to register on the app."""

    yield "habithero.blueprints.home"
    yield "habithero.blueprints.auth"
    yield "habithero.blueprints.habits"
    yield "habithero.blueprints.goals"
    yield "habithero.blueprints.dashboard"


def create_app(
    config_name: str | None = None,
    *,
    config: Optional[BaseConfig] = None,
    clock: Callable[[], datetime] = utcnow,
) -> Flask:
    """Create and configure the Flask application instance.

    ``config`` wins over ``config_name``; without either the ``HABITHERO_ENV``
    variable picks the config class. ``clock`` lets tests pin "today".
    """

    app = Flask(__name__, instance_relative_config=True)
    config_obj = config or _resolve_config(config_name or os.getenv("HABITHERO_ENV"))()
    app.config.from_object(config_obj)
    app.config["HABITHERO_CONFIG"] = config_obj

    setup_logging(config_obj)
    app.extensions[EXTENSION_KEY] = create_app_context(config_obj, clock=clock)

    register_error_handlers(app)
    _register_blueprints(app)
    _cli.init_app(app)

    get_logger(__name__).info("Application created", extra={"config": type(config_obj).__name__})
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "create_app"]
