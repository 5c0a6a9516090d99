"""Application configuration objects and helpers."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Habit Hero"
    DB_FILENAME = "habithero.db"
    TOKEN_ALGORITHM = "HS256"
    DEBUG = False
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("HABITHERO_SECRET_KEY", "replace-me")
        self.DEV_MODE = _env_bool("HABITHERO_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.DATABASE_URL = os.getenv("HABITHERO_DATABASE_URL", self._build_sqlite_url())
        self.TOKEN_TTL_MINUTES = _env_int("HABITHERO_TOKEN_TTL_MINUTES", 60 * 24)
        self.LOG_TO_FILE = _env_bool("HABITHERO_LOG_TO_FILE", default=True)
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("HABITHERO_SECRET_KEY must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("HABITHERO_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Configuration for the test-suite: throwaway data dir, no log files."""

    TESTING = True
    __test__ = False  # not a pytest test class

    def __init__(self, data_dir: str | Path | None = None) -> None:
        # Only a directory created here is removed by cleanup().
        self._owns_data_dir = data_dir is None
        self._tmpdir = str(data_dir) if data_dir is not None else tempfile.mkdtemp(prefix="habithero-test-")
        super().__init__()
        self.SECRET_KEY = "test-secret-key-with-enough-entropy-for-hs256"
        self.LOG_TO_FILE = False

    def cleanup(self) -> None:
        """Delete the throwaway data directory; dispose engines first."""

        if self._owns_data_dir:
            shutil.rmtree(self._tmpdir, ignore_errors=True)

    def _resolve_data_dir(self) -> Path:
        path = Path(self._tmpdir)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        return f"sqlite:///{Path(self._tmpdir) / self.DB_FILENAME}"
