"""Environment-driven settings for the API server and CLI."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Mapping, Optional


logger = logging.getLogger("uvicorn.error")

_DB_PATH_ENV = "TEAMGEN_DB_PATH"
_HOST_ENV = "TEAMGEN_HOST"
_PORT_ENV = "PORT"
_PHOTO_DIR_ENV = "TEAMGEN_PHOTO_DIR"
_MAX_PHOTO_BYTES_ENV = "TEAMGEN_MAX_PHOTO_BYTES"

DEFAULT_DB_PATH = Path(__file__).resolve().parents[2] / "teamgen.sqlite"
_PORT_DEFAULT = 3000
_MAX_PHOTO_BYTES_DEFAULT = 5 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
    db_path: str = str(DEFAULT_DB_PATH)
    host: str = "127.0.0.1"
    port: int = _PORT_DEFAULT
    photo_dir: Optional[Path] = None
    max_photo_bytes: int = _MAX_PHOTO_BYTES_DEFAULT


def _env_int(env: Mapping[str, str], name: str, default: int, *, min_value: int | None = None) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from ``env`` (defaults to ``os.environ``)."""

    env = os.environ if env is None else env
    photo_dir = env.get(_PHOTO_DIR_ENV)
    return Settings(
        db_path=env.get(_DB_PATH_ENV) or str(DEFAULT_DB_PATH),
        host=env.get(_HOST_ENV) or "127.0.0.1",
        port=_env_int(env, _PORT_ENV, _PORT_DEFAULT, min_value=1),
        photo_dir=Path(photo_dir) if photo_dir else None,
        max_photo_bytes=_env_int(env, _MAX_PHOTO_BYTES_ENV, _MAX_PHOTO_BYTES_DEFAULT, min_value=1),
    )
