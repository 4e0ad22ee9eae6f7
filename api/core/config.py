"""
Process-wide settings, read once from the environment at startup.

`load_settings()` is the only place that touches `os.environ`; everything else
receives a `Settings` instance (see `main.create_app`).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEV_JWT_SECRET = "dev-change-this-secret"


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def parse_listen_addr(addr: str) -> tuple[str, int]:
    """
    Split a `host:port` address. An empty host (":3000") binds all interfaces.
    """
    host, sep, port = (addr or "").strip().rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"Invalid listen address: {addr!r}")
    return host or "0.0.0.0", int(port)


@dataclass(frozen=True)
class Settings:
    jwt_secret: str = field(default=DEV_JWT_SECRET, repr=False)
    access_token_expire_minutes: int = 60
    bcrypt_rounds: int = 10
    listen_addr: str = ":3000"
    database_url: str = ""
    db_pool_min: int = 1
    db_pool_max: int = 5
    db_command_timeout: float = 30.0
    log_level: str = "INFO"

    @property
    def uses_dev_secret(self) -> bool:
        return self.jwt_secret == DEV_JWT_SECRET


def load_settings() -> Settings:
    return Settings(
        jwt_secret=_env_str("JWT_SECRET", DEV_JWT_SECRET),
        access_token_expire_minutes=_env_int("ACCESS_TOKEN_EXPIRE_MIN", 60),
        bcrypt_rounds=_env_int("BCRYPT_ROUNDS", 10),
        listen_addr=_env_str("LISTEN_ADDR", ":3000"),
        database_url=_env_str("DATABASE_URL", ""),
        db_pool_min=_env_int("DB_POOL_MIN", 1),
        db_pool_max=_env_int("DB_POOL_MAX", 5),
        db_command_timeout=float(_env_int("DB_COMMAND_TIMEOUT", 30)),
        log_level=_env_str("LOG_LEVEL", "INFO"),
    )
