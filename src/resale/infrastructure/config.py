"""Runtime settings, read from the environment.

A ``.env`` file in the working directory is loaded first; real
environment variables take precedence over it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from resale.domain.exceptions import ValidationError

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    data_dir: Path = Path("data")
    log_level: str = "INFO"
    log_json: bool = False
    lock_timeout: float = 5.0
    orders_page_limit: int = 20

    @property
    def store_path(self) -> Path:
        return self.data_dir / "store.json"

    @property
    def products_path(self) -> Path:
        return self.data_dir / "products.json"

    @property
    def users_path(self) -> Path:
        return self.data_dir / "users.json"

    @staticmethod
    def from_env(environ: dict[str, str] | None = None, dotenv: bool = True) -> Settings:
        if dotenv:
            load_dotenv(Path(".env"))
        env = os.environ if environ is None else environ

        lock_timeout = _parse_float(env.get("RESALE_LOCK_TIMEOUT", "5.0"), "RESALE_LOCK_TIMEOUT")
        if lock_timeout <= 0:
            raise ValidationError("RESALE_LOCK_TIMEOUT must be positive")

        page_limit = _parse_int(env.get("RESALE_ORDERS_PAGE_LIMIT", "20"), "RESALE_ORDERS_PAGE_LIMIT")
        if not 1 <= page_limit <= 100:
            raise ValidationError("RESALE_ORDERS_PAGE_LIMIT must be between 1 and 100")

        log_level = env.get("RESALE_LOG_LEVEL", "INFO").strip().upper()
        if log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValidationError(f"Invalid RESALE_LOG_LEVEL {log_level!r}")

        return Settings(
            data_dir=Path(env.get("RESALE_DATA_DIR", "data")),
            log_level=log_level,
            log_json=_parse_bool(env.get("RESALE_LOG_JSON", "false"), "RESALE_LOG_JSON"),
            lock_timeout=lock_timeout,
            orders_page_limit=page_limit,
        )


def _parse_bool(raw: str, name: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValidationError(f"{name} must be a boolean, got {raw!r}")


def _parse_float(raw: str, name: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a number, got {raw!r}") from None


def _parse_int(raw: str, name: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer, got {raw!r}") from None
