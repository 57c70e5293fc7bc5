"""Runtime settings read from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from .formatting import DEFAULT_CURRENCY_SYMBOL

ENV_PREFIX = "SAVINGS_LEDGER_"

_LOGGING_CONFIGURED = False


@dataclass(frozen=True)
class Settings:
    environment: str = "prod"
    data_dir: Path = Path("data")
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    log_level: str = "INFO"
    allowed_origins: List[str] = field(default_factory=list)

    @property
    def is_development(self) -> bool:
        return self.environment in {"dev", "development"}

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        def get(name: str, default: str) -> str:
            value = env.get(ENV_PREFIX + name)
            return value.strip() if value and value.strip() else default

        origins = env.get(ENV_PREFIX + "ALLOWED_ORIGINS") or ""
        return cls(
            environment=get("ENV", "prod").lower(),
            data_dir=Path(get("DATA_DIR", "data")).expanduser(),
            currency_symbol=get("CURRENCY", DEFAULT_CURRENCY_SYMBOL),
            log_level=get("LOG_LEVEL", "INFO").upper(),
            allowed_origins=[origin.strip() for origin in origins.split(",") if origin.strip()],
        )


def configure_logging(level: str = "INFO") -> None:
    """Install a single root handler; repeated calls only adjust the level."""
    global _LOGGING_CONFIGURED
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    root = logging.getLogger()
    root.setLevel(numeric)
    if _LOGGING_CONFIGURED:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
    _LOGGING_CONFIGURED = True
