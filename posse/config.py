"""
Configuration - Environment-driven settings and logging setup.

Environment variables:
    POSSE_ENV           development | production (default: development)
    POSSE_DATA_DIR      Directory for the JSON collections (default: ./data)
    POSSE_SECRET        Token signing secret (required in production)
    POSSE_TOKEN_TTL     Token lifetime in seconds (default: 3600)
    POSSE_LIFE_POLICY   reject | clamp | eliminate (default: reject)
    POSSE_LOG_LEVEL     Logging level name (default: INFO)
    ALLOWED_ORIGINS     Comma-separated CORS origins (default: *)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import os
import sys


DEFAULT_SECRET = "posse-development-secret"


class LifePolicy(str, Enum):
    """What happens when a life change would take a player below zero."""
    REJECT = "reject"  # Refuse the action
    CLAMP = "clamp"  # Stay at 0
    ELIMINATE = "eliminate"  # Stay at 0 and reveal the role


@dataclass
class Settings:
    """Runtime settings for the server."""
    env: str = "development"
    data_dir: str = "data"
    secret: str = DEFAULT_SECRET
    token_ttl: int = 3600
    life_policy: LifePolicy = LifePolicy.REJECT
    log_level: str = "INFO"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from the process environment."""
        env = os.getenv("POSSE_ENV", "development")
        secret = os.getenv("POSSE_SECRET", DEFAULT_SECRET)
        if env == "production" and secret == DEFAULT_SECRET:
            raise ValueError("POSSE_SECRET must be set in production")

        try:
            life_policy = LifePolicy(os.getenv("POSSE_LIFE_POLICY", "reject").lower())
        except ValueError:
            raise ValueError(
                f"POSSE_LIFE_POLICY must be one of: {', '.join(p.value for p in LifePolicy)}"
            )

        return cls(
            env=env,
            data_dir=os.getenv("POSSE_DATA_DIR", "data"),
            secret=secret,
            token_ttl=int(os.getenv("POSSE_TOKEN_TTL", "3600")),
            life_policy=life_policy,
            log_level=os.getenv("POSSE_LOG_LEVEL", "INFO").upper(),
            allowed_origins=[
                o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()
            ] or ["*"],
        )


def setup_logging(level: str | int = logging.INFO) -> None:
    """
    Configure the `posse` package logger.

    Replaces any handlers from a previous call.
    """
    pkg_logger = logging.getLogger("posse")
    pkg_logger.setLevel(level)
    pkg_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    pkg_logger.addHandler(handler)
    pkg_logger.propagate = False
