"""Runtime configuration read from the environment."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    host: str = "localhost"
    port: int = 9999
    log_level: str = "INFO"
    secure_cookie: bool = False

    @property
    def listen_address(self) -> str:
        return f"{self.host}:{self.port}"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``GAMEBACKEND_*`` variables, falling back to defaults.

        Raises ``ValueError`` for a port that is not an integer in 1-65535.
        """
        env = os.environ if environ is None else environ
        raw_port = env.get("GAMEBACKEND_PORT", "").strip()
        port = cls.port
        if raw_port:
            port = int(raw_port)
            if not 0 < port < 65536:
                raise ValueError(f"GAMEBACKEND_PORT out of range: {port}")
        return cls(
            host=env.get("GAMEBACKEND_HOST", "").strip() or cls.host,
            port=port,
            log_level=(env.get("GAMEBACKEND_LOG_LEVEL", "").strip() or cls.log_level).upper(),
            secure_cookie=env.get("GAMEBACKEND_SECURE_COOKIE", "").strip().lower() in _TRUTHY,
        )


def configure_logging(level: str = "INFO") -> None:
    """Install one root handler with a timestamped line format."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )


__all__ = ["Settings", "configure_logging"]
