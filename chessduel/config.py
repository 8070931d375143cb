from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional


ENV_PREFIX = "CHESSDUEL_"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the HTTP service.

    Attributes:
        host (str): Interface uvicorn binds to.
        port (int): TCP port uvicorn listens on.
        log_level (str): Root logging level name (``INFO``, ``DEBUG``...).
        default_strength (int): Opponent strength for new games, 1..10.
    """

    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    default_strength: int = 5

    def __post_init__(self) -> None:
        if not (0 < self.port < 65536):
            raise ValueError(f"invalid port: {self.port}")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"invalid log level: {self.log_level!r}")
        if not (1 <= self.default_strength <= 10):
            raise ValueError("default strength must be in 1..10")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Read ``CHESSDUEL_*`` variables, falling back to defaults.

        Raises:
            ValueError: If a variable holds a malformed value.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        try:
            return cls(
                host=env.get(ENV_PREFIX + "HOST", defaults.host),
                port=int(env.get(ENV_PREFIX + "PORT", defaults.port)),
                log_level=env.get(ENV_PREFIX + "LOG_LEVEL", defaults.log_level).upper(),
                default_strength=int(
                    env.get(ENV_PREFIX + "DEFAULT_STRENGTH", defaults.default_strength)
                ),
            )
        except ValueError as e:
            raise ValueError(f"invalid {ENV_PREFIX}* setting: {e}") from e

    def override(self, **changes: object) -> "Settings":
        """Return a copy with the non-``None`` values in ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
