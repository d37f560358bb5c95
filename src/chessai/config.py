from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


ENV_PREFIX = "CHESSAI_"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
COLORS = ("white", "black")


def _env_int(env: Mapping[str, str], key: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(ENV_PREFIX + key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}{key} must be an integer, got {raw!r}") from e


@dataclass
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"invalid log level: {self.log_level!r}")
        if not 0 < self.port < 65536:
            raise ValueError(f"invalid port: {self.port}")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        env = os.environ if env is None else env
        return cls(
            host=env.get(ENV_PREFIX + "HOST", cls.host),
            port=_env_int(env, "PORT", cls.port) or cls.port,
            log_level=env.get(ENV_PREFIX + "LOG_LEVEL", cls.log_level),
        )


@dataclass
class GameConfig:
    """Defaults for new game sessions.

    Attributes:
        ai_level (int): Strength level 1..5 for new games.
        player_color (str): Side the human plays, ``"white"`` or ``"black"``.
        seed (Optional[int]): Seed for the AI's random choices; None for a
            fresh seed per session.
    """

    ai_level: int = 1
    player_color: str = "white"
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if not 1 <= self.ai_level <= 5:
            raise ValueError(f"AI level must be in 1..5, got {self.ai_level}")
        if self.player_color not in COLORS:
            raise ValueError(f"player color must be white or black, got {self.player_color!r}")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "GameConfig":
        env = os.environ if env is None else env
        level = _env_int(env, "AI_LEVEL", cls.ai_level)
        return cls(
            ai_level=cls.ai_level if level is None else level,
            player_color=env.get(ENV_PREFIX + "PLAYER_COLOR", cls.player_color).lower(),
            seed=_env_int(env, "SEED", None),
        )
