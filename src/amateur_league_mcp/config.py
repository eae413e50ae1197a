"""Runtime settings for the amateur league server."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class ConfigError(ValueError):
    """Raised when an environment variable holds an unusable value."""


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    """
    Single source for every tunable of the league engine and server.
    Defaults reproduce the behaviour of the league app.
    """

    neo4j_uri: str = "bolt://localhost:7687"
    neo4j_user: str = "neo4j"
    neo4j_password: str = "password"

    # Wall-clock times in the documents are local to the league
    timezone: str = "Europe/Madrid"

    # 90 minutes of play + 15 for halftime/stoppage
    live_window_minutes: int = 105

    red_card_weight: int = 3
    ranking_limit: int = 20
    form_length: int = 5

    sweep_interval_seconds: int = 60
    refresh_interval_seconds: int = 30

    data_dir: Optional[Path] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        data_dir = os.getenv("LEAGUE_DATA_DIR")
        return cls(
            neo4j_uri=os.getenv("NEO4J_URI", cls.neo4j_uri),
            neo4j_user=os.getenv("NEO4J_USER", cls.neo4j_user),
            neo4j_password=os.getenv("NEO4J_PASSWORD", cls.neo4j_password),
            timezone=os.getenv("LEAGUE_TIMEZONE", cls.timezone),
            live_window_minutes=_env_int("LEAGUE_LIVE_WINDOW_MINUTES", cls.live_window_minutes),
            red_card_weight=_env_int("LEAGUE_RED_CARD_WEIGHT", cls.red_card_weight),
            ranking_limit=_env_int("LEAGUE_RANKING_LIMIT", cls.ranking_limit, minimum=1),
            form_length=_env_int("LEAGUE_FORM_LENGTH", cls.form_length, minimum=1),
            sweep_interval_seconds=_env_int(
                "LEAGUE_SWEEP_INTERVAL_SECONDS", cls.sweep_interval_seconds, minimum=1
            ),
            refresh_interval_seconds=_env_int(
                "LEAGUE_REFRESH_INTERVAL_SECONDS", cls.refresh_interval_seconds, minimum=1
            ),
            data_dir=Path(data_dir) if data_dir else None,
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )
