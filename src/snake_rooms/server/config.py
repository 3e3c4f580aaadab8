"""Server configuration."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_COLORS: tuple[str, ...] = (
    "#2a2a2a",
    "#3d5a80",
    "#8d5a3a",
    "#5a7d3a",
    "#7a3d6b",
    "#a08a2a",
)

# Environment variable → (field name, parser).
_ENV_FIELDS: dict[str, tuple[str, type]] = {
    "SNAKE_WS_HOST": ("host", str),
    "SNAKE_WS_PORT": ("port", int),
    "SNAKE_TICK_MS": ("tick_ms", int),
    "SNAKE_ROWS": ("rows", int),
    "SNAKE_COLS": ("cols", int),
    "SNAKE_MAX_PLAYERS": ("max_players", int),
}


@dataclass(frozen=True)
class ServerConfig:
    """Room server settings.

    Supports JSON round-tripping and environment overrides.
    """

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8080
    tick_ms: int = 120
    rows: int = 20
    cols: int = 20
    max_players: int = 4
    colors: tuple[str, ...] = DEFAULT_COLORS
    name_max_length: int = 16

    def __post_init__(self) -> None:
        if self.tick_ms < 10:
            raise ValueError("tick_ms must be at least 10.")
        if not 2 <= self.max_players <= 6:
            raise ValueError("max_players must be between 2 and 6.")
        if self.max_players > len(self.colors):
            raise ValueError("max_players exceeds the number of colors.")
        if self.rows < 8 or self.cols < 8:
            raise ValueError("rows and cols must each be at least 8.")
        if self.name_max_length < 1:
            raise ValueError("name_max_length must be at least 1.")

    @property
    def tick_interval(self) -> float:
        """Tick period in seconds."""
        return self.tick_ms / 1000.0

    def to_dict(self) -> dict:
        """Serialize to a plain dict (tuples become lists)."""
        d = asdict(self)
        d["colors"] = list(self.colors)
        return d

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> ServerConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        unknown = sorted(set(raw) - {f.name for f in fields(cls)})
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}.")
        if "colors" in raw:
            raw["colors"] = tuple(raw["colors"])
        return cls(**raw)

    @classmethod
    def from_env(
        cls, environ: dict[str, str] | None = None, base: ServerConfig | None = None,
    ) -> ServerConfig:
        """Apply ``SNAKE_*`` environment overrides on top of *base*."""
        env = os.environ if environ is None else environ
        d = (base or cls()).to_dict()
        for var, (name, parse) in _ENV_FIELDS.items():
            if var in env:
                try:
                    d[name] = parse(env[var])
                except ValueError as exc:
                    raise ValueError(f"{var} must be {parse.__name__}.") from exc
        d["colors"] = tuple(d["colors"])
        return cls(**d)
