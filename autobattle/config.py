from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field


class BattleSettings(BaseModel):
    """Tunable constants of the simulation.

    A tick is one fixed logical interval (100 ms of game time by default);
    every living unit gains ``speed * tick_rate * game_speed`` charge per tick.
    """

    model_config = ConfigDict(frozen=True)

    tick_rate: float = Field(0.05, gt=0)
    tick_interval: float = Field(0.1, gt=0)  # seconds of game time per tick
    charge_threshold: float = Field(100.0, gt=0)
    crit_chance: float = Field(0.15, ge=0, le=1)
    crit_multiplier: float = Field(1.5, ge=1)
    start_ap: int = Field(3, ge=0)
    pp_recovery: int = Field(1, ge=0)  # PP regained after each action
    defend_ratio: float = Field(0.5, ge=0, le=1)
    splash_ratio: float = Field(0.5, ge=0, le=1)
    staggered_start: bool = False  # speed-scaled head start, 30..80 charge
    max_ticks: int = Field(100_000, gt=0)
    log_limit: int = Field(1000, gt=0)
    seed: int | None = None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw not in (None, "") else default


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.getenv(name)
    return int(raw) if raw not in (None, "") else default


def settings_from_env() -> BattleSettings:
    defaults = BattleSettings()
    return BattleSettings(
        tick_rate=_env_float("AUTOBATTLE_TICK_RATE", defaults.tick_rate),
        crit_chance=_env_float("AUTOBATTLE_CRIT_CHANCE", defaults.crit_chance),
        crit_multiplier=_env_float(
            "AUTOBATTLE_CRIT_MULTIPLIER", defaults.crit_multiplier
        ),
        start_ap=_env_int("AUTOBATTLE_START_AP", defaults.start_ap),
        staggered_start=os.getenv("AUTOBATTLE_STAGGERED_START", "false").lower()
        == "true",
        max_ticks=_env_int("AUTOBATTLE_MAX_TICKS", defaults.max_ticks),
        log_limit=_env_int("AUTOBATTLE_LOG_LIMIT", defaults.log_limit),
        seed=_env_int("AUTOBATTLE_SEED", None),
    )


DEFAULT_SETTINGS = BattleSettings()
