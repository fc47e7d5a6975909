from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from .enums import GAME_SPEEDS, BattleOutcome, LogCategory, Team
from .units import Unit


class LogEntry(BaseModel):
    battle_id: str
    turn: int
    tick: int
    message: str
    category: LogCategory = LogCategory.SYSTEM
    created_at: str = Field(default_factory=lambda: datetime.now().isoformat())


class BattleState(BaseModel):
    id: str = "battle.example"
    allies: list[Unit] = Field(default_factory=list)
    enemies: list[Unit] = Field(default_factory=list)
    started: bool = False
    running: bool = False
    paused: bool = False
    auto_mode: bool = True
    game_speed: int = 1
    ticks: int = 0
    turn: int = 0
    acting_unit_id: str | None = None
    seed: int | None = None
    targeting: str = "lowest_hp"
    log_limit: int = Field(1000, gt=0)
    outcome: BattleOutcome = BattleOutcome.IN_PROGRESS
    log: list[LogEntry] = Field(default_factory=list)

    @field_validator("game_speed")
    @classmethod
    def _known_speed(cls, v: int) -> int:
        if v not in GAME_SPEEDS:
            raise ValueError(f"game_speed must be one of {GAME_SPEEDS}")
        return v

    def roster(self) -> list[Unit]:
        return [*self.allies, *self.enemies]

    def living(self, team: Team | None = None) -> Iterator[Unit]:
        for u in self.roster():
            if u.is_alive and (team is None or u.team == team):
                yield u

    def unit(self, unit_id: str) -> Unit | None:
        for u in self.roster():
            if u.id == unit_id:
                return u
        return None

    @property
    def ended(self) -> bool:
        return self.outcome != BattleOutcome.IN_PROGRESS
