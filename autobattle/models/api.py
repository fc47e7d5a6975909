from __future__ import annotations

from pydantic import BaseModel, Field

from .battle import BattleState, LogEntry
from .enums import BattleOutcome
from .results import TurnReport
from .units import Unit


class CreateBattleRequest(BaseModel):
    allies: list[Unit] | None = None
    enemies: list[Unit] | None = None
    auto_mode: bool = True
    seed: int | None = None
    targeting: str = "lowest_hp"
    start: bool = False


class BattleView(BaseModel):
    id: str
    state: BattleState
    ready: list[str] = Field(default_factory=list)
    upcoming: list[str] = Field(default_factory=list)


class SpeedRequest(BaseModel):
    multiplier: int


class ControlResponse(BaseModel):
    ok: bool
    message: str
    report: TurnReport | None = None
    battle: BattleView


class TickResponse(BaseModel):
    reports: list[TurnReport] = Field(default_factory=list)
    outcome: BattleOutcome
    battle: BattleView


class BattleLogResponse(BaseModel):
    entries: list[LogEntry] = Field(default_factory=list)
