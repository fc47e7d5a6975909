from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, computed_field, model_validator

from .enums import Team, UnitPhase
from .passives import PassiveAbility
from .skills import Skill


class Unit(BaseModel):
    id: str = "unit.example"
    name: str = "Unit"
    team: Team = Team.ALLY
    slot: int = Field(0, ge=0)
    hp: int = Field(100, ge=0)
    max_hp: int = Field(100, gt=0)
    ap: int = Field(0, ge=0)
    max_ap: int = Field(10, ge=0)
    ap_recovery: int = Field(3, ge=0)
    pp: int = Field(0, ge=0)
    max_pp: int = Field(0, ge=0)
    speed: int = Field(10, gt=0)
    attack: int = Field(10, ge=0)
    defense: int = Field(0, ge=0)
    charge: float = Field(0.0, ge=0)
    phase: UnitPhase = UnitPhase.CHARGING
    is_defending: bool = False
    skills: list[Skill] = Field(default_factory=list)
    passive: PassiveAbility | None = None

    @model_validator(mode="before")
    @classmethod
    def _default_pools(cls, data: Any) -> Any:
        # A unit without explicit hp/pp starts full
        if isinstance(data, dict):
            data = dict(data)
            if data.get("hp") is None and "max_hp" in data:
                data["hp"] = data["max_hp"]
            if data.get("pp") is None and "max_pp" in data:
                data["pp"] = data["max_pp"]
        return data

    @model_validator(mode="after")
    def _check_bounds(self) -> Unit:
        if self.hp > self.max_hp:
            raise ValueError(f"hp {self.hp} exceeds max_hp {self.max_hp}")
        if self.ap > self.max_ap:
            raise ValueError(f"ap {self.ap} exceeds max_ap {self.max_ap}")
        if self.pp > self.max_pp:
            raise ValueError(f"pp {self.pp} exceeds max_pp {self.max_pp}")
        if self.hp == 0:
            self.phase = UnitPhase.DEAD
        return self

    @computed_field
    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    @property
    def hp_ratio(self) -> float:
        return self.hp / self.max_hp
