from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .enums import BattleOutcome, PresentationEventKind, SkillKind


class HitContext(BaseModel):
    """Snapshot of one attack as it moves through the resolution stages.

    Stages never mutate it; each returns an updated copy.
    """

    model_config = ConfigDict(frozen=True)

    attacker_id: str
    target_id: str
    skill_id: str
    damage: int
    damage_multiplier: float = 1.0
    is_critical: bool = False
    dodged: bool = False
    counter_damage: int = 0
    ap_bonus: int = 0
    activated: tuple[str, ...] = ()


class PresentationEvent(BaseModel):
    kind: PresentationEventKind
    unit_id: str | None = None
    amount: int = 0
    is_critical: bool = False
    skill_id: str | None = None
    passive_id: str | None = None
    ap_cost: int | None = None


class PassiveActivation(BaseModel):
    unit_id: str
    passive_id: str
    display_name: str
    pp_spent: int = 0


class SkillResult(BaseModel):
    success: bool
    kind: SkillKind
    total_effect: int = 0
    target_died: bool = False
    reason: str | None = None

    actor_id: str | None = None
    skill_id: str | None = None
    target_ids: list[str] = Field(default_factory=list)
    ap_spent: int = 0
    is_critical: bool = False
    dodged: bool = False
    hits: list[int] = Field(default_factory=list)
    counter_damage: int = 0
    lifesteal: int = 0
    splash: dict[str, int] = Field(default_factory=dict)
    passives: list[PassiveActivation] = Field(default_factory=list)
    deaths: list[str] = Field(default_factory=list)
    events: list[PresentationEvent] = Field(default_factory=list)


class TurnReport(BaseModel):
    turn: int
    actor_id: str
    skill_id: str | None = None
    result: SkillResult | None = None
    rejected: str | None = None
    outcome: BattleOutcome = BattleOutcome.IN_PROGRESS


class ControlResult(BaseModel):
    ok: bool
    message: str
    report: TurnReport | None = None
