from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from ...models.enums import TargetKind, Team

if TYPE_CHECKING:
    from random import Random

    from ...models.battle import BattleState
    from ...models.skills import Skill
    from ...models.units import Unit


def opposing(team: Team) -> Team:
    return Team.ENEMY if team == Team.ALLY else Team.ALLY


def candidates(actor: Unit, skill: Skill, battle: BattleState) -> list[Unit]:
    """Living units a skill may land on, in roster order."""
    if skill.target == TargetKind.SELF:
        return [actor] if actor.is_alive else []
    if skill.target == TargetKind.ENEMY:
        return list(battle.living(opposing(actor.team)))
    return [u for u in battle.living(actor.team) if u.id != actor.id]


def adjacent(target: Unit, battle: BattleState) -> list[Unit]:
    return [
        u
        for u in battle.living(target.team)
        if u.id != target.id and abs(u.slot - target.slot) == 1
    ]


class TargetingPolicy(Protocol):
    def select(
        self, actor: Unit, skill: Skill, battle: BattleState
    ) -> Unit | None: ...


class LowestHpTargeting:
    """Deterministic default.

    Enemies: lowest HP first. Allies: lowest HP ratio first. Ties go to the
    lower slot, then the id.
    """

    def select(self, actor, skill, battle):
        pool = candidates(actor, skill, battle)
        if not pool:
            return None
        if skill.target == TargetKind.ALLY:
            return min(pool, key=lambda u: (u.hp_ratio, u.slot, u.id))
        return min(pool, key=lambda u: (u.hp, u.slot, u.id))


class RandomTargeting:
    """Uniform pick among valid targets, drawn from the battle's seeded RNG."""

    def __init__(self, rng: Random):
        self.rng = rng

    def select(self, actor, skill, battle):
        pool = candidates(actor, skill, battle)
        if not pool:
            return None
        if skill.target == TargetKind.ALLY:
            # healing still goes to whoever needs it most
            return min(pool, key=lambda u: (u.hp_ratio, u.slot, u.id))
        return self.rng.choice(pool)
