from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from ..data.skills import WAIT
from ..models.enums import LogCategory, SkillKind
from .logging.logger import log_event

if TYPE_CHECKING:
    from ..models.skills import Skill
    from ..models.units import Unit
    from .pipeline import SkillResolver


class SkillPolicy(Protocol):
    def choose(self, unit: Unit, resolver: SkillResolver) -> Skill: ...


class PrioritySkillPolicy:
    """Pick the highest-precedence skill the unit can afford right now.

    Skills are tried by ascending priority. A skill is skipped when the AP
    is short, when nothing can be targeted, or (for heals) when every ally
    is already at full HP. Falls back to waiting.
    """

    def __init__(self, fallback: Skill = WAIT, *, require_target: bool = True):
        self.fallback = fallback
        self.require_target = require_target

    def usable(self, unit: Unit, skill: Skill, resolver: SkillResolver) -> bool:
        if skill.ap_cost > unit.ap:
            return False
        if not self.require_target:
            return True
        if skill.kind in (SkillKind.ATTACK, SkillKind.HEAL) and not resolver.has_target(
            unit, skill
        ):
            return False
        if skill.kind == SkillKind.HEAL:
            return any(
                u.hp < u.max_hp
                for u in resolver.battle.living(unit.team)
                if u.id != unit.id
            )
        return True

    def choose(self, unit, resolver):
        for skill in sorted(unit.skills, key=lambda s: s.priority):
            if self.usable(unit, skill, resolver):
                return skill
        return self.fallback


class ScriptedSkillPolicy:
    """Replays queued skill ids per unit; units with an empty queue defer."""

    def __init__(self, plan: dict[str, list[str]], default: SkillPolicy | None = None):
        self.plan = {k: list(v) for k, v in plan.items()}
        self.default = default or PrioritySkillPolicy()

    def choose(self, unit, resolver):
        queue = self.plan.get(unit.id)
        if queue:
            skill_id = queue.pop(0)
            for s in unit.skills:
                if s.id == skill_id:
                    return s
            if skill_id == self.default_fallback().id:
                return self.default_fallback()
            log_event(
                resolver.battle,
                f"{unit.id}: planned skill {skill_id} is not in its skill set",
                LogCategory.REJECTED,
            )
        return self.default.choose(unit, resolver)

    def default_fallback(self) -> Skill:
        return getattr(self.default, "fallback", WAIT)
