from __future__ import annotations

from ...models.enums import LogCategory, SkillKind
from ..logging.logger import log_event
from ..systems import combat, targeting
from .base import ActionHandler


class HealHandler(ActionHandler):
    kind = SkillKind.HEAL

    def evaluate(self, env, actor, skill):
        pool = targeting.candidates(actor, skill, env.battle)
        if not pool:
            return False, "no_target"
        neediest = min(pool, key=lambda u: u.hp_ratio)
        missing = neediest.max_hp - neediest.hp
        return True, f"ok (predicted_heal={min(skill.power, missing)})"

    def apply(self, env, actor, skill):
        target = env.select_target(actor, skill)
        if target is None:
            return env.no_target(actor, skill)
        combat.spend_ap(actor, skill.ap_cost)
        result = env.start_result(
            actor, skill, target_ids=[target.id], ap_spent=skill.ap_cost
        )
        gained = combat.heal(target, skill.power)
        result.total_effect = gained
        env.record_heal(result, target, gained)
        log_event(
            env.battle,
            f"{actor.name} heals {target.name} for {gained} HP",
            LogCategory.HEAL,
        )
        return result
