from __future__ import annotations

from ...models.enums import LogCategory, SkillKind
from ..logging.logger import log_event
from ..systems import combat
from .base import ActionHandler


class DefendHandler(ActionHandler):
    kind = SkillKind.DEFEND

    def evaluate(self, env, actor, skill):
        if actor.is_defending:
            return True, "ok (already defending)"
        return True, "ok"

    def apply(self, env, actor, skill):
        combat.spend_ap(actor, skill.ap_cost)
        actor.is_defending = True
        log_event(env.battle, f"{actor.name} takes a defensive stance", LogCategory.ACTION)
        return env.start_result(
            actor, skill, target_ids=[actor.id], ap_spent=skill.ap_cost
        )
