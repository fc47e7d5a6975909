from __future__ import annotations

from ...models.enums import LogCategory, SkillKind
from ..logging.logger import log_event
from ..systems import combat
from .base import ActionHandler


class WaitHandler(ActionHandler):
    kind = SkillKind.WAIT

    def evaluate(self, env, actor, skill):
        room = actor.max_ap - actor.ap
        return True, f"ok (predicted_ap={min(actor.ap_recovery, room)})"

    def apply(self, env, actor, skill):
        # waiting is free, whatever keywords the skill carries
        recovered = combat.recover_ap(actor, actor.ap_recovery)
        log_event(
            env.battle,
            f"{actor.name} waits and recovers {recovered} AP",
            LogCategory.ACTION,
        )
        return env.start_result(
            actor, skill, target_ids=[actor.id], total_effect=recovered
        )
