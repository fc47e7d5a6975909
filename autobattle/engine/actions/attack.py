from __future__ import annotations

import math

from ...models.enums import LogCategory, PassiveTrigger, SkillKind
from ...models.results import HitContext
from ..logging.logger import log_event
from ..systems import combat, targeting
from .base import ActionHandler


class AttackHandler(ActionHandler):
    kind = SkillKind.ATTACK

    def evaluate(self, env, actor, skill):
        pool = targeting.candidates(actor, skill, env.battle)
        if not pool:
            return False, "no_target"
        return True, (
            f"ok (targets={len(pool)}, power={skill.power}, "
            f"hits={skill.effects.hits}, ap_cost={skill.ap_cost})"
        )

    def apply(self, env, actor, skill):
        target = env.select_target(actor, skill)
        if target is None:
            return env.no_target(actor, skill)

        combat.spend_ap(actor, skill.ap_cost)
        result = env.start_result(
            actor, skill, target_ids=[target.id], ap_spent=skill.ap_cost
        )
        effects = skill.effects

        is_crit = combat.roll_crit(env.rng, env.settings)
        damage = combat.apply_crit(skill.power, env.settings) if is_crit else skill.power
        result.is_critical = is_crit
        ctx = HitContext(
            attacker_id=actor.id,
            target_id=target.id,
            skill_id=skill.id,
            damage=damage,
            is_critical=is_crit,
        )

        ctx, _, _ = env.fire_passive(PassiveTrigger.ON_BEING_HIT, target, ctx, result)
        if ctx.dodged:
            result.dodged = True
            result.reason = "dodged"
            log_event(
                env.battle,
                f"{actor.name} uses {skill.name} on {target.name}: miss",
                LogCategory.ACTION,
            )
            return result

        for per_hit in combat.split_hits(ctx.damage, ctx.damage_multiplier, effects.hits):
            if not target.is_alive:
                break
            dealt = combat.take_hit(target, per_hit, effects, env.settings)
            result.hits.append(dealt)
            env.record_damage(result, target, dealt, is_crit)
        result.total_effect = sum(result.hits)
        result.target_died = not target.is_alive
        log_event(
            env.battle,
            f"{actor.name} uses {skill.name} on {target.name}: "
            f"{result.total_effect} damage{' (critical)' if is_crit else ''}",
            LogCategory.DAMAGE,
        )

        if effects.lifesteal and result.total_effect and actor.is_alive:
            gained = combat.heal(actor, math.floor(result.total_effect * effects.lifesteal))
            result.lifesteal = gained
            if gained:
                env.record_heal(result, actor, gained)
                log_event(env.battle, f"{actor.name} drains {gained} HP", LogCategory.HEAL)

        if effects.splash:
            splash_dmg = math.floor(
                ctx.damage * ctx.damage_multiplier * env.settings.splash_ratio
            )
            for near in targeting.adjacent(target, env.battle):
                dealt = combat.take_hit(near, splash_dmg, effects, env.settings)
                result.splash[near.id] = dealt
                env.record_damage(result, near, dealt)
                log_event(
                    env.battle,
                    f"{near.name} is caught in the blast: {dealt} damage",
                    LogCategory.DAMAGE,
                )

        if target.is_alive:
            ctx, _, _ = env.fire_passive(PassiveTrigger.ON_AFTER_HIT, target, ctx, result)
            if ctx.counter_damage and actor.is_alive:
                dealt = combat.take_hit(actor, ctx.counter_damage, settings=env.settings)
                result.counter_damage = dealt
                env.record_damage(result, actor, dealt)
                log_event(
                    env.battle,
                    f"{target.name} counters {actor.name}: {dealt} damage",
                    LogCategory.DAMAGE,
                )
        return result
