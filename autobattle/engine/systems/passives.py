from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from ...models.enums import PassiveEffectKind, PassiveTrigger

if TYPE_CHECKING:
    from random import Random

    from ...models.passives import PassiveAbility
    from ...models.results import HitContext
    from ...models.units import Unit


class PassiveEffect(Protocol):
    effect: PassiveEffectKind

    def apply(
        self, passive: PassiveAbility, owner: Unit, ctx: HitContext
    ) -> HitContext: ...


class DamageMultiplierEffect:
    effect = PassiveEffectKind.DAMAGE_MULTIPLIER

    def apply(self, passive, owner, ctx):
        factor = 1.0 if passive.value is None else passive.value
        return ctx.model_copy(
            update={"damage_multiplier": ctx.damage_multiplier * factor}
        )


class DodgeEffect:
    effect = PassiveEffectKind.DODGE

    def apply(self, passive, owner, ctx):
        return ctx.model_copy(update={"dodged": True, "damage_multiplier": 0.0})


class CounterEffect:
    effect = PassiveEffectKind.COUNTER

    def apply(self, passive, owner, ctx):
        dmg = owner.attack if passive.value is None else int(passive.value)
        return ctx.model_copy(update={"counter_damage": ctx.counter_damage + dmg})


class RecoverApEffect:
    effect = PassiveEffectKind.RECOVER_AP

    def apply(self, passive, owner, ctx):
        amount = 1 if passive.value is None else int(passive.value)
        return ctx.model_copy(update={"ap_bonus": ctx.ap_bonus + amount})


PassiveRegistry = dict[PassiveEffectKind, PassiveEffect]

default_effects: PassiveRegistry = {
    DamageMultiplierEffect.effect: DamageMultiplierEffect(),
    DodgeEffect.effect: DodgeEffect(),
    CounterEffect.effect: CounterEffect(),
    RecoverApEffect.effect: RecoverApEffect(),
}


def invoke(
    trigger: PassiveTrigger,
    owner: Unit,
    ctx: HitContext,
    rng: Random,
    registry: PassiveRegistry | None = None,
) -> HitContext:
    """Run ``owner``'s passive if it listens to ``trigger``.

    Only the context changes here. The caller commits PP and any stat
    change recorded in the returned context.
    """
    passive = owner.passive
    if passive is None or passive.trigger != trigger or not owner.is_alive:
        return ctx
    if owner.pp < passive.pp_cost:
        return ctx
    if rng.random() >= passive.chance:
        return ctx
    registry = registry or default_effects
    effect = registry.get(passive.effect)
    if effect is None:
        return ctx
    out = effect.apply(passive, owner, ctx)
    return out.model_copy(update={"activated": (*out.activated, passive.id)})
