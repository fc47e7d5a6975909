from __future__ import annotations

from ..models.enums import PassiveEffectKind, PassiveTrigger
from ..models.passives import PassiveAbility

GUARD_REACTION = PassiveAbility(
    id="GUARD_REACTION",
    display_name="Guard Reaction",
    trigger=PassiveTrigger.ON_BEING_HIT,
    effect=PassiveEffectKind.DAMAGE_MULTIPLIER,
    chance=0.3,
    pp_cost=1,
    value=0.5,
)

COUNTER_ATTACK = PassiveAbility(
    id="COUNTER_ATTACK",
    display_name="Counter Attack",
    trigger=PassiveTrigger.ON_AFTER_HIT,
    effect=PassiveEffectKind.COUNTER,
    chance=0.4,
    pp_cost=1,
    value=10,
)

EMERGENCY_DODGE = PassiveAbility(
    id="EMERGENCY_DODGE",
    display_name="Emergency Dodge",
    trigger=PassiveTrigger.ON_BEING_HIT,
    effect=PassiveEffectKind.DODGE,
    chance=0.2,
    pp_cost=2,
)

BATTLE_SPIRIT = PassiveAbility(
    id="BATTLE_SPIRIT",
    display_name="Battle Spirit",
    trigger=PassiveTrigger.ON_TURN_START,
    effect=PassiveEffectKind.RECOVER_AP,
    chance=0.5,
    pp_cost=1,
    value=1,
)

PASSIVES: dict[str, PassiveAbility] = {
    p.id: p for p in (GUARD_REACTION, COUNTER_ATTACK, EMERGENCY_DODGE, BATTLE_SPIRIT)
}

PASSIVE_SETS: dict[str, PassiveAbility] = {
    "WARRIOR": COUNTER_ATTACK,
    "MAGE": BATTLE_SPIRIT,
    "ROGUE": EMERGENCY_DODGE,
    "TANK": GUARD_REACTION,
}
