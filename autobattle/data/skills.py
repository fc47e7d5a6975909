from __future__ import annotations

from ..models.enums import SkillKind, TargetKind
from ..models.skills import Skill, compose

BASIC_STRIKE = compose("BASIC_STRIKE", ["STRIKE"], priority=6, name="Strike")
POWER_SLASH = compose("POWER_SLASH", ["SLASH", "POWER"], priority=3, name="Power Slash")
FLAME_STRIKE = compose("FLAME_STRIKE", ["STRIKE", "FLAME"], priority=4, name="Flame Strike")
FLAME_POWER_STRIKE = compose(
    "FLAME_POWER_STRIKE", ["STRIKE", "FLAME", "POWER"], priority=2, name="Blazing Strike"
)
LIGHTNING_SLASH = compose(
    "LIGHTNING_SLASH", ["SLASH", "LIGHTNING"], priority=2, name="Lightning Slash"
)
SWIFT_MULTI = compose(
    "SWIFT_MULTI", ["STRIKE", "SWIFT", "MULTI"], priority=4, name="Flurry"
)
HEAVY_STRIKE = compose("HEAVY_STRIKE", ["STRIKE", "HEAVY"], priority=4, name="Heavy Strike")
PIERCE_THRUST = compose("PIERCE_THRUST", ["THRUST", "PIERCE"], priority=5, name="Piercing Thrust")
FROST_HEAVY_STRIKE = compose(
    "FROST_HEAVY_STRIKE", ["STRIKE", "FROST", "HEAVY"], priority=1, name="Glacial Crush"
)
DRAIN_STRIKE = compose("DRAIN_STRIKE", ["STRIKE", "DRAIN"], priority=4, name="Drain Strike")
SWEEP_SLASH = compose("SWEEP_SLASH", ["SLASH", "SWEEP"], priority=3, name="Sweeping Slash")
BREAK_STRIKE = compose("BREAK_STRIKE", ["STRIKE", "BREAK"], priority=5, name="Guard Break")

HEAL = compose("HEAL", ["HEAL"], priority=3, kind=SkillKind.HEAL, name="Heal")
GUARD = compose(
    "GUARD", ["GUARD"], priority=5, kind=SkillKind.DEFEND, target=TargetKind.SELF, name="Guard"
)
WAIT = compose("WAIT", [], priority=99, kind=SkillKind.WAIT, name="Wait")

PRESETS: dict[str, Skill] = {
    s.id: s
    for s in (
        BASIC_STRIKE,
        POWER_SLASH,
        FLAME_STRIKE,
        FLAME_POWER_STRIKE,
        LIGHTNING_SLASH,
        SWIFT_MULTI,
        HEAVY_STRIKE,
        PIERCE_THRUST,
        FROST_HEAVY_STRIKE,
        DRAIN_STRIKE,
        SWEEP_SLASH,
        BREAK_STRIKE,
        HEAL,
        GUARD,
        WAIT,
    )
}

SKILL_SETS: dict[str, list[Skill]] = {
    "WARRIOR": [BASIC_STRIKE, POWER_SLASH, HEAVY_STRIKE, SWEEP_SLASH, GUARD, WAIT],
    "MAGE": [BASIC_STRIKE, FLAME_STRIKE, FLAME_POWER_STRIKE, LIGHTNING_SLASH, HEAL, WAIT],
    "ROGUE": [BASIC_STRIKE, SWIFT_MULTI, PIERCE_THRUST, DRAIN_STRIKE, WAIT],
    "BRUISER": [BASIC_STRIKE, FROST_HEAVY_STRIKE, BREAK_STRIKE, GUARD, WAIT],
}


def skill_set(name: str) -> list[Skill]:
    return list(SKILL_SETS[name.upper()])
