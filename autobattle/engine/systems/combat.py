from __future__ import annotations

import math
from typing import TYPE_CHECKING

from ...config import DEFAULT_SETTINGS
from ...models.enums import UnitPhase
from ...models.keywords import SkillEffects

if TYPE_CHECKING:
    from random import Random

    from ...config import BattleSettings
    from ...models.units import Unit


def roll_crit(rng: Random, settings: BattleSettings = DEFAULT_SETTINGS) -> bool:
    return rng.random() < settings.crit_chance


def apply_crit(damage: int, settings: BattleSettings = DEFAULT_SETTINGS) -> int:
    return math.floor(damage * settings.crit_multiplier)


def split_hits(damage: int, multiplier: float, hits: int) -> list[int]:
    final = math.floor(damage * multiplier)
    return [final // hits] * hits


def mitigate(
    target: Unit,
    damage: int,
    effects: SkillEffects | None = None,
    settings: BattleSettings = DEFAULT_SETTINGS,
) -> int:
    """Damage left after the defend stance and flat defense.

    A defend stance halves the hit and is consumed by it; penetration skips
    the stance and leaves it in place. ignore_defense skips the flat
    subtraction. A positive hit never drops below 1.
    """
    if damage <= 0:
        return 0
    effects = effects or SkillEffects()
    if target.is_defending and not effects.penetration:
        damage = max(1, math.floor(damage * settings.defend_ratio))
        target.is_defending = False
    if not effects.ignore_defense:
        damage = max(1, damage - target.defense)
    return damage


def apply_damage(target: Unit, amount: int) -> int:
    """Remove up to ``amount`` HP; returns the HP actually lost."""
    lost = max(0, min(amount, target.hp))
    target.hp -= lost
    if target.hp == 0:
        target.phase = UnitPhase.DEAD
    return lost


def take_hit(
    target: Unit,
    damage: int,
    effects: SkillEffects | None = None,
    settings: BattleSettings = DEFAULT_SETTINGS,
) -> int:
    if not target.is_alive:
        return 0
    return apply_damage(target, mitigate(target, damage, effects, settings))


def heal(target: Unit, amount: int) -> int:
    gained = max(0, min(amount, target.max_hp - target.hp))
    target.hp += gained
    return gained


def spend_ap(unit: Unit, cost: int) -> None:
    unit.ap = max(0, unit.ap - cost)


def recover_ap(unit: Unit, amount: int) -> int:
    gained = max(0, min(amount, unit.max_ap - unit.ap))
    unit.ap += gained
    return gained


def spend_pp(unit: Unit, cost: int) -> None:
    unit.pp = max(0, unit.pp - cost)


def recover_pp(unit: Unit, amount: int) -> int:
    gained = max(0, min(amount, unit.max_pp - unit.pp))
    unit.pp += gained
    return gained
