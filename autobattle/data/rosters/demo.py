from __future__ import annotations

from ...models.enums import Team
from ...models.units import Unit
from ..passives import PASSIVE_SETS
from ..skills import skill_set

MAX_AP = 10
MAX_PP = 3


def make_unit(
    id_: str,
    name: str,
    team: Team,
    slot: int,
    archetype: str,
    *,
    speed: int = 10,
    max_hp: int = 100,
    attack: int = 10,
    defense: int = 0,
    passive: str | None = None,
) -> Unit:
    return Unit(
        id=id_,
        name=name,
        team=team,
        slot=slot,
        max_hp=max_hp,
        max_ap=MAX_AP,
        max_pp=MAX_PP,
        speed=speed,
        attack=attack,
        defense=defense,
        skills=skill_set(archetype),
        passive=PASSIVE_SETS.get(passive or archetype),
    )


def default_demo_roster() -> tuple[list[Unit], list[Unit]]:
    """Three-on-three skirmish: warrior, mage and rogue on each side."""
    allies = [
        make_unit("ally.warrior", "Ally Warrior", Team.ALLY, 0, "WARRIOR", speed=12, defense=2),
        make_unit("ally.mage", "Ally Mage", Team.ALLY, 1, "MAGE", speed=10, max_hp=80),
        make_unit("ally.rogue", "Ally Rogue", Team.ALLY, 2, "ROGUE", speed=15, max_hp=90),
    ]
    enemies = [
        make_unit("enemy.warrior", "Enemy Warrior", Team.ENEMY, 0, "WARRIOR", speed=11, defense=2),
        make_unit("enemy.mage", "Enemy Mage", Team.ENEMY, 1, "MAGE", speed=9, max_hp=80),
        make_unit(
            "enemy.rogue", "Enemy Rogue", Team.ENEMY, 2, "BRUISER", speed=14, passive="TANK"
        ),
    ]
    return allies, enemies
