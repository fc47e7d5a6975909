from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...models.battle import BattleState

from ...models.enums import BattleOutcome, Team


def check(battle: BattleState) -> BattleOutcome:
    if battle.outcome != BattleOutcome.IN_PROGRESS:
        return battle.outcome

    allies_up = any(True for _ in battle.living(Team.ALLY))
    enemies_up = any(True for _ in battle.living(Team.ENEMY))

    if not allies_up and not enemies_up:
        return BattleOutcome.DRAW
    if not enemies_up:
        return BattleOutcome.VICTORY
    if not allies_up:
        return BattleOutcome.DEFEAT
    return BattleOutcome.IN_PROGRESS
