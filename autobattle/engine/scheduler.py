from __future__ import annotations

import math
from typing import TYPE_CHECKING, TypeVar

from ..config import DEFAULT_SETTINGS
from ..models.enums import GAME_SPEEDS, Team, UnitPhase
from ..models.results import ControlResult

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..config import BattleSettings
    from ..models.battle import BattleState
    from ..models.units import Unit

T = TypeVar("T")


def ready_key(u: Unit) -> tuple[int, int, int, str]:
    # faster first, then lower slot; team and id only keep the order total
    return (-u.speed, u.slot, 0 if u.team == Team.ALLY else 1, u.id)


class TurnScheduler:
    """Charge-based turn order over a battle's roster.

    Per unit: charging -> ready -> acting -> charging, with dead as the
    terminal phase. Time only moves while nobody is ready or acting.
    """

    def __init__(self, battle: BattleState, settings: BattleSettings | None = None):
        self.battle = battle
        self.settings = settings or DEFAULT_SETTINGS

    # ----- control -----

    def start(self, head_start: bool = False) -> None:
        b = self.battle
        b.started = True
        b.running = True
        b.paused = False
        for u in b.roster():
            u.phase = UnitPhase.CHARGING if u.is_alive else UnitPhase.DEAD
        if head_start:
            self._apply_head_start()
        self._promote_ready()

    def stop(self) -> None:
        self.battle.running = False
        self.battle.paused = False

    def pause(self) -> None:
        self.battle.paused = True

    def resume(self) -> None:
        self.battle.paused = False

    def set_speed(self, multiplier: int) -> ControlResult:
        if multiplier not in GAME_SPEEDS:
            return ControlResult(
                ok=False, message=f"speed must be one of {list(GAME_SPEEDS)}"
            )
        self.battle.game_speed = multiplier
        return ControlResult(ok=True, message=f"speed x{multiplier}")

    def step_once(self, take_turn: Callable[[Unit], T]) -> tuple[ControlResult, T | None]:
        """Run exactly one ready unit's turn in manual mode."""
        b = self.battle
        if b.auto_mode:
            return ControlResult(ok=False, message="auto mode is on"), None
        if not b.running:
            return ControlResult(ok=False, message="battle is not running"), None
        if b.paused:
            return ControlResult(ok=False, message="battle is paused"), None
        ready = self.ready_units()
        if not ready:
            return ControlResult(ok=False, message="no unit is ready"), None
        out = take_turn(ready[0])
        return ControlResult(ok=True, message=f"{ready[0].id} acted"), out

    # ----- time -----

    def can_advance(self) -> bool:
        b = self.battle
        return (
            b.running
            and not b.paused
            and not b.ended
            and b.acting_unit_id is None
            and not self.ready_units()
        )

    def advance(self) -> list[Unit]:
        """One logical tick of charge; returns the units ready afterwards."""
        if not self.can_advance():
            return self.ready_units()
        rate = self.settings.tick_rate * self.battle.game_speed
        for u in self.battle.living():
            if u.phase == UnitPhase.CHARGING:
                u.charge += u.speed * rate
        self.battle.ticks += 1
        self._promote_ready()
        return self.ready_units()

    def ticks_until_ready(self, unit: Unit) -> int:
        missing = self.settings.charge_threshold - unit.charge
        if missing <= 0:
            return 0
        per_tick = unit.speed * self.settings.tick_rate * self.battle.game_speed
        return math.ceil(missing / per_tick)

    def preview_order(self, count: int = 5) -> list[str]:
        """Ids of the next ``count`` actors, assuming nobody dies meanwhile."""
        threshold = self.settings.charge_threshold
        rate = self.settings.tick_rate * self.battle.game_speed
        units = [u for u in self.battle.living()]
        if not units:
            return []
        charge = {
            u.id: (threshold if u.phase == UnitPhase.READY else u.charge)
            for u in units
        }
        if self.battle.acting_unit_id in charge:
            charge[self.battle.acting_unit_id] = 0.0
        order: list[str] = []
        while len(order) < count:
            ready = sorted(
                (u for u in units if charge[u.id] >= threshold), key=ready_key
            )
            if ready:
                order.append(ready[0].id)
                charge[ready[0].id] = 0.0
                continue
            for u in units:
                charge[u.id] += u.speed * rate
        return order

    # ----- phases -----

    def ready_units(self) -> list[Unit]:
        ready = [
            u
            for u in self.battle.living()
            if u.phase == UnitPhase.READY
        ]
        return sorted(ready, key=ready_key)

    def begin_action(self, unit: Unit) -> None:
        unit.phase = UnitPhase.ACTING
        unit.charge = 0.0
        self.battle.acting_unit_id = unit.id

    def end_action(self, unit: Unit) -> None:
        if self.battle.acting_unit_id == unit.id:
            self.battle.acting_unit_id = None
        self.sync_deaths()
        if unit.is_alive:
            unit.phase = UnitPhase.CHARGING
        self._promote_ready()

    def sync_deaths(self) -> list[Unit]:
        fallen = []
        for u in self.battle.roster():
            if not u.is_alive and u.phase != UnitPhase.DEAD:
                u.phase = UnitPhase.DEAD
                fallen.append(u)
        return fallen

    def _promote_ready(self) -> None:
        for u in self.battle.living():
            if u.phase == UnitPhase.CHARGING and u.charge >= self.settings.charge_threshold:
                u.phase = UnitPhase.READY

    def _apply_head_start(self) -> None:
        living = list(self.battle.living())
        if not living:
            return
        fastest = max(u.speed for u in living)
        slowest = min(u.speed for u in living)
        for u in living:
            ratio = (
                0.5
                if fastest == slowest
                else (u.speed - slowest) / (fastest - slowest)
            )
            u.charge = 30 + math.floor(ratio * 50)
