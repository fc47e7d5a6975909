from __future__ import annotations

import asyncio
import logging
import random
from typing import TYPE_CHECKING
from uuid import uuid4

from ..config import DEFAULT_SETTINGS
from ..errors import BattleError, EmptyRosterError
from ..models.battle import BattleState
from ..models.enums import BattleOutcome, LogCategory, Team
from ..models.results import ControlResult, TurnReport
from .ai import PrioritySkillPolicy
from .hooks import HookDispatcher
from .logging.logger import log_error, log_event, log_illegal, log_outcome
from .pipeline import SkillResolver
from .scheduler import TurnScheduler
from .systems import combat, victory
from .systems.targeting import LowestHpTargeting, RandomTargeting

if TYPE_CHECKING:
    from collections.abc import Awaitable
    from typing import Any

    from ..config import BattleSettings
    from ..models.units import Unit
    from .ai import SkillPolicy
    from .systems.targeting import TargetingPolicy

logger = logging.getLogger(__name__)

TARGETING_POLICIES = ("lowest_hp", "random")


def make_targeting(name: str, rng: random.Random) -> TargetingPolicy:
    if name == "random":
        return RandomTargeting(rng)
    if name == "lowest_hp":
        return LowestHpTargeting()
    raise BattleError(f"unknown targeting policy {name!r}")


class BattleController:
    """Owns one battle: roster, scheduler, resolver and the control surface."""

    def __init__(
        self,
        settings: BattleSettings | None = None,
        *,
        battle_id: str | None = None,
        seed: int | None = None,
        targeting: str | TargetingPolicy = "lowest_hp",
        skill_policy: SkillPolicy | None = None,
        hooks: object | None = None,
    ):
        self.settings = settings or DEFAULT_SETTINGS
        self.seed = seed if seed is not None else self.settings.seed
        self.rng = random.Random(self.seed)
        self.battle_id = battle_id or uuid4().hex
        self.targeting_name = targeting if isinstance(targeting, str) else "custom"
        self.targeting = (
            make_targeting(targeting, self.rng) if isinstance(targeting, str) else targeting
        )
        self.skill_policy: SkillPolicy = skill_policy or PrioritySkillPolicy()
        self.hooks = HookDispatcher(hooks)
        self.state: BattleState | None = None
        self.scheduler: TurnScheduler | None = None
        self.resolver: SkillResolver | None = None

    # ----- setup -----

    def initialize_units(
        self, allies: list[Unit], enemies: list[Unit], *, auto_mode: bool = True
    ) -> BattleState:
        if not allies:
            raise EmptyRosterError(Team.ALLY.value)
        if not enemies:
            raise EmptyRosterError(Team.ENEMY.value)
        ally_copies = [u.model_copy(deep=True, update={"team": Team.ALLY}) for u in allies]
        enemy_copies = [
            u.model_copy(deep=True, update={"team": Team.ENEMY}) for u in enemies
        ]
        ids = [u.id for u in (*ally_copies, *enemy_copies)]
        if len(ids) != len(set(ids)):
            raise BattleError("unit ids must be unique within a battle")
        state = BattleState(
            id=self.battle_id,
            allies=ally_copies,
            enemies=enemy_copies,
            auto_mode=auto_mode,
            seed=self.seed,
            targeting=self.targeting_name,
            log_limit=self.settings.log_limit,
        )
        self.attach(state)
        log_event(state, f"{len(ally_copies)} allies vs {len(enemy_copies)} enemies")
        return state

    def attach(self, state: BattleState) -> None:
        self.state = state
        self.battle_id = state.id
        self.scheduler = TurnScheduler(state, self.settings)
        self.resolver = SkillResolver(
            state,
            settings=self.settings,
            rng=self.rng,
            targeting_policy=self.targeting,
        )

    @classmethod
    def from_state(
        cls, state: BattleState, settings: BattleSettings | None = None, **kwargs
    ) -> BattleController:
        kwargs.setdefault("seed", state.seed)
        if state.targeting in TARGETING_POLICIES:
            kwargs.setdefault("targeting", state.targeting)
        ctl = cls(settings, battle_id=state.id, **kwargs)
        ctl.attach(state)
        return ctl

    # ----- control surface -----

    @property
    def is_running(self) -> bool:
        return bool(self.state and self.state.running)

    @property
    def is_paused(self) -> bool:
        return bool(self.state and self.state.paused)

    @property
    def auto_mode(self) -> bool:
        return bool(self.state and self.state.auto_mode)

    @property
    def outcome(self) -> BattleOutcome:
        return self.state.outcome if self.state else BattleOutcome.IN_PROGRESS

    def _reject(self, message: str) -> ControlResult:
        if self.state is not None:
            log_event(self.state, message, LogCategory.REJECTED)
        return ControlResult(ok=False, message=message)

    def start_battle(self) -> ControlResult:
        st = self.state
        if st is None:
            return ControlResult(ok=False, message="no units initialized")
        if st.ended:
            return self._reject("battle is over")
        if st.started:
            return self._reject("battle already started")
        self.scheduler.start(head_start=self.settings.staggered_start)
        for u in st.living():
            combat.recover_ap(u, self.settings.start_ap)
        log_event(st, "battle started")
        return ControlResult(ok=True, message="battle started")

    def toggle_pause(self) -> ControlResult:
        st = self.state
        if st is None or not st.running:
            return self._reject("battle is not running")
        if st.paused:
            self.scheduler.resume()
            log_event(st, "battle resumed")
            return ControlResult(ok=True, message="resumed")
        self.scheduler.pause()
        log_event(st, "battle paused")
        return ControlResult(ok=True, message="paused")

    def toggle_auto_mode(self) -> ControlResult:
        st = self.state
        if st is None:
            return ControlResult(ok=False, message="no units initialized")
        st.auto_mode = not st.auto_mode
        mode = "auto" if st.auto_mode else "manual"
        log_event(st, f"{mode} mode")
        return ControlResult(ok=True, message=mode)

    def set_speed(self, multiplier: int) -> ControlResult:
        if self.state is None:
            return ControlResult(ok=False, message="no units initialized")
        res = self.scheduler.set_speed(multiplier)
        if res.ok:
            log_event(self.state, f"game speed x{multiplier}")
        else:
            log_event(self.state, res.message, LogCategory.REJECTED)
        return res

    def manual_next_turn(self, *, advance: bool = False) -> ControlResult:
        """Play one ready unit's turn in manual mode.

        Starts the battle first when it has not started yet. With
        ``advance=True`` time is moved forward until someone is ready.
        """
        res, turn = self._manual_step(advance)
        if turn is not None:
            self.hooks.discard(turn[1])
        return res

    async def manual_next_turn_async(self, *, advance: bool = False) -> ControlResult:
        res, turn = self._manual_step(advance)
        if turn is not None:
            await self.hooks.drain(self.state, turn[1])
        return res

    def _manual_step(
        self, advance: bool
    ) -> tuple[ControlResult, tuple[TurnReport, list[Awaitable[Any]]] | None]:
        st = self.state
        if st is None:
            return ControlResult(ok=False, message="no units initialized"), None
        if not st.started:
            started = self.start_battle()
            if not started.ok:
                return started, None
        if advance and not st.auto_mode:
            self.advance_until_ready()
        res, turn = self.scheduler.step_once(self._take_turn)
        if not res.ok:
            log_event(st, res.message, LogCategory.REJECTED)
            return res, None
        return res.model_copy(update={"report": turn[0]}), turn

    def advance_until_ready(self, max_ticks: int | None = None) -> int:
        limit = max_ticks or self.settings.max_ticks
        moved = 0
        while moved < limit and self.scheduler.can_advance():
            self.scheduler.advance()
            moved += 1
        return moved

    # ----- simulation -----

    def _can_tick(self) -> bool:
        st = self.state
        return bool(st and st.running and not st.paused and not st.ended)

    def _next_auto_actor(self) -> Unit | None:
        if not self._can_tick() or not self.state.auto_mode:
            return None
        ready = self.scheduler.ready_units()
        return ready[0] if ready else None

    def tick(self) -> list[TurnReport]:
        """One scheduler tick; in auto mode every unit that becomes ready acts."""
        if not self._can_tick():
            return []
        self.scheduler.advance()
        reports: list[TurnReport] = []
        while (unit := self._next_auto_actor()) is not None:
            report, pending = self._take_turn(unit)
            self.hooks.discard(pending)
            reports.append(report)
        return reports

    async def tick_async(self) -> list[TurnReport]:
        if not self._can_tick():
            return []
        self.scheduler.advance()
        reports: list[TurnReport] = []
        while (unit := self._next_auto_actor()) is not None:
            report, pending = self._take_turn(unit)
            await self.hooks.drain(self.state, pending)
            reports.append(report)
        return reports

    def run(self, max_ticks: int | None = None) -> BattleOutcome:
        """Play until the battle ends, it is paused, or ``max_ticks`` pass.

        In manual mode this acts as the host and steps every ready unit.
        """
        st = self.state
        if st is None:
            raise BattleError("no units initialized")
        if not st.started:
            self.start_battle()
        limit = max_ticks or self.settings.max_ticks
        first = st.ticks
        while self._can_tick() and st.ticks - first < limit:
            if not st.auto_mode and self.scheduler.ready_units():
                self.manual_next_turn()
            else:
                self.tick()
        return st.outcome

    async def run_async(
        self, max_ticks: int | None = None, *, realtime: bool = False
    ) -> BattleOutcome:
        st = self.state
        if st is None:
            raise BattleError("no units initialized")
        if not st.started:
            self.start_battle()
        limit = max_ticks or self.settings.max_ticks
        first = st.ticks
        while self._can_tick() and st.ticks - first < limit:
            if not st.auto_mode and self.scheduler.ready_units():
                await self.manual_next_turn_async()
            else:
                await self.tick_async()
            if realtime:
                await asyncio.sleep(self.settings.tick_interval)
        return st.outcome

    def _take_turn(self, unit: Unit) -> tuple[TurnReport, list[Awaitable[Any]]]:
        st = self.state
        st.turn += 1
        self.scheduler.begin_action(unit)
        events = self.resolver.turn_start(unit)
        skill = self.skill_policy.choose(unit, self.resolver)
        report = TurnReport(turn=st.turn, actor_id=unit.id, skill_id=skill.id)
        try:
            result = self.resolver.resolve(unit, skill)
            report.result = result
            events = [*events, *result.events]
        except BattleError as e:
            log_illegal(st, unit.id, str(e))
            report.rejected = str(e)
        except Exception as e:
            log_error(st, e)
            raise
        finally:
            if unit.is_alive:
                combat.recover_pp(unit, self.settings.pp_recovery)
            self.scheduler.end_action(unit)

        outcome = victory.check(st)
        if outcome != BattleOutcome.IN_PROGRESS:
            st.outcome = outcome
            self.scheduler.stop()
            log_outcome(st)
            logger.info("battle %s ended: %s", st.id, outcome.value)
        report.outcome = st.outcome
        # state is final for this turn; presentation runs after
        return report, self.hooks.dispatch(st, events, skill)
