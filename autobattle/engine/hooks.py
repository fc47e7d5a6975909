from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any

from ..models.enums import LogCategory, PresentationEventKind
from .logging.logger import log_event

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from ..models.battle import BattleState
    from ..models.results import PresentationEvent
    from ..models.skills import Skill

logger = logging.getLogger(__name__)


class PresentationHooks:
    """Callbacks a host may override to animate a battle.

    Any of them may return an awaitable; ``BattleController.run_async``
    awaits it before the next tick. The simulation never reads the return
    value.
    """

    def on_damage(self, target, amount: int, is_critical: bool) -> Any:
        return None

    def on_heal(self, target, amount: int) -> Any:
        return None

    def on_death(self, unit) -> Any:
        return None

    def on_passive_activated(self, unit, passive) -> Any:
        return None

    def on_action_announced(self, skill, ap_cost: int) -> Any:
        return None


class HookDispatcher:
    def __init__(self, hooks: object | None = None):
        self.hooks = hooks
        self.failures = 0

    def _bind(
        self, battle: BattleState, ev: PresentationEvent, skill: Skill | None
    ) -> Callable[[], Any] | None:
        h = self.hooks
        unit = battle.unit(ev.unit_id) if ev.unit_id else None
        if ev.kind == PresentationEventKind.ACTION_ANNOUNCED:
            fn = getattr(h, "on_action_announced", None)
            return fn and (lambda: fn(skill, ev.ap_cost or 0))
        if ev.kind == PresentationEventKind.DAMAGE:
            fn = getattr(h, "on_damage", None)
            return fn and (lambda: fn(unit, ev.amount, ev.is_critical))
        if ev.kind == PresentationEventKind.HEAL:
            fn = getattr(h, "on_heal", None)
            return fn and (lambda: fn(unit, ev.amount))
        if ev.kind == PresentationEventKind.DEATH:
            fn = getattr(h, "on_death", None)
            return fn and (lambda: fn(unit))
        if ev.kind == PresentationEventKind.PASSIVE_ACTIVATED:
            fn = getattr(h, "on_passive_activated", None)
            passive = unit.passive if unit else None
            return fn and (lambda: fn(unit, passive))
        return None

    def _failed(self, battle: BattleState, ev_kind: str, exc: BaseException) -> None:
        self.failures += 1
        logger.error("presentation hook %s failed", ev_kind, exc_info=exc)
        log_event(battle, f"hook {ev_kind} failed: {exc}", LogCategory.ERROR)

    def dispatch(
        self,
        battle: BattleState,
        events: list[PresentationEvent],
        skill: Skill | None = None,
    ) -> list[Awaitable[Any]]:
        """Call the hooks for ``events`` in order; returns what must be awaited."""
        if self.hooks is None:
            return []
        pending: list[Awaitable[Any]] = []
        for ev in events:
            call = self._bind(battle, ev, skill)
            if call is None:
                continue
            try:
                ret = call()
            except Exception as e:
                self._failed(battle, ev.kind.value, e)
                continue
            if inspect.isawaitable(ret):
                pending.append(ret)
        return pending

    async def drain(self, battle: BattleState, pending: list[Awaitable[Any]]) -> None:
        for aw in pending:
            try:
                await aw
            except Exception as e:
                self._failed(battle, "awaitable", e)

    def discard(self, pending: list[Awaitable[Any]]) -> None:
        # synchronous callers cannot wait; close coroutines so they never run
        for aw in pending:
            close = getattr(aw, "close", None)
            if close is not None:
                close()
        if pending:
            logger.warning(
                "dropped %d awaitable hook result(s); use run_async to await them",
                len(pending),
            )
