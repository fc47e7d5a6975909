from __future__ import annotations

import logging

from . import store as store_module
from .events import BattleEndedEvent, BattleLogEvent, event_bus
from .models.enums import LogCategory

battle_logger = logging.getLogger("autobattle.battle")

_LEVELS = {
    LogCategory.ERROR: logging.ERROR,
    LogCategory.REJECTED: logging.WARNING,
}


def _persist_log_event(ev: BattleLogEvent) -> None:
    store_module.store.append_log(ev.battle_id, ev.entry_json)


def _forward_log_event(ev: BattleLogEvent) -> None:
    battle_logger.log(
        _LEVELS.get(ev.category, logging.INFO),
        "[%s t%d] %s",
        ev.battle_id,
        ev.turn,
        ev.message,
    )


def _on_battle_ended(ev: BattleEndedEvent) -> None:
    battle_logger.info("[%s] finished after %d turns: %s", ev.battle_id, ev.turn, ev.outcome.value)


def register_listeners() -> None:
    event_bus.subscribe(BattleLogEvent, _persist_log_event)
    event_bus.subscribe(BattleLogEvent, _forward_log_event)
    event_bus.subscribe(BattleEndedEvent, _on_battle_ended)
