from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...models.battle import BattleState

from ...events import BattleEndedEvent, BattleLogEvent, event_bus
from ...models.battle import LogEntry
from ...models.enums import LogCategory


def log_event(
    battle: BattleState,
    message: str,
    category: LogCategory = LogCategory.SYSTEM,
    limit: int | None = None,
) -> LogEntry:
    """Append to the battle log, keeping at most ``limit`` entries.

    ``limit`` defaults to the cap stored on the battle.
    """
    limit = limit or battle.log_limit
    entry = LogEntry(
        battle_id=battle.id,
        turn=battle.turn,
        tick=battle.ticks,
        message=message,
        category=category,
    )
    battle.log.append(entry)
    if len(battle.log) > limit:
        del battle.log[: len(battle.log) - limit]
    event_bus.emit(
        BattleLogEvent(
            battle_id=battle.id,
            turn=battle.turn,
            tick=battle.ticks,
            message=message,
            category=category,
            entry_json=entry.model_dump_json(),
        )
    )
    return entry


def log_illegal(battle: BattleState, actor_id: str, explanation: str) -> LogEntry:
    return log_event(battle, f"{actor_id}: {explanation}", LogCategory.REJECTED)


def log_error(battle: BattleState, error: Exception) -> LogEntry:
    return log_event(battle, f"{type(error).__name__}: {error}", LogCategory.ERROR)


def log_outcome(battle: BattleState) -> LogEntry:
    entry = log_event(battle, f"battle over: {battle.outcome.value}", LogCategory.SYSTEM)
    event_bus.emit(
        BattleEndedEvent(battle_id=battle.id, turn=battle.turn, outcome=battle.outcome)
    )
    return entry
