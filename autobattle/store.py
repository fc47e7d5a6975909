from __future__ import annotations

import os
import threading
from collections import deque
from typing import Protocol

from redis import Redis

from .config import settings_from_env
from .models.battle import BattleState


class BattleStore(Protocol):
    def get(self, bid: str) -> BattleState | None: ...
    def save(self, state: BattleState) -> None: ...
    def delete(self, bid: str) -> bool: ...
    def list_all(self) -> list[BattleState]: ...
    def append_log(self, bid: str, entry_json: str) -> None: ...
    def list_logs(self, bid: str, limit: int) -> list[str]: ...
    def ping(self) -> bool: ...


class MemoryBattleStore:
    """In-process store guarded by a lock; FastAPI runs sync routes in threads."""

    def __init__(self, log_limit: int = 1000) -> None:
        self._data: dict[str, str] = {}
        self._logs: dict[str, deque[str]] = {}
        self._log_limit = log_limit
        self._lock = threading.Lock()

    def get(self, bid: str) -> BattleState | None:
        with self._lock:
            raw = self._data.get(bid)
        return BattleState.model_validate_json(raw) if raw else None

    def save(self, state: BattleState) -> None:
        raw = state.model_dump_json()
        with self._lock:
            self._data[state.id] = raw

    def delete(self, bid: str) -> bool:
        with self._lock:
            self._logs.pop(bid, None)
            return self._data.pop(bid, None) is not None

    def list_all(self) -> list[BattleState]:
        with self._lock:
            raws = list(self._data.values())
        return [BattleState.model_validate_json(r) for r in raws]

    def append_log(self, bid: str, entry_json: str) -> None:
        with self._lock:
            q = self._logs.setdefault(bid, deque(maxlen=self._log_limit))
            q.append(entry_json)

    def list_logs(self, bid: str, limit: int) -> list[str]:
        with self._lock:
            q = self._logs.get(bid)
            return list(q)[-limit:] if q else []

    def ping(self) -> bool:
        return True


class RedisBattleStore:
    """Cross-worker store using Redis. Set REDIS_URL to enable."""

    def __init__(self, url: str, log_limit: int = 1000) -> None:
        self.r = Redis.from_url(url, decode_responses=True)
        self._prefix = "autobattle:battle:"
        self._log_prefix = "autobattle:log:"
        self._index = "autobattle:index"
        self._log_limit = log_limit

    def _key(self, bid: str) -> str:
        return f"{self._prefix}{bid}"

    def _log_key(self, bid: str) -> str:
        return f"{self._log_prefix}{bid}"

    def get(self, bid: str) -> BattleState | None:
        raw = self.r.get(self._key(bid))
        if raw is None:
            # cleanup stale index entry if it exists
            self.r.srem(self._index, bid)
            return None
        return BattleState.model_validate_json(raw)

    def save(self, state: BattleState) -> None:
        pipe = self.r.pipeline()
        pipe.set(self._key(state.id), state.model_dump_json())
        pipe.sadd(self._index, state.id)
        pipe.execute()

    def delete(self, bid: str) -> bool:
        pipe = self.r.pipeline()
        pipe.delete(self._key(bid))
        pipe.delete(self._log_key(bid))
        pipe.srem(self._index, bid)
        res = pipe.execute()
        return bool(res and res[0])

    def list_all(self) -> list[BattleState]:
        bids = sorted(self.r.smembers(self._index))
        if not bids:
            return []
        raws = self.r.mget([self._key(b) for b in bids])
        out: list[BattleState] = []
        stale: list[str] = []
        for bid, raw in zip(bids, raws):
            if raw:
                out.append(BattleState.model_validate_json(raw))
            else:
                stale.append(bid)
        if stale:
            self.r.srem(self._index, *stale)
        return out

    def append_log(self, bid: str, entry_json: str) -> None:
        pipe = self.r.pipeline()
        pipe.rpush(self._log_key(bid), entry_json)
        pipe.ltrim(self._log_key(bid), -self._log_limit, -1)
        pipe.execute()

    def list_logs(self, bid: str, limit: int) -> list[str]:
        return list(self.r.lrange(self._log_key(bid), -limit, -1))

    def ping(self) -> bool:
        return bool(self.r.ping())


def make_store(url: str | None = None, log_limit: int = 1000) -> BattleStore:
    if url:
        return RedisBattleStore(url, log_limit=log_limit)
    return MemoryBattleStore(log_limit=log_limit)


REDIS_URL = os.getenv("REDIS_URL")
store: BattleStore = make_store(REDIS_URL, settings_from_env().log_limit)
