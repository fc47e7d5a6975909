from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import TypeAdapter

from . import store as store_module
from .config import settings_from_env
from .data.keywords import KEYWORDS
from .data.passives import PASSIVES
from .data.rosters.demo import default_demo_roster
from .data.skills import PRESETS, SKILL_SETS
from .engine.core import TARGETING_POLICIES, BattleController
from .errors import BattleError, BattleNotFoundError
from .logging_listeners import register_listeners
from .models.api import (
    BattleLogResponse,
    BattleView,
    ControlResponse,
    CreateBattleRequest,
    SpeedRequest,
    TickResponse,
)
from .models.battle import LogEntry
from .models.enums import GAME_SPEEDS
from .models.results import ControlResult
from .models.skills import Skill
from .models.units import Unit

logger = logging.getLogger(__name__)

app = FastAPI(title="Autobattle - charge-based battle simulator")
settings = settings_from_env()
register_listeners()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BattleError)
def battle_error_handler(request: Request, exc: BattleError):
    # unknown keywords surface while the request body is validated
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(BattleNotFoundError)
def battle_not_found_handler(request: Request, exc: BattleNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


# Live controllers for this worker; snapshots go to the store after each call.
# Each battle has its own lock, held for a whole request so turns never overlap.
_controllers: dict[str, tuple[BattleController, threading.Lock]] = {}
_lock = threading.Lock()


def _register(ctl: BattleController) -> threading.Lock:
    guard = threading.Lock()
    with _lock:
        _controllers[ctl.battle_id] = (ctl, guard)
    return guard


def _controller(bid: str) -> tuple[BattleController, threading.Lock]:
    with _lock:
        entry = _controllers.get(bid)
        if entry is not None:
            return entry
        state = store_module.store.get(bid)
        if state is None:
            raise BattleNotFoundError(bid)
        entry = (BattleController.from_state(state, settings), threading.Lock())
        _controllers[bid] = entry
        return entry


@contextmanager
def _battle(bid: str) -> Iterator[BattleController]:
    ctl, guard = _controller(bid)
    with guard:
        yield ctl


def _view(ctl: BattleController) -> BattleView:
    return BattleView(
        id=ctl.state.id,
        state=ctl.state,
        ready=[u.id for u in ctl.scheduler.ready_units()],
        upcoming=ctl.scheduler.preview_order(5) if not ctl.state.ended else [],
    )


def _save(ctl: BattleController) -> None:
    store_module.store.save(ctl.state)


def _control(ctl: BattleController, res: ControlResult) -> ControlResponse:
    _save(ctl)
    return ControlResponse(
        ok=res.ok, message=res.message, report=res.report, battle=_view(ctl)
    )


@app.get("/")
def index():
    return RedirectResponse(url="/docs", status_code=307)


@app.get("/health")
def health() -> dict[str, Any]:
    kind = "redis" if store_module.REDIS_URL else "memory"
    try:
        connected = store_module.store.ping()
    except Exception:
        logger.warning("store ping failed", exc_info=True)
        connected = False
    return {"ok": connected, "storage": kind, "storage_connected": connected}


## Model-driven examples (avoid bespoke templates)


@app.get("/info")
def defaults_info():
    """Expose schemas and examples for battle creation plus the content tables."""
    allies, enemies = default_demo_roster()
    return {
        "models": {
            "unit": {
                "schema": Unit.model_json_schema(),
                "example": allies[0].model_dump(mode="json"),
            },
            "skill": {
                "schema": Skill.model_json_schema(),
                "example": PRESETS["FLAME_STRIKE"].model_dump(mode="json"),
            },
        },
        "keywords": {k: v.model_dump(mode="json") for k, v in KEYWORDS.items()},
        "skills": {k: v.model_dump(mode="json") for k, v in PRESETS.items()},
        "skill_sets": {k: [s.id for s in v] for k, v in SKILL_SETS.items()},
        "passives": {k: v.model_dump(mode="json") for k, v in PASSIVES.items()},
        "speeds": list(GAME_SPEEDS),
        "targeting": list(TARGETING_POLICIES),
        "requests": {
            "create_battle": {
                "schema": CreateBattleRequest.model_json_schema(),
                "example": CreateBattleRequest(
                    allies=allies, enemies=enemies
                ).model_dump(mode="json"),
            }
        },
    }


@app.get("/battles", response_model=list[BattleView])
def list_battles():
    return [BattleView(id=s.id, state=s) for s in store_module.store.list_all()]


@app.post("/battles", response_model=BattleView)
def create_battle(req: CreateBattleRequest):
    demo_allies, demo_enemies = default_demo_roster()
    allies = req.allies if req.allies is not None else demo_allies
    enemies = req.enemies if req.enemies is not None else demo_enemies
    ctl = BattleController(settings, seed=req.seed, targeting=req.targeting)
    ctl.initialize_units(allies, enemies, auto_mode=req.auto_mode)
    if req.start:
        ctl.start_battle()
    with _register(ctl):
        _save(ctl)
        return _view(ctl)


@app.get("/battles/{bid}", response_model=BattleView)
def get_battle(bid: str):
    with _battle(bid) as ctl:
        return _view(ctl)


@app.delete("/battles/{bid}")
def delete_battle(bid: str) -> dict[str, Any]:
    with _lock:
        _controllers.pop(bid, None)
    if not store_module.store.delete(bid):
        raise BattleNotFoundError(bid)
    return {"deleted": bid}


@app.post("/battles/{bid}/start", response_model=ControlResponse)
def start_battle(bid: str):
    with _battle(bid) as ctl:
        return _control(ctl, ctl.start_battle())


@app.post("/battles/{bid}/pause", response_model=ControlResponse)
def toggle_pause(bid: str):
    with _battle(bid) as ctl:
        return _control(ctl, ctl.toggle_pause())


@app.post("/battles/{bid}/auto", response_model=ControlResponse)
def toggle_auto_mode(bid: str):
    with _battle(bid) as ctl:
        return _control(ctl, ctl.toggle_auto_mode())


@app.post("/battles/{bid}/speed", response_model=ControlResponse)
def set_speed(bid: str, req: SpeedRequest):
    with _battle(bid) as ctl:
        return _control(ctl, ctl.set_speed(req.multiplier))


@app.post("/battles/{bid}/next_turn", response_model=ControlResponse)
def manual_next_turn(bid: str, advance: bool = False):
    with _battle(bid) as ctl:
        return _control(ctl, ctl.manual_next_turn(advance=advance))


@app.post("/battles/{bid}/tick", response_model=TickResponse)
def tick(bid: str, count: int = Query(1, ge=1, le=10_000)):
    with _battle(bid) as ctl:
        reports = []
        for _ in range(count):
            if ctl.state.ended:
                break
            reports.extend(ctl.tick())
        _save(ctl)
        return TickResponse(reports=reports, outcome=ctl.outcome, battle=_view(ctl))


@app.post("/battles/{bid}/run", response_model=TickResponse)
def run_battle(bid: str, max_ticks: int = Query(10_000, ge=1, le=1_000_000)):
    with _battle(bid) as ctl:
        turn_before = ctl.state.turn
        outcome = ctl.run(max_ticks)
        _save(ctl)
        logger.info(
            "battle %s ran %d turns -> %s", bid, ctl.state.turn - turn_before, outcome.value
        )
        return TickResponse(outcome=outcome, battle=_view(ctl))


@app.get("/battles/{bid}/log", response_model=BattleLogResponse)
def get_battle_log(bid: str, limit: int = Query(50, ge=1, le=1000)):
    with _battle(bid) as ctl:
        snapshot = ctl.state.log[-limit:]
    raw = store_module.store.list_logs(bid, limit)
    ta = TypeAdapter(LogEntry)
    entries = [ta.validate_json(s) for s in raw]
    if not entries:
        # another worker may own the log stream; fall back to the snapshot
        entries = snapshot
    return BattleLogResponse(entries=entries)
