# tests/integration/utils/helpers.py
import json

import requests

from autobattle.models.units import Unit


# ---------- HTTP helpers (show server error bodies) ----------
def _post(url: str, payload: dict | None = None, *, timeout=10, **params) -> dict:
    r = requests.post(url, json=payload, params=params or None, timeout=timeout)
    if r.status_code >= 400:
        try:
            body = r.json()
        except ValueError:
            body = r.text
        raise requests.HTTPError(
            f"{r.status_code} {r.reason} for {url}\n"
            f"Payload:\n{json.dumps(payload, indent=2)}\n"
            f"Response:\n{body}",
            response=r,
        )
    return r.json()


def _get(url: str, *, timeout=10, **params) -> dict:
    r = requests.get(url, params=params or None, timeout=timeout)
    r.raise_for_status()
    return r.json()


# ---------- verify/create helpers ----------
def _units_by_id(battle_json: dict) -> dict[str, dict]:
    st = battle_json["state"]
    return {u["id"]: u for u in [*st["allies"], *st["enemies"]]}


def _hp_of(battle_json: dict, uid: str) -> int:
    return _units_by_id(battle_json)[uid]["hp"]


def _create_battle(
    base_url: str,
    allies: list[Unit],
    enemies: list[Unit],
    **options,
) -> tuple[str, dict]:
    """Create a battle from typed units; returns (id, battle view)."""
    body = {
        "allies": [json.loads(u.model_dump_json()) for u in allies],
        "enemies": [json.loads(u.model_dump_json()) for u in enemies],
        **options,
    }
    view = _post(f"{base_url}/battles", body)
    bid = view["id"]

    # sanity check: ensure server actually used our roster
    present = set(_units_by_id(view))
    wanted = {u.id for u in (*allies, *enemies)}
    assert present == wanted, f"server roster {present} != requested {wanted}"
    return bid, view
