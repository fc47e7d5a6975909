# tests/integration/test_api_battles.py
import pytest
import requests

from tests.integration.utils.helpers import _create_battle, _get, _hp_of, _post
from tests.utils.data import duelists, strike_flame


# ---------- tests ----------
@pytest.mark.timeout(30)
def test_health_and_info(http):
    r = http.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    assert body["storage"] == "memory"

    info = http.get("/info").json()
    assert info["keywords"]["FLAME"]["power"] == 5
    assert info["skills"]["SWIFT_MULTI"]["effects"]["hits"] == 2
    assert info["speeds"] == [1, 2, 4, 8]
    assert "WAIT" in info["skill_sets"]["WARRIOR"]
    assert "lowest_hp" in info["targeting"]


@pytest.mark.timeout(60)
def test_demo_battle_runs_to_the_end(base_url: str, http):
    view = http.create_battle({"seed": 4})
    bid = view["id"]
    assert len(view["state"]["allies"]) == 3
    assert view["state"]["started"] is False
    assert len(view["upcoming"]) == 5

    res = _post(f"{base_url}/battles/{bid}/run", max_ticks=100_000)
    assert res["outcome"] in ("victory", "defeat", "draw")

    again = _get(f"{base_url}/battles/{bid}")
    assert again["state"]["outcome"] == res["outcome"]
    assert again["upcoming"] == []

    log = _get(f"{base_url}/battles/{bid}/log", limit=5)["entries"]
    assert 0 < len(log) <= 5
    assert log[-1]["message"].startswith("battle over")

    assert bid in [b["id"] for b in http.get("/battles").json()]


@pytest.mark.timeout(30)
def test_duel_over_http(base_url: str):
    allies, enemies = duelists([strike_flame()], foe_hp=100)
    bid, view = _create_battle(base_url, allies, enemies, auto_mode=False)

    res = _post(f"{base_url}/battles/{bid}/next_turn")
    assert res["ok"] is False
    assert res["message"] == "no unit is ready"

    res = _post(f"{base_url}/battles/{bid}/next_turn", advance="true")
    assert res["ok"] is True
    assert res["report"]["actor_id"] == "hero"
    assert res["report"]["result"]["total_effect"] == 15
    assert _hp_of(res["battle"], "foe") == 85


@pytest.mark.timeout(30)
def test_controls(base_url: str):
    allies, enemies = duelists([strike_flame()], foe_hp=100)
    bid, _ = _create_battle(base_url, allies, enemies, start=True)

    bad = _post(f"{base_url}/battles/{bid}/speed", {"multiplier": 3})
    assert bad["ok"] is False
    assert bad["battle"]["state"]["game_speed"] == 1
    ok = _post(f"{base_url}/battles/{bid}/speed", {"multiplier": 4})
    assert ok["ok"] is True
    assert ok["battle"]["state"]["game_speed"] == 4

    paused = _post(f"{base_url}/battles/{bid}/pause")
    assert paused["message"] == "paused"
    ticked = _post(f"{base_url}/battles/{bid}/tick", count=10)
    assert ticked["battle"]["state"]["ticks"] == 0
    _post(f"{base_url}/battles/{bid}/pause")

    # 20 speed * 0.05 * 4 = 4 charge per tick
    ticked = _post(f"{base_url}/battles/{bid}/tick", count=25)
    assert [r["actor_id"] for r in ticked["reports"]] == ["hero"]

    manual = _post(f"{base_url}/battles/{bid}/auto")
    assert manual["message"] == "manual"
    assert manual["battle"]["state"]["auto_mode"] is False


@pytest.mark.timeout(30)
def test_bad_requests(base_url: str, http):
    allies, enemies = duelists([strike_flame()])
    r = http.post("/battles", {"allies": [], "enemies": [enemies[0].model_dump(mode="json")]})
    assert r.status_code == 400

    body = {
        "allies": [
            {"id": "hero", "skills": [{"id": "BAD", "keywords": ["STRIKE", "NOPE"]}]}
        ],
        "enemies": [enemies[0].model_dump(mode="json")],
    }
    r = http.post("/battles", body)
    assert r.status_code == 400
    assert "NOPE" in r.json()["detail"]

    r = http.post("/battles", {"targeting": "psychic"})
    assert r.status_code == 400

    assert http.get("/battles/missing").status_code == 404
    assert http.post("/battles/missing/start").status_code == 404
    assert http.delete("/battles/missing").status_code == 404


@pytest.mark.timeout(30)
def test_delete_battle(base_url: str, http):
    bid = http.create_battle()["id"]
    assert http.delete(f"/battles/{bid}").json() == {"deleted": bid}
    with pytest.raises(requests.HTTPError):
        _get(f"{base_url}/battles/{bid}")
