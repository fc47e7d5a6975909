import pytest

from autobattle.data.rosters.demo import default_demo_roster
from autobattle.engine.core import BattleController
from autobattle.engine.systems.targeting import LowestHpTargeting, RandomTargeting
from autobattle.models.enums import BattleOutcome, Team, UnitPhase
from tests.utils.data import ally, battle_of, enemy


class CheckedTargeting:
    """Wraps a policy and records every pick."""

    def __init__(self, inner):
        self.inner = inner
        self.picks = []

    def select(self, actor, skill, battle):
        target = self.inner.select(actor, skill, battle)
        if target is not None:
            self.picks.append((target.id, target.is_alive))
        return target


def _check_units(ctl):
    for u in ctl.state.roster():
        assert 0 <= u.hp <= u.max_hp
        assert 0 <= u.ap <= u.max_ap
        assert 0 <= u.pp <= u.max_pp
        assert u.charge >= 0
        if not u.is_alive:
            assert u.phase == UnitPhase.DEAD


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 17, 99])
def test_demo_battles_hold_invariants(seed):
    ctl = BattleController(seed=seed)
    inner = RandomTargeting(ctl.rng) if seed % 2 else LowestHpTargeting()
    checked = CheckedTargeting(inner)
    ctl.targeting = checked
    ctl.initialize_units(*default_demo_roster())
    ctl.start_battle()

    dead_seen: set[str] = set()
    for _ in range(ctl.settings.max_ticks):
        if ctl.state.ended:
            break
        reports = ctl.tick()
        _check_units(ctl)
        assert ctl.state.acting_unit_id is None
        for r in reports:
            assert r.actor_id not in dead_seen
        dead_seen |= {u.id for u in ctl.state.roster() if not u.is_alive}

    assert ctl.outcome in (BattleOutcome.VICTORY, BattleOutcome.DEFEAT, BattleOutcome.DRAW)
    assert checked.picks
    assert all(alive for _, alive in checked.picks)


def test_turn_counter_matches_reports():
    ctl = BattleController(seed=8)
    ctl.initialize_units(*default_demo_roster())
    ctl.start_battle()
    reports = []
    while not ctl.state.ended and ctl.state.ticks < ctl.settings.max_ticks:
        reports.extend(ctl.tick())
    assert [r.turn for r in reports] == list(range(1, ctl.state.turn + 1))
    assert reports[-1].outcome == ctl.outcome


def test_battle_lookups_by_team_and_id():
    b = battle_of([ally("a1"), ally("a2", slot=1, hp=0)], [enemy("e1")])
    assert [u.id for u in b.living(Team.ALLY)] == ["a1"]
    assert [u.id for u in b.living()] == ["a1", "e1"]
    assert b.unit("a2").hp == 0
    assert b.unit("ghost") is None
    assert not hasattr(b, "team_of")
