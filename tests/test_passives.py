import random

from autobattle.data.passives import BATTLE_SPIRIT, GUARD_REACTION, PASSIVE_SETS
from autobattle.data.skills import BASIC_STRIKE
from autobattle.engine.systems import passives
from autobattle.models.enums import PassiveEffectKind, PassiveTrigger, PresentationEventKind
from autobattle.models.passives import PassiveAbility
from autobattle.models.results import HitContext
from tests.utils.data import ally, battle_of, enemy, resolver_for, sure_passive


def _ctx(damage: int = 10) -> HitContext:
    return HitContext(attacker_id="a", target_id="t", skill_id="s", damage=damage)


def test_dodge_nullifies_hit_and_costs_pp():
    hero = ally("hero")
    rogue = enemy(
        "rogue", max_pp=3, passive=sure_passive(PassiveEffectKind.DODGE, pp_cost=2)
    )
    b = battle_of([hero], [rogue])
    res = resolver_for(b).resolve(hero, BASIC_STRIKE)
    assert res.success
    assert res.dodged
    assert res.total_effect == 0
    assert rogue.hp == 100
    assert rogue.pp == 1
    assert hero.ap == 10 - BASIC_STRIKE.ap_cost
    assert [p.passive_id for p in res.passives] == ["test.dodge"]
    assert any(e.kind == PresentationEventKind.PASSIVE_ACTIVATED for e in res.events)


def test_passive_needs_pp():
    hero = ally("hero")
    rogue = enemy(
        "rogue", max_pp=3, pp=1, passive=sure_passive(PassiveEffectKind.DODGE, pp_cost=2)
    )
    b = battle_of([hero], [rogue])
    res = resolver_for(b).resolve(hero, BASIC_STRIKE)
    assert not res.dodged
    assert rogue.hp == 90
    assert rogue.pp == 1


def test_guard_reaction_scales_damage():
    hero = ally("hero")
    tank = enemy(
        "tank", passive=sure_passive(PassiveEffectKind.DAMAGE_MULTIPLIER, value=0.5)
    )
    b = battle_of([hero], [tank])
    res = resolver_for(b).resolve(hero, BASIC_STRIKE)
    assert res.total_effect == 5


def test_counter_hits_attacker_after_damage():
    hero = ally("hero")
    brawler = enemy(
        "brawler",
        passive=sure_passive(
            PassiveEffectKind.COUNTER, PassiveTrigger.ON_AFTER_HIT, value=10
        ),
    )
    b = battle_of([hero], [brawler])
    res = resolver_for(b).resolve(hero, BASIC_STRIKE)
    assert brawler.hp == 90
    assert res.counter_damage == 10
    assert hero.hp == 90


def test_counter_defaults_to_owner_attack():
    hero = ally("hero")
    brawler = enemy(
        "brawler",
        attack=7,
        passive=sure_passive(PassiveEffectKind.COUNTER, PassiveTrigger.ON_AFTER_HIT),
    )
    b = battle_of([hero], [brawler])
    res = resolver_for(b).resolve(hero, BASIC_STRIKE)
    assert res.counter_damage == 7


def test_no_counter_from_the_dead():
    hero = ally("hero")
    brawler = enemy(
        "brawler",
        hp=5,
        passive=sure_passive(
            PassiveEffectKind.COUNTER, PassiveTrigger.ON_AFTER_HIT, value=10
        ),
    )
    b = battle_of([hero], [brawler])
    res = resolver_for(b).resolve(hero, BASIC_STRIKE)
    assert res.target_died
    assert res.counter_damage == 0
    assert hero.hp == 100


def test_counter_can_kill_attacker():
    hero = ally("hero", hp=5)
    brawler = enemy(
        "brawler",
        passive=sure_passive(
            PassiveEffectKind.COUNTER, PassiveTrigger.ON_AFTER_HIT, value=10
        ),
    )
    b = battle_of([hero], [brawler])
    res = resolver_for(b).resolve(hero, BASIC_STRIKE)
    assert hero.hp == 0
    assert res.deaths == ["hero"]


def test_turn_start_recovers_ap():
    mage = ally(
        "mage",
        ap=0,
        passive=sure_passive(
            PassiveEffectKind.RECOVER_AP, PassiveTrigger.ON_TURN_START, value=1
        ),
    )
    b = battle_of([mage], [enemy("foe")])
    events = resolver_for(b).turn_start(mage)
    assert mage.ap == 1
    assert [e.kind for e in events] == [PresentationEventKind.PASSIVE_ACTIVATED]


def test_invoke_returns_new_context():
    owner = enemy("t", passive=sure_passive(PassiveEffectKind.DODGE))
    ctx = _ctx()
    out = passives.invoke(PassiveTrigger.ON_BEING_HIT, owner, ctx, random.Random(0))
    assert out.dodged and out.damage_multiplier == 0
    assert out.activated == ("test.dodge",)
    assert ctx.dodged is False
    assert ctx.activated == ()


def test_invoke_ignores_other_triggers_and_zero_chance():
    owner = enemy("t", passive=sure_passive(PassiveEffectKind.DODGE))
    ctx = _ctx()
    assert passives.invoke(PassiveTrigger.ON_AFTER_HIT, owner, ctx, random.Random(0)) is ctx

    never = PassiveAbility(
        id="never",
        display_name="Never",
        trigger=PassiveTrigger.ON_BEING_HIT,
        effect=PassiveEffectKind.DODGE,
        chance=0.0,
    )
    owner = enemy("t", passive=never)
    out = passives.invoke(PassiveTrigger.ON_BEING_HIT, owner, ctx, random.Random(0))
    assert out.dodged is False


def test_preset_sets_use_known_effects():
    for p in PASSIVE_SETS.values():
        assert p.effect in passives.default_effects
    assert GUARD_REACTION.value == 0.5
    assert BATTLE_SPIRIT.pp_cost == 1
