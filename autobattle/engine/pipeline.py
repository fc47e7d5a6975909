from __future__ import annotations

import random
from typing import TYPE_CHECKING

from ..config import DEFAULT_SETTINGS
from ..errors import BattleError, DeadUnitActsError, InsufficientApError
from ..models.enums import LogCategory, PassiveTrigger, PresentationEventKind, SkillKind
from ..models.results import HitContext, PassiveActivation, PresentationEvent, SkillResult
from .actions.attack import AttackHandler
from .actions.defend import DefendHandler
from .actions.heal import HealHandler
from .actions.wait import WaitHandler
from .logging.logger import log_event
from .systems import combat, passives, targeting

if TYPE_CHECKING:
    from ..config import BattleSettings
    from ..models.battle import BattleState
    from ..models.skills import Skill
    from ..models.units import Unit
    from .actions.base import Registry
    from .systems.passives import PassiveRegistry
    from .systems.targeting import TargetingPolicy

NO_TARGET = "no_target"

default_handlers: Registry = {
    AttackHandler.kind: AttackHandler(),
    HealHandler.kind: HealHandler(),
    DefendHandler.kind: DefendHandler(),
    WaitHandler.kind: WaitHandler(),
}


class SkillResolver:
    """Applies one skill for one acting unit and reports what happened.

    Every unit stat change of a battle goes through here. Handlers record
    presentation events on the result instead of calling out, so the
    caller can run hooks once the state is final.
    """

    def __init__(
        self,
        battle: BattleState,
        *,
        settings: BattleSettings | None = None,
        rng: random.Random | None = None,
        targeting_policy: TargetingPolicy | None = None,
        handlers: Registry | None = None,
        passive_effects: PassiveRegistry | None = None,
    ):
        self.battle = battle
        self.settings = settings or DEFAULT_SETTINGS
        self.rng = rng or random.Random(self.settings.seed)
        self.targeting = targeting_policy or targeting.LowestHpTargeting()
        self.handlers: Registry = handlers or default_handlers
        self.passive_effects = passive_effects or passives.default_effects

    # ----- entry points -----

    def precondition(self, actor: Unit, skill: Skill) -> BattleError | None:
        if not actor.is_alive:
            return DeadUnitActsError(actor.id)
        if actor.ap < skill.ap_cost:
            return InsufficientApError(actor.id, actor.ap, skill.ap_cost)
        return None

    def evaluate(self, actor: Unit, skill: Skill) -> tuple[bool, str]:
        err = self.precondition(actor, skill)
        if err is not None:
            return False, str(err)
        h = self.handlers.get(skill.kind)
        if not h:
            return False, f"no handler for {skill.kind.value}"
        return h.evaluate(self, actor, skill)

    def resolve(self, actor: Unit, skill: Skill) -> SkillResult:
        err = self.precondition(actor, skill)
        if err is not None:
            raise err
        return self.handlers[skill.kind].apply(self, actor, skill)

    def turn_start(self, unit: Unit) -> list[PresentationEvent]:
        """Fire ``on_turn_start`` passives for a unit about to act."""
        ctx = HitContext(
            attacker_id=unit.id, target_id=unit.id, skill_id="", damage=0
        )
        ctx, _, events = self.fire_passive(PassiveTrigger.ON_TURN_START, unit, ctx)
        if ctx.ap_bonus:
            gained = combat.recover_ap(unit, ctx.ap_bonus)
            log_event(self.battle, f"{unit.name} recovers {gained} AP", LogCategory.PASSIVE)
        return events

    # ----- helpers shared by the handlers -----

    def has_target(self, actor: Unit, skill: Skill) -> bool:
        return bool(targeting.candidates(actor, skill, self.battle))

    def select_target(self, actor: Unit, skill: Skill) -> Unit | None:
        target = self.targeting.select(actor, skill, self.battle)
        if target is not None and not target.is_alive:
            return None
        return target

    def start_result(self, actor: Unit, skill: Skill, **extra) -> SkillResult:
        return SkillResult(
            success=True,
            kind=skill.kind,
            actor_id=actor.id,
            skill_id=skill.id,
            events=[
                PresentationEvent(
                    kind=PresentationEventKind.ACTION_ANNOUNCED,
                    unit_id=actor.id,
                    skill_id=skill.id,
                    ap_cost=skill.ap_cost,
                )
            ],
            **extra,
        )

    def no_target(self, actor: Unit, skill: Skill) -> SkillResult:
        log_event(
            self.battle,
            f"{actor.name} tries {skill.name} but has no target",
            LogCategory.ACTION,
        )
        return SkillResult(
            success=False,
            kind=skill.kind,
            reason=NO_TARGET,
            actor_id=actor.id,
            skill_id=skill.id,
        )

    def fire_passive(
        self,
        trigger: PassiveTrigger,
        owner: Unit,
        ctx: HitContext,
        result: SkillResult | None = None,
    ) -> tuple[HitContext, list[PassiveActivation], list[PresentationEvent]]:
        before = len(ctx.activated)
        ctx = passives.invoke(trigger, owner, ctx, self.rng, self.passive_effects)
        fired: list[PassiveActivation] = []
        events: list[PresentationEvent] = []
        for passive_id in ctx.activated[before:]:
            passive = owner.passive
            combat.spend_pp(owner, passive.pp_cost)
            fired.append(
                PassiveActivation(
                    unit_id=owner.id,
                    passive_id=passive_id,
                    display_name=passive.display_name,
                    pp_spent=passive.pp_cost,
                )
            )
            events.append(
                PresentationEvent(
                    kind=PresentationEventKind.PASSIVE_ACTIVATED,
                    unit_id=owner.id,
                    passive_id=passive_id,
                )
            )
            log_event(
                self.battle,
                f"{owner.name}'s {passive.display_name} activates",
                LogCategory.PASSIVE,
            )
        if result is not None:
            result.passives.extend(fired)
            result.events.extend(events)
        return ctx, fired, events

    def record_damage(
        self, result: SkillResult, target: Unit, amount: int, is_critical: bool = False
    ) -> None:
        result.events.append(
            PresentationEvent(
                kind=PresentationEventKind.DAMAGE,
                unit_id=target.id,
                amount=amount,
                is_critical=is_critical,
            )
        )
        if not target.is_alive and target.id not in result.deaths:
            result.deaths.append(target.id)
            result.events.append(
                PresentationEvent(kind=PresentationEventKind.DEATH, unit_id=target.id)
            )
            log_event(self.battle, f"{target.name} falls", LogCategory.DEATH)

    def record_heal(self, result: SkillResult, target: Unit, amount: int) -> None:
        result.events.append(
            PresentationEvent(
                kind=PresentationEventKind.HEAL, unit_id=target.id, amount=amount
            )
        )


def resolve(battle: BattleState, actor: Unit, skill: Skill, **kwargs) -> SkillResult:
    return SkillResolver(battle, **kwargs).resolve(actor, skill)
