from enum import Enum


class Team(str, Enum):
    ALLY = "ally"
    ENEMY = "enemy"


class SkillKind(str, Enum):
    ATTACK = "attack"
    HEAL = "heal"
    DEFEND = "defend"
    WAIT = "wait"


class TargetKind(str, Enum):
    ENEMY = "enemy"
    ALLY = "ally"
    SELF = "self"


class PassiveTrigger(str, Enum):
    ON_BEING_HIT = "on_being_hit"
    ON_AFTER_HIT = "on_after_hit"
    ON_TURN_START = "on_turn_start"


class PassiveEffectKind(str, Enum):
    """
    What a passive does once its chance roll succeeds:
    - DAMAGE_MULTIPLIER: scale the incoming hit (guard reaction)
    - DODGE: nullify the incoming hit, reported as a miss
    - COUNTER: deal fixed damage back to the attacker
    - RECOVER_AP: restore AP to the owner at the start of its turn
    """

    DAMAGE_MULTIPLIER = "damage_multiplier"
    DODGE = "dodge"
    COUNTER = "counter"
    RECOVER_AP = "recover_ap"


class UnitPhase(str, Enum):
    CHARGING = "charging"
    READY = "ready"
    ACTING = "acting"
    DEAD = "dead"


class BattleOutcome(str, Enum):
    IN_PROGRESS = "in_progress"
    VICTORY = "victory"
    DEFEAT = "defeat"
    DRAW = "draw"


class LogCategory(str, Enum):
    SYSTEM = "system"
    ACTION = "action"
    DAMAGE = "damage"
    HEAL = "heal"
    PASSIVE = "passive"
    DEATH = "death"
    REJECTED = "rejected"
    ERROR = "error"


class PresentationEventKind(str, Enum):
    ACTION_ANNOUNCED = "action_announced"
    DAMAGE = "damage"
    HEAL = "heal"
    DEATH = "death"
    PASSIVE_ACTIVATED = "passive_activated"


GAME_SPEEDS: tuple[int, ...] = (1, 2, 4, 8)
