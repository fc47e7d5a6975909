from pydantic import BaseModel, ConfigDict, Field

from .enums import PassiveEffectKind, PassiveTrigger


class PassiveAbility(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    trigger: PassiveTrigger
    effect: PassiveEffectKind
    chance: float = Field(1.0, ge=0, le=1)
    pp_cost: int = Field(0, ge=0)
    # multiplier for DAMAGE_MULTIPLIER, damage for COUNTER (None = owner's
    # attack), AP for RECOVER_AP; unused by DODGE
    value: float | None = None
