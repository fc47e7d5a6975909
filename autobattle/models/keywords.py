from pydantic import BaseModel, ConfigDict, Field


class KeywordTags(BaseModel):
    """Optional modifiers a keyword contributes on top of cost and power.

    Every field is explicit; ``None`` means the keyword says nothing about it.
    """

    model_config = ConfigDict(frozen=True)

    hits: int | None = Field(None, ge=1)
    ignore_defense: bool | None = None
    penetration: bool | None = None
    lifesteal: float | None = Field(None, ge=0, le=1)
    splash: bool | None = None


class Keyword(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    ap_cost: int = Field(ge=0)
    power: int = Field(ge=0)
    tags: KeywordTags = Field(default_factory=KeywordTags)


class SkillEffects(BaseModel):
    """Aggregate of every keyword tag carried by a skill."""

    model_config = ConfigDict(frozen=True)

    hits: int = Field(1, ge=1)
    ignore_defense: bool = False
    penetration: bool = False
    lifesteal: float = Field(0.0, ge=0, le=1)
    splash: bool = False
