from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..engine.systems.composition import lookup, reduce_tags
from .enums import SkillKind, TargetKind
from .keywords import SkillEffects


class Skill(BaseModel):
    """A named action composed from keywords.

    ``ap_cost``, ``power`` and ``effects`` are always derived from
    ``keywords`` while validating; values passed in for them are ignored.
    An unknown keyword raises ``UnknownKeywordError`` straight out of the
    constructor.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    keywords: tuple[str, ...] = ()
    priority: int = 50  # lower = picked first
    kind: SkillKind = SkillKind.ATTACK
    target: TargetKind = TargetKind.ENEMY
    ap_cost: int = 0
    power: int = 0
    effects: SkillEffects = Field(default_factory=SkillEffects)

    @model_validator(mode="before")
    @classmethod
    def _derive_from_keywords(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        ids = tuple(data.get("keywords") or ())
        kws = lookup(ids)
        return {
            **data,
            "keywords": ids,
            "name": data.get("name") or data.get("id", ""),
            "ap_cost": sum(k.ap_cost for k in kws),
            "power": sum(k.power for k in kws),
            "effects": reduce_tags(ids),
        }


def compose(
    id_: str,
    keywords: list[str] | tuple[str, ...],
    *,
    priority: int = 50,
    kind: SkillKind = SkillKind.ATTACK,
    target: TargetKind | None = None,
    name: str | None = None,
) -> Skill:
    if target is None:
        target = {
            SkillKind.ATTACK: TargetKind.ENEMY,
            SkillKind.HEAL: TargetKind.ALLY,
        }.get(kind, TargetKind.SELF)
    return Skill(
        id=id_,
        name=name or id_,
        keywords=tuple(keywords),
        priority=priority,
        kind=kind,
        target=target,
    )
