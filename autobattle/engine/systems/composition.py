from __future__ import annotations

from typing import TYPE_CHECKING

from ...data.keywords import KEYWORDS
from ...errors import UnknownKeywordError
from ...models.keywords import SkillEffects

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ...models.keywords import Keyword


def lookup(
    keyword_ids: Iterable[str], table: Mapping[str, Keyword] | None = None
) -> list[Keyword]:
    table = KEYWORDS if table is None else table
    ids = list(keyword_ids)
    missing = [k for k in ids if k not in table]
    if missing:
        raise UnknownKeywordError(missing)
    return [table[k] for k in ids]


def resolve_ap_cost(
    keyword_ids: Iterable[str], table: Mapping[str, Keyword] | None = None
) -> int:
    return sum(k.ap_cost for k in lookup(keyword_ids, table))


def resolve_power(
    keyword_ids: Iterable[str], table: Mapping[str, Keyword] | None = None
) -> int:
    return sum(k.power for k in lookup(keyword_ids, table))


def reduce_tags(
    keyword_ids: Iterable[str], table: Mapping[str, Keyword] | None = None
) -> SkillEffects:
    """Fold keyword tags into one effect record.

    hits and lifesteal take the largest contribution, flags are OR-ed.
    """
    effects = SkillEffects()
    for kw in lookup(keyword_ids, table):
        t = kw.tags
        effects = SkillEffects(
            hits=max(effects.hits, t.hits or 1),
            ignore_defense=effects.ignore_defense or bool(t.ignore_defense),
            penetration=effects.penetration or bool(t.penetration),
            lifesteal=max(effects.lifesteal, t.lifesteal or 0.0),
            splash=effects.splash or bool(t.splash),
        )
    return effects
