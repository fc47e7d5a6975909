from __future__ import annotations

from types import MappingProxyType

from ..models.keywords import Keyword, KeywordTags


def _kw(id_: str, ap_cost: int, power: int, **tags) -> Keyword:
    return Keyword(id=id_, ap_cost=ap_cost, power=power, tags=KeywordTags(**tags))


_KEYWORDS = [
    # base attacks
    _kw("STRIKE", 2, 10),
    _kw("SLASH", 3, 15),
    _kw("THRUST", 2, 12),
    # elements
    _kw("FLAME", 3, 5),
    _kw("FROST", 3, 6),
    _kw("LIGHTNING", 4, 10),
    # modifiers
    _kw("POWER", 2, 8),
    _kw("SWIFT", 1, 3),
    _kw("HEAVY", 3, 12),
    # support
    _kw("GUARD", 2, 0),
    _kw("HEAL", 4, 15),
    # tagged
    _kw("MULTI", 2, 5, hits=2),
    _kw("PIERCE", 2, 5, ignore_defense=True),
    _kw("BREAK", 2, 3, penetration=True),
    _kw("DRAIN", 2, 4, lifesteal=0.5),
    _kw("SWEEP", 3, 4, splash=True),
]

KEYWORDS: MappingProxyType[str, Keyword] = MappingProxyType(
    {k.id: k for k in _KEYWORDS}
)


def get_keyword(keyword_id: str) -> Keyword | None:
    return KEYWORDS.get(keyword_id)
