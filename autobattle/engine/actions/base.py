from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from ...models.enums import SkillKind

if TYPE_CHECKING:
    from ...models.results import SkillResult
    from ...models.skills import Skill
    from ...models.units import Unit
    from ..pipeline import SkillResolver


class ActionHandler(Protocol):
    kind: SkillKind

    def evaluate(
        self, env: SkillResolver, actor: Unit, skill: Skill
    ) -> tuple[bool, str]: ...

    def apply(self, env: SkillResolver, actor: Unit, skill: Skill) -> SkillResult: ...


Registry = dict[SkillKind, ActionHandler]
