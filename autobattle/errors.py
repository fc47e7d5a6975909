from __future__ import annotations


class BattleError(Exception):
    """Base class for every error raised by the battle engine."""


class UnknownKeywordError(BattleError):
    def __init__(self, keyword_ids: list[str]):
        self.keyword_ids = list(keyword_ids)
        super().__init__(f"unknown keyword(s): {', '.join(self.keyword_ids)}")


class EmptyRosterError(BattleError):
    def __init__(self, team: str):
        self.team = team
        super().__init__(f"{team} roster is empty")


class InsufficientApError(BattleError):
    def __init__(self, unit_id: str, ap: int, ap_cost: int):
        self.unit_id = unit_id
        self.ap = ap
        self.ap_cost = ap_cost
        super().__init__(f"{unit_id} has {ap} AP, skill needs {ap_cost}")


class DeadUnitActsError(BattleError):
    def __init__(self, unit_id: str):
        self.unit_id = unit_id
        super().__init__(f"{unit_id} is dead and cannot act")


class BattleNotFoundError(BattleError):
    def __init__(self, battle_id: str):
        self.battle_id = battle_id
        super().__init__(f"battle {battle_id} not found")
