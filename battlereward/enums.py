"""Battle outcome enumeration with its text and JSON forms."""

from __future__ import annotations

import json
from enum import IntEnum


class BattleResult(IntEnum):
    """Outcome of a battle for one side."""

    LOSE = -1
    TIE = 0
    WIN = 1

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def from_name(cls, name: str) -> BattleResult:
        """Look a result up by its text name ("lose", "tie", "win")."""
        for member in cls:
            if str(member) == name:
                return member
        raise ValueError(f"{name} is not a valid BattleResult")

    @classmethod
    def from_int(cls, value: int) -> BattleResult:
        """Look a result up by its numeric value."""
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"{value} is not a valid BattleResult") from None

    @classmethod
    def from_json(cls, text: str | bytes) -> BattleResult:
        """Decode a result from a JSON string literal."""
        try:
            name = json.loads(text)
        except ValueError:
            raise ValueError("enums must be strings") from None
        if not isinstance(name, str):
            raise ValueError("enums must be strings")
        return cls.from_name(name)

    def to_json(self) -> str:
        """Encode the result as a JSON string literal."""
        return json.dumps(str(self))