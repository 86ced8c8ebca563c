"""Domain entities: teams taking part in a battle and users' Elo ratings."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

DEFAULT_ELO = 1000


def _field(data: Any, key: str, kind: type, default: Any) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError("expected a JSON object")
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, kind):
        raise ValueError(f"{key} must be of type {kind.__name__}")
    return value


@dataclass
class Team:
    """A team in a battle, identified by its owner."""

    id: str = ""
    owner: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> Team:
        return cls(id=_field(data, "id", str, ""), owner=_field(data, "userID", str, ""))

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "userID": self.owner}


@dataclass
class UserElo:
    """The Elo rating of one user."""

    user_id: str
    elo: int = DEFAULT_ELO

    def clone(self) -> UserElo:
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        return {"userID": self.user_id, "elo": self.elo}

    @classmethod
    def from_dict(cls, data: Any) -> UserElo:
        """Build a rating from its JSON object form; absent fields are zero."""
        return cls(user_id=_field(data, "userID", str, ""), elo=_field(data, "elo", int, 0))


def new_user_default_elo(user_id: str) -> UserElo:
    return UserElo(user_id=user_id, elo=DEFAULT_ELO)