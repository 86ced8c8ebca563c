"""Request and response models of the reward API."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

from battlereward.entity import Team


class HTTPError(Exception):
    """An error that maps onto an HTTP response status."""

    def __init__(self, status: int, message: Any = None) -> None:
        if message is None:
            message = HTTPStatus(status).phrase
        super().__init__(status, message)
        self.status = status
        self.message = message

    def __str__(self) -> str:
        message = self.message
        if isinstance(message, (list, tuple)):
            message = "[" + " ".join(map(str, message)) + "]"
        return f"code={self.status}, message={message}"


@dataclass
class Reward:
    """A user's Elo change after a battle."""

    user_id: str
    old_elo: int
    new_elo: int
    updated_at: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "userID": self.user_id,
            "oldElo": self.old_elo,
            "newElo": self.new_elo,
            "updatedAt": self.updated_at,
        }


@dataclass
class Rewards:
    """The rewards of all users in a battle."""

    items: list[Reward] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"rewards": [item.to_dict() for item in self.items]}


@dataclass
class CreateRewardRequest:
    """Body of a create-reward request."""

    winner: str = ""
    teams: list[Team] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> CreateRewardRequest:
        if not isinstance(data, Mapping):
            raise ValueError("request body must be a JSON object")
        winner = data.get("winner") or ""
        if not isinstance(winner, str):
            raise ValueError("winner must be a string")
        raw_teams = data.get("teams")
        if raw_teams is not None and not isinstance(raw_teams, list):
            raise ValueError("teams must be an array")
        teams = None if raw_teams is None else [Team.from_dict(item) for item in raw_teams]
        return cls(winner=winner, teams=teams)

    def validate(self) -> None:
        """Raise a 400 HTTPError listing every rule the request breaks."""
        errors = []
        if not self.winner:
            errors.append("winner is required")
        if self.teams is None:
            errors.append("teams is required")
        elif len(self.teams) != 2:
            errors.append("teams must be equals to 2")
        if errors:
            raise HTTPError(HTTPStatus.BAD_REQUEST, errors)

    def winner_index(self) -> int:
        """Return 0 for a draw, 1 if the first team won, 2 if the second did."""
        assert self.teams is not None
        owners = [team.owner for team in self.teams[:2]]
        return owners.index(self.winner) + 1 if self.winner in owners else 0