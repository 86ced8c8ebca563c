"""Storage of user Elo ratings."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from battlereward.entity import DEFAULT_ELO, UserElo

USER_ELO_KEY = "user-elo"


class EloRepository(ABC):
    """Reads and writes user Elo ratings."""

    @abstractmethod
    def get_user_elo(self, user_id: str) -> UserElo:
        """Return the rating of ``user_id``, the default one if none is stored."""

    @abstractmethod
    def batch_update_elo(self, elos: Iterable[UserElo]) -> None:
        """Store all the given ratings."""


class RedisEloRepo(EloRepository):
    """Keeps ratings as JSON values in one Redis hash keyed by user id."""

    def __init__(self, client: Any) -> None:
        self._client = client

    def get_user_elo(self, user_id: str) -> UserElo:
        data = self._client.hget(USER_ELO_KEY, user_id)
        if data is None:
            return UserElo(user_id=user_id, elo=DEFAULT_ELO)
        payload = json.loads(data)
        if payload is None:
            return UserElo(user_id=user_id, elo=DEFAULT_ELO)
        if not isinstance(payload, dict):
            raise ValueError("stored user elo is not a JSON object")
        present = {key: value for key, value in payload.items() if value is not None}
        return UserElo.from_dict({"userID": user_id, "elo": DEFAULT_ELO, **present})

    def batch_update_elo(self, elos: Iterable[UserElo]) -> None:
        pipe = self._client.pipeline(transaction=False)
        for elo in elos:
            encoded = json.dumps(elo.to_dict(), separators=(",", ":"))
            pipe.hset(USER_ELO_KEY, elo.user_id, encoded)
        pipe.execute()