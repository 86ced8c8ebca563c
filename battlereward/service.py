"""The reward use case: turn a battle result into Elo changes."""

from __future__ import annotations

import json
import time
from collections.abc import Callable, Iterable
from http import HTTPStatus

from battlereward.api import CreateRewardRequest, HTTPError, Reward, Rewards
from battlereward.entity import Team, UserElo
from battlereward.repo import EloRepository

JSON_MIME = "application/json"

# Elo changes (first team, second team) for each winner index.
_ELO_DELTAS = {
    0: (5, 5),
    1: (10, -10),
    2: (-10, 10),
}


def _bind_request(body: bytes | str | None, content_type: str | None) -> CreateRewardRequest:
    """Decode a request body; an empty body gives an empty request."""
    if not body:
        return CreateRewardRequest()
    if not (content_type or "").startswith(JSON_MIME):
        raise HTTPError(HTTPStatus.UNSUPPORTED_MEDIA_TYPE.value)
    try:
        data = json.loads(body)
    except ValueError as exc:
        raise HTTPError(HTTPStatus.BAD_REQUEST.value, f"Syntax error: {exc}") from exc
    if data is None:
        return CreateRewardRequest()
    try:
        return CreateRewardRequest.from_dict(data)
    except ValueError as exc:
        raise HTTPError(HTTPStatus.BAD_REQUEST.value, f"Unmarshal type error: {exc}") from exc


class RewardService:
    """Calculates and stores new Elo ratings after a battle."""

    def __init__(self, repo: EloRepository, clock: Callable[[], float] = time.time) -> None:
        self._repo = repo
        self._clock = clock

    def create_reward(self, body: bytes | str | None, content_type: str | None) -> Rewards:
        """Handle a create-reward request body and return the users' rewards.

        Raises HTTPError for a body that cannot be decoded or is invalid;
        errors of the repository propagate unchanged.
        """
        updated_at = int(self._clock())
        try:
            request = _bind_request(body, content_type)
        except HTTPError as exc:
            raise HTTPError(HTTPStatus.BAD_REQUEST.value, str(exc)) from exc

        request.validate()

        user_elos = self.list_user_elos(request.teams)
        new_user_elos = self.calculate_elo(user_elos, request.winner_index())
        rewards = Rewards(
            items=[
                Reward(
                    user_id=new.user_id,
                    old_elo=old.elo,
                    new_elo=new.elo,
                    updated_at=updated_at,
                )
                for new, old in zip(new_user_elos, user_elos)
            ]
        )
        self._repo.batch_update_elo(new_user_elos)
        return rewards

    def list_user_elos(self, teams: Iterable[Team] | None) -> list[UserElo]:
        """Return the current rating of each team's owner, in team order."""
        return [self._repo.get_user_elo(team.owner) for team in teams or ()]

    def calculate_elo(self, user_elos: list[UserElo], winner_idx: int) -> list[UserElo]:
        """Return new ratings of the two users; the inputs are left untouched.

        ``winner_idx`` is 0 for a draw, 1 or 2 for the winning team; any other
        value leaves the ratings as they are.
        """
        first, second = (elo.clone() for elo in user_elos[:2])
        first_delta, second_delta = _ELO_DELTAS.get(winner_idx, (0, 0))
        first.elo += first_delta
        second.elo += second_delta
        return [first, second]