import json
import time

import pytest

from battlereward.api import HTTPError
from battlereward.entity import Team, UserElo, new_user_default_elo
from battlereward.repo import EloRepository
from battlereward.service import RewardService

DEFAULT_ELO = 1000
INTERNAL = HTTPError(500)


class FakeRepo(EloRepository):
    def __init__(self, results=None, get_error=None, update_error=None):
        self.results = results
        self.get_error = get_error
        self.update_error = update_error
        self.requested = []
        self.updates = []

    def get_user_elo(self, user_id):
        self.requested.append(user_id)
        if self.results is not None:
            outcome = self.results[user_id]
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        if self.get_error is not None:
            raise self.get_error
        return new_user_default_elo(user_id)

    def batch_update_elo(self, elos):
        self.updates.append([elo.clone() for elo in elos])
        if self.update_error is not None:
            raise self.update_error


def _body(winner, teams):
    return json.dumps(
        {"winner": winner, "teams": None if teams is None else [t.to_dict() for t in teams]}
    ).encode()


TWO_TEAMS = [Team(id="team_1", owner="user_1"), Team(id="team_2", owner="user_2")]


def test_required_validation_fails():
    svc = RewardService(FakeRepo())
    with pytest.raises(HTTPError) as info:
        svc.create_reward(_body("", None), "application/json")
    expected = HTTPError(400, ["winner is required", "teams is required"])
    assert str(info.value) == str(expected)
    assert info.value.status == 400


def test_teams_not_equal_to_two():
    svc = RewardService(FakeRepo())
    with pytest.raises(HTTPError) as info:
        svc.create_reward(_body("user_1", [Team(id="team_1", owner="user_1")]), "application/json")
    assert str(info.value) == str(HTTPError(400, ["teams must be equals to 2"]))


def test_cannot_bind_without_content_type():
    svc = RewardService(FakeRepo())
    with pytest.raises(HTTPError) as info:
        svc.create_reward(_body("", None), "")
    expected = HTTPError(400, "code=415, message=Unsupported Media Type")
    assert str(info.value) == str(expected)


def test_invalid_json_is_bad_request():
    svc = RewardService(FakeRepo())
    with pytest.raises(HTTPError) as info:
        svc.create_reward(b"{not json", "application/json")
    assert info.value.status == 400


@pytest.mark.parametrize(
    "winner, new_elos",
    [
        ("user_1", (DEFAULT_ELO + 10, DEFAULT_ELO - 10)),
        ("user_2", (DEFAULT_ELO - 10, DEFAULT_ELO + 10)),
        ("draw", (DEFAULT_ELO + 5, DEFAULT_ELO + 5)),
    ],
)
def test_successful_create_reward(winner, new_elos):
    repo = FakeRepo()
    svc = RewardService(repo)
    before = int(time.time())
    result = svc.create_reward(_body(winner, TWO_TEAMS), "application/json")
    after = int(time.time())

    assert before <= result.items[0].updated_at <= after
    for item in result.items:
        item.updated_at = 0
    assert result.to_dict() == {
        "rewards": [
            {"userID": "user_1", "oldElo": DEFAULT_ELO, "newElo": new_elos[0], "updatedAt": 0},
            {"userID": "user_2", "oldElo": DEFAULT_ELO, "newElo": new_elos[1], "updatedAt": 0},
        ]
    }
    assert repo.requested == ["user_1", "user_2"]
    assert repo.updates == [
        [UserElo(user_id="user_1", elo=new_elos[0]), UserElo(user_id="user_2", elo=new_elos[1])]
    ]


def test_failed_to_get_user_elo():
    repo = FakeRepo(get_error=INTERNAL)
    svc = RewardService(repo)
    with pytest.raises(HTTPError) as info:
        svc.create_reward(_body("draw", TWO_TEAMS), "application/json")
    assert str(info.value) == str(HTTPError(500))
    assert repo.updates == []


def test_failed_to_batch_update_elo():
    repo = FakeRepo(update_error=INTERNAL)
    svc = RewardService(repo)
    with pytest.raises(HTTPError) as info:
        svc.create_reward(_body("user_1", TWO_TEAMS), "application/json")
    assert str(info.value) == str(HTTPError(500))
    assert repo.updates == [
        [UserElo(user_id="user_1", elo=DEFAULT_ELO + 10), UserElo(user_id="user_2", elo=DEFAULT_ELO - 10)]
    ]


def test_uses_clock_for_updated_at():
    svc = RewardService(FakeRepo(), clock=lambda: 1700000000.9)
    result = svc.create_reward(_body("user_1", TWO_TEAMS), "application/json")
    assert [item.updated_at for item in result.items] == [1700000000, 1700000000]


@pytest.mark.parametrize(
    "elos, winner_idx, want",
    [
        ((1000, 1200), 0, (1005, 1205)),
        ((1000, 1200), 1, (1010, 1190)),
        ((1000, 1200), 2, (990, 1210)),
        ((0, 0), 1, (10, -10)),
        ((-50, -30), 2, (-60, -20)),
        ((2500, 2800), 0, (2505, 2805)),
        ((1000, 1200), -1, (1000, 1200)),
    ],
)
def test_calculate_elo(elos, winner_idx, want):
    svc = RewardService(FakeRepo())
    user_elos = [UserElo(user_id="user_1", elo=elos[0]), UserElo(user_id="user_2", elo=elos[1])]
    result = svc.calculate_elo(user_elos, winner_idx)
    assert result == [UserElo(user_id="user_1", elo=want[0]), UserElo(user_id="user_2", elo=want[1])]
    assert [e.elo for e in user_elos] == list(elos)


def test_list_user_elos_success():
    repo = FakeRepo(
        results={
            "user_1": UserElo(user_id="user_1", elo=1000),
            "user_2": UserElo(user_id="user_2", elo=1000),
        }
    )
    svc = RewardService(repo)
    result = svc.list_user_elos([Team(owner="user_1"), Team(owner="user_2")])
    assert result == [UserElo(user_id="user_1", elo=1000), UserElo(user_id="user_2", elo=1000)]


def test_list_user_elos_single_team():
    repo = FakeRepo(results={"user_1": UserElo(user_id="user_1", elo=1000)})
    svc = RewardService(repo)
    assert svc.list_user_elos([Team(owner="user_1")]) == [UserElo(user_id="user_1", elo=1000)]


@pytest.mark.parametrize("teams", [[], None])
def test_list_user_elos_empty(teams):
    repo = FakeRepo()
    svc = RewardService(repo)
    assert svc.list_user_elos(teams) == []
    assert repo.requested == []


def test_list_user_elos_error_from_repository():
    repo = FakeRepo(
        results={
            "user_1": UserElo(user_id="user_1", elo=1000),
            "user_2": RuntimeError("redis connection failed"),
        }
    )
    svc = RewardService(repo)
    with pytest.raises(RuntimeError, match="^redis connection failed$"):
        svc.list_user_elos([Team(owner="user_1"), Team(owner="user_2")])


def test_list_user_elos_error_on_first_user():
    repo = FakeRepo(results={"user_1": RuntimeError("user not found")})
    svc = RewardService(repo)
    with pytest.raises(RuntimeError, match="^user not found$"):
        svc.list_user_elos([Team(owner="user_1"), Team(owner="user_2")])
    assert repo.requested == ["user_1"]