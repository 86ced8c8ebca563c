# battlereward

A small HTTP service that settles the result of a two-player battle and
updates both players' Elo ratings, which are kept in a Redis hash.

## Rules

A player with no stored rating has an Elo of 1000. A battle is between
exactly two teams, and each team has an owner. Once the battle is reported:

- if the winner owns the first or the second team, that player gains 10
  and the other player loses 10;
- if the reported winner owns neither team, the battle counts as a draw
  and both players gain 5.

## Installing

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Running

```
battlereward
```

The command takes no options. It loads the configuration, connects to
Redis and sends it a `PING`; if the configuration cannot be read or the
ping fails, it logs the error and exits with status 1. Otherwise it serves
the API on `0.0.0.0`, port 8080.

### Configuration

Settings are read from `config.yaml` (or `config.yml`, or `config`) in
`./infra/config`. Set `CONFIG_PATH` to read that file from some other
directory. A missing file is an error.

A setting that is present in the file can be overridden by an environment
variable named after its key path, joined with underscores, in upper case,
with an `SVC_` prefix: for example, `SVC_REDIS_HOST` overrides
`redis.host`. Keys that are not in the file are not taken from the
environment.

Setting `ENV_CONFIG_ENABLED` to a true value (`1`, `t`, `true`, ...) skips
the file altogether; no settings are read at all and every option keeps its
default. Any value that is not a valid boolean is an error.

```yaml
http_server:
  addr: ":8080"
redis:
  host: localhost
  port: 6379
  pass: password
  database: 0
  pool_size: 10
  dial_timeout: 5s
  read_timeout: 3s
  # tls_config:
  #   cert_file_path: /path/to/ca.pem
  #   insecure_skip_verify: false
```

How the Redis settings are used:

- `host` falls back to `localhost` when empty; `pass` is sent only when
  non-empty.
- `pool_size`, when above 0, caps the number of connections.
- `read_timeout` and `dial_timeout` are durations such as `500ms`, `3s`,
  `1m` or `2h45m`. Left out or 0, they default to 3s and 5s; a negative
  value means no timeout.
- When `tls_config` is given and `insecure_skip_verify` is false, the CA
  certificate at `cert_file_path` is read (a missing file stops start-up)
  and the connection uses TLS with certificate and host name checks. With
  `insecure_skip_verify` true the connection is plain, without TLS.
- `ttl`, `min_idle_conns`, `write_timeout` and `http_server.addr` are
  accepted and parsed but have no effect; the server always listens on
  port 8080.

## HTTP API

### `GET /ping`

Answers `pong` as plain text.

### `POST /v1/battle/<battle_id>/reward`

The body must be JSON, sent with `Content-Type: application/json`:

```json
{
  "winner": "user_1",
  "teams": [
    {"id": "team_1", "userID": "user_1"},
    {"id": "team_2", "userID": "user_2"}
  ]
}
```

`winner` and `teams` are required, and `teams` must hold exactly two
entries. A body that breaks these rules gets a `400` whose `message` is a
list such as `["winner is required", "teams is required"]` or
`["teams must be equals to 2"]`. A non-empty body sent with another content
type, malformed JSON, or fields of the wrong type also get a `400`, with a
single message string. An empty body counts as a request with no fields.

On success both players' new ratings are stored and the answer is:

```json
{
  "rewards": [
    {"userID": "user_1", "oldElo": 1000, "newElo": 1010, "updatedAt": 1700000000},
    {"userID": "user_2", "oldElo": 1000, "newElo": 990, "updatedAt": 1700000000}
  ]
}
```

`updatedAt` is the Unix time, in seconds, at which the request was handled.
Errors from Redis give a `500` with `{"message": "Internal Server Error"}`;
unknown routes give a JSON `404`. The `battle_id` in the path is not used.

### Storage

Ratings live in the Redis hash `user-elo`, one field per user id, each
value a JSON object such as `{"userID":"user_1","elo":1010}`.

## Using it as a library

- `battlereward.server.create_app(reward_service)` builds the Flask
  application; `battlereward.server.main` is the command above.
- `battlereward.service.RewardService(repo)` handles a request body with
  `create_reward(body, content_type)` and returns a
  `battlereward.api.Rewards`, raising `battlereward.api.HTTPError` for bad
  requests. `calculate_elo(user_elos, winner_idx)` applies the rating rules
  to two `battlereward.entity.UserElo` values without touching storage, and
  `list_user_elos(teams)` fetches the current ratings.
- `battlereward.repo.EloRepository` is the storage interface;
  `battlereward.repo.RedisEloRepo(client)` is the Redis-backed one. A
  repository of your own, such as an in-memory one for tests, works just
  as well.
- `battlereward.config` has `read_settings`, `load_config`, the `Config`
  dataclasses and `parse_duration`; `battlereward.redis_client` has
  `build_connection_kwargs` and `connect_redis`.
- `battlereward.enums.BattleResult` is an enumeration of battle outcomes
  (`lose`, `tie`, `win`) with name, integer and JSON conversions; the
  service does not use it.