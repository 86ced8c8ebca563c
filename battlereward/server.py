"""HTTP server exposing the reward API, and the service's entry point."""

from __future__ import annotations

import argparse
import json
import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, request

from battlereward.api import HTTPError
from battlereward.config import load_config, read_settings
from battlereward.redis_client import connect_redis
from battlereward.repo import RedisEloRepo
from battlereward.service import RewardService

logger = logging.getLogger(__name__)

LISTEN_HOST = "0.0.0.0"
LISTEN_PORT = 8080


def _json_response(app: Flask, payload: Any, status: int) -> Response:
    return app.response_class(
        json.dumps(payload) + "\n", status=status, mimetype="application/json"
    )


def create_app(reward_service: RewardService) -> Flask:
    """Build the web application serving ``reward_service``."""
    app = Flask(__name__)

    @app.get("/ping")
    def ping() -> Response:
        return app.response_class("pong", status=HTTPStatus.OK.value, mimetype="text/plain")

    @app.post("/v1/battle/<battle_id>/reward")
    def create_reward(battle_id: str) -> Response:
        result = reward_service.create_reward(request.get_data(), request.content_type or "")
        return _json_response(app, result.to_dict(), HTTPStatus.OK.value)

    @app.errorhandler(Exception)
    def handle_error(exc: Exception) -> Response:
        if isinstance(exc, HTTPError):
            return _json_response(app, {"message": exc.message}, int(exc.status))
        code = getattr(exc, "code", None)
        if isinstance(code, int) and 400 <= code < 600:
            return _json_response(app, {"message": HTTPStatus(code).phrase}, code)
        logger.exception("unhandled error")
        status = HTTPStatus.INTERNAL_SERVER_ERROR
        return _json_response(app, {"message": status.phrase}, status.value)

    return app


def main(argv: list[str] | None = None) -> int:
    """Load the configuration, connect to Redis and serve the API."""
    parser = argparse.ArgumentParser(description="Serve the battle reward API.")
    parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    try:
        cfg = load_config(read_settings())
        client = connect_redis(cfg.redis)
    except (OSError, ValueError, RuntimeError) as exc:
        logger.error("failed to start service: %s", exc)
        return 1

    app = create_app(RewardService(RedisEloRepo(client)))
    app.run(host=LISTEN_HOST, port=LISTEN_PORT)
    return 0