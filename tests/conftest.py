"""Shared fixtures."""

from datetime import UTC, datetime, timedelta

import pytest

from launchwatch.core.types import Token

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def build_token(token_id: int, **overrides) -> Token:
    """Build a token with deterministic defaults."""
    data = {
        "id": token_id,
        "pair_name": f"PAIR{token_id}/SOL",
        "pair_address": f"addr{token_id}",
        "created_at": BASE_TIME + timedelta(minutes=token_id),
        "updated_at": BASE_TIME + timedelta(minutes=token_id, seconds=30),
        "launch_fdv": 10000.0,
        "current_fdv": 12000.0,
        "launch_liquidity": 5000.0,
        "current_liquidity": 4000.0,
    }
    data.update(overrides)
    return Token(**data)


@pytest.fixture
def make_token():
    """Token factory."""
    return build_token


@pytest.fixture
def make_snapshot():
    """Snapshot factory from ids."""

    def _make(*ids: int) -> list[Token]:
        return [build_token(i) for i in ids]

    return _make
