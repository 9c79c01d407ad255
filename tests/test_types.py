"""Tests for core data types."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from launchwatch.core.types import (
    PermissionState,
    SortDirection,
    SortKey,
    SortSpec,
    Token,
    coerce_token_id,
)


class TestToken:
    """Test Token model."""

    def test_snake_case_payload(self):
        """Test parsing the backend's snake_case wire format."""
        token = Token.model_validate(
            {
                "id": 7,
                "pair_name": "DOGE/SOL",
                "pair_address": "So1PairAddr",
                "created_at": "2024-05-01T12:00:00Z",
                "updated_at": "2024-05-01T12:05:00Z",
                "launch_fdv": 10000,
                "current_fdv": 25000.5,
                "launch_liquidity": 4000,
                "current_liquidity": 3000,
                "twitter_url": "https://x.com/doge",
                "is_scam": False,
            }
        )

        assert token.id == 7
        assert token.pair_name == "DOGE/SOL"
        assert token.pair_address == "So1PairAddr"
        assert token.created_at == datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        assert token.current_fdv == 25000.5
        assert token.twitter_url == "https://x.com/doge"
        assert token.telegram_url is None

    def test_camel_case_payload(self):
        """Test parsing camelCase keys."""
        token = Token.model_validate(
            {
                "id": 1,
                "pairName": "A/B",
                "pairAddress": "addr",
                "createdAt": "2024-05-01T12:00:00Z",
                "updatedAt": "2024-05-01T12:00:00Z",
                "dexscreenerUrl": "https://dexscreener.com/solana/addr",
            }
        )

        assert token.pair_name == "A/B"
        assert token.dexscreener_url == "https://dexscreener.com/solana/addr"

    def test_epoch_and_naive_timestamps_are_comparable(self):
        """Test epoch and naive ISO timestamps both normalize to UTC."""
        epoch = Token(
            id=1,
            pair_name="A",
            pair_address="a",
            created_at=1714564800,
            updated_at=1714564800,
        )
        naive = Token(
            id=2,
            pair_name="B",
            pair_address="b",
            created_at="2024-05-01T12:00:01",
            updated_at="2024-05-01T12:00:01",
        )

        assert epoch.created_at.tzinfo is not None
        assert naive.created_at.tzinfo is not None
        assert epoch.created_at < naive.created_at

    def test_missing_required_field(self):
        """Test that a token without pair_address is rejected."""
        with pytest.raises(ValidationError):
            Token.model_validate(
                {
                    "id": 1,
                    "pair_name": "A",
                    "created_at": "2024-05-01T12:00:00Z",
                    "updated_at": "2024-05-01T12:00:00Z",
                }
            )

    def test_improved_flags(self, make_token):
        """Test derived improved flags."""
        token = make_token(
            1,
            launch_fdv=100.0,
            current_fdv=150.0,
            launch_liquidity=100.0,
            current_liquidity=100.0,
        )

        assert token.fdv_improved is True
        assert token.liquidity_improved is False

    def test_improved_flags_with_missing_values(self, make_token):
        """Test improved flags are False when a value is missing."""
        token = make_token(1, launch_fdv=None, current_liquidity=None)

        assert token.fdv_improved is False
        assert token.liquidity_improved is False

    @pytest.mark.parametrize("field", ["launch_fdv", "current_liquidity"])
    def test_non_finite_amounts_rejected(self, make_token, field):
        """Test NaN and infinity are not accepted as amounts."""
        for value in (float("nan"), float("inf")):
            with pytest.raises(ValidationError):
                make_token(1, **{field: value})


class TestSortSpec:
    """Test SortSpec defaults."""

    def test_default_is_newest_first(self):
        spec = SortSpec()

        assert spec.key == SortKey.CREATED_AT
        assert spec.direction == SortDirection.DESC

    def test_from_strings(self):
        spec = SortSpec(key="current_fdv", direction="asc")

        assert spec.key == SortKey.CURRENT_FDV
        assert spec.direction == SortDirection.ASC

    def test_invalid_key(self):
        with pytest.raises(ValidationError):
            SortSpec(key="external_links")


def test_permission_state_values() -> None:
    """Test permission states match the platform lifecycle names."""
    assert {s.value for s in PermissionState} == {"granted", "denied", "default"}


class TestCoerceTokenId:
    """Test id coercion."""

    @pytest.mark.parametrize("raw", [7, "7", " 7 ", 7.0])
    def test_valid(self, raw):
        assert coerce_token_id(raw) == 7

    @pytest.mark.parametrize("raw", ["abc", "7.5", 7.5, "", None, True, [7]])
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            coerce_token_id(raw)
