"""Core data types for the launch monitor."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat, field_validator
from pydantic.alias_generators import to_camel


class Token(BaseModel):
    """One monitored trading pair as returned by the backend."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    id: int = Field(description="Backend identifier, stable across polls")
    pair_name: str = Field(description="Display label of the pair")
    pair_address: str = Field(description="External pair address used for moderation")
    created_at: datetime = Field(description="Launch timestamp")
    updated_at: datetime = Field(description="Last backend update timestamp")
    launch_fdv: FiniteFloat | None = Field(
        default=None, description="FDV at launch in USD"
    )
    current_fdv: FiniteFloat | None = Field(
        default=None, description="Current FDV in USD"
    )
    launch_liquidity: FiniteFloat | None = Field(
        default=None, description="Liquidity at launch in USD"
    )
    current_liquidity: FiniteFloat | None = Field(
        default=None, description="Current liquidity in USD"
    )
    twitter_url: str | None = Field(default=None, description="Twitter link")
    telegram_url: str | None = Field(default=None, description="Telegram link")
    website_url: str | None = Field(default=None, description="Project website")
    dexscreener_url: str | None = Field(default=None, description="DexScreener chart")

    @field_validator("created_at", "updated_at", mode="after")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Mixed naive/aware values would not be comparable
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def fdv_improved(self) -> bool:
        """Whether FDV is above its launch value."""
        if self.current_fdv is None or self.launch_fdv is None:
            return False
        return self.current_fdv > self.launch_fdv

    @property
    def liquidity_improved(self) -> bool:
        """Whether liquidity is above its launch value."""
        if self.current_liquidity is None or self.launch_liquidity is None:
            return False
        return self.current_liquidity > self.launch_liquidity


class SortKey(StrEnum):
    """Columns a snapshot can be ordered by."""

    ID = "id"
    PAIR_NAME = "pair_name"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    LAUNCH_FDV = "launch_fdv"
    CURRENT_FDV = "current_fdv"
    LAUNCH_LIQUIDITY = "launch_liquidity"
    CURRENT_LIQUIDITY = "current_liquidity"


class SortDirection(StrEnum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class SortSpec(BaseModel):
    """Requested ordering of the token table."""

    model_config = ConfigDict(frozen=True)

    key: SortKey = Field(default=SortKey.CREATED_AT, description="Column to sort by")
    direction: SortDirection = Field(
        default=SortDirection.DESC, description="Sort direction"
    )


class PermissionState(StrEnum):
    """Notification permission lifecycle state."""

    GRANTED = "granted"
    DENIED = "denied"
    DEFAULT = "default"


def coerce_token_id(raw: Any) -> int:
    """Convert an id passed as int, integral float or digit string to int.

    Raises:
        ValueError: If the value does not denote an integer id
    """
    if isinstance(raw, bool):
        raise ValueError(f"Invalid token id: {raw!r}")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if raw.is_integer():
            return int(raw)
        raise ValueError(f"Invalid token id: {raw!r}")
    if isinstance(raw, str):
        text = raw.strip()
        if text.lstrip("-").isdigit():
            return int(text)
    raise ValueError(f"Invalid token id: {raw!r}")
