"""HTTP client for the token backend."""

from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from ..core.errors import ModerationRequestError, TransientFetchError
from ..core.interfaces import TokenBackend
from ..core.types import Token

logger = structlog.get_logger(__name__)


def parse_snapshot(payload: Any) -> list[Token]:
    """Validate a decoded /tokens response into a snapshot.

    Args:
        payload: Decoded JSON body

    Returns:
        Tokens in server order

    Raises:
        TransientFetchError: If the payload is not a list of valid tokens
            with unique ids
    """
    if not isinstance(payload, list):
        raise TransientFetchError(
            f"Expected a JSON array of tokens, got {type(payload).__name__}"
        )

    try:
        tokens = [Token.model_validate(item) for item in payload]
    except ValidationError as e:
        raise TransientFetchError(f"Malformed token payload: {e}") from e

    ids = [t.id for t in tokens]
    if len(set(ids)) != len(ids):
        raise TransientFetchError("Duplicate token ids in snapshot")

    return tokens


class BackendClient(TokenBackend):
    """Token backend client over HTTP."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        with_twitter: bool = False,
        session: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize backend client.

        Args:
            base_url: Backend base URL
            with_twitter: Only request tokens that have a Twitter link
            session: Optional httpx client session
        """
        self.base_url = base_url.rstrip("/")
        self.with_twitter = with_twitter
        self.session = session or httpx.AsyncClient()

        logger.info(
            "Backend client initialized",
            base_url=self.base_url,
            with_twitter=with_twitter,
        )

    async def fetch_tokens(self) -> list[Token]:
        """Fetch the full current token snapshot.

        Returns:
            Tokens in server order

        Raises:
            TransientFetchError: On transport, status or payload errors
        """
        url = f"{self.base_url}/tokens"
        params = {"with_twitter": "true"} if self.with_twitter else None

        try:
            response = await self.session.get(url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise TransientFetchError(
                f"Token fetch failed with status {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise TransientFetchError(f"Token fetch failed: {e}") from e
        except (ValueError, RecursionError) as e:
            raise TransientFetchError(f"Token response is not JSON: {e}") from e

        tokens = parse_snapshot(payload)
        logger.debug("Fetched tokens", count=len(tokens))
        return tokens

    async def mark_scam(self, pair_address: str) -> None:
        """Flag a pair as a scam.

        Args:
            pair_address: External pair address

        Raises:
            ModerationRequestError: On transport or status errors
        """
        url = f"{self.base_url}/mark_scam"

        try:
            response = await self.session.post(
                url, json={"pair_address": pair_address}
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ModerationRequestError(
                f"Mark scam rejected with status {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ModerationRequestError(f"Mark scam request failed: {e}") from e

        logger.info("Marked pair as scam", pair_address=pair_address)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.session.aclose()
        logger.info("Backend client closed")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
