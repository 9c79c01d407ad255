"""Mark-as-scam round trip."""

from typing import Any

import structlog

from ..core.errors import ModerationRequestError
from ..core.interfaces import TokenBackend
from ..core.types import coerce_token_id
from ..store.token_store import TokenStore
from .poller import Poller

logger = structlog.get_logger(__name__)


class ModerationClient:
    """Flags tokens as scams and resynchronizes the snapshot."""

    def __init__(self, backend: TokenBackend, store: TokenStore, poller: Poller) -> None:
        self.backend = backend
        self.store = store
        self.poller = poller

    async def mark_as_scam(self, raw_id: Any) -> bool:
        """Flag the token with the given id.

        The row stays in the store until a refreshed snapshot drops it.

        Args:
            raw_id: Token id as int or digit string

        Returns:
            True if the backend accepted the request
        """
        try:
            token_id = coerce_token_id(raw_id)
        except ValueError as e:
            logger.error("Cannot mark scam for invalid token id", error=str(e))
            return False

        token = self.store.lookup(token_id)
        if token is None:
            logger.error("Cannot mark scam for unknown token", token_id=token_id)
            return False

        try:
            await self.backend.mark_scam(token.pair_address)
        except ModerationRequestError as e:
            logger.error(
                "Error marking as scam",
                token_id=token_id,
                pair_address=token.pair_address,
                error=str(e),
                status_code=e.status_code,
            )
            return False

        logger.info(
            "Marked as scam", token_id=token_id, pair_address=token.pair_address
        )
        await self.poller.fetch_now()
        return True
