"""Authoritative in-memory token state for one monitoring session."""

from collections.abc import Sequence

import structlog

from ..core.errors import LookupMiss
from ..core.types import Token

logger = structlog.get_logger(__name__)


class TokenStore:
    """Holds the current snapshot and every token id observed this session.

    The snapshot is replaced wholesale on each reconciliation; the set of
    seen ids only ever grows. One instance per session, nothing is persisted.
    """

    def __init__(self, notify_on_first_load: bool = False) -> None:
        """Initialize an empty store.

        Args:
            notify_on_first_load: Report every token of the first snapshot as
                newly appeared instead of seeding seen ids silently
        """
        self.notify_on_first_load = notify_on_first_load
        self._snapshot: tuple[Token, ...] = ()
        self._by_id: dict[int, Token] = {}
        self._seen_ids: set[int] = set()
        self._reconcile_count = 0

    @property
    def snapshot(self) -> tuple[Token, ...]:
        """Current snapshot in server order."""
        return self._snapshot

    @property
    def seen_ids(self) -> frozenset[int]:
        """All ids observed this session."""
        return frozenset(self._seen_ids)

    @property
    def reconcile_count(self) -> int:
        """Number of snapshots reconciled so far."""
        return self._reconcile_count

    def __len__(self) -> int:
        return len(self._snapshot)

    def reconcile(self, snapshot: Sequence[Token]) -> list[Token]:
        """Replace the current snapshot and return tokens not seen before.

        Args:
            snapshot: Full token list from one successful fetch

        Returns:
            Tokens whose id was absent from the seen set, in snapshot order
        """
        first_load = self._reconcile_count == 0
        newly_appeared = [t for t in snapshot if t.id not in self._seen_ids]

        self._seen_ids.update(t.id for t in snapshot)
        self._snapshot = tuple(snapshot)
        self._by_id = {t.id: t for t in self._snapshot}
        self._reconcile_count += 1

        if first_load and not self.notify_on_first_load:
            logger.info("Seeded seen tokens from first snapshot", count=len(snapshot))
            return []

        logger.debug(
            "Reconciled snapshot",
            size=len(snapshot),
            newly_appeared=len(newly_appeared),
            seen_total=len(self._seen_ids),
        )
        return newly_appeared

    def lookup(self, token_id: int) -> Token | None:
        """Look up a token of the current snapshot by id."""
        return self._by_id.get(token_id)

    def require(self, token_id: int) -> Token:
        """Look up a token, raising LookupMiss when absent."""
        token = self._by_id.get(token_id)
        if token is None:
            raise LookupMiss(token_id)
        return token
