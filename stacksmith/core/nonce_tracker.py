"""Per-run cache of the next unused nonce for each signing account."""

from __future__ import annotations

import logging
from collections.abc import Callable

from stacksmith.models.accounts import Account

logger = logging.getLogger(__name__)


class NonceTracker:
    """Next-unused nonce per account name, seeded lazily from the node.

    One tracker belongs to exactly one orchestrator run.  Values only move
    forward, by one, after a successful broadcast.
    """

    def __init__(self) -> None:
        self._next: dict[str, int] = {}

    def resolve(self, account: Account, fetch: Callable[[str], int]) -> int:
        """Return the next nonce for *account*.

        On first use the node is asked via ``fetch(account.address)`` and
        the answer seeds the cache.
        """
        if account.name not in self._next:
            nonce = fetch(account.address)
            logger.debug(
                "Seeded nonce for %s (%s): %d", account.name, account.address, nonce
            )
            self._next[account.name] = nonce
        return self._next[account.name]

    def advance(self, account_name: str) -> int:
        """Consume the current nonce for *account_name* and return the next one."""
        if account_name not in self._next:
            raise KeyError(f"Nonce for account {account_name!r} was never resolved")
        self._next[account_name] += 1
        return self._next[account_name]

    def peek(self, account_name: str) -> int | None:
        return self._next.get(account_name)

    def snapshot(self) -> dict[str, int]:
        return dict(self._next)
