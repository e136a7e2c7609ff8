"""In-memory payment rail.

Implements the PaymentPort with a plain balance table. Used for tests,
simulations and local development.
"""

from __future__ import annotations

from collections.abc import Mapping

from ..domain.exceptions import PaymentFailedError
from ..domain.value_objects import Principal
from ..ports.payment import PaymentPort


class InMemoryLedger(PaymentPort):
    """Balance table with all-or-nothing transfers.

    Rejections mirror a native token transfer: non-positive amounts,
    transfers to self and overdrafts all fail without touching balances.
    """

    def __init__(self, balances: Mapping[str | Principal, int] | None = None) -> None:
        self._balances: dict[str, int] = {}
        for account, amount in (balances or {}).items():
            self.credit(account, amount)

    def credit(self, account: str | Principal, amount: int) -> None:
        """Add funds to an account out of thin air."""
        if amount < 0:
            raise ValueError("Credit amount cannot be negative")
        key = str(Principal.parse(account))
        self._balances[key] = self._balances.get(key, 0) + amount

    async def balance_of(self, account: Principal) -> int:
        return self._balances.get(str(account), 0)

    async def transfer(self, amount: int, sender: Principal, recipient: Principal) -> None:
        if amount <= 0:
            raise PaymentFailedError(
                f"Transfer amount must be positive, got {amount}",
                sender=str(sender),
                recipient=str(recipient),
            )
        if sender == recipient:
            raise PaymentFailedError(
                "Sender and recipient are the same account",
                sender=str(sender),
                recipient=str(recipient),
            )
        available = self._balances.get(str(sender), 0)
        if available < amount:
            raise PaymentFailedError(
                f"Insufficient balance: {available} < {amount}",
                sender=str(sender),
                recipient=str(recipient),
            )
        self._balances[str(sender)] = available - amount
        self._balances[str(recipient)] = self._balances.get(str(recipient), 0) + amount

    def snapshot(self) -> dict[str, int]:
        """Copy of all balances (useful for testing)."""
        return dict(self._balances)
