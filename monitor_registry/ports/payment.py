"""Payment port for moving value between accounts.

The registry consumes the payment rail as an atomic "transfer or fail"
primitive and never implements balances itself.
"""

from abc import ABC, abstractmethod

from ..domain.value_objects import Principal


class PaymentPort(ABC):
    """Abstract interface to the payment rail."""

    @abstractmethod
    async def balance_of(self, account: Principal) -> int:
        """Get the spendable balance of an account."""
        ...

    @abstractmethod
    async def transfer(self, amount: int, sender: Principal, recipient: Principal) -> None:
        """Move ``amount`` from ``sender`` to ``recipient`` atomically.

        Raises:
            PaymentFailedError: If the rail rejects the transfer. A rejected
                transfer must leave both balances unchanged.
        """
        ...
