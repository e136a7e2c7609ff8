"""Block clock port abstraction for time handling.

This module defines the clock abstraction to decouple registry logic from
the chain's block-height source, making it easier to test and control
expiry-dependent behavior.
"""

from abc import ABC, abstractmethod


class BlockClockPort(ABC):
    """Abstract source of the current block height.

    The registry reads it once at the start of each operation and compares
    stored expiries against the value.
    """

    @abstractmethod
    def block_height(self) -> int:
        """Get the current block height.

        Note:
            Implementations MUST be monotonic: a later call never returns
            a smaller value than an earlier one.
        """
        ...
