"""
Abstract Base Class for Relay Adapters

Defines the capability contract every relay-service adapter (Gelato, ITX, ...)
must implement. Adapters differ in how they submit (HTTP API, custom JSON-RPC
method, managed relayer) but present identical semantics for ``send`` and
``lookup``, so the registry and the waiter never need to know which provider
is plugged in.

Core Types:
    - Relayer: The capability contract {send, lookup, supports_chain, get_balance, fund}
    - RelayerBuilder: Async factory ``(chain_id, signer) -> Relayer``

Each adapter holds its own provider client (composition) and decides at
construction time whether it routes through a custom forwarder.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable

from web3.types import TxParams

from ..metatx.signers import Signer
from ..schemas.bases import RelayResponse, RelayStatus


class Relayer(ABC):
    """
    Abstract Base Class for relay adapters.

    Key Responsibilities:
    1. send: Submit a prepared transaction to the provider and return a task handle
    2. lookup: Query the provider once for the task's status
    3. supports_chain: Report whether the provider relays on a chain
    4. get_balance / fund: Manage the relay account (optional per provider)

    Implementations must tolerate concurrent ``send`` calls against the same
    instance.

    Example Implementation:
        class MyRelayer(Relayer):
            @classmethod
            def builder(cls, config):
                async def build(chain_id, signer):
                    return cls(signer, chain_id, config)
                return build
    """

    @abstractmethod
    async def send(self, tx: TxParams) -> RelayResponse:
        """
        Submit a prepared transaction to the relay provider.

        Args:
            tx: Transaction request; ``to`` and ``data`` are required.

        Returns:
            RelayResponse: Opaque task handle for ``lookup``.

        Raises:
            PreconditionError: If ``to`` or ``data`` is missing. Raised before
                any network call.
        """
        pass

    @abstractmethod
    async def lookup(self, task_id: str) -> RelayStatus:
        """
        Query the status of a relay task once.

        Must not loop or sleep. A task the provider has not indexed yet is
        reported as pending, a terminal provider failure as ``is_error``.
        """
        pass

    @abstractmethod
    async def supports_chain(self, chain_id: int) -> bool:
        """
        Report whether this provider relays on ``chain_id``.

        Must not mutate adapter state; safe to call before any ``send``.
        """
        pass

    @abstractmethod
    async def get_balance(self) -> int:
        """
        Return the relay account's funding balance in the provider's unit.

        Raises:
            UnsupportedOperationError: If the provider does not expose balances.
        """
        pass

    @abstractmethod
    async def fund(self, amount: int) -> None:
        """
        Deposit ``amount`` into the relay account.

        Raises:
            UnsupportedOperationError: If the provider does not support funding.
        """
        pass

    async def aclose(self) -> None:
        """Release the provider client. The default implementation holds nothing."""
        pass


RelayerBuilder = Callable[[int, Signer], Awaitable[Relayer]]
