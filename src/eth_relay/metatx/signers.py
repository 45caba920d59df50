"""
Signing Capability

The relay layer never holds key material itself: every component that needs
a signature receives a ``Signer`` from the caller. A signer exposes an
address, the ``AsyncWeb3`` handle it is connected to, EIP-712 and EIP-191
signing, and (for funding flows) plain transaction submission.

``LocalSigner`` is the in-process implementation backed by ``eth_account``.
Remote signers (hardware wallets, MPC services) implement the same ABC.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_utils import to_hex
from web3 import AsyncWeb3
from web3.types import TxParams

from ..engine.exceptions import ConfigurationError


class Signer(ABC):
    """
    Abstract signing capability passed by reference into the relay layer.

    Implementations must be safe to share across concurrent ``send`` calls.
    """

    @property
    @abstractmethod
    def address(self) -> str:
        """Checksum address of the signing account."""

    @property
    @abstractmethod
    def w3(self) -> AsyncWeb3:
        """``AsyncWeb3`` instance connected to the signer's network."""

    @abstractmethod
    async def sign_typed_data(
        self,
        domain: Dict[str, Any],
        types: Dict[str, List[Dict[str, str]]],
        message: Dict[str, Any],
    ) -> str:
        """
        Sign EIP-712 structured data.

        Args:
            domain: EIP-712 domain (name, version, chainId, verifyingContract).
            types: Struct definitions, excluding ``EIP712Domain``.
            message: Values of the primary type.

        Returns:
            str: 0x-prefixed 65-byte signature.
        """

    @abstractmethod
    async def sign_message(self, data: bytes) -> str:
        """Sign ``data`` as an EIP-191 personal message; returns 0x-prefixed hex."""

    @abstractmethod
    async def send_transaction(self, tx: TxParams) -> str:
        """Sign and broadcast a transaction from the signer's own account; returns its hash."""


class LocalSigner(Signer):
    """
    In-process signer backed by an ``eth_account`` private key.

    Example:
        w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider("https://polygon-rpc.com"))
        signer = LocalSigner("0xYOUR_PRIVATE_KEY", w3=w3)
        signature = await signer.sign_typed_data(domain, types, message)
    """

    def __init__(self, private_key: str, w3: Optional[AsyncWeb3] = None):
        if not private_key:
            raise ConfigurationError("Private key is required for signing.")
        self._private_key = private_key
        self._account = Account.from_key(private_key)
        self._w3 = w3

    @property
    def address(self) -> str:
        return AsyncWeb3.to_checksum_address(self._account.address)

    @property
    def w3(self) -> AsyncWeb3:
        if self._w3 is None:
            raise ConfigurationError("Signer is not connected to a web3 provider.")
        return self._w3

    async def sign_typed_data(
        self,
        domain: Dict[str, Any],
        types: Dict[str, List[Dict[str, str]]],
        message: Dict[str, Any],
    ) -> str:
        signed = Account.sign_typed_data(
            self._private_key,
            domain_data=domain,
            message_types=types,
            message_data=message,
        )
        return to_hex(signed.signature)

    async def sign_message(self, data: bytes) -> str:
        signed = Account.sign_message(encode_defunct(primitive=data), self._private_key)
        return to_hex(signed.signature)

    async def send_transaction(self, tx: TxParams) -> str:
        """
        Fill, sign and broadcast a transaction from this account.

        Nonce and chain id are read from the node. Gas is estimated with a
        10% buffer, falling back to a fixed limit when estimation fails.
        EIP-1559 fees are derived from the latest fee history, falling back
        to the legacy gas price.
        """
        w3 = self.w3
        tx_params: Dict[str, Any] = dict(tx)
        tx_params.setdefault("from", self.address)
        tx_params.setdefault("nonce", await w3.eth.get_transaction_count(self.address))
        tx_params.setdefault("chainId", await w3.eth.chain_id)

        if "gas" not in tx_params:
            try:
                gas_estimate = await w3.eth.estimate_gas(tx_params)
                tx_params["gas"] = int(gas_estimate * 1.1)
            except Exception:
                tx_params["gas"] = 100000

        if "gasPrice" not in tx_params and "maxFeePerGas" not in tx_params:
            try:
                fee_history = await w3.eth.fee_history(1, "latest", [25.0])
                base_fee = fee_history["baseFeePerGas"][-1]
                priority_fee = fee_history["reward"][0][0]
                tx_params["maxPriorityFeePerGas"] = priority_fee
                tx_params["maxFeePerGas"] = (base_fee * 2) + priority_fee
            except Exception:
                tx_params["gasPrice"] = await w3.eth.gas_price

        signed_tx = Account.sign_transaction(tx_params, self._private_key)
        tx_hash = await w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        return to_hex(tx_hash)
