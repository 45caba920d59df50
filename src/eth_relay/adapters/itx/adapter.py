"""
Infura ITX Adapter

Relays transactions through Infura Transactions (ITX). ITX exposes custom
JSON-RPC methods on an ITX-enabled endpoint:

    relay_sendTransaction       submit a signed relay request
    relay_getTransactionStatus  list the broadcasts made for a relay request
    relay_getBalance            gas tank balance of the signer

Every relay request goes through the configured forwarder, so ITX only ever
calls ``execute`` on it. The gas tank is topped up by sending ETH to the ITX
deposit contract from the signer's account.

Dependencies:
    - web3.py: Custom RPC methods and receipt lookups
    - eth_abi / eth_utils: Relay request hash
"""

import logging
from typing import Any, Dict, Optional

from eth_abi import encode as abi_encode
from eth_utils import keccak, to_bytes
from web3 import AsyncWeb3
from web3.exceptions import TransactionNotFound
from web3.types import TxParams

from ...engine.exceptions import RelayProviderError
from ...metatx.signatures import create_forwarded_transaction, require_to_and_data
from ...metatx.signers import Signer
from ...schemas.bases import ForwarderConfig, RelayResponse
from ..bases import Relayer, RelayerBuilder
from .constants import ITX_DEPOSIT_CONTRACT, RELAY_REQUEST_HASH_TYPES, SUPPORTED_CHAIN_IDS
from .schemas import ITXConfig, ITXOptions, ITXRelayRequest, ITXRelayStatus

logger = logging.getLogger(__name__)


class ITXRelayer(Relayer):
    """
    Infura ITX adapter.

    Args:
        chain_id: Chain this adapter was built for.
        signer: Signing capability; signs the meta-transaction and the relay request.
        forwarder: Forwarder every request is routed through.
        options: Gas limit and schedule of relay requests.
        w3: ITX-enabled web3 connection. Defaults to the signer's.

    Example:
        builder = ITXRelayer.builder(ITXConfig(forwarder=forwarder))
        relayer = await builder(1, signer)
        response = await relayer.send({"to": target, "data": call_data})
    """

    def __init__(
        self,
        chain_id: int,
        signer: Signer,
        forwarder: ForwarderConfig,
        options: Optional[ITXOptions] = None,
        w3: Optional[AsyncWeb3] = None,
    ):
        self.chain_id = chain_id
        self._signer = signer
        self._forwarder = forwarder
        self._options = options or ITXOptions()
        self._w3 = w3

    @classmethod
    def builder(cls, config: ITXConfig) -> RelayerBuilder:
        """Return an async factory building an ``ITXRelayer`` per chain."""
        async def build(chain_id: int, signer: Signer) -> "ITXRelayer":
            w3 = None
            if config.rpc_url:
                w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(
                    config.rpc_url,
                    request_kwargs={"timeout": config.request_timeout},
                ))
            return cls(chain_id, signer, config.forwarder, config.options, w3)
        return build

    @property
    def w3(self) -> AsyncWeb3:
        return self._w3 if self._w3 is not None else self._signer.w3

    async def _rpc(self, method: str, params: list) -> Any:
        return await self.w3.manager.coro_request(method, params)

    async def _sign_request(self, request: ITXRelayRequest) -> str:
        encoded = abi_encode(
            RELAY_REQUEST_HASH_TYPES,
            [
                AsyncWeb3.to_checksum_address(request.to),
                to_bytes(hexstr=request.data),
                int(request.gas),
                self.chain_id,
                request.schedule,
            ],
        )
        return await self._signer.sign_message(keccak(encoded))

    async def send(self, tx: TxParams) -> RelayResponse:
        require_to_and_data(tx, "ITX")

        meta_tx = await create_forwarded_transaction(tx, self._forwarder, self._signer)
        request = ITXRelayRequest(
            to=str(meta_tx["to"]),
            data=str(meta_tx["data"]),
            gas=self._options.gas,
            schedule=self._options.schedule,
        )
        signature = await self._sign_request(request)

        logger.info("Sending ITX relay request %s", request.to_canonical_json())
        result = await self._rpc("relay_sendTransaction", [request.to_dict(), signature])
        relay_hash = result.get("relayTransactionHash") if result else None
        if not relay_hash:
            raise RelayProviderError("ITX accepted the request without a relayTransactionHash.", provider="itx")
        return RelayResponse(task_id=relay_hash)

    async def lookup(self, task_id: str) -> ITXRelayStatus:
        """
        Check every broadcast made for ``task_id``.

        ITX may rebroadcast with a higher gas price; the first broadcast with a
        mined receipt decides the status. A mined receipt with ``status == 0``
        is an error.
        """
        status = await self._rpc("relay_getTransactionStatus", [task_id])
        broadcasts = status.get("broadcasts") if status else None
        if not broadcasts:
            return ITXRelayStatus.pending()

        for broadcast in broadcasts:
            tx_hash = broadcast.get("ethTxHash")
            try:
                receipt = await self.w3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                continue
            if receipt.get("blockNumber") is None:
                continue
            mined_ok = receipt.get("status") == 1
            logger.debug("ITX broadcast %s mined in block %s", tx_hash, receipt["blockNumber"])
            return ITXRelayStatus(
                is_complete=mined_ok,
                is_error=not mined_ok,
                transaction_hash=tx_hash,
                block_number=receipt["blockNumber"],
                gas_used=receipt.get("gasUsed"),
            )

        return ITXRelayStatus.pending()

    async def supports_chain(self, chain_id: int) -> bool:
        return chain_id in SUPPORTED_CHAIN_IDS

    async def get_balance(self) -> int:
        result: Dict[str, Any] = await self._rpc("relay_getBalance", [self._signer.address])
        if not result or result.get("balance") is None:
            raise RelayProviderError("Null response from ITX on relay_getBalance.", provider="itx")
        return int(result["balance"])

    async def fund(self, amount: int) -> None:
        """
        Deposit ``amount`` wei into the ITX gas tank and wait for the deposit
        to be mined.

        Raises:
            RelayProviderError: If the deposit transaction reverts.
        """
        tx_hash = await self._signer.send_transaction({
            "to": AsyncWeb3.to_checksum_address(ITX_DEPOSIT_CONTRACT),
            "value": amount,
        })
        logger.info("ITX deposit sent: %s", tx_hash)
        receipt = await self._signer.w3.eth.wait_for_transaction_receipt(tx_hash)
        if receipt.get("status") != 1:
            raise RelayProviderError(f"ITX deposit failed: {tx_hash}", provider="itx")
