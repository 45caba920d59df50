"""
Gelato Relay Adapter

Relays transactions through the Gelato Relay API, sponsored from a 1Balance
account.

Routing is chosen at construction time:
    - With a custom forwarder, the transaction is wrapped into a signed
      forwarder ``execute`` call and submitted with ``sponsoredCall``,
      targeting the forwarder. Concurrent sends are tolerated.
    - Without one, the user signs a ``SponsoredCallERC2771`` struct for
      Gelato's own ERC-2771 relay contract and the call is submitted with
      ``sponsoredCallERC2771``. Gelato's forwarder tracks a single nonce per
      user, so concurrent sends from one user are not supported.

Dependencies:
    - httpx: Gelato REST API (see ``client.py``)
    - web3.py: Reading the user nonce of Gelato's relay contract
"""

import logging
import time
from typing import Any, Dict, Optional

import httpx
from web3 import AsyncWeb3
from web3.types import TxParams

from ...engine.exceptions import RelayProviderError, UnsupportedOperationError
from ...metatx.signatures import (
    call_data_hex,
    create_forwarded_transaction,
    require_to_and_data,
    resolve_address,
    sign_typed_data,
)
from ...metatx.signers import Signer
from ...metatx.standards import (
    EIP712Domain,
    SPONSORED_CALL_ERC2771_TYPES,
    SponsoredCallERC2771Message,
)
from ...schemas.bases import ForwarderConfig, RelayResponse
from ..bases import Relayer, RelayerBuilder
from .client import GelatoRelayClient
from .constants import (
    ERROR_TASK_STATES,
    GELATO_RELAY_ERC2771_ADDRESS,
    GELATO_RELAY_ERC2771_DOMAIN_NAME,
    GELATO_RELAY_ERC2771_DOMAIN_VERSION,
    SUCCESS_TASK_STATES,
    USER_DEADLINE_GAP,
    get_user_nonce_abi,
    network_group,
)
from .schemas import GelatoConfig, GelatoRelayStatus

logger = logging.getLogger(__name__)


def _is_status_not_found(error: httpx.HTTPStatusError) -> bool:
    return error.response.status_code == 404 or "Status not found" in error.response.text


class GelatoRelayer(Relayer):
    """
    Gelato Relay adapter.

    Attributes:
        chain_id: Chain this adapter was built for.
        network_group: 1Balance group (``"mainnets"`` or ``"testnets"``).

    Example:
        builder = GelatoRelayer.builder(GelatoConfig(api_key="...", forwarder=forwarder))
        relayer = await builder(137, signer)
        response = await relayer.send({"to": target, "data": call_data})
    """

    def __init__(
        self,
        signer: Signer,
        chain_id: int,
        api_key: str,
        forwarder: Optional[ForwarderConfig] = None,
        client: Optional[GelatoRelayClient] = None,
    ):
        self._signer = signer
        self.chain_id = chain_id
        self._api_key = api_key
        self._forwarder = forwarder
        self._client = client or GelatoRelayClient()
        self.network_group = network_group(chain_id)

    @classmethod
    def builder(cls, config: GelatoConfig) -> RelayerBuilder:
        """Return an async factory building a ``GelatoRelayer`` per chain."""
        async def build(chain_id: int, signer: Signer) -> "GelatoRelayer":
            client = GelatoRelayClient(api_url=config.api_url, timeout=config.request_timeout)
            return cls(signer, chain_id, config.api_key, config.forwarder, client)
        return build

    async def send(self, tx: TxParams) -> RelayResponse:
        require_to_and_data(tx, "Gelato")

        if self._forwarder is None:
            payload = await self._send_erc2771(tx)
        else:
            meta_tx = await create_forwarded_transaction(tx, self._forwarder, self._signer)
            logger.info("Sending Gelato sponsored call via forwarder %s", self._forwarder.address)
            payload = await self._client.sponsored_call(
                self.chain_id,
                self._forwarder.address,
                meta_tx["data"],
                self._api_key,
            )

        task_id = payload.get("taskId")
        if not task_id:
            raise RelayProviderError("Gelato accepted the call without a taskId.", provider="gelato")
        return RelayResponse(task_id=task_id)

    async def _send_erc2771(self, tx: TxParams) -> Dict[str, Any]:
        w3 = self._signer.w3
        relay_contract = w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(GELATO_RELAY_ERC2771_ADDRESS),
            abi=get_user_nonce_abi(),
        )
        user = self._signer.address
        user_nonce = await relay_contract.functions.userNonce(user).call()

        message = SponsoredCallERC2771Message(
            chainId=self.chain_id,
            target=await resolve_address(w3, str(tx["to"])),
            data=call_data_hex(tx["data"]),
            user=user,
            userNonce=user_nonce,
            userDeadline=int(time.time()) + USER_DEADLINE_GAP,
        )
        domain = EIP712Domain(
            name=GELATO_RELAY_ERC2771_DOMAIN_NAME,
            version=GELATO_RELAY_ERC2771_DOMAIN_VERSION,
            chainId=self.chain_id,
            verifyingContract=relay_contract.address,
        )
        signature = await sign_typed_data(
            self._signer,
            domain.to_dict(),
            SPONSORED_CALL_ERC2771_TYPES,
            message.to_message(),
        )
        logger.info("Sending Gelato ERC-2771 sponsored call for %s", user)
        return await self._client.sponsored_call_erc2771(message.to_dict(), signature, self._api_key)

    async def lookup(self, task_id: str) -> GelatoRelayStatus:
        try:
            task = await self._client.get_task_status(task_id)
        except httpx.HTTPStatusError as e:
            # freshly submitted tasks are not indexed yet
            if _is_status_not_found(e):
                return GelatoRelayStatus.pending()
            raise

        if not task:
            return GelatoRelayStatus(is_error=True)

        task_state = task.get("taskState")
        return GelatoRelayStatus(
            is_complete=task_state in SUCCESS_TASK_STATES,
            is_error=task_state in ERROR_TASK_STATES,
            transaction_hash=task.get("transactionHash"),
            task_state=task_state,
            block_number=task.get("blockNumber"),
            last_check_message=task.get("lastCheckMessage"),
        )

    async def supports_chain(self, chain_id: int) -> bool:
        return str(chain_id) in await self._client.get_supported_networks()

    async def get_balance(self) -> int:
        sponsor = await self._client.get_sponsor_balance(self.network_group, self._signer.address)
        if not sponsor or sponsor.get("remainingBalance") is None:
            raise RelayProviderError("Null response from gelato on getSponsorBalance.", provider="gelato")
        return int(sponsor["remainingBalance"])

    async def fund(self, amount: int) -> None:
        raise UnsupportedOperationError(
            "Funding a Gelato 1Balance account is not supported by this adapter."
        )

    async def aclose(self) -> None:
        await self._client.aclose()
