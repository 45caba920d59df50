"""
Meta-Transaction Signing Utilities

Builds and signs EIP-2771 forward requests for an on-chain forwarder
contract, and wraps a prepared transaction into a forwarder ``execute`` call
that any third-party relayer can broadcast.

Exported helpers
----------------
sign_typed_data
    Hand an EIP-712 domain, schema and message to a ``Signer``.

build_forward_request
    Read the sender's forwarder nonce and merge it with the caller's fields
    and the builder defaults (``value=0``, ``gas=2_000_000``).

get_meta_tx_type_data / build_typed_data
    Assemble the ``ForwardRequest`` typed data; ``build_typed_data`` reads
    the chain id from the forwarder's connected network.

sign_meta_tx_request
    Compose the three steps above.

create_forwarded_transaction
    Turn a prepared transaction into a signed forwarder ``execute`` call.

No helper retries: a failed nonce read or signature propagates, and a
resubmission must fetch a fresh nonce.
"""

import logging
from typing import Any, Dict, List, Union

from eth_utils import is_address, to_bytes
from web3 import AsyncWeb3
from web3.contract import AsyncContract
from web3.types import TxParams

from ..engine.exceptions import PreconditionError
from ..schemas.bases import (
    EIP712DomainFragment,
    ForwardRequest,
    ForwarderConfig,
    MetaTxInput,
    SignedForwardRequest,
)
from .FORWARDER_ABI import get_forwarder_abi
from .signers import Signer
from .standards import EIP712Domain, ForwardRequestTypedData

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Typed-data signer
# ---------------------------------------------------------------------------

async def sign_typed_data(
    signer: Signer,
    domain: Dict[str, Any],
    types: Dict[str, List[Dict[str, str]]],
    message: Dict[str, Any],
) -> str:
    """
    Obtain an EIP-712 signature from a signing capability.

    ``types`` must not contain ``EIP712Domain``; signers derive it from
    ``domain``. Whatever the signer raises (user rejection, unsupported
    method) propagates unchanged.

    Returns:
        str: 0x-prefixed 65-byte signature.
    """
    return await signer.sign_typed_data(domain, types, message)


# ---------------------------------------------------------------------------
# Forward request construction
# ---------------------------------------------------------------------------

def get_forwarder_contract(w3: AsyncWeb3, address: str) -> AsyncContract:
    """Bind the forwarder ABI to ``address`` on the given web3 connection."""
    return w3.eth.contract(
        address=AsyncWeb3.to_checksum_address(address),
        abi=get_forwarder_abi(),
    )


async def build_forward_request(
    forwarder: AsyncContract,
    request_input: MetaTxInput,
) -> ForwardRequest:
    """
    Build a ``ForwardRequest`` carrying the sender's current forwarder nonce.

    Args:
        forwarder: Forwarder contract (read-only ``getNonce`` is called).
        request_input: Caller fields ``from``/``to``/``data`` plus optional
            ``value`` and ``gas`` overrides.

    Returns:
        ForwardRequest: With ``nonce`` equal to ``getNonce(from)`` at call time.
    """
    nonce = await forwarder.functions.getNonce(request_input.from_).call()
    logger.debug("Forwarder nonce for %s: %s", request_input.from_, nonce)
    return ForwardRequest(
        from_=request_input.from_,
        to=request_input.to,
        value=request_input.value,
        gas=request_input.gas,
        nonce=str(nonce),
        data=request_input.data,
    )


def get_meta_tx_type_data(
    chain_id: int,
    verifying_contract: str,
    domain: EIP712DomainFragment,
) -> ForwardRequestTypedData:
    """
    Assemble the ``ForwardRequest`` typed data without a message.

    Deterministic: the same ``(chain_id, verifying_contract, domain)`` always
    yields an equal domain object.
    """
    return ForwardRequestTypedData(
        domain=EIP712Domain(
            name=domain.name,
            version=domain.version,
            chainId=chain_id,
            verifyingContract=verifying_contract,
        ),
    )


async def build_typed_data(
    forwarder: AsyncContract,
    request: ForwardRequest,
    domain: EIP712DomainFragment,
) -> ForwardRequestTypedData:
    """
    Build the full typed data for ``request``.

    The chain id is read from the forwarder's connected network and the
    verifying contract is the forwarder's own address.
    """
    chain_id = await forwarder.w3.eth.chain_id
    typed_data = get_meta_tx_type_data(chain_id, forwarder.address, domain)
    typed_data.message = request.to_message()
    return typed_data


async def sign_meta_tx_request(
    signer: Signer,
    forwarder: AsyncContract,
    request_input: MetaTxInput,
    domain: EIP712DomainFragment,
) -> SignedForwardRequest:
    """
    Build and sign a forward request.

    Two concurrent calls for the same sender may read the same nonce; only
    one of the resulting requests is accepted on-chain.

    Returns:
        SignedForwardRequest: The request and its signature.
    """
    request = await build_forward_request(forwarder, request_input)
    typed_data = await build_typed_data(forwarder, request, domain)
    signature = await sign_typed_data(
        signer,
        typed_data.domain.to_dict(),
        typed_data.message_types(),
        typed_data.message,
    )
    return SignedForwardRequest(request=request, signature=signature)


# ---------------------------------------------------------------------------
# Forwarded transaction
# ---------------------------------------------------------------------------

async def resolve_address(w3: AsyncWeb3, target: str) -> str:
    """
    Resolve ``target`` to a checksum address, looking ENS names up on-chain.

    Raises:
        PreconditionError: If an ENS name has no address record.
    """
    if is_address(target):
        return AsyncWeb3.to_checksum_address(target)
    resolved = await w3.ens.address(target)
    if resolved is None:
        raise PreconditionError(f"Could not resolve target address: {target}")
    return AsyncWeb3.to_checksum_address(resolved)


def call_data_hex(data: Union[str, bytes]) -> str:
    """Return call data as a 0x-prefixed hex string."""
    if isinstance(data, (bytes, bytearray)):
        return "0x" + bytes(data).hex()
    return data


def require_to_and_data(tx: TxParams, provider: str = "The relayer") -> None:
    """Raise ``PreconditionError`` if ``tx`` lacks ``to`` or ``data``."""
    if tx.get("data") is None or tx.get("to") is None:
        raise PreconditionError(
            f"{provider} requires a data field and to address in the transaction."
        )


async def create_forwarded_transaction(
    tx: TxParams,
    forwarder_config: ForwarderConfig,
    signer: Signer,
) -> TxParams:
    """
    Wrap ``tx`` into a signed ``execute(request, signature)`` call on the forwarder.

    The returned transaction targets the forwarder and carries no ``from``
    field: it is broadcast by a third-party relayer, not by ``signer``.

    Args:
        tx: Prepared transaction; ``to`` and ``data`` are required.
        forwarder_config: Forwarder address and EIP-712 domain fragment.
        signer: Signing capability; its web3 connection is used for reads.

    Returns:
        TxParams: ``{"to": forwarder, "data": execute call data}``.

    Raises:
        PreconditionError: If ``tx`` lacks ``to`` or ``data`` (no network call
            is made) or ``to`` does not resolve.
    """
    require_to_and_data(tx)

    forwarder = get_forwarder_contract(signer.w3, forwarder_config.address)
    target = await resolve_address(signer.w3, str(tx["to"]))
    signed = await sign_meta_tx_request(
        signer,
        forwarder,
        MetaTxInput(from_=signer.address, to=target, data=call_data_hex(tx["data"])),
        forwarder_config.eip712_domain,
    )

    # no "from": the relayer broadcasts this, not the signer
    return {
        "to": forwarder.address,
        "data": forwarder.encode_abi(
            "execute",
            args=[signed.request.to_abi_tuple(), to_bytes(hexstr=signed.signature)],
        ),
    }
