"""
eth-relay: gasless meta-transactions for EVM chains.

Wraps a prepared transaction into a signed EIP-2771 forward request and
hands it to a third-party relay service (Gelato, Infura ITX) that pays the
gas. A registry picks a relay provider per chain and ``wait_for_relay``
polls the provider until the relayed transaction settles.

Example:
    registry = RelayerRegistry([GelatoRelayer.builder(GelatoConfig.from_env())])
    relayer = await registry.resolve(137, LocalSigner(private_key, w3=w3))
    response = await relayer.send({"to": target, "data": call_data})
    status = await wait_for_relay(relayer, response.task_id)
"""

from .engine.exceptions import (
    RelayError,
    PreconditionError,
    ConfigurationError,
    UnsupportedOperationError,
    RelayProviderError,
)
from .engine.waiters import wait_for_relay, DEFAULT_POLL_PERIOD, DEFAULT_STOP_AFTER
from .schemas.bases import (
    EIP712DomainFragment,
    ForwarderConfig,
    MetaTxInput,
    ForwardRequest,
    SignedForwardRequest,
    RelayResponse,
    RelayState,
    RelayStatus,
)
from .metatx import (
    Signer,
    LocalSigner,
    sign_typed_data,
    build_forward_request,
    get_meta_tx_type_data,
    build_typed_data,
    sign_meta_tx_request,
    create_forwarded_transaction,
)
from .adapters import (
    Relayer,
    RelayerBuilder,
    RelayerRegistry,
    GelatoRelayer,
    GelatoConfig,
    ITXRelayer,
    ITXConfig,
    ITXOptions,
)

__all__ = [
    "RelayError",
    "PreconditionError",
    "ConfigurationError",
    "UnsupportedOperationError",
    "RelayProviderError",
    "wait_for_relay",
    "DEFAULT_POLL_PERIOD",
    "DEFAULT_STOP_AFTER",
    "EIP712DomainFragment",
    "ForwarderConfig",
    "MetaTxInput",
    "ForwardRequest",
    "SignedForwardRequest",
    "RelayResponse",
    "RelayState",
    "RelayStatus",
    "Signer",
    "LocalSigner",
    "sign_typed_data",
    "build_forward_request",
    "get_meta_tx_type_data",
    "build_typed_data",
    "sign_meta_tx_request",
    "create_forwarded_transaction",
    "Relayer",
    "RelayerBuilder",
    "RelayerRegistry",
    "GelatoRelayer",
    "GelatoConfig",
    "ITXRelayer",
    "ITXConfig",
    "ITXOptions",
]
