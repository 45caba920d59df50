from .bases import (
    CanonicalModel,
    DEFAULT_FORWARD_GAS,
    EIP712DomainFragment,
    ForwarderConfig,
    MetaTxInput,
    ForwardRequest,
    SignedForwardRequest,
    RelayResponse,
    RelayState,
    RelayStatus,
)

__all__ = [
    "CanonicalModel",
    "DEFAULT_FORWARD_GAS",
    "EIP712DomainFragment",
    "ForwarderConfig",
    "MetaTxInput",
    "ForwardRequest",
    "SignedForwardRequest",
    "RelayResponse",
    "RelayState",
    "RelayStatus",
]
