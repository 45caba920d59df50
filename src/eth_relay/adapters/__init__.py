from .bases import Relayer, RelayerBuilder
from .registry import RelayerRegistry
from .gelato import (
    GelatoRelayer,
    GelatoRelayClient,
    GelatoConfig,
    GelatoRelayStatus,
)
from .itx import (
    ITXRelayer,
    ITXConfig,
    ITXOptions,
    ITXRelayRequest,
    ITXRelayStatus,
)

__all__ = [
    "Relayer",
    "RelayerBuilder",
    "RelayerRegistry",
    "GelatoRelayer",
    "GelatoRelayClient",
    "GelatoConfig",
    "GelatoRelayStatus",
    "ITXRelayer",
    "ITXConfig",
    "ITXOptions",
    "ITXRelayRequest",
    "ITXRelayStatus",
]
