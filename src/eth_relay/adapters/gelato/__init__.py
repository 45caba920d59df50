"""
Gelato Relay adapter.
"""

from .adapter import GelatoRelayer
from .client import GelatoRelayClient
from .schemas import GelatoConfig, GelatoRelayStatus

__all__ = [
    "GelatoRelayer",
    "GelatoRelayClient",
    "GelatoConfig",
    "GelatoRelayStatus",
]
