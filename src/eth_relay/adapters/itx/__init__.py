"""
Infura ITX relay adapter.
"""

from .adapter import ITXRelayer
from .schemas import ITXConfig, ITXOptions, ITXRelayRequest, ITXRelayStatus

__all__ = [
    "ITXRelayer",
    "ITXConfig",
    "ITXOptions",
    "ITXRelayRequest",
    "ITXRelayStatus",
]
