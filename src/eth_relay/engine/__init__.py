from .exceptions import (
    RelayError,
    PreconditionError,
    ConfigurationError,
    UnsupportedOperationError,
    RelayProviderError,
)

__all__ = [
    "RelayError",
    "PreconditionError",
    "ConfigurationError",
    "UnsupportedOperationError",
    "RelayProviderError",
]
