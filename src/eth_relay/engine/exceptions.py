"""
Exception and Error Definitions Module

Defines the exception hierarchy for meta-transaction construction and relay
submission. Upstream failures (RPC errors, HTTP errors, signer rejections)
are not wrapped: they propagate to the caller unchanged.

Exception Hierarchy:
    RelayError (root)
    ├── PreconditionError
    │   └── ConfigurationError
    ├── UnsupportedOperationError
    └── RelayProviderError
"""


class RelayError(Exception):
    """
    Root exception class for all project-specific exceptions.

    All custom exceptions inherit from this class so callers can catch
    every relay-layer failure in one place.
    """
    pass


class PreconditionError(RelayError):
    """
    Raised before any network call when a request cannot possibly succeed.

    This includes scenarios such as:
    - Transaction without a ``to`` address
    - Transaction without ``data``
    - A target name that does not resolve to an address

    Never retried.
    """
    pass


class ConfigurationError(PreconditionError):
    """
    Raised when configuration is missing or invalid.

    This includes scenarios such as:
    - Missing provider API key
    - Forwarder address set without its EIP-712 domain
    - Signer without a connected web3 provider
    """
    pass


class UnsupportedOperationError(RelayError):
    """
    Raised when a relay provider does not offer an optional capability.

    ``get_balance`` and ``fund`` are part of every adapter's surface but
    some providers expose neither.
    """
    pass


class RelayProviderError(RelayError):
    """
    Raised when a relay provider answers with a payload the adapter cannot use.

    This includes scenarios such as:
    - Submission accepted without a task identifier
    - Balance response without a balance field

    Attributes:
        provider: Name of the relay provider
    """

    def __init__(self, message: str, provider: str = ""):
        super().__init__(message)
        self.provider = provider
