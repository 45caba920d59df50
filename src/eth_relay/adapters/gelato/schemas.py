"""
Gelato Adapter Schema Models

Configuration and status models for the Gelato relay adapter.
"""

from typing import Optional

from pydantic import Field

from ...engine.exceptions import ConfigurationError
from ...schemas.bases import CanonicalModel, ForwarderConfig, RelayStatus
from .constants import get_api_key_from_env, get_api_url_from_env, API_URL


class GelatoConfig(CanonicalModel):
    """
    Gelato adapter configuration.

    Setting ``forwarder`` routes every call through that custom forwarder via
    ``sponsoredCall``; leaving it unset uses Gelato's own ERC-2771 relay
    contract, which does not support concurrent requests from one user.

    Attributes:
        api_key: Gelato 1Balance sponsor API key.
        forwarder: Optional custom forwarder.
        api_url: Gelato Relay API base URL.
        request_timeout: HTTP timeout in seconds.
    """

    api_key: str = Field(..., description="Gelato sponsor API key")
    forwarder: Optional[ForwarderConfig] = Field(default=None, description="Optional custom forwarder")
    api_url: str = Field(default=API_URL, description="Gelato Relay API base URL")
    request_timeout: float = Field(default=60.0, gt=0, description="HTTP timeout (seconds)")

    @classmethod
    def from_env(cls) -> "GelatoConfig":
        """
        Build the configuration from ``GELATO_API_KEY``, ``GELATO_API_URL``
        and the ``RELAY_FORWARDER_*`` variables.

        Raises:
            ConfigurationError: If ``GELATO_API_KEY`` is not set.
        """
        api_key = get_api_key_from_env()
        if not api_key:
            raise ConfigurationError(
                "Gelato API key not provided. Set the 'GELATO_API_KEY' environment variable."
            )
        return cls(
            api_key=api_key,
            forwarder=ForwarderConfig.from_env(),
            api_url=get_api_url_from_env(),
        )


class GelatoRelayStatus(RelayStatus):
    """
    Relay status enriched with Gelato task fields.

    Attributes:
        task_state: Raw Gelato task state (e.g. ``"ExecPending"``).
        block_number: Block the transaction was mined in, when known.
        last_check_message: Gelato's last diagnostic message.
    """

    task_state: Optional[str] = Field(default=None, alias="taskState")
    block_number: Optional[int] = Field(default=None, alias="blockNumber")
    last_check_message: Optional[str] = Field(default=None, alias="lastCheckMessage")
