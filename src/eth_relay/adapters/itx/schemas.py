"""
ITX Adapter Schema Models
"""

from typing import Literal, Optional

from pydantic import Field

from ...engine.exceptions import ConfigurationError
from ...schemas.bases import CanonicalModel, ForwarderConfig, RelayStatus
from .constants import DEFAULT_RELAY_GAS, DEFAULT_SCHEDULE, get_rpc_url_from_env


class ITXOptions(CanonicalModel):
    """
    Per-request ITX options.

    Attributes:
        gas: Gas limit of the relayed transaction (decimal string). Defaults to ``"1000000"``.
        schedule: ``"fast"`` or ``"slow"``. Defaults to ``"slow"``.
    """

    gas: str = Field(default=DEFAULT_RELAY_GAS, description="Gas limit (decimal string)")
    schedule: Literal["fast", "slow"] = Field(default=DEFAULT_SCHEDULE, description="ITX schedule")


class ITXConfig(CanonicalModel):
    """
    ITX adapter configuration.

    ITX always relays through a custom forwarder.

    Attributes:
        forwarder: Forwarder the meta-transaction targets.
        options: Gas and schedule sent with each request.
        rpc_url: ITX-enabled RPC endpoint. When unset the signer's own web3
            connection is used.
        request_timeout: RPC timeout in seconds.
    """

    forwarder: ForwarderConfig
    options: ITXOptions = Field(default_factory=ITXOptions)
    rpc_url: Optional[str] = Field(default=None, description="ITX-enabled RPC endpoint")
    request_timeout: float = Field(default=60.0, gt=0, description="RPC timeout (seconds)")

    @classmethod
    def from_env(cls) -> "ITXConfig":
        """
        Build the configuration from ``ITX_RPC_URL`` and the ``RELAY_FORWARDER_*``
        variables.

        Raises:
            ConfigurationError: If no forwarder is configured.
        """
        forwarder = ForwarderConfig.from_env()
        if forwarder is None:
            raise ConfigurationError(
                "ITX requires a forwarder. Set 'RELAY_FORWARDER_ADDRESS', "
                "'RELAY_FORWARDER_NAME' and 'RELAY_FORWARDER_VERSION'."
            )
        return cls(forwarder=forwarder, rpc_url=get_rpc_url_from_env())


class ITXRelayRequest(CanonicalModel):
    """Payload of ``relay_sendTransaction``."""

    to: str
    data: str
    gas: str
    schedule: Literal["fast", "slow"]


class ITXRelayStatus(RelayStatus):
    """
    Relay status enriched with the mined receipt.

    Attributes:
        block_number: Block containing the relayed transaction.
        gas_used: Gas consumed by the relayed transaction.
    """

    block_number: Optional[int] = Field(default=None, alias="blockNumber")
    gas_used: Optional[int] = Field(default=None, alias="gasUsed")
