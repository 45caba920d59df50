"""
Base Schema Models for the eth-relay System

This module defines the shared data model every other layer speaks: the
meta-transaction request that gets signed, the forwarder configuration that
identifies the on-chain contract, and the provider-neutral relay response and
status objects returned by every adapter.

Core Classes:
    - CanonicalModel: Pydantic base model with deterministic JSON serialization
    - ForwardRequest: EIP-2771 forward request (the signed meta-transaction body)
    - MetaTxInput: Caller-supplied fields merged into a ForwardRequest
    - EIP712DomainFragment: Static part of the EIP-712 domain (name, version)
    - ForwarderConfig: Which forwarder contract to target and its domain
    - SignedForwardRequest: ForwardRequest plus its EIP-712 signature
    - RelayResponse: Opaque task handle returned by a relay provider
    - RelayStatus: Provider-neutral status of a relay task
    - RelayState: Pending / complete / errored classification of a RelayStatus

Dependencies:
    - pydantic: For data validation and serialization
    - eth_utils: For hex/bytes conversion of call data
"""

import json
import os
from enum import Enum
from typing import Optional, Dict, Any

from eth_utils import to_bytes
from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..engine.exceptions import ConfigurationError


#: Gas limit used for a forward request when the caller does not specify one.
DEFAULT_FORWARD_GAS: int = 2_000_000


class CanonicalModel(BaseModel):
    """
    Pydantic base model with canonical JSON serialization.

    Keys are sorted and whitespace is stripped so that two equal models always
    serialize to the same string, which keeps log lines and request payloads
    comparable across runs.

    Example:
        class MyModel(CanonicalModel):
            name: str
            value: int

        MyModel(name="test", value=123).to_canonical_json()
        # '{"name":"test","value":123}'
    """

    model_config = ConfigDict(populate_by_name=True)

    def to_canonical_json(self) -> str:
        """
        Convert model to a canonical JSON string (sorted keys, compact separators).

        Returns:
            str: Deterministic JSON representation using field aliases.
        """
        data = self.model_dump(mode="json", by_alias=True)
        return json.dumps(
            data,
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model to dictionary representation (aliases applied).

        Returns:
            Dict[str, Any]: Dictionary with all model fields.
        """
        return self.model_dump(by_alias=True)


class EIP712DomainFragment(CanonicalModel):
    """
    Static part of an EIP-712 domain.

    ``chainId`` and ``verifyingContract`` are always computed at signing time
    from the forwarder contract, so only ``name`` and ``version`` are supplied
    by configuration. Both must match the values the forwarder contract was
    deployed with or the on-chain signature check fails.

    Attributes:
        name: Domain name registered in the forwarder (e.g. ``"MinimalForwarder"``).
        version: Domain version string (e.g. ``"0.0.1"``).
    """

    name: str = Field(..., description="EIP-712 domain name of the forwarder")
    version: str = Field(..., description="EIP-712 domain version of the forwarder")


class ForwarderConfig(CanonicalModel):
    """
    Identifies the on-chain forwarder contract a meta-transaction targets.

    Attributes:
        address: Forwarder contract address (0x-prefixed).
        eip712_domain: Static domain fragment the forwarder was deployed with.

    Example::

        forwarder = ForwarderConfig(
            address="0x6A7ebF6dC5dA3B6b3F0bD7c1C8F6e5bD5b2a0e1c",
            eip712_domain=EIP712DomainFragment(name="MinimalForwarder", version="0.0.1"),
        )
    """

    address: str = Field(..., description="Forwarder contract address")
    eip712_domain: EIP712DomainFragment = Field(
        ..., alias="EIP712Domain", description="Static EIP-712 domain of the forwarder"
    )

    @classmethod
    def from_env(cls) -> Optional["ForwarderConfig"]:
        """
        Build a forwarder configuration from environment variables.

        Reads ``RELAY_FORWARDER_ADDRESS``, ``RELAY_FORWARDER_NAME`` and
        ``RELAY_FORWARDER_VERSION``. Returns ``None`` when no address is set,
        so callers can fall back to a provider's own forwarder.

        Raises:
            ConfigurationError: If an address is set but the domain name or
                version is missing.
        """
        address = os.getenv("RELAY_FORWARDER_ADDRESS")
        if not address:
            return None
        name = os.getenv("RELAY_FORWARDER_NAME")
        version = os.getenv("RELAY_FORWARDER_VERSION")
        if not name or not version:
            raise ConfigurationError(
                "RELAY_FORWARDER_ADDRESS is set but RELAY_FORWARDER_NAME or "
                "RELAY_FORWARDER_VERSION is missing."
            )
        return cls(
            address=address,
            eip712_domain=EIP712DomainFragment(name=name, version=version),
        )


class MetaTxInput(CanonicalModel):
    """
    Caller-supplied fields of a meta-transaction.

    ``value`` and ``gas`` carry documented defaults; the nonce is never
    supplied by the caller, it is always read from the forwarder.

    Attributes:
        from_: Address of the signer on whose behalf the call executes.
        to: Target contract address.
        data: Call data (0x-prefixed hex).
        value: Wei forwarded with the call. Defaults to ``0``.
        gas: Gas limit of the inner call. Defaults to ``2_000_000``.
    """

    from_: str = Field(..., alias="from", description="Signer address")
    to: str = Field(..., description="Target contract address")
    data: str = Field(..., description="Call data (0x-prefixed hex)")
    value: int = Field(default=0, ge=0, description="Wei forwarded with the call")
    gas: int = Field(default=DEFAULT_FORWARD_GAS, ge=0, description="Gas limit of the inner call")


class ForwardRequest(CanonicalModel):
    """
    EIP-2771 forward request, the body of a meta-transaction.

    Mirrors the ``ForwardRequest`` struct of the OpenZeppelin MinimalForwarder.
    ``nonce`` is kept as a decimal string (as read from the forwarder) so it
    survives JSON transport without precision loss.

    Attributes:
        from_: Signer address (serialized as ``from``).
        to: Target contract address.
        value: Wei forwarded with the call.
        gas: Gas limit of the inner call.
        nonce: Forwarder nonce of ``from_`` at construction time.
        data: Call data (0x-prefixed hex).
    """

    from_: str = Field(..., alias="from", description="Signer address")
    to: str = Field(..., description="Target contract address")
    value: int = Field(default=0, ge=0, description="Wei forwarded with the call")
    gas: int = Field(default=DEFAULT_FORWARD_GAS, ge=0, description="Gas limit of the inner call")
    nonce: str = Field(..., description="Forwarder nonce as a decimal string")
    data: str = Field(..., description="Call data (0x-prefixed hex)")

    def to_message(self) -> Dict[str, Any]:
        """Return the EIP-712 message dict (``nonce`` as int, ``data`` as bytes)."""
        return {
            "from": self.from_,
            "to": self.to,
            "value": self.value,
            "gas": self.gas,
            "nonce": int(self.nonce),
            "data": to_bytes(hexstr=self.data),
        }

    def to_abi_tuple(self) -> tuple:
        """Return the struct as a positional tuple for ``execute(req, signature)``."""
        return (
            self.from_,
            self.to,
            self.value,
            self.gas,
            int(self.nonce),
            to_bytes(hexstr=self.data),
        )


class SignedForwardRequest(CanonicalModel):
    """
    A forward request together with its EIP-712 signature.

    Produced once per logical transaction. Never reuse one: resubmitting it
    replays an already consumed nonce and the forwarder rejects it.
    """

    request: ForwardRequest
    signature: str = Field(..., description="0x-prefixed 65-byte ECDSA signature")


class RelayResponse(CanonicalModel):
    """
    Handle returned by a relay provider after accepting a submission.

    ``task_id`` is opaque and only meaningful to the adapter that produced it.
    Providers may attach extra fields (e.g. a transaction hash).
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    task_id: str = Field(..., alias="taskId", description="Provider task identifier")


class RelayState(str, Enum):
    """
    Classification of a relay status.

    Attributes:
        PENDING: Neither complete nor errored yet
        COMPLETE: The underlying transaction was mined successfully
        ERRORED: The provider reported a terminal failure
    """
    PENDING = "pending"
    COMPLETE = "complete"
    ERRORED = "errored"


class RelayStatus(CanonicalModel):
    """
    Provider-neutral status of a relay task.

    At most one of ``is_complete`` / ``is_error`` is true; both false means the
    task is still pending. Adapters extend the model (or attach extra fields)
    with provider-specific data.

    Attributes:
        is_complete: The relayed transaction was mined successfully.
        is_error: The provider reported a terminal failure.
        transaction_hash: Hash of the broadcast transaction, when known.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    is_complete: bool = Field(default=False, alias="isComplete")
    is_error: bool = Field(default=False, alias="isError")
    transaction_hash: Optional[str] = Field(default=None, alias="transactionHash")

    @model_validator(mode="after")
    def _check_exclusive(self) -> "RelayStatus":
        if self.is_complete and self.is_error:
            raise ValueError("A relay status cannot be both complete and errored")
        return self

    @classmethod
    def pending(cls, **extra: Any) -> "RelayStatus":
        """Build a pending status (neither complete nor errored)."""
        return cls(is_complete=False, is_error=False, transaction_hash=None, **extra)

    @property
    def state(self) -> RelayState:
        if self.is_complete:
            return RelayState.COMPLETE
        if self.is_error:
            return RelayState.ERRORED
        return RelayState.PENDING

    def is_terminal(self) -> bool:
        """Return True once the task is complete or errored."""
        return self.is_complete or self.is_error
