from dataclasses import dataclass, field
from typing import Dict, Any, List

from eth_utils import to_bytes


# -----------------------------
# EIP-712 Domain
# -----------------------------

EIP712_DOMAIN_TYPE: List[Dict[str, str]] = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]


@dataclass
class EIP712Domain:
    """
    EIP-712 domain separator.
    Used to prevent signature replay across chains and forwarder deployments.
    """
    name: str
    version: str
    chainId: int
    verifyingContract: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "chainId": self.chainId,
            "verifyingContract": self.verifyingContract,
        }


# -----------------------------
# EIP-2771: Forward Request
# -----------------------------

FORWARD_REQUEST_TYPE: List[Dict[str, str]] = [
    {"name": "from", "type": "address"},
    {"name": "to", "type": "address"},
    {"name": "value", "type": "uint256"},
    {"name": "gas", "type": "uint256"},
    {"name": "nonce", "type": "uint256"},
    {"name": "data", "type": "bytes"},
]


@dataclass
class ForwardRequestTypedData:
    """
    Container for ForwardRequest typed data usable with EIP-712 signing routines.

    The message is left as a plain dict (see ``ForwardRequest.to_message``)
    so the container can be built before or after the request itself.

    Attributes:
        domain: EIP712Domain instance describing the signing domain.
        message: ForwardRequest message (``nonce`` int, ``data`` bytes).
        primary_type: The primary EIP-712 type (always "ForwardRequest").
        types: The typed definitions required by EIP-712 (automatically set).
    """
    domain: EIP712Domain
    message: Dict[str, Any] = field(default_factory=dict)

    primary_type: str = "ForwardRequest"

    types: Dict[str, List[Dict[str, str]]] = field(
        default_factory=lambda: {
            "EIP712Domain": list(EIP712_DOMAIN_TYPE),
            "ForwardRequest": list(FORWARD_REQUEST_TYPE),
        }
    )

    def message_types(self) -> Dict[str, List[Dict[str, str]]]:
        """Return the types without ``EIP712Domain`` (derived from the domain by signers)."""
        return {k: v for k, v in self.types.items() if k != "EIP712Domain"}

    def to_dict(self) -> Dict[str, Any]:
        """Return a dictionary compatible with EIP-712 structured signing.

        The returned structure follows the conventional layout consumed by
        EIP-712 signing libraries: { types, primaryType, domain, message }.
        """
        return {
            "types": self.types,
            "primaryType": self.primary_type,
            "domain": self.domain.to_dict(),
            "message": self.message,
        }


# -----------------------------
# Gelato: SponsoredCallERC2771
# -----------------------------


@dataclass
class SponsoredCallERC2771Message:
    """
    Message signed by the user for Gelato's own ERC-2771 relay contract.

    Attributes:
        chainId: Chain the call executes on.
        target: Target contract address.
        data: Call data (0x-prefixed hex).
        user: Signer address.
        userNonce: Nonce of ``user`` on the Gelato relay contract.
        userDeadline: Unix timestamp after which the relay contract rejects the call.
    """
    chainId: int
    target: str
    data: str
    user: str
    userNonce: int
    userDeadline: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chainId": self.chainId,
            "target": self.target,
            "data": self.data,
            "user": self.user,
            "userNonce": self.userNonce,
            "userDeadline": self.userDeadline,
        }

    def to_message(self) -> Dict[str, Any]:
        """Same as ``to_dict`` with ``data`` decoded to bytes for EIP-712 hashing."""
        message = self.to_dict()
        message["data"] = to_bytes(hexstr=self.data)
        return message


SPONSORED_CALL_ERC2771_TYPES: Dict[str, List[Dict[str, str]]] = {
    "SponsoredCallERC2771": [
        {"name": "chainId", "type": "uint256"},
        {"name": "target", "type": "address"},
        {"name": "data", "type": "bytes"},
        {"name": "user", "type": "address"},
        {"name": "userNonce", "type": "uint256"},
        {"name": "userDeadline", "type": "uint256"},
    ],
}
