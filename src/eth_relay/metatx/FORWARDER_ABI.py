"""
EIP-2771 Forwarder Smart Contract ABI Module

Minimal ABI of the OpenZeppelin ``MinimalForwarder`` covering the calls the
meta-transaction builder needs.

Usage:
    from FORWARDER_ABI import get_forwarder_abi

    forwarder = w3.eth.contract(address=forwarder_address, abi=get_forwarder_abi())
    nonce = await forwarder.functions.getNonce(sender).call()
"""

from typing import Dict, Any, List


_FORWARD_REQUEST_COMPONENTS: List[Dict[str, Any]] = [
    {"name": "from", "type": "address"},
    {"name": "to", "type": "address"},
    {"name": "value", "type": "uint256"},
    {"name": "gas", "type": "uint256"},
    {"name": "nonce", "type": "uint256"},
    {"name": "data", "type": "bytes"},
]


def get_nonce_abi() -> List[Dict[str, Any]]:
    """
    Get ABI for ``getNonce(address from) returns (uint256)``.

    Returns:
        List[Dict[str, Any]]: ABI for the forwarder's nonce getter.
    """
    return [
        {
            "name": "getNonce",
            "type": "function",
            "stateMutability": "view",
            "inputs": [{"name": "from", "type": "address"}],
            "outputs": [{"name": "", "type": "uint256"}],
        }
    ]


def get_execute_abi() -> List[Dict[str, Any]]:
    """
    Get ABI for ``execute(ForwardRequest req, bytes signature)``.

    Returns:
        List[Dict[str, Any]]: ABI for the forwarder's execute entry point.
    """
    return [
        {
            "name": "execute",
            "type": "function",
            "stateMutability": "payable",
            "inputs": [
                {
                    "name": "req",
                    "type": "tuple",
                    "internalType": "struct MinimalForwarder.ForwardRequest",
                    "components": _FORWARD_REQUEST_COMPONENTS,
                },
                {"name": "signature", "type": "bytes"},
            ],
            "outputs": [
                {"name": "", "type": "bool"},
                {"name": "", "type": "bytes"},
            ],
        }
    ]


def get_verify_abi() -> List[Dict[str, Any]]:
    """Get ABI for ``verify(ForwardRequest req, bytes signature) returns (bool)``."""
    return [
        {
            "name": "verify",
            "type": "function",
            "stateMutability": "view",
            "inputs": [
                {
                    "name": "req",
                    "type": "tuple",
                    "internalType": "struct MinimalForwarder.ForwardRequest",
                    "components": _FORWARD_REQUEST_COMPONENTS,
                },
                {"name": "signature", "type": "bytes"},
            ],
            "outputs": [{"name": "", "type": "bool"}],
        }
    ]


def get_forwarder_abi() -> List[Dict[str, Any]]:
    """Full forwarder ABI (``getNonce``, ``execute``, ``verify``)."""
    return get_nonce_abi() + get_execute_abi() + get_verify_abi()
