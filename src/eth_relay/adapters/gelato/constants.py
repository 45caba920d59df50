"""
Gelato Relay Configuration Constants

Endpoints, contract addresses, task states and environment getters used by
the Gelato adapter.
"""

import os
from typing import Dict, Any, List, Optional

import dotenv

dotenv.load_dotenv()


#: Gelato Relay REST API base URL.
API_URL: str = "https://api.gelato.digital"

#: GelatoRelay1BalanceERC2771 contract (Gelato's own ERC-2771 forwarder).
GELATO_RELAY_ERC2771_ADDRESS: str = "0xd8253782c45a12053594b9deB72d8e8aB2Fca54c"

#: EIP-712 domain of the Gelato ERC-2771 relay contract.
GELATO_RELAY_ERC2771_DOMAIN_NAME: str = "GelatoRelay1BalanceERC2771"
GELATO_RELAY_ERC2771_DOMAIN_VERSION: str = "1"

#: Seconds a user signature for Gelato's ERC-2771 relay stays valid.
USER_DEADLINE_GAP: int = 24 * 60 * 60

#: Task states reported once the relayed transaction succeeded.
SUCCESS_TASK_STATES = frozenset({"ExecSuccess"})

#: Task states reported when the relay failed for good.
ERROR_TASK_STATES = frozenset({"ExecReverted", "Blacklisted", "Cancelled", "NotFound"})

# Not the Gelato supported-networks list: a chain missing here may still be
# relayed, but 1Balance treats it as a testnet for balance queries.
MAINNET_CHAIN_IDS = frozenset({
    1,               # eth mainnet
    137,             # polygon
    1_313_161_554,   # aurora mainnet
    10,              # optimism mainnet
    11_297_108_109,  # palm mainnet
    42_161,          # arbitrum mainnet
    42_220,          # celo mainnet
    43_114,          # avalanche c chain
    50,              # xdc
    56,              # bsc
    25,              # cronos
    250,             # fantom
    100,             # xdai / gnosis
    1284,            # moonbeam
    1285,            # moonriver
})


def network_group(chain_id: int) -> str:
    """1Balance network group for ``chain_id``: ``"mainnets"`` or ``"testnets"``."""
    return "mainnets" if chain_id in MAINNET_CHAIN_IDS else "testnets"


def get_user_nonce_abi() -> List[Dict[str, Any]]:
    """ABI for ``userNonce(address) returns (uint256)`` on the Gelato ERC-2771 relay."""
    return [
        {
            "name": "userNonce",
            "type": "function",
            "stateMutability": "view",
            "inputs": [{"name": "", "type": "address"}],
            "outputs": [{"name": "", "type": "uint256"}],
        }
    ]


def get_api_key_from_env() -> Optional[str]:
    """
    Load the Gelato sponsor API key from environment variables.

    Example:
        # In your .env file or environment setup:
        GELATO_API_KEY=your_sponsor_key
    """
    return os.getenv("GELATO_API_KEY")


def get_api_url_from_env() -> str:
    """Gelato API base URL, overridable with ``GELATO_API_URL``."""
    return os.getenv("GELATO_API_URL") or API_URL
