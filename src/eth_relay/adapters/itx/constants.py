"""
Infura ITX Configuration Constants
"""

import os
from typing import Optional

import dotenv

dotenv.load_dotenv()


#: ITX deposit contract (same address on all public Ethereum networks).
ITX_DEPOSIT_CONTRACT: str = "0x015C7C7A7D65bbdb117C573007219107BD7486f9"

#: Chains ITX relays on: ethereum mainnet, goerli, polygon mainnet.
SUPPORTED_CHAIN_IDS = frozenset({1, 5, 137})

#: Default gas limit sent with every relay request.
DEFAULT_RELAY_GAS: str = "1000000"

#: Default ITX schedule.
DEFAULT_SCHEDULE: str = "slow"

#: ABI types of the relay request hash signed by the sender.
RELAY_REQUEST_HASH_TYPES = ["address", "bytes", "uint256", "uint256", "string"]


def get_rpc_url_from_env() -> Optional[str]:
    """
    Load the ITX-enabled RPC endpoint from environment variables.

    Example:
        # In your .env file or environment setup:
        ITX_RPC_URL=https://mainnet.infura.io/v3/<project id>
    """
    return os.getenv("ITX_RPC_URL")
