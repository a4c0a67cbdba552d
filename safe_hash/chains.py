"""
Static registry of chains supported by the Safe transaction service.
"""
from dataclasses import dataclass
from typing import Dict, List

from .config import safe_api_url_override
from .exceptions import UnsupportedChainError


@dataclass(frozen=True)
class ChainDescriptor:
    name: str
    chain_id: int


SUPPORTED_CHAINS = (
    ChainDescriptor("arbitrum", 42161),
    ChainDescriptor("aurora", 1313161554),
    ChainDescriptor("avalanche", 43114),
    ChainDescriptor("base", 8453),
    ChainDescriptor("blast", 81457),
    ChainDescriptor("bsc", 56),
    ChainDescriptor("celo", 42220),
    ChainDescriptor("ethereum", 1),
    ChainDescriptor("gnosis", 100),
    ChainDescriptor("linea", 59144),
    ChainDescriptor("mantle", 5000),
    ChainDescriptor("optimism", 10),
    ChainDescriptor("polygon", 137),
    ChainDescriptor("scroll", 534352),
    ChainDescriptor("sepolia", 11155111),
    ChainDescriptor("worldchain", 480),
    ChainDescriptor("xlayer", 196),
    ChainDescriptor("zksync", 324),
    ChainDescriptor("base-sepolia", 84532),
    ChainDescriptor("gnosis-chiado", 10200),
    ChainDescriptor("polygon-zkevm", 1101),
    ChainDescriptor("hemi", 43111),
)

SAFE_API_URLS: Dict[str, str] = {
    "arbitrum": "https://safe-transaction-arbitrum.safe.global",
    "aurora": "https://safe-transaction-aurora.safe.global",
    "avalanche": "https://safe-transaction-avalanche.safe.global",
    "base": "https://safe-transaction-base.safe.global",
    "blast": "https://safe-transaction-blast.safe.global",
    "bsc": "https://safe-transaction-bsc.safe.global",
    "celo": "https://safe-transaction-celo.safe.global",
    "ethereum": "https://safe-transaction-mainnet.safe.global",
    "gnosis": "https://safe-transaction-gnosis-chain.safe.global",
    "linea": "https://safe-transaction-linea.safe.global",
    "mantle": "https://safe-transaction-mantle.safe.global",
    "optimism": "https://safe-transaction-optimism.safe.global",
    "polygon": "https://safe-transaction-polygon.safe.global",
    "scroll": "https://safe-transaction-scroll.safe.global",
    "sepolia": "https://safe-transaction-sepolia.safe.global",
    "worldchain": "https://safe-transaction-worldchain.safe.global",
    "xlayer": "https://safe-transaction-xlayer.safe.global",
    "zksync": "https://safe-transaction-zksync.safe.global",
    "base-sepolia": "https://safe-transaction-base-sepolia.safe.global",
    "gnosis-chiado": "https://safe-transaction-chiado.safe.global",
    "polygon-zkevm": "https://safe-transaction-zkevm.safe.global",
    "hemi": "https://safe-transaction-hemi.safe.global",
}

_BY_NAME: Dict[str, ChainDescriptor] = {c.name: c for c in SUPPORTED_CHAINS}
_BY_ID: Dict[int, ChainDescriptor] = {c.chain_id: c for c in SUPPORTED_CHAINS}


def supported_chain_names() -> List[str]:
    return [c.name for c in SUPPORTED_CHAINS]


def chain_id_of(name: str) -> int:
    """
    Look up the numeric chain id for a chain name.

    Raises:
        UnsupportedChainError: If the chain is not supported
    """
    try:
        return _BY_NAME[name.strip().lower()].chain_id
    except KeyError:
        raise UnsupportedChainError(f"unsupported safe chain - {name}") from None


def chain_name_of(chain_id: int) -> str:
    try:
        return _BY_ID[int(chain_id)].name
    except (KeyError, ValueError):
        raise UnsupportedChainError(f"no chain found for id {chain_id}") from None


def safe_api_url(chain_id: int) -> str:
    """
    Base URL of the Safe transaction service for a chain.

    The ``SAFE_HASH_SAFE_API_URL`` environment variable overrides the table.
    """
    override = safe_api_url_override()
    if override:
        return override
    return SAFE_API_URLS[chain_name_of(chain_id)]
