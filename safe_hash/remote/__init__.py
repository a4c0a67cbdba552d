"""
Clients for the remote collaborators: the Safe transaction service, the
block-explorer verification lookup and the four-byte signature directory.
"""
from .etherscan import EtherscanClient, VerificationStatus
from .four_byte import FourByteDirectory
from .safe_api import SafeApiClient, validate_safe_tx_hash, validate_transaction_details

__all__ = [
    "EtherscanClient",
    "FourByteDirectory",
    "SafeApiClient",
    "VerificationStatus",
    "validate_safe_tx_hash",
    "validate_transaction_details",
]
