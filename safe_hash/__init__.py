"""
safe-hash: recompute Safe multisig transaction, message and EIP-712 hashes
so they can be compared against what a hardware wallet displays.
"""
from .version import __version__
from .exceptions import (
    SafeHashError, EncodingError, DecodingError, VersionUnsupportedError,
    UnsupportedChainError, LookupUnavailableError, MismatchError
)
from .models import HashTriple, TransactionParameters, SafeTransaction, TxFileInput, UserTransactionArgs
from .safe_version import SafeVersion
from .chains import chain_id_of, chain_name_of, safe_api_url, supported_chain_names
from .hasher import (
    CallDataHasher, DomainHasher, ExecuteTxHasher, MessageHasher, SafeHasher, TxMessageHasher
)
from .eip712 import TypedDataDocument, TypedDataHasher, typed_data_hashes
from .signing import msg_signing_hashes, safe_ui_hashes, tx_signing_hashes
from .checks import SafeWarnings, check_suspicious_content
from .decoder import CalldataDecoder, DecodedCall
from .sources import resolve_transaction

__all__ = [
    "__version__",
    "SafeHashError",
    "EncodingError",
    "DecodingError",
    "VersionUnsupportedError",
    "UnsupportedChainError",
    "LookupUnavailableError",
    "MismatchError",
    "HashTriple",
    "TransactionParameters",
    "SafeTransaction",
    "TxFileInput",
    "UserTransactionArgs",
    "SafeVersion",
    "chain_id_of",
    "chain_name_of",
    "safe_api_url",
    "supported_chain_names",
    "CallDataHasher",
    "DomainHasher",
    "ExecuteTxHasher",
    "MessageHasher",
    "SafeHasher",
    "TxMessageHasher",
    "TypedDataDocument",
    "TypedDataHasher",
    "typed_data_hashes",
    "msg_signing_hashes",
    "safe_ui_hashes",
    "tx_signing_hashes",
    "SafeWarnings",
    "check_suspicious_content",
    "CalldataDecoder",
    "DecodedCall",
    "resolve_transaction",
]
