"""
End-to-end hash computation for the three payload kinds a Safe signs.
"""
import logging
from typing import Union

from .hasher import DomainHasher, MessageHasher, SafeHasher, TxMessageHasher, safe_message_struct_hash
from .models import HashTriple, TransactionParameters
from .safe_version import SafeVersion, ensure_supported

logger = logging.getLogger(__name__)


def tx_signing_hashes(
    tx: TransactionParameters,
    chain_id: int,
    safe_address: str,
    safe_version: Union[SafeVersion, str],
) -> HashTriple:
    """
    Domain, SafeTx struct and final hashes of a multisig transaction.

    Raises:
        VersionUnsupportedError: If the Safe version is below the minimum
    """
    version = ensure_supported(SafeVersion.parse(safe_version))
    domain_hash = DomainHasher(version, chain_id, safe_address).hash()
    message_hash = TxMessageHasher.from_transaction(version, tx).hash()
    safe_hash = SafeHasher(domain_hash, message_hash).hash()
    logger.debug(f"Safe tx hash for nonce {tx.nonce}: {safe_hash.hex()}")
    return HashTriple(domain_hash=domain_hash, message_hash=message_hash, safe_hash=safe_hash)


def msg_signing_hashes(
    message: str,
    chain_id: int,
    safe_address: str,
    safe_version: Union[SafeVersion, str],
) -> HashTriple:
    """
    Hashes of an off-chain Safe message. ``raw_message_hash`` carries the
    personal-sign hash of the message text.
    """
    version = ensure_supported(SafeVersion.parse(safe_version))
    hasher = MessageHasher(message)
    raw_hash = hasher.raw_hash()
    domain_hash = DomainHasher(version, chain_id, safe_address).hash()
    message_hash = hasher.hash()
    safe_hash = SafeHasher(domain_hash, message_hash).hash()
    return HashTriple(
        domain_hash=domain_hash,
        message_hash=message_hash,
        safe_hash=safe_hash,
        raw_message_hash=raw_hash,
    )


def safe_ui_hashes(
    digest: bytes,
    chain_id: int,
    safe_address: str,
    safe_version: Union[SafeVersion, str],
) -> HashTriple:
    """
    Values the Safe UI shows when it signs an EIP-712 digest as a SafeMessage.
    """
    version = ensure_supported(SafeVersion.parse(safe_version))
    domain_hash = DomainHasher(version, chain_id, safe_address).hash()
    message_hash = safe_message_struct_hash(digest)
    safe_hash = SafeHasher(domain_hash, message_hash).hash()
    return HashTriple(
        domain_hash=domain_hash,
        message_hash=message_hash,
        safe_hash=safe_hash,
        raw_message_hash=bytes(digest),
    )
