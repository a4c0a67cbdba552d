"""
Hashers for Safe transactions and messages.

Every hasher is a small immutable object built from its inputs; ``hash()``
is a pure function of those inputs and returns 32 raw bytes.
"""
import logging
from typing import Union

from . import abi
from .models import TransactionParameters
from .safe_version import (
    DOMAIN_TYPE_BY_VERSION, SAFE_TX_TYPE_BY_VERSION, SafeVersion,
    domain_includes_chain_id, select_for_version,
)
from .utils import hex_to_bytes, keccak256, function_selector, personal_sign_hash

logger = logging.getLogger(__name__)

EIP712_PREFIX = b"\x19\x01"
SAFE_MESSAGE_TYPE = "SafeMessage(bytes message)"
EXEC_TRANSACTION_SIGNATURE = (
    "execTransaction(address,uint256,bytes,uint8,uint256,uint256,uint256,address,address,bytes)"
)


def _require_hash(value: bytes, name: str) -> bytes:
    value = bytes(value)
    if len(value) != 32:
        raise ValueError(f"{name} must be 32 bytes, got {len(value)}")
    return value


class DomainHasher:
    """
    EIP-712 domain separator of a Safe.

    Safes from 1.3.0 bind the chain id into the domain; older Safes only
    bind the verifying contract.
    """

    def __init__(self, safe_version: Union[SafeVersion, str], chain_id: int, safe_address: str):
        self.safe_version = SafeVersion.parse(safe_version)
        self.chain_id = chain_id
        self.safe_address = abi.Address(safe_address)

    def type_string(self) -> str:
        return select_for_version(DOMAIN_TYPE_BY_VERSION, self.safe_version)

    def hash(self) -> bytes:
        fields = [abi.FixedBytes(keccak256(self.type_string()))]
        if domain_includes_chain_id(self.safe_version):
            fields.append(abi.Uint(self.chain_id))
        fields.append(self.safe_address)
        return keccak256(abi.encode(abi.Tuple(fields)))


class CallDataHasher:
    """Keccak-256 of hex-encoded call data."""

    def __init__(self, calldata: str):
        self.calldata = calldata

    def hash(self) -> bytes:
        """
        Raises:
            DecodingError: If the call data is not valid hex
        """
        return keccak256(hex_to_bytes(self.calldata))


class TxMessageHasher:
    """
    SafeTx struct hash. ``data_hashed`` is the Keccak-256 of the call data,
    as produced by ``CallDataHasher``.
    """

    def __init__(
        self,
        safe_version: Union[SafeVersion, str],
        to: str,
        value: int,
        data_hashed: bytes,
        operation: int,
        safe_tx_gas: int,
        base_gas: int,
        gas_price: int,
        gas_token: str,
        refund_receiver: str,
        nonce: int,
    ):
        self.safe_version = SafeVersion.parse(safe_version)
        self.fields = [
            abi.Address(to),
            abi.Uint(value),
            abi.FixedBytes(_require_hash(data_hashed, "data_hashed")),
            abi.Uint(operation, 8),
            abi.Uint(safe_tx_gas),
            abi.Uint(base_gas),
            abi.Uint(gas_price),
            abi.Address(gas_token),
            abi.Address(refund_receiver),
            abi.Uint(nonce),
        ]

    @classmethod
    def from_transaction(
        cls, safe_version: Union[SafeVersion, str], tx: TransactionParameters
    ) -> "TxMessageHasher":
        return cls(
            safe_version,
            tx.to,
            tx.value,
            CallDataHasher(tx.data).hash(),
            tx.operation,
            tx.safe_tx_gas,
            tx.base_gas,
            tx.gas_price,
            tx.gas_token,
            tx.refund_receiver,
            tx.nonce,
        )

    def type_string(self) -> str:
        return select_for_version(SAFE_TX_TYPE_BY_VERSION, self.safe_version)

    def hash(self) -> bytes:
        typehash = abi.FixedBytes(keccak256(self.type_string()))
        return keccak256(abi.encode(abi.Tuple([typehash] + self.fields)))


class SafeHasher:
    """Final hash: keccak256(0x19 0x01 ++ domainHash ++ structHash)."""

    def __init__(self, domain_hash: bytes, message_hash: bytes):
        self.domain_hash = _require_hash(domain_hash, "domain_hash")
        self.message_hash = _require_hash(message_hash, "message_hash")

    def hash(self) -> bytes:
        return keccak256(EIP712_PREFIX + self.domain_hash + self.message_hash)


def safe_message_struct_hash(digest: bytes) -> bytes:
    """SafeMessage struct hash for a 32-byte message digest."""
    inner = keccak256(abi.encode(abi.FixedBytes(_require_hash(digest, "digest"))))
    return keccak256(abi.encode(abi.Tuple([
        abi.FixedBytes(keccak256(SAFE_MESSAGE_TYPE)),
        abi.FixedBytes(inner),
    ])))


class MessageHasher:
    """
    Off-chain Safe message hasher.

    CRLF line endings are normalized to LF before hashing.
    """

    def __init__(self, message: str):
        self.message = message.replace("\r\n", "\n")

    def raw_hash(self) -> bytes:
        """Personal-sign (EIP-191) hash of the message text."""
        return personal_sign_hash(self.message)

    def hash(self) -> bytes:
        return safe_message_struct_hash(self.raw_hash())


class ExecuteTxHasher:
    """
    Calldata of ``execTransaction`` as an executor would submit it, and its hash.
    """

    def __init__(self, tx: TransactionParameters):
        self.tx = tx

    def arguments(self):
        tx = self.tx
        return [
            abi.Address(tx.to),
            abi.Uint(tx.value),
            abi.Bytes(tx.data_bytes),
            abi.Uint(tx.operation, 8),
            abi.Uint(tx.safe_tx_gas),
            abi.Uint(tx.base_gas),
            abi.Uint(tx.gas_price),
            abi.Address(tx.gas_token),
            abi.Address(tx.refund_receiver),
            abi.Bytes(tx.signatures_bytes),
        ]

    def calldata(self) -> bytes:
        return function_selector(EXEC_TRANSACTION_SIGNATURE) + abi.encode_params(self.arguments())

    def calldata_hash(self) -> bytes:
        return keccak256(self.calldata())
