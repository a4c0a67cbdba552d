"""
Hex and hashing helpers shared by the hashers and decoders.
"""
from typing import Union

from eth_account.messages import defunct_hash_message
from web3 import Web3

from .exceptions import DecodingError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def strip_0x(value: str) -> str:
    if value.startswith(("0x", "0X")):
        return value[2:]
    return value


def hex_to_bytes(value: Union[str, bytes]) -> bytes:
    """
    Decode a hex string (with or without 0x prefix) into bytes.

    Args:
        value: Hex string, or bytes which are returned unchanged

    Returns:
        Decoded bytes ("0x" and "" decode to b"")

    Raises:
        DecodingError: If the string is not valid hexadecimal
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if not isinstance(value, str):
        raise DecodingError(f"Expected a hex string, got {type(value).__name__}")
    try:
        return bytes.fromhex(strip_0x(value.strip()))
    except ValueError as e:
        raise DecodingError(f"Invalid hex data {value!r}: {e}") from e


def to_hex(data: bytes, prefix: bool = True) -> str:
    return ("0x" if prefix else "") + bytes(data).hex()


def keccak256(data: Union[bytes, str]) -> bytes:
    """Keccak-256 of raw bytes, or of the UTF-8 encoding of a string."""
    if isinstance(data, str):
        return bytes(Web3.keccak(text=data))
    return bytes(Web3.keccak(bytes(data)))


def function_selector(signature: str) -> bytes:
    """First four bytes of the Keccak-256 of a canonical function signature."""
    return keccak256(signature)[:4]


def personal_sign_hash(message: str) -> bytes:
    """Hash of "\\x19Ethereum Signed Message:\\n" + len + message."""
    return bytes(defunct_hash_message(text=message))


def normalize_address(value: Union[str, bytes]) -> str:
    """
    Validate a 20-byte address and return it in checksum form.

    Raises:
        DecodingError: If the value is not exactly 20 bytes of hex
    """
    raw = hex_to_bytes(value)
    if len(raw) != 20:
        raise DecodingError(f"Address must be 20 bytes, got {len(raw)}: {value!r}")
    return Web3.to_checksum_address(raw)
