"""
Tests for the end-to-end signing hash helpers.
"""
import pytest

from safe_hash.exceptions import VersionUnsupportedError
from safe_hash.hasher import SafeHasher, safe_message_struct_hash
from safe_hash.signing import msg_signing_hashes, safe_ui_hashes, tx_signing_hashes
from safe_hash.utils import personal_sign_hash

from conftest import (
    MAINNET_DOMAIN_HASH, MAINNET_MESSAGE_HASH, MAINNET_SAFE, MAINNET_SAFE_HASH, MESSAGE_DOMAIN_HASH,
    MESSAGE_SAFE,
)

SEPOLIA = 11155111


def test_tx_signing_hashes(mainnet_tx):
    hashes = tx_signing_hashes(mainnet_tx, 1, MAINNET_SAFE, "1.3.0")
    assert hashes.as_hex() == {
        "domain_hash": MAINNET_DOMAIN_HASH,
        "message_hash": MAINNET_MESSAGE_HASH,
        "safe_hash": MAINNET_SAFE_HASH,
    }
    assert hashes.raw_message_hash is None


def test_tx_signing_hashes_rejects_unsupported_version(mainnet_tx):
    with pytest.raises(VersionUnsupportedError):
        tx_signing_hashes(mainnet_tx, 1, MAINNET_SAFE, "0.0.9")


def test_msg_signing_hashes():
    message = "Sign in to example.org\r\nNonce: 42"
    hashes = msg_signing_hashes(message, SEPOLIA, MESSAGE_SAFE, "1.3.0")

    assert hashes.domain_hash.hex() == MESSAGE_DOMAIN_HASH
    assert hashes.raw_message_hash == personal_sign_hash("Sign in to example.org\nNonce: 42")
    assert hashes.message_hash == safe_message_struct_hash(hashes.raw_message_hash)
    assert hashes.safe_hash == SafeHasher(hashes.domain_hash, hashes.message_hash).hash()


def test_safe_ui_hashes_wrap_the_digest():
    digest = bytes.fromhex("a85c2e2b118698e88db68a8105b794a8cc7cec074e89ef991cb4f5f533819cc2")
    hashes = safe_ui_hashes(digest, SEPOLIA, MESSAGE_SAFE, "1.3.0")

    assert hashes.raw_message_hash == digest
    assert hashes.domain_hash.hex() == MESSAGE_DOMAIN_HASH
    assert hashes.message_hash == safe_message_struct_hash(digest)
    assert hashes.safe_hash == SafeHasher(hashes.domain_hash, hashes.message_hash).hash()


def test_safe_ui_hashes_require_a_32_byte_digest():
    with pytest.raises(ValueError):
        safe_ui_hashes(b"\x00" * 20, SEPOLIA, MESSAGE_SAFE, "1.3.0")
