#!/usr/bin/env python3
"""
Simple example of using safe-hash as a library.
"""
import os

from safe_hash import LookupUnavailableError, chain_id_of, tx_signing_hashes
from safe_hash.checks import check_suspicious_content
from safe_hash.remote import SafeApiClient, validate_safe_tx_hash
from safe_hash.sources import resolve_transaction


def main():
    """
    Recompute the hash of a queued Safe transaction.

    This example shows how to:
    1. Fetch the queued transaction from the Safe transaction service
    2. Recompute the domain, message and Safe transaction hashes locally
    3. Compare the result with the hash the service reports
    """
    chain = os.environ.get("SAFE_CHAIN", "ethereum")
    safe_address = os.environ.get("SAFE_ADDRESS", "0x1c694Fc3006D81ff4a56F97E1b99529066a23725")
    nonce = int(os.environ.get("SAFE_NONCE", "63"))
    chain_id = chain_id_of(chain)

    try:
        api_tx = SafeApiClient().get_transaction(chain_id, safe_address, nonce)
    except LookupUnavailableError as e:
        print(f"ERROR: could not fetch the transaction: {e}")
        return

    tx = resolve_transaction(api=api_tx)
    hashes = tx_signing_hashes(tx, chain_id, safe_address, "1.3.0")
    for name, value in hashes.as_hex().items():
        print(f"{name}: {value}")

    validate_safe_tx_hash(api_tx, hashes.safe_hash)
    print("Safe transaction hash matches the transaction service")

    warnings = check_suspicious_content(tx, chain_id)
    for message in warnings.messages():
        print(f"WARNING: {message}")


if __name__ == "__main__":
    main()
