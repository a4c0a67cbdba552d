"""
Tests for the Safe transaction-service client and record cross-checks.
"""
import copy

import pytest

from safe_hash.exceptions import LookupUnavailableError, MismatchError, UnsupportedChainError
from safe_hash.models import UserTransactionArgs
from safe_hash.remote.safe_api import SafeApiClient, validate_safe_tx_hash, validate_transaction_details

from conftest import (
    MAINNET_NONCE, MAINNET_SAFE, MAINNET_SAFE_API_URL, MAINNET_SAFE_HASH, USDC, USDC_TRANSFER_DATA,
)


class TestGetTransaction:
    def test_success(self, requests_mock, api_response):
        requests_mock.get(MAINNET_SAFE_API_URL, json=api_response)
        tx = SafeApiClient().get_transaction(1, MAINNET_SAFE, MAINNET_NONCE)

        assert tx.nonce == MAINNET_NONCE
        assert tx.to == USDC
        assert tx.safe_tx_hash == "0x" + MAINNET_SAFE_HASH
        assert requests_mock.last_request.qs == {"nonce": ["63"]}

    def test_base_url_override(self, requests_mock, api_response):
        requests_mock.get(
            f"http://localhost:8000/api/v1/safes/{MAINNET_SAFE}/multisig-transactions/", json=api_response
        )
        tx = SafeApiClient(base_url="http://localhost:8000/").get_transaction(1, MAINNET_SAFE, MAINNET_NONCE)
        assert tx.nonce == MAINNET_NONCE

    def test_no_results(self, requests_mock):
        requests_mock.get(MAINNET_SAFE_API_URL, json={"count": 0, "results": []})
        with pytest.raises(LookupUnavailableError, match="No transaction found"):
            SafeApiClient().get_transaction(1, MAINNET_SAFE, MAINNET_NONCE)

    def test_multiple_results(self, requests_mock, api_response):
        response = copy.deepcopy(api_response)
        response["results"].append(copy.deepcopy(response["results"][0]))
        response["count"] = 2
        requests_mock.get(MAINNET_SAFE_API_URL, json=response)
        with pytest.raises(LookupUnavailableError, match="Multiple transactions"):
            SafeApiClient().get_transaction(1, MAINNET_SAFE, MAINNET_NONCE)

    def test_http_error(self, requests_mock):
        requests_mock.get(MAINNET_SAFE_API_URL, status_code=500)
        with pytest.raises(LookupUnavailableError, match="request failed"):
            SafeApiClient().get_transaction(1, MAINNET_SAFE, MAINNET_NONCE)

    def test_malformed_record(self, requests_mock):
        requests_mock.get(MAINNET_SAFE_API_URL, json={"count": 1, "results": [{"nonce": 63}]})
        with pytest.raises(LookupUnavailableError, match="Unexpected Safe API response"):
            SafeApiClient().get_transaction(1, MAINNET_SAFE, MAINNET_NONCE)

    def test_network_failure(self):
        with pytest.raises(LookupUnavailableError):
            SafeApiClient().get_transaction(1, MAINNET_SAFE, MAINNET_NONCE)

    def test_unsupported_chain(self):
        with pytest.raises(UnsupportedChainError):
            SafeApiClient().get_transaction(999999, MAINNET_SAFE, MAINNET_NONCE)

    def test_plain_http_rejected(self):
        with pytest.raises(ValueError, match="must use https"):
            SafeApiClient(base_url="http://safe.example.org")


class TestValidateTransactionDetails:
    def test_defaults_are_not_compared(self, api_transaction):
        validate_transaction_details(api_transaction, UserTransactionArgs())

    def test_matching_fields(self, api_transaction):
        validate_transaction_details(
            api_transaction, UserTransactionArgs(to=USDC.lower(), data=USDC_TRANSFER_DATA.upper().replace("0X", "0x"))
        )

    def test_mismatched_fields(self, api_transaction):
        user_args = UserTransactionArgs(to="0x" + "11" * 20, value=5, operation=1, gas_price=2)
        with pytest.raises(MismatchError) as excinfo:
            validate_transaction_details(api_transaction, user_args)

        fields = [m.field for m in excinfo.value.mismatches]
        assert fields == ["to", "value", "operation", "gas_price"]
        assert "Mismatched fields: to, value, operation, gas_price" in str(excinfo.value)

    def test_data_mismatch_reports_both_values(self, api_transaction):
        with pytest.raises(MismatchError) as excinfo:
            validate_transaction_details(api_transaction, UserTransactionArgs(data="0x1234"))
        mismatch = excinfo.value.mismatches[0]
        assert mismatch.field == "data"
        assert mismatch.api_value == USDC_TRANSFER_DATA
        assert mismatch.user_value == "0x1234"


class TestValidateSafeTxHash:
    def test_match(self, api_transaction):
        validate_safe_tx_hash(api_transaction, bytes.fromhex(MAINNET_SAFE_HASH))

    def test_mismatch(self, api_transaction):
        with pytest.raises(MismatchError) as excinfo:
            validate_safe_tx_hash(api_transaction, b"\x00" * 32)
        assert excinfo.value.mismatches[0].field == "safe_tx_hash"

    def test_unparseable_api_hash(self, api_transaction):
        tx = api_transaction.model_copy(update={"safe_tx_hash": "not-a-hash"})
        with pytest.raises(MismatchError, match="safe_tx_hash"):
            validate_safe_tx_hash(tx, b"\x00" * 32)
