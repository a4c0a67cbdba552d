"""
Tests for the pydantic models and their normalization rules.
"""
import pytest
from pydantic import ValidationError

from safe_hash.models import (
    HashTriple, SafeApiResponse, SafeTransaction, TransactionParameters, TxFileInput,
    UserTransactionArgs,
)
from safe_hash.utils import ZERO_ADDRESS

from conftest import USDC, load_fixture


class TestTransactionParameters:
    def test_defaults(self):
        tx = TransactionParameters(to=USDC)
        assert tx.value == 0
        assert tx.data == "0x"
        assert tx.operation == 0
        assert tx.gas_token == ZERO_ADDRESS
        assert tx.refund_receiver == ZERO_ADDRESS
        assert tx.signatures == "0x"
        assert tx.data_bytes == b""

    def test_normalizes_addresses_and_hex(self):
        tx = TransactionParameters(to=USDC.lower(), data="0xABCD", value="0x10", nonce="63")
        assert tx.to == USDC
        assert tx.data == "0xabcd"
        assert tx.data_bytes == b"\xab\xcd"
        assert tx.value == 16
        assert tx.nonce == 63

    def test_none_data_is_empty(self):
        assert TransactionParameters(to=USDC, data=None, signatures=None).data == "0x"

    @pytest.mark.parametrize("field,value", [
        ("operation", 2),
        ("value", -1),
        ("value", 2 ** 256),
        ("nonce", "abc"),
        ("data", "0x123"),
        ("gas_token", "0x1234"),
        ("safe_tx_gas", True),
    ])
    def test_rejects_invalid_fields(self, field, value):
        with pytest.raises(ValidationError):
            TransactionParameters(to=USDC, **{field: value})

    def test_is_immutable(self):
        tx = TransactionParameters(to=USDC)
        with pytest.raises(ValidationError):
            tx.nonce = 5


class TestUserTransactionArgs:
    def test_to_is_optional(self):
        args = UserTransactionArgs()
        assert args.to is None
        assert args.operation == 0

    def test_parses_cli_strings(self):
        args = UserTransactionArgs(to=USDC.lower(), value="1000", operation="1", gas_price="0x2")
        assert args.to == USDC
        assert args.value == 1000
        assert args.operation == 1
        assert args.gas_price == 2


class TestSafeTransaction:
    def test_parses_service_record(self, api_response):
        response = SafeApiResponse.model_validate(api_response)
        assert response.count == 1
        tx = response.results[0]
        assert isinstance(tx, SafeTransaction)
        assert tx.nonce == 63
        assert tx.to == USDC
        assert tx.value == "0"
        assert tx.gas_price == "0"
        assert tx.signatures is None
        assert tx.confirmations_required == 2
        assert tx.confirmations[0].signature_type == "EOA"
        assert tx.data_decoded.method == "transfer"
        assert tx.data_decoded.parameters[1].value == "25000000000"

    def test_null_gas_fields_default_to_zero(self, api_response):
        record = dict(api_response["results"][0], safeTxGas=None, baseGas=None, gasPrice=None)
        tx = SafeTransaction.model_validate(record)
        assert tx.safe_tx_gas == 0
        assert tx.base_gas == 0
        assert tx.gas_price == "0"

    def test_numeric_value_is_stringified(self, api_response):
        record = dict(api_response["results"][0], value=12)
        assert SafeTransaction.model_validate(record).value == "12"

    def test_missing_safe_tx_hash(self, api_response):
        record = dict(api_response["results"][0])
        del record["safeTxHash"]
        with pytest.raises(ValidationError):
            SafeTransaction.model_validate(record)


class TestTxFileInput:
    def test_base_gas(self):
        tx_file = TxFileInput.model_validate(load_fixture("tx_file.json"))
        assert tx_file.resolved_base_gas() == 0
        assert tx_file.data.startswith("0x095ea7b3")

    def test_data_gas_for_legacy_safes(self):
        tx_file = TxFileInput.model_validate({"to": USDC, "dataGas": "21000"})
        assert tx_file.base_gas is None
        assert tx_file.resolved_base_gas() == 21000

    def test_requires_one_gas_field(self):
        with pytest.raises(ValidationError, match="exactly one of baseGas or dataGas"):
            TxFileInput.model_validate({"to": USDC})

    def test_rejects_both_gas_fields(self):
        with pytest.raises(ValidationError):
            TxFileInput.model_validate({"to": USDC, "baseGas": 0, "dataGas": 0})


def test_hash_triple_as_hex():
    triple = HashTriple(domain_hash=b"\x01" * 32, message_hash=b"\x02" * 32, safe_hash=b"\x03" * 32)
    assert triple.as_hex() == {
        "domain_hash": "01" * 32,
        "message_hash": "02" * 32,
        "safe_hash": "03" * 32,
    }
    with_raw = HashTriple(b"\x01" * 32, b"\x02" * 32, b"\x03" * 32, raw_message_hash=b"\x04" * 32)
    assert with_raw.as_hex()["raw_message_hash"] == "04" * 32
