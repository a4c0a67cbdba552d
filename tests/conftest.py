"""
Pytest fixtures for the safe-hash tests.
"""
import json
import pathlib

import pytest
import requests
from requests.adapters import HTTPAdapter

from safe_hash.models import SafeTransaction, TransactionParameters

FIXTURES = pathlib.Path(__file__).parent / "fixtures"

# Transaction scenario on Ethereum mainnet (USDC transfer)
MAINNET_SAFE = "0x1c694Fc3006D81ff4a56F97E1b99529066a23725"
MAINNET_NONCE = 63
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
USDC_TRANSFER_DATA = (
    "0xa9059cbb00000000000000000000000092d0ebaf7eb707f0650f9471e61348f4656c29bc"
    "00000000000000000000000000000000000000000000000000000005d21dba00"
)
MAINNET_DOMAIN_HASH = "1655e94a9bcc5a957daa1acae692b4c22e7aaf146b4deb9194f8221d2f09d8c3"
MAINNET_MESSAGE_HASH = "f22754eba5a2b230714534b4657195268f00dc0031296de4b835d82e7aa1e574"
MAINNET_SAFE_HASH = "ad06b099fca34e51e4886643d95d9a19ace2cd024065efb66662a876e8c40343"

# Transaction scenario on Sepolia (WETH approve)
SEPOLIA_SAFE = "0x86D46EcD553d25da0E3b96A9a1B442ac72fa9e9F"
SEPOLIA_NONCE = 6
SEPOLIA_SAFE_HASH = "213be037275c94449a28b4edead76b0d63c7e12b52257f9d5686d98b9a1a5ff4"

# Message scenario on Sepolia
MESSAGE_SAFE = "0x657ff0D4eC65D82b2bC1247b0a558bcd2f80A0f1"
MESSAGE_DOMAIN_HASH = "611379c19940caee095cdb12bebe6a9fa9abb74cdb1fbd7377c49a1f198dc24f"

MAIL_SAFE_HASH = "a85c2e2b118698e88db68a8105b794a8cc7cec074e89ef991cb4f5f533819cc2"

MAINNET_SAFE_API_URL = (
    f"https://safe-transaction-mainnet.safe.global/api/v1/safes/{MAINNET_SAFE}/multisig-transactions/"
)
FOUR_BYTE_URL = "https://www.4byte.directory/api/v1/signatures/"


def load_fixture(name: str):
    with (FIXTURES / name).open("r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture(autouse=True)
def _no_network(monkeypatch):
    """
    Fail any HTTP request that is not intercepted by requests_mock, and keep
    the caller's environment from leaking into the tests.
    """
    def _blocked(self, request, **kwargs):
        raise requests.ConnectionError(f"Network access blocked in tests: {request.url}")

    monkeypatch.setattr(HTTPAdapter, "send", _blocked)
    for name in ("ETHERSCAN_API_KEY", "SAFE_HASH_SAFE_API_URL", "NO_COLOR"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def api_response():
    return load_fixture("safe_api_response.json")


@pytest.fixture
def api_transaction(api_response):
    return SafeTransaction.model_validate(api_response["results"][0])


@pytest.fixture
def mainnet_tx():
    return TransactionParameters(to=USDC, data=USDC_TRANSFER_DATA, nonce=MAINNET_NONCE)


@pytest.fixture
def mail_typed_data():
    return load_fixture("mail_typed_data.json")


@pytest.fixture
def ether_mail():
    return load_fixture("ether_mail.json")


@pytest.fixture
def tx_file_path():
    return FIXTURES / "tx_file.json"
