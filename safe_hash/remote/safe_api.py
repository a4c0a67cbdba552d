"""
Client for the Safe transaction service, and cross-checks between a fetched
record and locally supplied values.
"""
import logging
from typing import List, Optional

import requests
from pydantic import ValidationError

from ..chains import safe_api_url
from ..config import DEFAULT_RETRY_COUNT, DEFAULT_TIMEOUT
from ..exceptions import LookupUnavailableError, MismatchError
from ..models import Mismatch, SafeApiResponse, SafeTransaction, UserTransactionArgs
from ..utils import ZERO_ADDRESS, normalize_address, strip_0x
from ._session import build_session, require_https


class SafeApiClient:
    """
    Fetches pending multisig transactions from the Safe transaction service.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: int = DEFAULT_TIMEOUT,
        retry_count: int = DEFAULT_RETRY_COUNT,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the client.

        Args:
            base_url: Transaction-service base URL. When omitted the per-chain
                URL from the chain registry is used for every request.
            timeout: Request timeout in seconds
            retry_count: Number of retries for failed requests
            session: Pre-configured session (mainly for tests)
            logger: Optional logger instance
        """
        self.base_url = require_https(base_url, "base_url") if base_url else None
        self.timeout = timeout
        self.session = session or build_session(retry_count)
        self.logger = logger or logging.getLogger(__name__)

    def transactions_url(self, chain_id: int, safe_address: str) -> str:
        base = self.base_url or safe_api_url(chain_id)
        return f"{base}/api/v1/safes/{normalize_address(safe_address)}/multisig-transactions/"

    def get_transaction(self, chain_id: int, safe_address: str, nonce: int) -> SafeTransaction:
        """
        Fetch the single multisig transaction queued at ``nonce``.

        Args:
            chain_id: Numeric chain id
            safe_address: Address of the Safe
            nonce: Safe nonce of the transaction

        Returns:
            The transaction record

        Raises:
            UnsupportedChainError: If the chain has no transaction service
            LookupUnavailableError: If the request fails, the response is
                malformed, or the nonce matches zero or several transactions
        """
        url = self.transactions_url(chain_id, safe_address)
        self.logger.debug(f"Fetching transaction from API: {url}?nonce={nonce}")

        try:
            response = self.session.get(url, params={"nonce": nonce}, timeout=self.timeout)
            response.raise_for_status()
            api_response = SafeApiResponse.model_validate(response.json())
        except requests.RequestException as e:
            self.logger.error(f"Safe API request failed: {e}")
            raise LookupUnavailableError(f"Safe API request failed: {str(e)}") from e
        except ValidationError as e:
            self.logger.error(f"Unexpected Safe API response: {e}")
            raise LookupUnavailableError(f"Unexpected Safe API response: {str(e)}") from e
        except ValueError as e:
            self.logger.error(f"Invalid JSON response from Safe API: {e}")
            raise LookupUnavailableError(f"Invalid JSON response from Safe API: {str(e)}") from e

        if api_response.count == 0 or not api_response.results:
            raise LookupUnavailableError("No transaction found for the specified nonce")
        if api_response.count > 1 or len(api_response.results) > 1:
            raise LookupUnavailableError(
                "Multiple transactions found for the specified nonce. "
                "Please specify more details to identify the correct transaction."
            )
        return api_response.results[0]


def _same_hex(a: Optional[str], b: Optional[str]) -> bool:
    return strip_0x(a or "0x").lower() == strip_0x(b or "0x").lower()


def _as_int(value: str) -> Optional[int]:
    try:
        return int(value, 10)
    except (TypeError, ValueError):
        return None


def validate_transaction_details(api_tx: SafeTransaction, user_args: UserTransactionArgs) -> None:
    """
    Compare user-supplied transaction fields against a fetched record.

    Only fields the user actually set (i.e. that differ from their default)
    are compared; ``operation`` is always compared.

    Raises:
        MismatchError: Carrying one ``Mismatch`` per disagreeing field
    """
    errors: List[Mismatch] = []

    def mismatch(field: str, api_value, user_value) -> None:
        errors.append(Mismatch(field=field, api_value=str(api_value), user_value=str(user_value)))

    if user_args.to is not None and user_args.to != normalize_address(api_tx.to):
        mismatch("to", api_tx.to, user_args.to)

    if user_args.value != 0 and user_args.value != _as_int(api_tx.value):
        mismatch("value", api_tx.value, user_args.value)

    if user_args.data != "0x" and not _same_hex(user_args.data, api_tx.data):
        mismatch("data", api_tx.data or "0x", user_args.data)

    if user_args.operation != api_tx.operation:
        mismatch("operation", api_tx.operation, user_args.operation)

    if user_args.gas_token != ZERO_ADDRESS and user_args.gas_token != normalize_address(api_tx.gas_token):
        mismatch("gas_token", api_tx.gas_token, user_args.gas_token)

    if (user_args.refund_receiver != ZERO_ADDRESS
            and user_args.refund_receiver != normalize_address(api_tx.refund_receiver)):
        mismatch("refund_receiver", api_tx.refund_receiver, user_args.refund_receiver)

    if user_args.safe_tx_gas != 0 and user_args.safe_tx_gas != api_tx.safe_tx_gas:
        mismatch("safe_tx_gas", api_tx.safe_tx_gas, user_args.safe_tx_gas)

    if user_args.base_gas != 0 and user_args.base_gas != api_tx.base_gas:
        mismatch("base_gas", api_tx.base_gas, user_args.base_gas)

    if user_args.gas_price != 0 and user_args.gas_price != (_as_int(api_tx.gas_price) or 0):
        mismatch("gas_price", api_tx.gas_price, user_args.gas_price)

    if errors:
        raise MismatchError(errors)


def validate_safe_tx_hash(api_tx: SafeTransaction, computed: bytes) -> None:
    """
    Compare the ``safeTxHash`` reported by the API with the local final hash.

    Raises:
        MismatchError: If the hashes differ or the API value is not hex
    """
    try:
        api_hash = int(strip_0x(api_tx.safe_tx_hash), 16)
    except ValueError as e:
        raise MismatchError([Mismatch(
            field="safe_tx_hash",
            api_value="",
            user_value=f"Failed to parse API safe_tx_hash: {e}",
        )]) from e
    if api_hash != int.from_bytes(bytes(computed), "big"):
        raise MismatchError([Mismatch(
            field="safe_tx_hash",
            api_value=api_tx.safe_tx_hash,
            user_value=bytes(computed).hex(),
        )])
