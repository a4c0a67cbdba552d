"""
Contract source-verification lookup against the Etherscan v2 API.
"""
import logging
from enum import Enum
from typing import Optional

import requests

from ..config import DEFAULT_RETRY_COUNT, DEFAULT_TIMEOUT, ETHERSCAN_API_URL, etherscan_api_key
from ..utils import normalize_address
from ._session import build_session, require_https


class VerificationStatus(Enum):
    VERIFIED = "verified"
    UNVERIFIED = "unverified"
    UNAVAILABLE = "unavailable"


class EtherscanClient:
    """
    Looks up whether a contract's source is verified on a block explorer.

    A lookup never raises: any failure, including a missing API key, is
    reported as ``VerificationStatus.UNAVAILABLE``.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: str = ETHERSCAN_API_URL,
        timeout: int = DEFAULT_TIMEOUT,
        retry_count: int = DEFAULT_RETRY_COUNT,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.api_key = api_key if api_key is not None else etherscan_api_key()
        self.api_url = require_https(api_url, "api_url")
        self.timeout = timeout
        self.session = session or build_session(retry_count)
        self.logger = logger or logging.getLogger(__name__)

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    def verification_status(self, address: str, chain_id: int) -> VerificationStatus:
        """
        Args:
            address: Contract address
            chain_id: Numeric chain id

        Returns:
            VERIFIED if the explorer returns non-empty source code,
            UNVERIFIED if it returns an empty one, UNAVAILABLE otherwise
        """
        if not self.api_key:
            self.logger.warning("ETHERSCAN_API_KEY is not set, skipping contract verification")
            return VerificationStatus.UNAVAILABLE

        params = {
            "chainid": chain_id,
            "module": "contract",
            "action": "getsourcecode",
            "address": normalize_address(address),
            "apikey": self.api_key,
        }
        self.logger.debug(f"Checking verification of {params['address']} on chain {chain_id}")

        try:
            response = self.session.get(self.api_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            self.logger.error(f"Etherscan request failed: {e}")
            return VerificationStatus.UNAVAILABLE
        except ValueError as e:
            self.logger.error(f"Invalid JSON response from Etherscan: {e}")
            return VerificationStatus.UNAVAILABLE

        results = payload.get("result") if isinstance(payload, dict) else None
        if not isinstance(results, list) or not results or not isinstance(results[0], dict):
            self.logger.warning(f"Unexpected Etherscan response: {payload}")
            return VerificationStatus.UNAVAILABLE

        source_code = results[0].get("SourceCode")
        if not isinstance(source_code, str):
            self.logger.warning("Etherscan response has no SourceCode field")
            return VerificationStatus.UNAVAILABLE

        return VerificationStatus.VERIFIED if source_code else VerificationStatus.UNVERIFIED
