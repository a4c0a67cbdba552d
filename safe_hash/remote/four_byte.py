"""
Function-signature lookup against the 4byte.directory API.
"""
import logging
from typing import List, Optional, Union

import requests
from cachetools import TTLCache

from ..config import DEFAULT_RETRY_COUNT, DEFAULT_TIMEOUT, FOUR_BYTE_API_URL
from ..exceptions import DecodingError, LookupUnavailableError
from ..utils import hex_to_bytes, to_hex
from ._session import build_session, require_https

# Selectors seen during one process; results are never persisted
CACHE_SIZE = 1024
CACHE_TTL = 3600


class FourByteDirectory:
    """
    Resolves 4-byte selectors to candidate text signatures.
    """

    def __init__(
        self,
        api_url: str = FOUR_BYTE_API_URL,
        timeout: int = DEFAULT_TIMEOUT,
        retry_count: int = DEFAULT_RETRY_COUNT,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.api_url = require_https(api_url, "api_url") + "/"
        self.timeout = timeout
        self.session = session or build_session(retry_count)
        self.logger = logger or logging.getLogger(__name__)
        self._cache: TTLCache = TTLCache(maxsize=CACHE_SIZE, ttl=CACHE_TTL)

    @staticmethod
    def normalize_selector(selector: Union[str, bytes]) -> str:
        """
        Raises:
            DecodingError: If the selector is not exactly four bytes of hex
        """
        raw = hex_to_bytes(selector)
        if len(raw) != 4:
            raise DecodingError(f"Selector must be 4 bytes, got {len(raw)}")
        return to_hex(raw)

    def lookup(self, selector: Union[str, bytes]) -> List[str]:
        """
        Candidate text signatures for a selector, oldest registration first.

        Args:
            selector: 4-byte selector, hex string or bytes

        Returns:
            Possibly empty list of signatures such as ``transfer(address,uint256)``

        Raises:
            DecodingError: If the selector is malformed
            LookupUnavailableError: If the directory cannot be queried
        """
        hex_selector = self.normalize_selector(selector)
        if hex_selector in self._cache:
            return list(self._cache[hex_selector])

        self.logger.debug(f"Looking up selector {hex_selector} in signature directory")
        try:
            response = self.session.get(
                self.api_url,
                params={"hex_signature": hex_selector},
                timeout=self.timeout
            )
            response.raise_for_status()
            results = response.json().get("results", [])
        except requests.RequestException as e:
            self.logger.error(f"Signature directory request failed: {e}")
            raise LookupUnavailableError(f"Signature directory request failed: {str(e)}") from e
        except (ValueError, AttributeError) as e:
            self.logger.error(f"Invalid response from signature directory: {e}")
            raise LookupUnavailableError(f"Invalid response from signature directory: {str(e)}") from e

        entries = [r for r in results if isinstance(r, dict) and r.get("text_signature")]
        entries.sort(key=lambda r: r.get("id", 0))
        signatures = [r["text_signature"] for r in entries]
        self._cache[hex_selector] = tuple(signatures)
        return signatures
