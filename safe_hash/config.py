"""
Runtime defaults for the safe-hash package.

Values can be overridden per call through constructor arguments, or
through the environment variables named below.
"""
import os
from typing import Optional

# HTTP behaviour for remote lookups. Lookups are not retried by default.
DEFAULT_TIMEOUT = 30
DEFAULT_RETRY_COUNT = 0

ETHERSCAN_API_URL = "https://api.etherscan.io/v2/api"
FOUR_BYTE_API_URL = "https://www.4byte.directory/api/v1/signatures/"

# Environment variable names
ETHERSCAN_API_KEY_ENV = "ETHERSCAN_API_KEY"
SAFE_API_URL_ENV = "SAFE_HASH_SAFE_API_URL"
NO_COLOR_ENV = "NO_COLOR"

DEFAULT_SAFE_VERSION = "1.3.0"


def etherscan_api_key() -> Optional[str]:
    """Return the Etherscan API key from the environment, if set."""
    return os.environ.get(ETHERSCAN_API_KEY_ENV) or None


def safe_api_url_override() -> Optional[str]:
    """Return a Safe transaction-service base URL override, if set."""
    url = os.environ.get(SAFE_API_URL_ENV)
    return url.rstrip("/") if url else None
