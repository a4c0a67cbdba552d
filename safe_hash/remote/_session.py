"""
HTTP session setup shared by the remote lookup clients.
"""
import urllib.parse

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import DEFAULT_RETRY_COUNT


def build_session(retry_count: int = DEFAULT_RETRY_COUNT) -> requests.Session:
    """
    Create a requests session with a bounded retry policy.

    Args:
        retry_count: Number of retries for connection errors, read timeouts
            and 5xx responses. Lookups are not retried by default.

    Returns:
        Configured session
    """
    session = requests.Session()
    retries = Retry(
        total=retry_count,
        backoff_factor=0.5,
        status_forcelist=[500, 502, 503, 504],
        allowed_methods=["GET"],
        raise_on_status=False,
        connect=retry_count,
        read=retry_count,
        other=retry_count
    )
    session.mount("http://", HTTPAdapter(max_retries=retries))
    session.mount("https://", HTTPAdapter(max_retries=retries))
    return session


def require_https(url: str, url_name: str) -> str:
    """
    Reject plain-http URLs unless they point at localhost.

    Raises:
        ValueError: If the URL does not use https
    """
    parsed = urllib.parse.urlparse(url)
    host = parsed.netloc.split(':')[0]
    if parsed.scheme != 'https' and host not in ('localhost', '127.0.0.1'):
        raise ValueError(f"{url_name} must use https:// for security (got: {parsed.scheme}://)")
    return url.rstrip('/')
