"""Shared HTTP session for listing and article requests."""

import requests
from requests.adapters import HTTPAdapter

DEFAULT_TIMEOUT = 10.0
DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; hn-preview/0.1)",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}


def build_session(pool_size: int = 10) -> requests.Session:
    """Create a session whose connection pool fits *pool_size* worker threads."""
    session = requests.Session()
    session.headers.update(DEFAULT_HEADERS)
    adapter = HTTPAdapter(
        pool_connections=pool_size, pool_maxsize=pool_size
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session
