"""HTTP utilities for the dashboard data service.

Provides:
- RetryStrategy: urllib3 retry configuration for idempotent GETs
- SessionManager: a lazily-created ``requests.Session`` with retries and pooling
- get_json: GET a URL and decode a JSON body, raising on non-2xx responses
"""

from typing import Any, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry as URLRetry


class RetryStrategy:
    """Defines retry behavior for HTTP requests."""

    def __init__(self, max_retries: int = 2, backoff_factor: float = 0.5,
                 status_forcelist: Optional[List[int]] = None):
        """Initialize retry strategy.

        Args:
            max_retries: Maximum number of retry attempts (default: 2)
            backoff_factor: Exponential backoff multiplier (default: 0.5)
            status_forcelist: HTTP status codes to retry on
                            (default: [429, 502, 503, 504])
        """
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.status_forcelist = status_forcelist or [429, 502, 503, 504]

    def get_retry_object(self) -> URLRetry:
        """Get urllib3 Retry object configured with this strategy."""
        return URLRetry(
            total=self.max_retries,
            backoff_factor=self.backoff_factor,
            status_forcelist=self.status_forcelist,
            allowed_methods=["GET", "HEAD"],
            # Let the caller see the final status instead of a MaxRetryError.
            raise_on_status=False,
        )


class SessionManager:
    """Manages an HTTP session with connection pooling and retries."""

    def __init__(self, retry_strategy: Optional[RetryStrategy] = None,
                 pool_connections: int = 4, pool_maxsize: int = 8):
        self.retry_strategy = retry_strategy or RetryStrategy()
        self.pool_connections = pool_connections
        self.pool_maxsize = pool_maxsize
        self._session: Optional[requests.Session] = None

    @property
    def session(self) -> requests.Session:
        """Get or create the HTTP session."""
        if self._session is None:
            self._session = requests.Session()
            adapter = HTTPAdapter(
                max_retries=self.retry_strategy.get_retry_object(),
                pool_connections=self.pool_connections,
                pool_maxsize=self.pool_maxsize,
            )
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)
        return self._session

    def close(self) -> None:
        """Close the session and release resources."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def get_json(session: requests.Session, url: str, params: Optional[dict] = None,
             timeout: float = 10.0) -> Any:
    """GET *url* and return the decoded JSON body.

    Raises:
        requests.HTTPError: On a non-2xx status.
        requests.RequestException: On connection/timeout errors.
        ValueError: If the body is not valid JSON.
    """
    response = session.get(url, params=params or None, timeout=timeout)
    response.raise_for_status()
    return response.json()
