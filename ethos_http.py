"""
HTTP transport for the Ethos Network API.

Every resource call goes through HTTPClient, which:
    - builds the URL and default headers
    - paces request starts with a minimum-interval rate limiter
    - bounds each attempt, body included, by the configured timeout
    - retries network failures and 5xx responses with exponential backoff
    - classifies non-2xx responses into EthosError kinds

Usage:
    from ethos_config import EthosConfig
    from ethos_http import HTTPClient

    http = HTTPClient(EthosConfig(rate_limit=250))
    data = http.get("/profiles/42")
"""

import sys
import time
import logging
import threading
import requests
from concurrent.futures import Future, TimeoutError as FutureTimeoutError
from typing import Any, Callable, Dict, Optional

from ethos_config import CLIENT_HEADER, EthosConfig
from ethos_exceptions import EthosError

# Configure logging
logger = logging.getLogger(__name__)

# Add stderr handler if not already present
if not logger.handlers:
    handler = logging.StreamHandler(sys.stderr)
    formatter = logging.Formatter(
        "%(levelname)s: %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


class RateLimiter:
    """Enforces a minimum interval between request starts."""

    def __init__(self, min_interval: float = 0.5):
        """
        Args:
            min_interval: Minimum seconds between two consecutive starts
        """
        self.min_interval = min_interval
        self._last_request: Optional[float] = None
        self._lock = threading.Lock()

    def wait(self) -> None:
        """Block until the interval has passed, then record a new start."""
        with self._lock:
            if self._last_request is not None and self.min_interval > 0:
                elapsed = time.monotonic() - self._last_request
                if elapsed < self.min_interval:
                    time.sleep(self.min_interval - elapsed)
            self._last_request = time.monotonic()

    @property
    def last_request(self) -> Optional[float]:
        """Monotonic time of the most recent start, or None before the first."""
        return self._last_request


def call_with_deadline(deadline: float, func: Callable[..., Any], *args, **kwargs) -> Any:
    """
    Run ``func`` on a daemon thread and wait at most ``deadline`` seconds.

    The worker's result or exception is returned/raised as-is. If the
    deadline passes first, FutureTimeoutError is raised and the worker is
    left to finish on its own; its result is discarded.
    """
    future: Future = Future()

    def run():
        try:
            future.set_result(func(*args, **kwargs))
        except BaseException as e:
            future.set_exception(e)

    threading.Thread(target=run, name="ethos-request", daemon=True).start()
    return future.result(timeout=deadline)


class HTTPClient:
    """Low-level HTTP client: request/response, rate limiting, retries, errors."""

    def __init__(self, config: Optional[EthosConfig] = None):
        self.config = config or EthosConfig()
        self.rate_limiter = RateLimiter(self.config.rate_limit_seconds)
        self.session = requests.Session()
        self.session.headers.update(self.default_headers())

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def default_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            CLIENT_HEADER: self.config.client_name,
        }

    def build_url(self, path: str) -> str:
        """Join ``path`` onto the configured base URL."""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"

    @staticmethod
    def build_params(params: Optional[Dict[str, Any]]) -> Dict[str, str]:
        """Drop None values and render the rest as query strings."""
        query: Dict[str, str] = {}
        for key, value in (params or {}).items():
            if value is None:
                continue
            if isinstance(value, bool):
                query[key] = "true" if value else "false"
            else:
                query[key] = str(value)
        return query

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Fetch: GET ``path`` and return the parsed JSON."""
        return self.request("GET", path, params=params)

    def post(
        self,
        path: str,
        body: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Submit: POST a JSON body to ``path`` and return the parsed JSON."""
        return self.request("POST", path, params=params, body=body)

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Any = None,
    ) -> Any:
        """
        Make an HTTP request to the API with retries.

        Args:
            method: "GET" or "POST"
            path: Path relative to the base URL
            params: Query parameters; None values are skipped
            body: JSON-serializable request body

        Returns:
            Parsed JSON ({} for 204 responses)

        Raises:
            EthosError: On a 4xx response, or once all attempts are used up
        """
        url = self.build_url(path)
        query = self.build_params(params)
        max_retries = self.config.max_retries
        last_error: Optional[EthosError] = None

        for attempt in range(max_retries):
            try:
                self.rate_limiter.wait()
                response = self._send(method, url, query, body)
                return self._handle_response(response)
            except EthosError as e:
                # Don't retry on client errors (4xx)
                if e.is_client_error:
                    raise
                last_error = e

            if attempt < max_retries - 1:
                delay = 2 ** attempt
                logger.warning(
                    f"{method} {path} failed ({last_error}). "
                    f"Retrying in {delay:.1f}s (attempt {attempt + 1}/{max_retries})"
                )
                time.sleep(delay)

        if last_error is None:
            raise EthosError.transport(
                f"No attempt made for {method} {path} (max_retries={max_retries})"
            )
        logger.error(f"{method} {path} failed after {max_retries} attempts: {last_error}")
        raise last_error

    def _send(
        self,
        method: str,
        url: str,
        query: Dict[str, str],
        body: Any,
    ) -> requests.Response:
        logger.debug(f"{method} {url} params={query}")
        timeout = self.config.timeout_seconds
        try:
            # requests' timeout only bounds connect and each socket read, so
            # the whole attempt (headers and body) runs under a deadline.
            return call_with_deadline(
                timeout,
                self.session.request,
                method,
                url,
                params=query or None,
                json=body,
                timeout=timeout,
            )
        except FutureTimeoutError as e:
            raise EthosError.transport(
                f"Request timed out after {self.config.timeout} ms"
            ) from e
        except requests.exceptions.Timeout as e:
            raise EthosError.transport(f"Request timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            raise EthosError.transport(f"Request failed: {e}") from e
        except ValueError as e:
            # requests rejects invalid timeouts before sending
            raise EthosError.transport(f"Invalid request settings: {e}") from e

    @staticmethod
    def _handle_response(response: requests.Response) -> Any:
        status = response.status_code
        if not 200 <= status < 300:
            raise EthosError.from_response(response)

        if status == 204:
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise EthosError.transport(f"Malformed JSON response (HTTP {status}): {e}") from e
