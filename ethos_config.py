"""
Configuration for the Ethos Network API client.

Centralizes defaults and connection settings for easier maintenance.
"""

import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_BASE_URL = "https://api.ethos.network/api/v2"
DEFAULT_CLIENT_NAME = "ethos-python-sdk"

# Milliseconds
DEFAULT_TIMEOUT = 30000
DEFAULT_RATE_LIMIT = 500

DEFAULT_MAX_RETRIES = 3

# Pagination
DEFAULT_PAGE_SIZE = 100
SEARCH_PAGE_SIZE = 20
RECENT_PAGE_SIZE = 20

CLIENT_HEADER = "X-Ethos-Client"

ENV_BASE_URL = "ETHOS_API_BASE_URL"
ENV_CLIENT_NAME = "ETHOS_CLIENT_NAME"
ENV_TIMEOUT = "ETHOS_TIMEOUT"
ENV_RATE_LIMIT = "ETHOS_RATE_LIMIT"
ENV_MAX_RETRIES = "ETHOS_MAX_RETRIES"


@dataclass(frozen=True)
class EthosConfig:
    """
    Connection settings shared by the transport.

    Attributes:
        base_url: Base URL for the Ethos API
        client_name: Name identifying your application (sent as X-Ethos-Client)
        timeout: Request timeout in milliseconds
        rate_limit: Minimum milliseconds between request starts
        max_retries: Number of attempts per request
    """

    base_url: str = DEFAULT_BASE_URL
    client_name: str = DEFAULT_CLIENT_NAME
    timeout: float = DEFAULT_TIMEOUT
    rate_limit: float = DEFAULT_RATE_LIMIT
    max_retries: int = DEFAULT_MAX_RETRIES

    def __post_init__(self):
        # None means default
        defaults = {
            "base_url": DEFAULT_BASE_URL,
            "client_name": DEFAULT_CLIENT_NAME,
            "timeout": DEFAULT_TIMEOUT,
            "rate_limit": DEFAULT_RATE_LIMIT,
            "max_retries": DEFAULT_MAX_RETRIES,
        }
        for name, default in defaults.items():
            if getattr(self, name) is None:
                object.__setattr__(self, name, default)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000.0

    @property
    def rate_limit_seconds(self) -> float:
        return self.rate_limit / 1000.0

    @classmethod
    def from_env(cls) -> "EthosConfig":
        """Create configuration from ETHOS_* environment variables."""
        return cls(
            base_url=os.environ.get(ENV_BASE_URL) or None,
            client_name=os.environ.get(ENV_CLIENT_NAME) or None,
            timeout=_int_from_env(ENV_TIMEOUT),
            rate_limit=_int_from_env(ENV_RATE_LIMIT),
            max_retries=_int_from_env(ENV_MAX_RETRIES),
        )


def _int_from_env(name: str) -> Optional[int]:
    value = os.environ.get(name)
    if not value:
        return None
    return int(value, 10)
