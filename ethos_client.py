"""
Ethos Network API client.

Usage:
    from ethos_client import Ethos

    with Ethos(client_name="my-app") as client:
        profile = client.profiles.get_by_twitter("vitalikbuterin")
        print(profile.credibility_score)
"""

from typing import Optional

from ethos_config import EthosConfig
from ethos_http import HTTPClient
from ethos_resources import Activities, Markets, Profiles, Reviews, Scores, Vouches


class Ethos:
    """Entry point bundling one transport and the resources that share it."""

    def __init__(self, config: Optional[EthosConfig] = None, **options):
        """
        Args:
            config: Ready-made configuration; takes precedence over options
            **options: EthosConfig fields (base_url, client_name, timeout,
                rate_limit, max_retries)
        """
        self.config = config or EthosConfig(**options)
        self.http = HTTPClient(self.config)

        self.profiles = Profiles(self.http)
        self.vouches = Vouches(self.http)
        self.reviews = Reviews(self.http)
        self.markets = Markets(self.http)
        self.activities = Activities(self.http)
        self.scores = Scores(self.http)

    def __enter__(self) -> "Ethos":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.http.close()
