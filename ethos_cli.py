#!/usr/bin/env python3
"""
Ethos Network lookup tool

Command-line usage:
    python ethos_cli.py profile @vitalikbuterin
    python ethos_cli.py profile 0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045
    python ethos_cli.py score 0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045
    python ethos_cli.py vouches --target 42
    python ethos_cli.py reviews --author 42 --score positive
    python ethos_cli.py markets --top 10
"""

import json
import sys
import argparse
import logging
from typing import Any, List, Optional

from ethos_client import Ethos
from ethos_config import EthosConfig
from ethos_exceptions import EthosError, ErrorKind

# Configure logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# Add stderr handler if not already present
if not logger.handlers:
    handler = logging.StreamHandler(sys.stderr)
    formatter = logging.Formatter(
        "%(levelname)s: %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def lookup_profile(client: Ethos, identifier: str):
    """Resolve a profile from a numeric id, @handle, 0x address or userkey."""
    if identifier.isdigit():
        return client.profiles.get(int(identifier))
    if identifier.startswith("@"):
        return client.profiles.get_by_twitter(identifier)
    if identifier.lower().startswith("0x"):
        return client.profiles.get_by_address(identifier)
    if "/" in identifier:
        return client.profiles.get_by_userkey(identifier)
    return client.profiles.get_by_twitter(identifier)


def run_command(client: Ethos, args: argparse.Namespace) -> Any:
    if args.command == "profile":
        return lookup_profile(client, args.identifier).to_dict()

    if args.command == "score":
        if args.breakdown:
            return client.scores.breakdown(args.address).to_dict()
        return client.scores.get(args.address).to_dict()

    if args.command == "vouches":
        vouches = client.vouches.list_all(
            author_profile_id=args.author,
            target_profile_id=args.target,
        )
        logger.info(f"Retrieved {len(vouches)} vouches")
        return [v.to_dict() for v in vouches]

    if args.command == "reviews":
        reviews = client.reviews.list_all(
            author_profile_id=args.author,
            target_profile_id=args.target,
            score=args.score,
        )
        logger.info(f"Retrieved {len(reviews)} reviews")
        return [r.to_dict() for r in reviews]

    markets = client.markets.top_by_volume(args.top)
    return [m.to_dict() for m in markets]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Query the Ethos Network API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Look up a profile by Twitter handle:
    python ethos_cli.py profile @vitalikbuterin

  Vouches received by profile 42:
    python ethos_cli.py vouches --target 42

  Ten markets with the highest trading volume:
    python ethos_cli.py markets --top 10
        """
    )
    parser.add_argument("--base-url", help="API base URL (default: ETHOS_API_BASE_URL or the public v2 API)")
    parser.add_argument("--client-name", help="Value sent in the X-Ethos-Client header")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    profile = subparsers.add_parser("profile", help="Look up a profile")
    profile.add_argument("identifier", help="Profile id, @handle, 0x address or userkey")

    score = subparsers.add_parser("score", help="Credibility score for an address")
    score.add_argument("address")
    score.add_argument("--breakdown", action="store_true", help="Include the score breakdown")

    for name in ("vouches", "reviews"):
        listing = subparsers.add_parser(name, help=f"List {name}")
        listing.add_argument("--author", type=int, help="Author profile id")
        listing.add_argument("--target", type=int, help="Target (subject) profile id")
        if name == "reviews":
            listing.add_argument("--score", choices=["positive", "neutral", "negative"])

    markets = subparsers.add_parser("markets", help="Top markets by volume")
    markets.add_argument("--top", type=int, default=20, help="Number of markets (default: 20)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main function to handle command-line execution."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = getattr(logging, args.log_level)
    logger.setLevel(level)
    logging.getLogger("ethos_http").setLevel(level)

    try:
        env = EthosConfig.from_env()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    config = EthosConfig(
        base_url=args.base_url or env.base_url,
        client_name=args.client_name or env.client_name,
        timeout=env.timeout,
        rate_limit=env.rate_limit,
        max_retries=env.max_retries,
    )

    try:
        with Ethos(config) as client:
            output = run_command(client, args)
    except EthosError as e:
        if e.kind is ErrorKind.NOT_FOUND:
            logger.error(f"Not found: {e}")
        elif e.kind is ErrorKind.RATE_LIMIT:
            wait = f"{e.retry_after} seconds" if e.retry_after is not None else "a while"
            logger.error(f"Rate limited; retry after {wait}")
        else:
            logger.error(f"Request failed: {e}")
        return 1

    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
