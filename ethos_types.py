"""
Typed records for Ethos API responses.

Each record is built from the raw JSON object with ``from_dict`` (missing
fields get defaults, timestamps become aware datetimes) and turned back
into the API's camelCase shape with ``to_dict``.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp; naive values are taken as UTC."""
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    """Render as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def score_level(value: float) -> str:
    """
    Credibility level for a score.

    Score ranges:
        0-799: untrusted
        800-1199: questionable
        1200-1599: neutral
        1600-1999: reputable
        2000+: exemplary
    """
    if value < 800:
        return "untrusted"
    if value < 1200:
        return "questionable"
    if value < 1600:
        return "neutral"
    if value < 2000:
        return "reputable"
    return "exemplary"


def _or(value: Any, default: Any) -> Any:
    return default if value is None else value


def _empty_profile_stats() -> Dict[str, Any]:
    return {
        "review": {"received": {"positive": 0, "neutral": 0, "negative": 0}},
        "vouch": {
            "given": {"count": 0, "amountWeiTotal": 0},
            "received": {"count": 0, "amountWeiTotal": 0},
        },
    }


def _empty_score_breakdown() -> Dict[str, float]:
    return {"reviews": 0, "vouches": 0, "attestations": 0, "activity": 0, "history": 0}


TWITTER_USERKEY_PREFIXES = ("x.com/user/", "twitter.com/user/")


@dataclass(frozen=True)
class Profile:
    """An Ethos user profile."""

    id: int
    profile_id: Optional[int] = None
    address: Optional[str] = None
    display_name: Optional[str] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = None
    description: Optional[str] = None
    score: float = 0
    status: str = "ACTIVE"
    userkeys: List[str] = field(default_factory=list)
    xp_total: float = 0
    xp_streak_days: int = 0
    xp_removed_due_to_abuse: bool = False
    influence_factor: float = 0
    influence_factor_percentile: float = 0
    links: Dict[str, Any] = field(default_factory=dict)
    stats: Dict[str, Any] = field(default_factory=_empty_profile_stats)
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        return cls(
            id=data["id"],
            profile_id=data.get("profileId"),
            address=data.get("address"),
            display_name=data.get("displayName"),
            username=data.get("username"),
            avatar_url=data.get("avatarUrl"),
            description=data.get("description"),
            score=_or(data.get("score"), 0),
            status=_or(data.get("status"), "ACTIVE"),
            userkeys=list(_or(data.get("userkeys"), [])),
            xp_total=_or(data.get("xpTotal"), 0),
            xp_streak_days=_or(data.get("xpStreakDays"), 0),
            xp_removed_due_to_abuse=_or(data.get("xpRemovedDueToAbuse"), False),
            influence_factor=_or(data.get("influenceFactor"), 0),
            influence_factor_percentile=_or(data.get("influenceFactorPercentile"), 0),
            links=_or(data.get("links"), {}),
            stats=_or(data.get("stats"), _empty_profile_stats()),
            created_at=parse_datetime(data.get("createdAt")),
        )

    @property
    def twitter_handle(self) -> Optional[str]:
        for key in self.userkeys:
            for prefix in TWITTER_USERKEY_PREFIXES:
                if key.startswith(prefix):
                    return key[len(prefix):]
        return None

    @property
    def ethereum_address(self) -> Optional[str]:
        return self.address

    @property
    def credibility_score(self) -> float:
        return self.score

    @property
    def score_level(self) -> str:
        return score_level(self.score)

    @property
    def vouches_received_count(self) -> int:
        return self.stats["vouch"]["received"]["count"]

    @property
    def vouches_given_count(self) -> int:
        return self.stats["vouch"]["given"]["count"]

    @property
    def reviews_positive(self) -> int:
        return self.stats["review"]["received"]["positive"]

    @property
    def reviews_negative(self) -> int:
        return self.stats["review"]["received"]["negative"]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "profileId": self.profile_id,
            "address": self.address,
            "displayName": self.display_name,
            "username": self.username,
            "avatarUrl": self.avatar_url,
            "description": self.description,
            "score": self.score,
            "status": self.status,
            "userkeys": list(self.userkeys),
            "xpTotal": self.xp_total,
            "xpStreakDays": self.xp_streak_days,
            "xpRemovedDueToAbuse": self.xp_removed_due_to_abuse,
            "influenceFactor": self.influence_factor,
            "influenceFactorPercentile": self.influence_factor_percentile,
            "links": self.links,
            "stats": self.stats,
            "createdAt": format_datetime(self.created_at),
        }


@dataclass(frozen=True)
class Vouch:
    """One profile staking ETH on another profile's reputation."""

    id: int
    author_profile_id: int
    subject_profile_id: int
    staked: bool = True
    archived: bool = False
    unhealthy: bool = False
    balance: str = "0"
    activity_checkpoints: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Vouch":
        return cls(
            id=data["id"],
            author_profile_id=data.get("authorProfileId"),
            subject_profile_id=data.get("subjectProfileId"),
            staked=_or(data.get("staked"), True),
            archived=_or(data.get("archived"), False),
            unhealthy=_or(data.get("unhealthy"), False),
            balance=str(_or(data.get("balance"), "0")),
            activity_checkpoints=_or(data.get("activityCheckpoints"), {}),
            created_at=parse_datetime(data.get("createdAt")),
            updated_at=parse_datetime(data.get("updatedAt")),
        )

    @property
    def target_profile_id(self) -> int:
        return self.subject_profile_id

    @property
    def amount_wei(self) -> int:
        return int(self.balance)

    @property
    def amount_eth(self) -> float:
        return self.amount_wei / 1e18

    @property
    def is_active(self) -> bool:
        return self.staked and not self.archived

    @property
    def voucher_id(self) -> int:
        return self.author_profile_id

    @property
    def target_id(self) -> int:
        return self.subject_profile_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "authorProfileId": self.author_profile_id,
            "subjectProfileId": self.subject_profile_id,
            "staked": self.staked,
            "archived": self.archived,
            "unhealthy": self.unhealthy,
            "balance": self.balance,
            "activityCheckpoints": self.activity_checkpoints,
            "createdAt": format_datetime(self.created_at),
            "updatedAt": format_datetime(self.updated_at),
        }


REVIEW_SCORES = ("positive", "neutral", "negative")


@dataclass(frozen=True)
class Review:
    """A public rating one profile leaves for another."""

    id: int
    author_profile_id: int
    subject_profile_id: int
    score: str
    comment: Optional[str] = None
    archived: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Review":
        return cls(
            id=data["id"],
            author_profile_id=data.get("authorProfileId"),
            subject_profile_id=data.get("subjectProfileId"),
            score=data.get("score"),
            comment=data.get("comment"),
            archived=_or(data.get("archived"), False),
            created_at=parse_datetime(data.get("createdAt")),
            updated_at=parse_datetime(data.get("updatedAt")),
        )

    @property
    def target_profile_id(self) -> int:
        return self.subject_profile_id

    @property
    def is_positive(self) -> bool:
        return self.score == "positive"

    @property
    def is_negative(self) -> bool:
        return self.score == "negative"

    @property
    def is_neutral(self) -> bool:
        return self.score == "neutral"

    @property
    def reviewer_id(self) -> int:
        return self.author_profile_id

    @property
    def target_id(self) -> int:
        return self.subject_profile_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "authorProfileId": self.author_profile_id,
            "subjectProfileId": self.subject_profile_id,
            "score": self.score,
            "comment": self.comment,
            "archived": self.archived,
            "createdAt": format_datetime(self.created_at),
            "updatedAt": format_datetime(self.updated_at),
        }


@dataclass(frozen=True)
class Market:
    """
    A reputation market on Ethos Markets.

    Markets trade trust/distrust votes on a person's reputation through an
    LMSR-based AMM and never resolve.
    """

    id: int
    profile_id: int
    username: Optional[str] = None
    user_score: Optional[float] = None
    trust_votes: int = 0
    distrust_votes: int = 0
    trust_price: float = 0.5
    distrust_price: float = 0.5
    total_volume: float = 0
    liquidity_parameter: Optional[float] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Market":
        user = data.get("user") or {}
        # profileId is either top-level or nested under user
        profile_id = _or(data.get("profileId"), _or(user.get("profileId"), data["id"]))
        return cls(
            id=data["id"],
            profile_id=profile_id,
            username=user.get("username"),
            user_score=user.get("score"),
            trust_votes=_or(data.get("trustVotes"), 0),
            distrust_votes=_or(data.get("distrustVotes"), 0),
            trust_price=_or(data.get("trustPrice"), 0.5),
            distrust_price=_or(data.get("distrustPrice"), 0.5),
            total_volume=_or(data.get("totalVolume"), 0),
            liquidity_parameter=data.get("liquidityParameter"),
            is_active=_or(data.get("isActive"), True),
            created_at=parse_datetime(data.get("createdAt")),
            updated_at=parse_datetime(data.get("updatedAt")),
        )

    @property
    def trust_percentage(self) -> float:
        return self.trust_price * 100

    @property
    def distrust_percentage(self) -> float:
        return self.distrust_price * 100

    @property
    def market_sentiment(self) -> str:
        """Bullish above 60% trust, bearish above 60% distrust, else neutral."""
        if self.trust_price > 0.6:
            return "bullish"
        if self.distrust_price > 0.6:
            return "bearish"
        return "neutral"

    @property
    def is_volatile(self) -> bool:
        return 0.4 <= self.trust_price <= 0.6

    def to_dict(self) -> Dict[str, Any]:
        user = None
        if self.username:
            user = {
                "profileId": self.profile_id,
                "username": self.username,
                "score": self.user_score,
            }
        return {
            "id": self.id,
            "profileId": self.profile_id,
            "user": user,
            "trustVotes": self.trust_votes,
            "distrustVotes": self.distrust_votes,
            "trustPrice": self.trust_price,
            "distrustPrice": self.distrust_price,
            "totalVolume": self.total_volume,
            "liquidityParameter": self.liquidity_parameter,
            "isActive": self.is_active,
            "createdAt": format_datetime(self.created_at),
            "updatedAt": format_datetime(self.updated_at),
        }


ACTIVITY_TYPES = (
    "vouch",
    "unvouch",
    "review",
    "attestation",
    "invite_accepted",
    "profile_created",
    "score_updated",
)

BASESCAN_TX_URL = "https://basescan.org/tx/{}"


@dataclass(frozen=True)
class Activity:
    """An on-chain action: vouch, review, attestation and so on."""

    id: int
    type: str
    author_profile_id: Optional[int] = None
    subject_profile_id: Optional[int] = None
    tx_hash: Optional[str] = None
    block_number: Optional[int] = None
    data: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Activity":
        return cls(
            id=data["id"],
            type=data.get("type"),
            author_profile_id=data.get("authorProfileId"),
            subject_profile_id=data.get("subjectProfileId"),
            tx_hash=data.get("txHash"),
            block_number=data.get("blockNumber"),
            data=_or(data.get("data"), {}),
            created_at=parse_datetime(data.get("createdAt")),
        )

    @property
    def target_profile_id(self) -> Optional[int]:
        return self.subject_profile_id

    @property
    def is_vouch(self) -> bool:
        return self.type == "vouch"

    @property
    def is_review(self) -> bool:
        return self.type == "review"

    @property
    def actor_id(self) -> Optional[int]:
        return self.author_profile_id

    @property
    def etherscan_url(self) -> Optional[str]:
        if self.tx_hash:
            return BASESCAN_TX_URL.format(self.tx_hash)
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "authorProfileId": self.author_profile_id,
            "subjectProfileId": self.subject_profile_id,
            "txHash": self.tx_hash,
            "blockNumber": self.block_number,
            "data": self.data,
            "createdAt": format_datetime(self.created_at),
        }


@dataclass(frozen=True)
class Score:
    """A profile's credibility score and its breakdown."""

    profile_id: int
    address: Optional[str] = None
    value: float = 0
    breakdown: Dict[str, float] = field(default_factory=_empty_score_breakdown)
    percentile: Optional[float] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Score":
        return cls(
            profile_id=data.get("profileId"),
            address=data.get("address"),
            value=_or(data.get("value"), 0),
            breakdown=_or(data.get("breakdown"), _empty_score_breakdown()),
            percentile=data.get("percentile"),
            updated_at=parse_datetime(data.get("updatedAt")),
        )

    @property
    def level(self) -> str:
        return score_level(self.value)

    @property
    def is_trusted(self) -> bool:
        return self.value >= 1600

    @property
    def is_untrusted(self) -> bool:
        return self.value < 800

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profileId": self.profile_id,
            "address": self.address,
            "value": self.value,
            "breakdown": self.breakdown,
            "percentile": self.percentile,
            "updatedAt": format_datetime(self.updated_at),
        }
