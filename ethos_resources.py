"""
Resource wrappers for the Ethos API endpoints.

Each wrapper maps its parameters onto a path and filters, then hands off to
the transport (``get``/``post``) or to one of the pagination traversals.
Listing methods return lazy iterators; ``list_all`` and friends collect them.
"""

from typing import Any, Dict, Iterator, List, Optional
from urllib.parse import quote

from ethos_config import DEFAULT_PAGE_SIZE, RECENT_PAGE_SIZE, SEARCH_PAGE_SIZE
from ethos_exceptions import EthosError
from ethos_pagination import extract_items, first, paginate_body, paginate_query, take
from ethos_types import (
    ACTIVITY_TYPES,
    REVIEW_SCORES,
    Activity,
    Market,
    Profile,
    Review,
    Score,
    Vouch,
)


def _drop_none(values: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def _id_list(value: Optional[int]) -> Optional[List[int]]:
    return None if value is None else [value]


class Profiles:
    """Ethos user profiles by id, address, userkey or Twitter handle."""

    path = "/profiles"

    def __init__(self, http):
        self.http = http

    def get(self, profile_id: int) -> Profile:
        return Profile.from_dict(self.http.get(f"{self.path}/{profile_id}"))

    def get_by_address(self, address: str) -> Profile:
        return Profile.from_dict(self.http.get(f"{self.path}/address/{address}"))

    def get_by_twitter(self, handle: str) -> Profile:
        """Look up a profile by Twitter/X handle (leading ``@`` optional)."""
        handle = handle[1:] if handle.startswith("@") else handle
        return self.get_by_userkey(f"x.com/user/{handle}")

    def get_by_userkey(self, userkey: str) -> Profile:
        return Profile.from_dict(
            self.http.get(f"{self.path}/userkey/{quote(userkey, safe='')}")
        )

    def search(
        self,
        query: str,
        limit: int = SEARCH_PAGE_SIZE,
        offset: int = 0,
    ) -> List[Profile]:
        """Single page of profiles matching a name or username."""
        if not query or not isinstance(query, str):
            raise EthosError.validation(
                "Query must be a non-empty string",
                [{"field": "query", "message": "required"}],
            )
        response = self.http.get(
            f"{self.path}/search",
            {"query": query, "limit": limit, "offset": offset},
        )
        return [Profile.from_dict(item) for item in extract_items(response)]

    def list(
        self,
        order_by: Optional[str] = None,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> Iterator[Profile]:
        return paginate_query(
            self.http, self.path, Profile.from_dict, {"orderBy": order_by}, limit
        )

    def list_all(self, order_by: Optional[str] = None, limit: int = DEFAULT_PAGE_SIZE) -> List[Profile]:
        """All profiles as a list (use with caution for large datasets)."""
        return list(self.list(order_by=order_by, limit=limit))

    def recent(self, limit: int = RECENT_PAGE_SIZE) -> List[Profile]:
        response = self.http.get(f"{self.path}/recent", {"limit": limit})
        return [Profile.from_dict(item) for item in extract_items(response)]


class Vouches:
    """Vouch relationships between profiles."""

    path = "/vouches"

    def __init__(self, http):
        self.http = http

    def get(self, vouch_id: int) -> Vouch:
        return Vouch.from_dict(self.http.get(f"{self.path}/{vouch_id}"))

    def list(
        self,
        author_profile_id: Optional[int] = None,
        target_profile_id: Optional[int] = None,
        staked: Optional[bool] = None,
        archived: Optional[bool] = None,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> Iterator[Vouch]:
        body = _drop_none({
            "authorProfileIds": _id_list(author_profile_id),
            "subjectProfileIds": _id_list(target_profile_id),
            "staked": staked,
            "archived": archived,
        })
        return paginate_body(self.http, self.path, Vouch.from_dict, body, limit)

    def list_all(self, **filters) -> List[Vouch]:
        return list(self.list(**filters))

    def for_profile(self, profile_id: int) -> List[Vouch]:
        """Vouches received by a profile."""
        return self.list_all(target_profile_id=profile_id)

    def by_profile(self, profile_id: int) -> List[Vouch]:
        """Vouches given by a profile."""
        return self.list_all(author_profile_id=profile_id)

    def between(self, voucher_id: int, target_id: int) -> Optional[Vouch]:
        return first(
            self.list(author_profile_id=voucher_id, target_profile_id=target_id, limit=1)
        )


class Reviews:
    """Reviews left between profiles."""

    path = "/reviews"

    def __init__(self, http):
        self.http = http

    def get(self, review_id: int) -> Review:
        return Review.from_dict(self.http.get(f"{self.path}/{review_id}"))

    def list(
        self,
        author_profile_id: Optional[int] = None,
        target_profile_id: Optional[int] = None,
        score: Optional[str] = None,
        archived: Optional[bool] = None,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> Iterator[Review]:
        if score is not None and score not in REVIEW_SCORES:
            raise EthosError.validation(
                f"Invalid score '{score}'. Must be one of: {', '.join(REVIEW_SCORES)}",
                [{"field": "score", "value": score}],
            )
        body = _drop_none({
            "authorProfileIds": _id_list(author_profile_id),
            "subjectProfileIds": _id_list(target_profile_id),
            "score": score,
            "archived": archived,
        })
        return paginate_body(self.http, self.path, Review.from_dict, body, limit)

    def list_all(self, **filters) -> List[Review]:
        return list(self.list(**filters))

    def for_profile(self, profile_id: int) -> List[Review]:
        """Reviews received by a profile."""
        return self.list_all(target_profile_id=profile_id)

    def by_profile(self, profile_id: int) -> List[Review]:
        """Reviews given by a profile."""
        return self.list_all(author_profile_id=profile_id)

    def positive_for(self, profile_id: int) -> List[Review]:
        return self.list_all(target_profile_id=profile_id, score="positive")

    def negative_for(self, profile_id: int) -> List[Review]:
        return self.list_all(target_profile_id=profile_id, score="negative")


class Markets:
    """Reputation markets for trading trust/distrust."""

    path = "/markets"

    def __init__(self, http):
        self.http = http

    def get(self, market_id: int) -> Market:
        return Market.from_dict(self.http.get(f"{self.path}/{market_id}"))

    def get_by_profile(self, profile_id: int) -> Market:
        return Market.from_dict(self.http.get(f"{self.path}/profile/{profile_id}"))

    def list(
        self,
        is_active: Optional[bool] = None,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> Iterator[Market]:
        return paginate_query(
            self.http, self.path, Market.from_dict, {"isActive": is_active}, limit
        )

    def list_all(self, is_active: Optional[bool] = None) -> List[Market]:
        return list(self.list(is_active=is_active))

    # The API has no server-side ordering for these; all markets are fetched.

    def top_by_volume(self, limit: int = 20) -> List[Market]:
        return sorted(self.list_all(), key=lambda m: m.total_volume, reverse=True)[:limit]

    def most_trusted(self, limit: int = 20) -> List[Market]:
        return sorted(self.list_all(), key=lambda m: m.trust_price, reverse=True)[:limit]

    def most_distrusted(self, limit: int = 20) -> List[Market]:
        return sorted(self.list_all(), key=lambda m: m.distrust_price, reverse=True)[:limit]


class Activities:
    """On-chain activities (vouches, reviews, attestations, ...)."""

    path = "/activities"

    def __init__(self, http):
        self.http = http

    def get(self, activity_id: int) -> Activity:
        return Activity.from_dict(self.http.get(f"{self.path}/{activity_id}"))

    def list(
        self,
        author_profile_id: Optional[int] = None,
        target_profile_id: Optional[int] = None,
        activity_type: Optional[str] = None,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> Iterator[Activity]:
        if activity_type is not None and activity_type not in ACTIVITY_TYPES:
            raise EthosError.validation(
                f"Invalid activity type '{activity_type}'. Must be one of: {', '.join(ACTIVITY_TYPES)}",
                [{"field": "type", "value": activity_type}],
            )
        params = {
            "authorProfileId": author_profile_id,
            "subjectProfileId": target_profile_id,
            "type": activity_type,
        }
        return paginate_query(self.http, self.path, Activity.from_dict, params, limit)

    def list_all(self, **filters) -> List[Activity]:
        return list(self.list(**filters))

    def for_profile(self, profile_id: int) -> List[Activity]:
        """Activities where the profile is author or target, newest first."""
        seen = set()
        combined = []
        for activity in self.list_all(author_profile_id=profile_id) + self.list_all(
            target_profile_id=profile_id
        ):
            if activity.id in seen:
                continue
            seen.add(activity.id)
            combined.append(activity)

        return sorted(
            combined,
            key=lambda a: a.created_at.timestamp() if a.created_at else 0,
            reverse=True,
        )

    def vouches(self, limit: int = DEFAULT_PAGE_SIZE) -> Iterator[Activity]:
        return self.list(activity_type="vouch", limit=limit)

    def reviews(self, limit: int = DEFAULT_PAGE_SIZE) -> Iterator[Activity]:
        return self.list(activity_type="review", limit=limit)

    def recent(self, limit: int = RECENT_PAGE_SIZE) -> List[Activity]:
        return take(self.list(limit=limit), limit)


class Scores:
    """Credibility scores."""

    path = "/score"

    def __init__(self, http):
        self.http = http

    def get(self, address: str) -> Score:
        return Score.from_dict(self.http.get(f"{self.path}/{address}"))

    def get_by_profile(self, profile_id: int) -> Score:
        return Score.from_dict(self.http.get(f"{self.path}/profile/{profile_id}"))

    def breakdown(self, address: str) -> Score:
        return Score.from_dict(self.http.get(f"{self.path}/{address}/breakdown"))
