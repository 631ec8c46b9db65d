#!/usr/bin/env python3
"""
Unit tests for ethos_resources.py

The transport is a Mock; these tests check the paths, filters and body
shapes each wrapper sends, and how results are parsed.
"""

import unittest
from unittest.mock import Mock

from ethos_exceptions import ErrorKind, EthosError
from ethos_resources import Activities, Markets, Profiles, Reviews, Scores, Vouches
from ethos_types import Activity, Market, Profile, Review, Score, Vouch


class TestProfiles(unittest.TestCase):
    """Test the Profiles resource."""

    def setUp(self):
        """Set up test fixtures."""
        self.http = Mock()
        self.http.get.return_value = {"id": 1, "score": 1500}
        self.profiles = Profiles(self.http)

    def test_get(self):
        profile = self.profiles.get(1)

        self.assertIsInstance(profile, Profile)
        self.assertEqual(profile.score, 1500)
        self.http.get.assert_called_once_with("/profiles/1")

    def test_get_by_address(self):
        self.profiles.get_by_address("0xabc")
        self.http.get.assert_called_once_with("/profiles/address/0xabc")

    def test_get_by_twitter_strips_at(self):
        """Test the handle becomes an encoded x.com userkey."""
        self.profiles.get_by_twitter("@vitalik")
        self.http.get.assert_called_once_with("/profiles/userkey/x.com%2Fuser%2Fvitalik")

    def test_get_by_twitter_plain(self):
        self.profiles.get_by_twitter("vitalik")
        self.http.get.assert_called_once_with("/profiles/userkey/x.com%2Fuser%2Fvitalik")

    def test_get_by_userkey_encodes(self):
        self.profiles.get_by_userkey("address:0xabc")
        self.http.get.assert_called_once_with("/profiles/userkey/address%3A0xabc")

    def test_search(self):
        self.http.get.return_value = {"values": [{"id": 1}, {"id": 2}]}

        results = self.profiles.search("vitalik")

        self.assertEqual([p.id for p in results], [1, 2])
        self.http.get.assert_called_once_with(
            "/profiles/search", {"query": "vitalik", "limit": 20, "offset": 0}
        )

    def test_search_empty_query(self):
        with self.assertRaises(EthosError) as ctx:
            self.profiles.search("")
        self.assertIs(ctx.exception.kind, ErrorKind.VALIDATION)
        self.http.get.assert_not_called()

    def test_list_uses_query_pagination(self):
        self.http.get.return_value = {"data": [{"id": 1}]}

        results = self.profiles.list_all(order_by="score")

        self.assertEqual(len(results), 1)
        self.http.get.assert_called_once_with(
            "/profiles", {"orderBy": "score", "limit": 100, "offset": 0}
        )

    def test_recent(self):
        self.http.get.return_value = [{"id": 3}]

        results = self.profiles.recent(5)

        self.assertEqual(results[0].id, 3)
        self.http.get.assert_called_once_with("/profiles/recent", {"limit": 5})

    def test_not_found_propagates(self):
        self.http.get.side_effect = EthosError.not_found()

        with self.assertRaises(EthosError) as ctx:
            self.profiles.get(999)
        self.assertIs(ctx.exception.kind, ErrorKind.NOT_FOUND)


class TestVouches(unittest.TestCase):
    """Test the Vouches resource."""

    def setUp(self):
        """Set up test fixtures."""
        self.http = Mock()
        self.http.post.return_value = {
            "values": [{"id": 1, "authorProfileId": 10, "subjectProfileId": 20}],
            "total": 1,
        }
        self.vouches = Vouches(self.http)

    def test_get(self):
        self.http.get.return_value = {"id": 4, "authorProfileId": 1, "subjectProfileId": 2}
        vouch = self.vouches.get(4)
        self.assertIsInstance(vouch, Vouch)
        self.http.get.assert_called_once_with("/vouches/4")

    def test_list_body(self):
        """Test filters travel in the body as single-element id lists."""
        results = self.vouches.list_all(author_profile_id=10, target_profile_id=20, archived=False)

        self.assertEqual(len(results), 1)
        self.http.post.assert_called_once_with("/vouches", {
            "authorProfileIds": [10],
            "subjectProfileIds": [20],
            "archived": False,
            "limit": 100,
            "offset": 0,
        })

    def test_list_omits_unset_filters(self):
        self.vouches.list_all()
        self.http.post.assert_called_once_with("/vouches", {"limit": 100, "offset": 0})

    def test_for_profile(self):
        self.vouches.for_profile(20)
        body = self.http.post.call_args[0][1]
        self.assertEqual(body["subjectProfileIds"], [20])
        self.assertNotIn("authorProfileIds", body)

    def test_by_profile(self):
        self.vouches.by_profile(10)
        body = self.http.post.call_args[0][1]
        self.assertEqual(body["authorProfileIds"], [10])

    def test_between_found(self):
        vouch = self.vouches.between(10, 20)
        self.assertEqual(vouch.id, 1)
        self.assertEqual(self.http.post.call_args[0][1]["limit"], 1)
        self.assertEqual(self.http.post.call_count, 1)

    def test_between_missing(self):
        self.http.post.return_value = {"values": [], "total": 0}
        self.assertIsNone(self.vouches.between(10, 20))


class TestReviews(unittest.TestCase):
    """Test the Reviews resource."""

    def setUp(self):
        """Set up test fixtures."""
        self.http = Mock()
        self.http.post.return_value = {
            "values": [{"id": 1, "authorProfileId": 1, "subjectProfileId": 2, "score": "positive"}],
            "total": 1,
        }
        self.reviews = Reviews(self.http)

    def test_get(self):
        self.http.get.return_value = {"id": 1, "authorProfileId": 1, "subjectProfileId": 2, "score": "neutral"}
        self.assertIsInstance(self.reviews.get(1), Review)
        self.http.get.assert_called_once_with("/reviews/1")

    def test_positive_for(self):
        results = self.reviews.positive_for(2)

        self.assertTrue(results[0].is_positive)
        self.http.post.assert_called_once_with("/reviews", {
            "subjectProfileIds": [2],
            "score": "positive",
            "limit": 100,
            "offset": 0,
        })

    def test_negative_for(self):
        self.reviews.negative_for(2)
        self.assertEqual(self.http.post.call_args[0][1]["score"], "negative")

    def test_by_profile(self):
        self.reviews.by_profile(1)
        self.assertEqual(self.http.post.call_args[0][1]["authorProfileIds"], [1])

    def test_invalid_score(self):
        with self.assertRaises(EthosError) as ctx:
            self.reviews.list(score="great")
        self.assertIs(ctx.exception.kind, ErrorKind.VALIDATION)
        self.http.post.assert_not_called()


class TestMarkets(unittest.TestCase):
    """Test the Markets resource."""

    def setUp(self):
        """Set up test fixtures."""
        self.http = Mock()
        self.http.get.return_value = [
            {"id": 1, "totalVolume": 5, "trustPrice": 0.2, "distrustPrice": 0.8},
            {"id": 2, "totalVolume": 50, "trustPrice": 0.9, "distrustPrice": 0.1},
            {"id": 3, "totalVolume": 20, "trustPrice": 0.5, "distrustPrice": 0.5},
        ]
        self.markets = Markets(self.http)

    def test_get_by_profile(self):
        self.http.get.return_value = {"id": 1, "profileId": 42}
        market = self.markets.get_by_profile(42)
        self.assertIsInstance(market, Market)
        self.http.get.assert_called_once_with("/markets/profile/42")

    def test_list_is_active_filter(self):
        list(self.markets.list(is_active=True))
        self.http.get.assert_called_once_with(
            "/markets", {"isActive": True, "limit": 100, "offset": 0}
        )

    def test_top_by_volume(self):
        self.assertEqual([m.id for m in self.markets.top_by_volume(2)], [2, 3])

    def test_most_trusted(self):
        self.assertEqual(self.markets.most_trusted(1)[0].id, 2)

    def test_most_distrusted(self):
        self.assertEqual(self.markets.most_distrusted(1)[0].id, 1)


class TestActivities(unittest.TestCase):
    """Test the Activities resource."""

    def setUp(self):
        """Set up test fixtures."""
        self.http = Mock()
        self.activities = Activities(self.http)

    def test_get(self):
        self.http.get.return_value = {"id": 1, "type": "vouch"}
        self.assertIsInstance(self.activities.get(1), Activity)
        self.http.get.assert_called_once_with("/activities/1")

    def test_list_query_names(self):
        self.http.get.return_value = []

        list(self.activities.list(author_profile_id=1, target_profile_id=2, activity_type="review"))

        self.http.get.assert_called_once_with("/activities", {
            "authorProfileId": 1,
            "subjectProfileId": 2,
            "type": "review",
            "limit": 100,
            "offset": 0,
        })

    def test_invalid_activity_type(self):
        with self.assertRaises(EthosError) as ctx:
            self.activities.list(activity_type="tweet")
        self.assertIs(ctx.exception.kind, ErrorKind.VALIDATION)
        self.assertEqual(ctx.exception.errors, [{"field": "type", "value": "tweet"}])
        self.http.get.assert_not_called()

    def test_vouches_filter(self):
        self.http.get.return_value = []
        list(self.activities.vouches())
        self.assertEqual(self.http.get.call_args[0][1]["type"], "vouch")

    def test_for_profile_dedupes_and_sorts(self):
        """Test author and target results are merged, de-duplicated and newest first."""
        as_author = [
            {"id": 1, "type": "vouch", "createdAt": "2024-01-01T00:00:00Z"},
            {"id": 2, "type": "review", "createdAt": "2024-03-01T00:00:00Z"},
        ]
        as_target = [
            {"id": 2, "type": "review", "createdAt": "2024-03-01T00:00:00Z"},
            {"id": 3, "type": "vouch", "createdAt": "2024-02-01T00:00:00Z"},
            {"id": 4, "type": "vouch"},
        ]
        self.http.get.side_effect = [as_author, as_target]

        results = self.activities.for_profile(7)

        self.assertEqual([a.id for a in results], [2, 3, 1, 4])

    def test_recent_stops_at_limit(self):
        self.http.get.return_value = [{"id": i, "type": "vouch"} for i in range(5)]

        results = self.activities.recent(5)

        self.assertEqual(len(results), 5)
        self.assertEqual(self.http.get.call_count, 1)


class TestScores(unittest.TestCase):
    """Test the Scores resource."""

    def setUp(self):
        """Set up test fixtures."""
        self.http = Mock()
        self.http.get.return_value = {"profileId": 1, "value": 1700}
        self.scores = Scores(self.http)

    def test_get(self):
        score = self.scores.get("0xabc")
        self.assertIsInstance(score, Score)
        self.assertEqual(score.level, "reputable")
        self.http.get.assert_called_once_with("/score/0xabc")

    def test_get_by_profile(self):
        self.scores.get_by_profile(1)
        self.http.get.assert_called_once_with("/score/profile/1")

    def test_breakdown(self):
        self.scores.breakdown("0xabc")
        self.http.get.assert_called_once_with("/score/0xabc/breakdown")


if __name__ == "__main__":
    unittest.main()
