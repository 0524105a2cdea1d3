from __future__ import annotations

import random
import unittest

from videocatalog.catalog import default_videos
from videocatalog.engine import (
    newest,
    recommend_for_preferences,
    recommend_from_results,
    suggest_similar,
    trending,
)
from videocatalog.models import UserPreferences


def _ids(videos):
    return [v.id for v in videos]


class EngineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.videos = default_videos()
        self.by_id = {v.id: v for v in self.videos}
        self.rng = random.Random(7)

    def test_trending_and_newest(self) -> None:
        self.assertEqual(_ids(trending(self.videos, 3)), ["1", "5", "2"])
        self.assertEqual(_ids(newest(self.videos, 2)), ["3", "2"])

    def test_empty_preferences_fall_back_to_trending(self) -> None:
        recs = recommend_for_preferences(self.videos, UserPreferences(), 4, self.rng)
        self.assertEqual(recs, trending(self.videos, 4))

    def test_category_and_tag_preferences_rank_first(self) -> None:
        prefs = UserPreferences(categories=["hd"], tags=["quality"])
        recs = recommend_for_preferences(self.videos, prefs, 2, self.rng)
        self.assertEqual(_ids(recs), ["6", "5"])

    def test_viewed_videos_lose_unseen_bonus(self) -> None:
        prefs = UserPreferences(tags=["exclusive"], viewed_videos=["1"])
        recs = recommend_for_preferences(self.videos, prefs, 3, self.rng)
        self.assertEqual(set(_ids(recs[:2])), {"2", "6"})
        self.assertEqual(recs[2].id, "1")

    def test_suggest_similar_is_deterministic_and_excludes_current(self) -> None:
        current = self.by_id["6"]
        suggestions = suggest_similar(current, self.videos, limit=6)
        self.assertEqual(_ids(suggestions), ["1", "5", "2", "4", "3"])

    def test_recommend_from_few_results_returns_other_videos(self) -> None:
        results = [self.by_id["1"], self.by_id["6"]]
        recs = recommend_from_results(self.videos, results, rng=self.rng)
        self.assertEqual(_ids(recs), ["2", "3", "4", "5"])

    def test_recommend_from_many_results_scores_by_overlap(self) -> None:
        results = [self.by_id[i] for i in ("1", "2", "3", "4")]
        recs = recommend_from_results(self.videos, results, rng=self.rng)
        self.assertEqual(_ids(recs), ["6", "5"])


if __name__ == "__main__":
    unittest.main()
