import math
import random
from typing import List, Optional, Tuple

from .models import UserPreferences, Video
from .search import upload_day

CATEGORY_WEIGHT = 10.0
TAG_WEIGHT = 5.0
UNSEEN_BONUS = 3.0
JITTER = 2.0

SAME_CATEGORY_WEIGHT = 20.0
SHARED_TAG_WEIGHT = 10.0
SIMILAR_DURATION_BONUS = 5.0
SIMILAR_DURATION_RATIO = 0.3
RATING_WEIGHT = 2.0

FEW_RESULTS = 4


def trending(videos: List[Video], limit: int = 6) -> List[Video]:
    return sorted(videos, key=lambda v: v.views, reverse=True)[:limit]


def newest(videos: List[Video], limit: int = 6) -> List[Video]:
    return sorted(videos, key=upload_day, reverse=True)[:limit]


def _top(scored: List[Tuple[float, Video]], limit: int) -> List[Video]:
    scored.sort(key=lambda x: x[0], reverse=True)
    return [v for _, v in scored[:limit]]


def score_for_preferences(video: Video, prefs: UserPreferences, rng: random.Random) -> float:
    score = 0.0
    if video.category in prefs.categories:
        score += CATEGORY_WEIGHT
    for tag in video.tags:
        if tag in prefs.tags:
            score += TAG_WEIGHT
    # unseen videos rank above recently watched ones
    if video.id not in prefs.viewed_videos:
        score += UNSEEN_BONUS
    return score + rng.random() * JITTER


def recommend_for_preferences(
    videos: List[Video],
    prefs: UserPreferences,
    limit: int = 6,
    rng: Optional[random.Random] = None,
) -> List[Video]:
    if prefs.is_empty():
        return trending(videos, limit)
    rng = rng or random.Random()
    scored = [(score_for_preferences(v, prefs, rng), v) for v in videos]
    return _top(scored, limit)


def similarity_score(video: Video, current: Video) -> float:
    score = 0.0
    if video.category == current.category:
        score += SAME_CATEGORY_WEIGHT
    shared = [tag for tag in video.tags if tag in current.tags]
    score += len(shared) * SHARED_TAG_WEIGHT
    if abs(video.duration - current.duration) < current.duration * SIMILAR_DURATION_RATIO:
        score += SIMILAR_DURATION_BONUS
    score += math.log(video.views + 1)
    score += video.rating * RATING_WEIGHT
    return score


def suggest_similar(current: Video, videos: List[Video], limit: int = 6) -> List[Video]:
    scored = [(similarity_score(v, current), v) for v in videos if v.id != current.id]
    return _top(scored, limit)


def recommend_from_results(
    videos: List[Video],
    results: List[Video],
    limit: int = 6,
    rng: Optional[random.Random] = None,
) -> List[Video]:
    """Videos to show next to a search result page."""
    seen = {v.id for v in results}
    others = [v for v in videos if v.id not in seen]
    if len(results) < FEW_RESULTS:
        return others[:limit]

    rng = rng or random.Random()
    categories = {v.category for v in results}
    tags = {tag for v in results for tag in v.tags}
    scored: List[Tuple[float, Video]] = []
    for v in others:
        score = CATEGORY_WEIGHT if v.category in categories else 0.0
        score += TAG_WEIGHT * sum(1 for tag in v.tags if tag in tags)
        scored.append((score + rng.random() * JITTER, v))
    return _top(scored, limit)
