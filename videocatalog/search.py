from datetime import date
from typing import List, Optional

from .models import SearchFilters, Video

SHORT_MAX_SECONDS = 300
LONG_MIN_SECONDS = 900


def upload_day(video: Video) -> date:
    try:
        return date.fromisoformat((video.upload_date or "")[:10])
    except ValueError:
        return date.min


def matches(video: Video, term: str) -> bool:
    if term in video.title.lower():
        return True
    if term in video.description.lower():
        return True
    if any(term in tag.lower() for tag in video.tags):
        return True
    return term in video.category.lower()


def filter_by_duration(videos: List[Video], bucket: str) -> List[Video]:
    if bucket == "short":
        return [v for v in videos if v.duration < SHORT_MAX_SECONDS]
    if bucket == "medium":
        return [v for v in videos if SHORT_MAX_SECONDS <= v.duration <= LONG_MIN_SECONDS]
    if bucket == "long":
        return [v for v in videos if v.duration > LONG_MIN_SECONDS]
    return list(videos)


def sort_videos(videos: List[Video], sort_by: str) -> List[Video]:
    if sort_by == "newest":
        return sorted(videos, key=upload_day, reverse=True)
    if sort_by == "oldest":
        return sorted(videos, key=upload_day)
    if sort_by == "views":
        return sorted(videos, key=lambda v: v.views, reverse=True)
    if sort_by == "rating":
        return sorted(videos, key=lambda v: v.rating, reverse=True)
    if sort_by == "duration":
        return sorted(videos, key=lambda v: v.duration, reverse=True)
    # relevance: catalog order
    return list(videos)


def search_videos(videos: List[Video], query: str, filters: Optional[SearchFilters] = None) -> List[Video]:
    filters = filters or SearchFilters()
    term = (query or "").lower().strip()
    results = [v for v in videos if matches(v, term)]
    if filters.category and filters.category != "all":
        results = [v for v in results if v.category == filters.category]
    results = filter_by_duration(results, filters.duration)
    return sort_videos(results, filters.sort_by)


def search_suggestions(videos: List[Video], query: str, limit: int = 5) -> List[Video]:
    term = (query or "").lower()
    found = [
        v for v in videos
        if term in v.title.lower() or any(term in tag.lower() for tag in v.tags)
    ]
    return found[:limit]


def result_count_label(count: int) -> str:
    return f"{count} video{'' if count == 1 else 's'} found"
