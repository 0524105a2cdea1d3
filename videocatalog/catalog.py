import logging
import random
from datetime import datetime
from typing import Any, Dict, List, Optional

from . import engine, search
from .config import get_settings
from .models import Category, HistoryEntry, SearchFilters, UserPreferences, Video, VideoCreate, VideoUpdate
from .storage import (
    DATABASE_KEY,
    FAVORITES_KEY,
    LAST_SITEMAP_KEY,
    RECOMMENDATIONS_KEY,
    SITEMAP_UPDATED_KEY,
    USER_PREFERENCES_KEY,
    VIEW_HISTORY_KEY,
    LocalStore,
)

logger = logging.getLogger(__name__)

DEFAULT_VIDEOS: List[Dict[str, Any]] = [
    {"id": "1", "title": "Premium HD Experience", "description": "Experience the best in HD quality with our premium content.",
     "embedUrl": "https://example.com/embed/video1", "thumbnail": "/assets/thumbnails/thumb1.jpg", "category": "premium",
     "tags": ["hd", "premium", "exclusive"], "duration": 634, "views": 12500, "rating": 4.8, "uploadDate": "2024-01-10",
     "likes": 850, "dislikes": 25},
    {"id": "2", "title": "Trending Now - Exclusive", "description": "Currently trending video with exclusive content.",
     "embedUrl": "https://example.com/embed/video2", "thumbnail": "/assets/thumbnails/thumb2.jpg", "category": "trending",
     "tags": ["trending", "popular", "hot"], "duration": 452, "views": 8900, "rating": 4.5, "uploadDate": "2024-01-12",
     "likes": 620, "dislikes": 18},
    {"id": "3", "title": "New Release Today", "description": "Fresh content just released today.",
     "embedUrl": "https://example.com/embed/video3", "thumbnail": "/assets/thumbnails/thumb3.jpg", "category": "new",
     "tags": ["new", "fresh", "latest"], "duration": 721, "views": 3400, "rating": 4.2, "uploadDate": "2024-01-15",
     "likes": 280, "dislikes": 12},
    {"id": "4", "title": "Amateur Collection", "description": "Authentic amateur content for real experiences.",
     "embedUrl": "https://example.com/embed/video4", "thumbnail": "/assets/thumbnails/thumb4.jpg", "category": "amateur",
     "tags": ["amateur", "real", "authentic"], "duration": 512, "views": 6700, "rating": 4.3, "uploadDate": "2024-01-08",
     "likes": 450, "dislikes": 20},
    {"id": "5", "title": "Professional Production", "description": "High quality professional production.",
     "embedUrl": "https://example.com/embed/video5", "thumbnail": "/assets/thumbnails/thumb5.jpg", "category": "professional",
     "tags": ["professional", "quality", "production"], "duration": 890, "views": 11200, "rating": 4.7,
     "uploadDate": "2024-01-05", "likes": 780, "dislikes": 15},
    {"id": "6", "title": "HD Quality Exclusive", "description": "Exclusive content in full HD quality.",
     "embedUrl": "https://example.com/embed/video6", "thumbnail": "/assets/thumbnails/thumb6.jpg", "category": "hd",
     "tags": ["hd", "quality", "exclusive"], "duration": 345, "views": 7800, "rating": 4.4, "uploadDate": "2024-01-03",
     "likes": 520, "dislikes": 22},
]

DEFAULT_CATEGORIES: List[Dict[str, Any]] = [
    {"id": "trending", "name": "Trending", "icon": "fas fa-fire", "count": 24},
    {"id": "new", "name": "New Releases", "icon": "fas fa-star", "count": 18},
    {"id": "popular", "name": "Popular", "icon": "fas fa-chart-line", "count": 32},
    {"id": "hd", "name": "HD Quality", "icon": "fas fa-hd", "count": 15},
    {"id": "premium", "name": "Premium", "icon": "fas fa-crown", "count": 12},
    {"id": "exclusive", "name": "Exclusive", "icon": "fas fa-lock", "count": 8},
    {"id": "amateur", "name": "Amateur", "icon": "fas fa-user", "count": 28},
    {"id": "professional", "name": "Professional", "icon": "fas fa-video", "count": 16},
]


def default_videos() -> List[Video]:
    return [Video(**v) for v in DEFAULT_VIDEOS]


def _parse_videos(raw) -> List[Video]:
    videos = []
    for item in raw:
        try:
            videos.append(Video(**item))
        except (TypeError, ValueError) as exc:
            logger.warning("Skipping malformed video record: %s", exc)
    return videos


class VideoDatabase:
    """Catalog operations over a LocalStore.

    Every mutation of the catalog refreshes the recommendation cache so the
    home page stays consistent until the next interaction.
    """

    def __init__(self, store: LocalStore, rng: Optional[random.Random] = None):
        self.store = store
        self.rng = rng or random.Random()
        settings = get_settings()
        self.history_limit = settings.history_limit
        self.viewed_limit = settings.viewed_limit

    def init_database(self) -> None:
        seeds = {
            DATABASE_KEY: DEFAULT_VIDEOS,
            RECOMMENDATIONS_KEY: [],
            USER_PREFERENCES_KEY: UserPreferences().to_json(),
            VIEW_HISTORY_KEY: [],
            FAVORITES_KEY: [],
        }
        for key, value in seeds.items():
            if not self.store.has(key):
                self.store.set(key, value)

    # videos

    def get_all_videos(self) -> List[Video]:
        if not self.store.has(DATABASE_KEY):
            return []
        raw = self.store.get(DATABASE_KEY)
        if not isinstance(raw, list):
            return default_videos()
        return _parse_videos(raw)

    def _save_videos(self, videos: List[Video]) -> None:
        self.store.set(DATABASE_KEY, [v.to_json() for v in videos])

    def get_video_by_id(self, video_id: str) -> Optional[Video]:
        return next((v for v in self.get_all_videos() if v.id == video_id), None)

    def get_videos_by_category(self, category: str, limit: Optional[int] = None) -> List[Video]:
        filtered = [v for v in self.get_all_videos() if v.category == category]
        if limit and limit > 0:
            return filtered[:limit]
        return filtered

    def search_videos(self, query: str, filters: Optional[SearchFilters] = None) -> List[Video]:
        return search.search_videos(self.get_all_videos(), query, filters)

    def search_suggestions(self, query: str, limit: int = 5) -> List[Video]:
        return search.search_suggestions(self.get_all_videos(), query, limit)

    def get_trending_videos(self, limit: int = 6) -> List[Video]:
        return engine.trending(self.get_all_videos(), limit)

    def get_new_videos(self, limit: int = 6) -> List[Video]:
        return engine.newest(self.get_all_videos(), limit)

    def add_video(self, data: VideoCreate) -> Video:
        video = data.to_video()
        videos = self.get_all_videos()
        videos.append(video)
        self._save_videos(videos)
        self.update_recommendations()
        return video

    def update_video(self, video_id: str, updates: Dict[str, Any]) -> Optional[Video]:
        if isinstance(updates, VideoUpdate):
            updates = updates.changes()
        videos = self.get_all_videos()
        for i, video in enumerate(videos):
            if video.id == video_id:
                videos[i] = Video(**{**video.to_json(), **updates, "id": video_id})
                self._save_videos(videos)
                self.update_recommendations()
                return videos[i]
        return None

    def delete_video(self, video_id: str) -> bool:
        videos = self.get_all_videos()
        remaining = [v for v in videos if v.id != video_id]
        if len(remaining) == len(videos):
            return False
        self._save_videos(remaining)
        self.update_recommendations()
        return True

    def _bump(self, video_id: str, field: str) -> Optional[Video]:
        video = self.get_video_by_id(video_id)
        if video is None:
            return None
        return self.update_video(video_id, {field: getattr(video, field) + 1})

    def increment_views(self, video_id: str) -> Optional[Video]:
        return self._bump(video_id, "views")

    def like_video(self, video_id: str) -> Optional[Video]:
        video = self._bump(video_id, "likes")
        if video is not None:
            self.add_user_preference("liked", video_id)
        return video

    def dislike_video(self, video_id: str) -> Optional[Video]:
        return self._bump(video_id, "dislikes")

    # categories

    def get_all_categories(self) -> List[Category]:
        return [Category(**c) for c in DEFAULT_CATEGORIES]

    def get_category_by_id(self, category_id: str) -> Optional[Category]:
        return next((c for c in self.get_all_categories() if c.id == category_id), None)

    # recommendations

    def get_recommendations(self, limit: int = 6) -> List[Video]:
        recommended = engine.recommend_for_preferences(
            self.get_all_videos(), self.get_user_preferences(), limit, self.rng
        )
        self.save_recommendations(recommended)
        return recommended

    def get_consistent_recommendations(self) -> List[Video]:
        saved = self.store.get(RECOMMENDATIONS_KEY, [])
        if isinstance(saved, list) and saved:
            return _parse_videos(saved)
        return self.get_recommendations()

    def save_recommendations(self, videos: List[Video]) -> None:
        self.store.set(RECOMMENDATIONS_KEY, [v.to_json() for v in videos])

    def update_recommendations(self) -> List[Video]:
        return self.get_recommendations()

    def refresh_recommendations(self) -> List[Video]:
        self.store.remove(RECOMMENDATIONS_KEY)
        return self.get_consistent_recommendations()

    def get_video_suggestions(self, video_id: str, limit: int = 6) -> List[Video]:
        current = self.get_video_by_id(video_id)
        if current is None:
            return self.get_trending_videos(limit)
        return engine.suggest_similar(current, self.get_all_videos(), limit)

    def get_search_recommendations(self, results: List[Video], limit: int = 6) -> List[Video]:
        return engine.recommend_from_results(self.get_all_videos(), results, limit, self.rng)

    # preferences

    def get_user_preferences(self) -> UserPreferences:
        raw = self.store.get(USER_PREFERENCES_KEY, {})
        try:
            return UserPreferences(**raw)
        except (TypeError, ValueError):
            return UserPreferences()

    def add_user_preference(self, kind: str, value: str) -> UserPreferences:
        prefs = self.get_user_preferences()
        if kind == "category":
            if value not in prefs.categories:
                prefs.categories.append(value)
        elif kind == "tag":
            if value not in prefs.tags:
                prefs.tags.append(value)
        elif kind == "viewed":
            if value not in prefs.viewed_videos:
                prefs.viewed_videos.append(value)
                prefs.viewed_videos = prefs.viewed_videos[-self.viewed_limit:]
        elif kind == "liked":
            if "liked" not in prefs.tags:
                prefs.tags.append("liked")
        else:
            raise ValueError(f"Unknown preference type: {kind}")
        self.store.set(USER_PREFERENCES_KEY, prefs.to_json())
        return prefs

    # history

    def _history_entries(self) -> List[HistoryEntry]:
        raw = self.store.get(VIEW_HISTORY_KEY, [])
        entries = []
        for item in raw if isinstance(raw, list) else []:
            try:
                entries.append(HistoryEntry(**item))
            except (TypeError, ValueError):
                continue
        return entries

    def get_view_history(self) -> List[Dict[str, Any]]:
        by_id = {v.id: v for v in self.get_all_videos()}
        history = []
        for entry in self._history_entries():
            video = by_id.get(entry.video_id)
            if video is not None:
                history.append({**entry.to_json(), "video": video.to_json()})
        return history

    def add_to_history(self, video_id: str) -> None:
        now = datetime.now()
        entries = [e for e in self._history_entries() if e.video_id != video_id]
        entries.insert(0, HistoryEntry(video_id=video_id, timestamp=now.isoformat(), date=now.strftime("%m/%d/%Y")))
        self.store.set(VIEW_HISTORY_KEY, [e.to_json() for e in entries[: self.history_limit]])

        self.add_user_preference("viewed", video_id)
        video = self.get_video_by_id(video_id)
        if video is not None:
            self.add_user_preference("category", video.category)

    def clear_history(self) -> None:
        self.store.remove(VIEW_HISTORY_KEY)

    # favorites

    def _favorite_ids(self) -> List[str]:
        raw = self.store.get(FAVORITES_KEY, [])
        return [str(x) for x in raw] if isinstance(raw, list) else []

    def get_favorites(self) -> List[Video]:
        by_id = {v.id: v for v in self.get_all_videos()}
        return [by_id[i] for i in self._favorite_ids() if i in by_id]

    def add_to_favorites(self, video_id: str) -> bool:
        favorites = self._favorite_ids()
        if video_id in favorites:
            return False
        favorites.append(video_id)
        self.store.set(FAVORITES_KEY, favorites)
        return True

    def remove_from_favorites(self, video_id: str) -> bool:
        favorites = self._favorite_ids()
        if video_id not in favorites:
            return False
        favorites.remove(video_id)
        self.store.set(FAVORITES_KEY, favorites)
        return True

    def is_favorited(self, video_id: str) -> bool:
        return video_id in self._favorite_ids()

    # sitemap cache

    def cache_sitemap(self, xml: str) -> None:
        self.store.set(LAST_SITEMAP_KEY, xml)
        self.store.set(SITEMAP_UPDATED_KEY, datetime.now().isoformat())

    def get_cached_sitemap(self) -> Optional[Dict[str, str]]:
        xml = self.store.get(LAST_SITEMAP_KEY)
        if xml is None:
            return None
        return {"sitemap": xml, "updated": self.store.get(SITEMAP_UPDATED_KEY, "")}
