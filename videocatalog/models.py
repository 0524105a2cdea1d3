from datetime import date, datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _to_int(value) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def _to_float(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _check_day(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if len(value) != 10 or value[4] != "-" or value[7] != "-":
        raise ValueError("uploadDate must be YYYY-MM-DD")
    date.fromisoformat(value)
    return value


class CatalogModel(BaseModel):
    """Base for records persisted as JSON with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class Video(CatalogModel):
    id: str
    title: str = ""
    description: str = ""
    thumbnail: str = ""
    embed_url: str = Field(default="", alias="embedUrl")
    category: str = ""
    tags: List[str] = Field(default_factory=list)
    duration: int = 0
    views: int = 0
    rating: float = 0.0
    upload_date: str = Field(default="", alias="uploadDate")
    likes: int = 0
    dislikes: int = 0
    model: Optional[List[str]] = None
    language: Optional[str] = None

    @field_validator("duration", "views", "likes", "dislikes", mode="before")
    @classmethod
    def _coerce_int(cls, v):
        return _to_int(v)

    @field_validator("rating", mode="before")
    @classmethod
    def _coerce_float(cls, v):
        return _to_float(v)


class VideoCreate(CatalogModel):
    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    embed_url: Optional[str] = Field(default=None, alias="embedUrl")
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    duration: Optional[Union[int, str]] = None
    views: Optional[Union[int, str]] = None
    rating: Optional[Union[float, str]] = None
    upload_date: Optional[str] = Field(default=None, alias="uploadDate")
    likes: Optional[Union[int, str]] = None
    dislikes: Optional[Union[int, str]] = None
    model: Optional[List[str]] = None
    language: Optional[str] = None

    @field_validator("upload_date")
    @classmethod
    def _valid_upload_date(cls, v):
        # blank means "today", as for new uploads
        return _check_day(v or None)

    def to_video(self) -> Video:
        """Fill in defaults the way new uploads are stored."""
        return Video(
            id=self.id or str(int(datetime.now().timestamp() * 1000)),
            title=self.title or "Untitled Video",
            description=self.description or "",
            embed_url=self.embed_url or "",
            thumbnail=self.thumbnail or "/assets/thumbnails/default.jpg",
            category=self.category or "uncategorized",
            tags=self.tags or [],
            duration=_to_int(self.duration),
            views=_to_int(self.views),
            rating=_to_float(self.rating),
            upload_date=self.upload_date or date.today().isoformat(),
            likes=_to_int(self.likes),
            dislikes=_to_int(self.dislikes),
            model=self.model,
            language=self.language,
        )


class VideoUpdate(CatalogModel):
    title: Optional[str] = None
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    embed_url: Optional[str] = Field(default=None, alias="embedUrl")
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    duration: Optional[int] = None
    views: Optional[int] = None
    rating: Optional[float] = None
    upload_date: Optional[str] = Field(default=None, alias="uploadDate")
    likes: Optional[int] = None
    dislikes: Optional[int] = None
    model: Optional[List[str]] = None
    language: Optional[str] = None

    @field_validator("upload_date")
    @classmethod
    def _valid_upload_date(cls, v):
        return _check_day(v)

    def changes(self) -> dict:
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)


class Category(CatalogModel):
    id: str
    name: str
    icon: str = ""
    count: int = 0


class UserPreferences(CatalogModel):
    categories: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    viewed_videos: List[str] = Field(default_factory=list, alias="viewedVideos")

    def is_empty(self) -> bool:
        return not (self.categories or self.tags or self.viewed_videos)


class HistoryEntry(CatalogModel):
    video_id: str = Field(alias="videoId")
    timestamp: str
    date: str = ""


class SearchFilters(CatalogModel):
    sort_by: Literal["relevance", "newest", "oldest", "views", "rating", "duration"] = Field(
        default="relevance", alias="sortBy"
    )
    category: str = "all"
    duration: Literal["all", "short", "medium", "long"] = "all"
