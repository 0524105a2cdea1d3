"""Player page data: head metadata, JSON-LD and the formatted info panel."""
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from .formatting import format_date, format_duration, format_number
from .models import Video

SITE_NAME = "EliteVideos"
REGIONS_ALLOWED = "US,CA,UK,AU,EU"


def content_url(video: Video) -> str:
    return video.embed_url.replace("/embed/", "/video/")


def page_metadata(video: Video, origin: str, page_url: str) -> Dict[str, Any]:
    origin = origin.rstrip("/")
    return {
        "title": f"{video.title} - {SITE_NAME}",
        "description": video.description[:160],
        "og": {
            "og:title": video.title,
            "og:description": video.description[:200],
            "og:image": origin + video.thumbnail,
            "og:url": page_url,
            "og:type": "video.other",
            "og:video": video.embed_url,
            "og:video:type": "text/html",
            "og:video:width": "1280",
            "og:video:height": "720",
        },
    }


def structured_data(video: Video, origin: str) -> Dict[str, Any]:
    origin = origin.rstrip("/")
    return {
        "@context": "https://schema.org",
        "@type": "VideoObject",
        "name": video.title,
        "description": video.description,
        "thumbnailUrl": origin + video.thumbnail,
        "uploadDate": video.upload_date,
        "duration": f"PT{video.duration}S",
        "contentUrl": content_url(video),
        "embedUrl": video.embed_url,
        "interactionStatistic": {
            "@type": "InteractionCounter",
            "interactionType": "https://schema.org/WatchAction",
            "userInteractionCount": video.views,
        },
        "author": {"@type": "Organization", "name": SITE_NAME},
        "regionsAllowed": REGIONS_ALLOWED,
        "inLanguage": video.language or "English",
    }


def share_data(video: Video, page_url: str) -> Dict[str, str]:
    return {
        "title": video.title,
        "text": f"Check out this video: {video.title}",
        "url": page_url,
    }


def video_page(
    video: Video,
    origin: str,
    page_url: str,
    favorited: bool = False,
    related: Optional[List[Video]] = None,
) -> Dict[str, Any]:
    return {
        "video": video.to_json(),
        "metadata": page_metadata(video, origin, page_url),
        "structuredData": structured_data(video, origin),
        "share": share_data(video, page_url),
        "info": {
            "views": f"{format_number(video.views)} views",
            "duration": format_duration(video.duration),
            "uploaded": format_date(video.upload_date),
            "likes": format_number(video.likes),
            "dislikes": format_number(video.dislikes),
            "category": video.category,
            "categoryUrl": f"/category.html?cat={video.category}",
            "tags": [{"name": t, "url": f"/search.html?q={quote(t)}"} for t in video.tags],
        },
        "favorited": favorited,
        "related": [v.to_json() for v in related or []],
    }
