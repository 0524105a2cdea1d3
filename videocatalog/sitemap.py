"""Sitemaps-protocol XML with the video and image extensions."""
import json
import logging
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional
from xml.sax.saxutils import escape

from pydantic import BaseModel, Field

from .config import Settings, get_settings
from .formatting import slugify
from .models import Category, Video
from .player import content_url

logger = logging.getLogger(__name__)

LEGAL_PAGES = ["terms", "privacy", "dmca", "2257"]
CAPTION_LENGTH = 100


class SitemapError(Exception):
    pass


class SitemapConfig(BaseModel):
    domain: str = "https://yourdomain.com"
    output_file: str = "sitemap.xml"
    videos_json: str = "api/videos.json"
    categories_json: str = "api/categories.json"
    changefreq: str = "daily"
    priority: Dict[str, float] = Field(
        default_factory=lambda: {"homepage": 1.0, "categories": 0.9, "videos": 0.8, "legal": 0.5}
    )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SitemapConfig":
        settings = settings or get_settings()
        return cls(
            domain=settings.site_domain.rstrip("/"),
            output_file=settings.sitemap_output,
            videos_json=settings.videos_json,
            categories_json=settings.categories_json,
        )


def expiration_date(upload_date: str, today: Optional[date] = None) -> str:
    """One year after upload; unreadable dates count from today."""
    try:
        day = date.fromisoformat((upload_date or "")[:10])
    except ValueError:
        day = today or date.today()
    try:
        return day.replace(year=day.year + 1).isoformat()
    except ValueError:
        # Feb 29 rolls over to Mar 1
        return date(day.year + 1, 3, 1).isoformat()


def _cdata(text: str) -> str:
    return "<![CDATA[" + text.replace("]]>", "]]]]><![CDATA[>") + "]]>"


def _num(value: float) -> str:
    return f"{value:g}"


def _url(loc: str, lastmod: str, changefreq: str, priority: float) -> List[str]:
    return [
        "    <url>",
        f"        <loc>{escape(loc)}</loc>",
        f"        <lastmod>{lastmod}</lastmod>",
        f"        <changefreq>{changefreq}</changefreq>",
        f"        <priority>{_num(priority)}</priority>",
        "    </url>",
    ]


def _video_url(config: SitemapConfig, video: Video, today: date) -> List[str]:
    domain = config.domain
    try:
        published = date.fromisoformat(video.upload_date[:10]).isoformat()
    except ValueError:
        published = today.isoformat()
    thumb = escape(domain + video.thumbnail)
    uploader = video.model[0] if video.model else ""
    lines = [
        "    <url>",
        f"        <loc>{escape(f'{domain}/video/{video.id}')}</loc>",
        f"        <lastmod>{published}</lastmod>",
        "        <changefreq>weekly</changefreq>",
        f"        <priority>{_num(config.priority['videos'])}</priority>",
        "        <video:video>",
        f"            <video:thumbnail_loc>{thumb}</video:thumbnail_loc>",
        f"            <video:title>{_cdata(video.title)}</video:title>",
        f"            <video:description>{_cdata(video.description)}</video:description>",
        f"            <video:content_loc>{escape(content_url(video))}</video:content_loc>",
        f'            <video:player_loc allow_embed="yes" autoplay="ap=1">'
        f"{escape(f'{domain}/video/embed/{video.id}')}</video:player_loc>",
        f"            <video:duration>{video.duration}</video:duration>",
        f"            <video:expiration_date>{expiration_date(video.upload_date, today)}</video:expiration_date>",
        f"            <video:rating>{_num(video.rating)}</video:rating>",
        f"            <video:view_count>{video.views}</video:view_count>",
        f"            <video:publication_date>{published}</video:publication_date>",
        "            <video:family_friendly>no</video:family_friendly>",
        "            <video:requires_subscription>no</video:requires_subscription>",
    ]
    if uploader:
        info = escape(f"{domain}/model/{slugify(uploader)}", {'"': "&quot;"})
        lines.append(f'            <video:uploader info="{info}">{escape(uploader)}</video:uploader>')
    lines += [
        "            <video:live>no</video:live>",
        "        </video:video>",
        "        <image:image>",
        f"            <image:loc>{thumb}</image:loc>",
        f"            <image:title>{_cdata(video.title)}</image:title>",
        f"            <image:caption>{_cdata(video.description[:CAPTION_LENGTH] + '...')}</image:caption>",
        "        </image:image>",
        "    </url>",
    ]
    return lines


def generate_sitemap(
    config: SitemapConfig,
    videos: List[Video],
    categories: List[Category],
    today: Optional[date] = None,
) -> str:
    today = today or date.today()
    current = today.isoformat()
    domain = config.domain
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"',
        '        xmlns:xhtml="http://www.w3.org/1999/xhtml"',
        '        xmlns:video="http://www.google.com/schemas/sitemap-video/1.1"',
        '        xmlns:image="http://www.google.com/schemas/sitemap-image/1.1">',
        "",
        "    <!-- Homepage -->",
        *_url(f"{domain}/", current, config.changefreq, config.priority["homepage"]),
        "",
        "    <!-- Search Page -->",
        *_url(f"{domain}/search", current, config.changefreq, 0.8),
        "",
        "    <!-- Category Pages -->",
    ]
    for category in categories:
        lines += _url(f"{domain}/category/{category.id}", current, config.changefreq, config.priority["categories"])
    lines += ["", "    <!-- Legal Pages -->"]
    for page in LEGAL_PAGES:
        lines += _url(f"{domain}/{page}", current, "monthly", config.priority["legal"])
    lines += ["", "    <!-- Video Pages -->"]
    for video in videos:
        lines += _video_url(config, video, today)
    lines.append("</urlset>")
    return "\n".join(lines)


def generate_simple_sitemap(domain: str, videos: List[Video], today: Optional[date] = None) -> str:
    """Lightweight variant without the media extensions."""
    current = (today or date.today()).isoformat()
    domain = domain.rstrip("/")
    parts = ['<?xml version="1.0" encoding="UTF-8"?>\n<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n']
    for loc, priority in (("/", 1.0), ("/search", 0.8), ("/category", 0.9)):
        parts.append(
            f"  <url>\n    <loc>{escape(domain + loc)}</loc>\n    <lastmod>{current}</lastmod>\n"
            f"    <changefreq>daily</changefreq>\n    <priority>{_num(priority)}</priority>\n  </url>\n"
        )
    for video in videos:
        lastmod = video.upload_date or current
        parts.append(
            f"  <url>\n    <loc>{escape(f'{domain}/video/{video.id}')}</loc>\n    <lastmod>{lastmod}</lastmod>\n"
            f"    <changefreq>weekly</changefreq>\n    <priority>0.7</priority>\n  </url>\n"
        )
    parts.append("</urlset>")
    return "".join(parts)


def _load_json(path: Path, label: str):
    if not path.exists():
        raise SitemapError(f"{label} JSON file not found")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise SitemapError("Invalid JSON data") from exc


def load_sources(config: SitemapConfig):
    raw_videos = _load_json(Path(config.videos_json), "Videos")
    raw_categories = _load_json(Path(config.categories_json), "Categories")
    if not raw_videos or not raw_categories:
        raise SitemapError("Invalid JSON data")
    try:
        videos = [Video(**v) for v in raw_videos]
        categories = [Category(**c) for c in raw_categories]
    except (TypeError, ValueError) as exc:
        raise SitemapError("Invalid JSON data") from exc
    return videos, categories


def build_sitemap_file(config: SitemapConfig, today: Optional[date] = None) -> Path:
    videos, categories = load_sources(config)
    xml = generate_sitemap(config, videos, categories, today)
    out = Path(config.output_file)
    try:
        out.write_text(xml, encoding="utf-8")
    except OSError as exc:
        raise SitemapError("Could not write to file") from exc
    logger.info("Wrote sitemap with %d videos to %s", len(videos), out)
    return out
