import logging
from typing import List, Literal, Optional, Tuple
from urllib.parse import quote_plus

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import RedirectResponse, Response
from pydantic import ValidationError

from .catalog import VideoDatabase
from .client import CatalogClient
from .config import get_settings
from .models import SearchFilters, Video, VideoCreate, VideoUpdate
from .player import video_page
from .search import result_count_label
from .sitemap import SitemapConfig, SitemapError, build_sitemap_file, generate_simple_sitemap, generate_sitemap
from .storage import LocalStore

settings = get_settings()

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Video Catalog API", version="0.3.0")

# Process-wide catalog, hydrated lazily from the data directory
DB: Optional[VideoDatabase] = None


def get_db() -> VideoDatabase:
    global DB
    if DB is None:
        DB = VideoDatabase(LocalStore(settings.data_dir))
        DB.init_database()
        logger.info("Catalog loaded from %s", settings.data_dir)
    return DB


@app.on_event("startup")
async def on_startup():
    get_db()


def _dump(videos: List[Video]) -> List[dict]:
    return [v.to_json() for v in videos]


def _require_video(video_id: str) -> Video:
    video = get_db().get_video_by_id(video_id)
    if not video:
        raise HTTPException(status_code=404, detail="Video not found")
    return video


def paginate(items: List[dict], page: int, page_size: int) -> Tuple[List[dict], int]:
    total = len(items)
    start = max((page - 1) * page_size, 0)
    end = start + page_size
    return items[start:end], total


@app.get("/health")
async def health():
    db = get_db()
    return {
        "status": "ok",
        "videos": len(db.get_all_videos()),
        "categories": len(db.get_all_categories()),
        "favorites": len(db.get_favorites()),
        "history": len(db.get_view_history()),
    }


@app.get("/videos")
async def list_videos(
    category: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=settings.page_size_default, ge=1, le=100),
):
    db = get_db()
    items = db.get_videos_by_category(category) if category else db.get_all_videos()
    page_items, total = paginate(_dump(items), page, page_size)
    return {"items": page_items, "total": total, "page": page}


@app.post("/videos", status_code=201)
async def create_video(payload: VideoCreate):
    db = get_db()
    if payload.id and db.get_video_by_id(payload.id):
        raise HTTPException(status_code=409, detail="Video already exists")
    return db.add_video(payload).to_json()


@app.get("/videos/trending")
async def trending_videos(limit: int = Query(default=8, ge=1, le=100)):
    return _dump(get_db().get_trending_videos(limit))


@app.get("/videos/new")
async def new_videos(limit: int = Query(default=8, ge=1, le=100)):
    return _dump(get_db().get_new_videos(limit))


@app.get("/videos/{video_id}")
async def get_video(video_id: str):
    video = get_db().get_video_by_id(video_id)
    if video:
        return video.to_json()
    item = await CatalogClient().fetch_video(video_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Video not found")
    try:
        return Video(**item).to_json()
    except ValidationError:
        raise HTTPException(status_code=404, detail="Video not found")


@app.patch("/videos/{video_id}")
async def update_video(video_id: str, payload: VideoUpdate):
    video = get_db().update_video(video_id, payload.changes())
    if video is None:
        raise HTTPException(status_code=404, detail="Video not found")
    return video.to_json()


@app.delete("/videos/{video_id}")
async def delete_video(video_id: str):
    if not get_db().delete_video(video_id):
        raise HTTPException(status_code=404, detail="Video not found")
    return {"deleted": True}


@app.post("/videos/{video_id}/view")
async def view_video(video_id: str):
    _require_video(video_id)
    db = get_db()
    video = db.increment_views(video_id)
    db.add_to_history(video_id)
    return video.to_json()


@app.post("/videos/{video_id}/like")
async def like_video(video_id: str):
    _require_video(video_id)
    return get_db().like_video(video_id).to_json()


@app.post("/videos/{video_id}/dislike")
async def dislike_video(video_id: str):
    _require_video(video_id)
    return get_db().dislike_video(video_id).to_json()


@app.get("/videos/{video_id}/suggestions")
async def video_suggestions(video_id: str, limit: int = Query(default=6, ge=1, le=100)):
    return _dump(get_db().get_video_suggestions(video_id, limit))


@app.get("/videos/{video_id}/page")
async def player_page(video_id: str, request: Request):
    video = _require_video(video_id)
    db = get_db()
    origin = str(request.base_url).rstrip("/")
    page_url = f"{origin}/video.html?id={video_id}"
    return video_page(
        video,
        origin,
        page_url,
        favorited=db.is_favorited(video_id),
        related=db.get_video_suggestions(video_id),
    )


@app.get("/search")
async def search(
    q: str = Query(default=""),
    sort_by: Literal["relevance", "newest", "oldest", "views", "rating", "duration"] = Query(default="relevance"),
    category: str = Query(default="all"),
    duration: Literal["all", "short", "medium", "long"] = Query(default="all"),
):
    db = get_db()
    filters = SearchFilters(sort_by=sort_by, category=category, duration=duration)
    results = db.search_videos(q, filters)
    recommendations = db.get_search_recommendations(results) if results else []
    return {
        "query": q,
        "count": len(results),
        "label": result_count_label(len(results)),
        "results": _dump(results),
        "recommendations": _dump(recommendations),
    }


@app.get("/search/suggestions")
async def search_suggestions(q: str = Query(default="", min_length=1)):
    return _dump(get_db().search_suggestions(q))


@app.get("/categories")
async def list_categories():
    return [c.to_json() for c in get_db().get_all_categories()]


@app.get("/categories/{category_id}")
async def get_category(category_id: str, limit: Optional[int] = Query(default=None, ge=1)):
    db = get_db()
    category = db.get_category_by_id(category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return {**category.to_json(), "videos": _dump(db.get_videos_by_category(category_id, limit))}


@app.get("/recommendations")
async def recommendations():
    return _dump(get_db().get_consistent_recommendations())


@app.post("/recommendations/refresh")
async def refresh_recommendations():
    return _dump(get_db().refresh_recommendations())


@app.get("/preferences")
async def preferences():
    return get_db().get_user_preferences().to_json()


@app.get("/history")
async def history():
    return get_db().get_view_history()


@app.delete("/history")
async def clear_history():
    get_db().clear_history()
    return {"cleared": True}


@app.get("/favorites")
async def favorites():
    return _dump(get_db().get_favorites())


@app.post("/favorites/{video_id}")
async def add_favorite(video_id: str):
    _require_video(video_id)
    return {"added": get_db().add_to_favorites(video_id)}


@app.delete("/favorites/{video_id}")
async def remove_favorite(video_id: str):
    return {"removed": get_db().remove_from_favorites(video_id)}


@app.get("/sitemap.xml")
async def sitemap_xml():
    db = get_db()
    config = SitemapConfig.from_settings(settings)
    xml = generate_sitemap(config, db.get_all_videos(), db.get_all_categories())
    return Response(content=xml, media_type="application/xml")


@app.get("/sitemap/simple")
async def simple_sitemap():
    db = get_db()
    xml = generate_simple_sitemap(settings.site_domain, db.get_all_videos())
    db.cache_sitemap(xml)
    return Response(content=xml, media_type="application/xml")


@app.get("/sitemap")
async def sitemap_status(success: Optional[str] = None, error: Optional[str] = None):
    config = SitemapConfig.from_settings(settings)
    return {
        "domain": config.domain,
        "output_file": config.output_file,
        "success": bool(success),
        "error": error,
    }


@app.post("/sitemap")
async def generate_sitemap_file():
    try:
        build_sitemap_file(SitemapConfig.from_settings(settings))
    except SitemapError as exc:
        logger.warning("Sitemap generation failed: %s", exc)
        return RedirectResponse(url=app.url_path_for("sitemap_status") + f"?error={quote_plus(str(exc))}", status_code=303)
    return RedirectResponse(url=app.url_path_for("sitemap_status") + "?success=1", status_code=303)


@app.post("/sync/external")
async def sync_external():
    db = get_db()
    items = await CatalogClient().fetch_videos()
    added = 0
    for it in items:
        vid = str(it.get("id") or "")
        if not vid or db.get_video_by_id(vid):
            continue
        try:
            db.add_video(VideoCreate(**{**it, "id": vid}))
        except ValidationError as exc:
            logger.warning("Skipping remote video %s: %s", vid, exc)
            continue
        added += 1
    return {"fetched": len(items), "added": added}
