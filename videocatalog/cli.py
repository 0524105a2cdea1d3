"""
Command line entry points for the video catalog.

- sitemap: build sitemap.xml from the published videos/categories JSON
- serve:   run the HTTP API with uvicorn
- seed:    initialise the data directory with the default catalog
"""

import argparse
import logging
import sys
from pathlib import Path

from .catalog import VideoDatabase
from .config import get_settings
from .sitemap import SitemapConfig, SitemapError, build_sitemap_file, generate_simple_sitemap, load_sources
from .storage import LocalStore

logger = logging.getLogger(__name__)


def cmd_sitemap(args) -> int:
    config = SitemapConfig.from_settings()
    overrides = {
        "domain": args.domain.rstrip("/") if args.domain else None,
        "output_file": args.output,
        "videos_json": args.videos,
        "categories_json": args.categories,
    }
    config = config.model_copy(update={k: v for k, v in overrides.items() if v})
    try:
        if args.simple:
            videos, _ = load_sources(config)
            Path(config.output_file).write_text(generate_simple_sitemap(config.domain, videos), encoding="utf-8")
            out = config.output_file
        else:
            out = build_sitemap_file(config)
    except (SitemapError, OSError) as exc:
        logger.error("Error generating sitemap: %s", exc)
        return 1
    print(f"Sitemap generated successfully: {out}")
    return 0


def cmd_seed(args) -> int:
    data_dir = Path(args.data_dir) if args.data_dir else get_settings().data_dir
    db = VideoDatabase(LocalStore(data_dir))
    db.init_database()
    videos = db.get_all_videos()
    print(f"Catalog ready in {data_dir}: {len(videos)} videos")
    return 0


def cmd_serve(args) -> int:
    import uvicorn
    uvicorn.run("videocatalog.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="videocatalog", description="Video catalog tools")
    sub = ap.add_subparsers(dest="command", required=True)

    sm = sub.add_parser("sitemap", help="Generate sitemap.xml from JSON data files")
    sm.add_argument("--domain", help="Site origin, e.g. https://example.com")
    sm.add_argument("--videos", help="Path to videos.json")
    sm.add_argument("--categories", help="Path to categories.json")
    sm.add_argument("--output", help="Output file")
    sm.add_argument("--simple", action="store_true", help="Plain URL list without media extensions")
    sm.set_defaults(func=cmd_sitemap)

    sd = sub.add_parser("seed", help="Initialise the catalog data directory")
    sd.add_argument("--data-dir")
    sd.set_defaults(func=cmd_seed)

    sv = sub.add_parser("serve", help="Run the HTTP API")
    sv.add_argument("--host", default="0.0.0.0")
    sv.add_argument("--port", type=int, default=8000)
    sv.add_argument("--reload", action="store_true")
    sv.set_defaults(func=cmd_serve)
    return ap


def main(argv=None) -> int:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, get_settings().log_level.upper(), logging.INFO),
    )
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
