from pydantic import BaseModel, Field
from functools import lru_cache
from pathlib import Path
import os

from dotenv import load_dotenv

load_dotenv()


def _env(name: str, default: str = ""):
    return Field(default_factory=lambda: os.getenv(name, default))


class Settings(BaseModel):
    data_dir: Path = Field(default_factory=lambda: Path(os.getenv("CATALOG_DATA_DIR", "data")))
    api_base_url: str = _env("API_BASE_URL")
    api_token: str = _env("API_TOKEN")
    site_domain: str = _env("SITE_DOMAIN", "https://yourdomain.com")
    sitemap_output: str = _env("SITEMAP_OUTPUT", "sitemap.xml")
    videos_json: str = _env("VIDEOS_JSON", "api/videos.json")
    categories_json: str = _env("CATEGORIES_JSON", "api/categories.json")
    log_level: str = _env("LOG_LEVEL", "INFO")
    page_size_default: int = 6
    history_limit: int = 100
    viewed_limit: int = 50


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
