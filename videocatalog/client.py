import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import get_settings

logger = logging.getLogger(__name__)


class CatalogClient:
    """Reads the published videos.json of a remote catalog."""

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None):
        s = get_settings()
        self.base = (base_url if base_url is not None else s.api_base_url).rstrip('/')
        self.token = token if token is not None else s.api_token

    async def fetch_videos(self) -> List[Dict[str, Any]]:
        if not self.base:
            return []
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        url = f"{self.base}/videos.json"
        try:
            async with httpx.AsyncClient(timeout=10) as client:
                resp = await client.get(url, headers=headers)
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Remote catalog fetch failed: %s", exc)
            return []
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            return data.get("items", [])
        return []

    async def fetch_video(self, video_id: str):
        for item in await self.fetch_videos():
            if str(item.get("id")) == video_id:
                return item
        return None
