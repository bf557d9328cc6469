"""YouTube trend research

Wraps the YouTube Data API v3 to find trending videos for a keyword or to read
the "most popular" chart, reshaping the API items into TrendingVideo records.

Features:
- Keyword search ordered by relevance, re-ranked by view count (top 5).
- Most-popular chart per category and region.
- Quota-aware: 429 responses persist a block window shared across processes
  and surface as QuotaExceeded with a retry_after hint.
- YOUTUBE_TEST_MODE=1 returns deterministic canned videos without network.
"""

import logging
import os
import re
import time
from typing import Any, Dict, List, Optional, cast

import requests

from .errors import APIError, MissingAPIKey, NoResults
from .quota import QuotaState, error_message, send_with_retries
from .types import TrendingVideo

logger = logging.getLogger(__name__)

YOUTUBE_SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"
YOUTUBE_VIDEOS_URL = "https://www.googleapis.com/youtube/v3/videos"

SEARCH_PAGE_SIZE = 20
DETAIL_LIMIT = 10
TOP_N = 5
# YouTube exposes no share count; estimate it from likes
SHARE_RATIO = 0.1


def iso8601_duration_to_seconds(dur: str) -> int:
    # Very small ISO8601 duration parser supporting PT#H#M#S
    if not dur:
        return 0
    m = re.match(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?", dur)
    if not m:
        return 0
    hours = int(m.group(1) or 0)
    mins = int(m.group(2) or 0)
    secs = int(m.group(3) or 0)
    return hours * 3600 + mins * 60 + secs


def _to_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def to_trending_video(item: Dict[str, Any]) -> TrendingVideo:
    """Reshape one `videos` API item into a TrendingVideo."""
    vid = str(item.get("id") or "")
    snip = item.get("snippet") or {}
    stats = item.get("statistics") or {}
    content = item.get("contentDetails") or {}
    thumbs = snip.get("thumbnails") or {}
    thumb = thumbs.get("high") or thumbs.get("medium") or thumbs.get("default") or {}
    likes = _to_int(stats.get("likeCount"))
    return {
        "id": vid,
        "url": f"https://www.youtube.com/watch?v={vid}",
        "caption": snip.get("title") or "",
        "author": snip.get("channelTitle") or "",
        "thumbnail": thumb.get("url") or "",
        "likes": likes,
        "comments": _to_int(stats.get("commentCount")),
        "shares": int(likes * SHARE_RATIO),
        "views": _to_int(stats.get("viewCount")),
        "duration": iso8601_duration_to_seconds(content.get("duration", "")),
        "publishedAt": snip.get("publishedAt") or "",
    }


class TrendResearcher:
    """Finds trending YouTube videos.

    Safe to instantiate without an API key; any live call raises
    MissingAPIKey when no key is configured.
    """

    def __init__(self, api_key: Optional[str] = None, state: Optional[QuotaState] = None):
        self.api_key = api_key or os.environ.get("YOUTUBE_API_KEY")
        self._state = state or QuotaState()

    @staticmethod
    def test_mode() -> bool:
        return os.environ.get("YOUTUBE_TEST_MODE", "").lower() in ("1", "true", "yes")

    def _call_api(self, url: str, params: Dict[str, Any], what: str) -> Dict[str, Any]:
        if not self.api_key:
            raise MissingAPIKey("YouTube", "YOUTUBE_API_KEY")

        params = params.copy()
        params["key"] = self.api_key
        resp = send_with_retries(
            lambda: requests.get(url, params=params, timeout=15),
            service="youtube",
            state=self._state,
        )
        if resp.status_code >= 400:
            raise APIError(
                f"{what} failed: {resp.status_code} - {error_message(resp)}",
                status_code=resp.status_code,
            )
        try:
            return cast(Dict[str, Any], resp.json())
        except ValueError as exc:
            raise APIError("Invalid JSON from API") from exc

    def search(self, query: str) -> List[TrendingVideo]:
        """Return the five most viewed videos among the top search hits for `query`."""
        if self.test_mode():
            return self._mock_videos(query, TOP_N)

        data = self._call_api(
            YOUTUBE_SEARCH_URL,
            {
                "part": "snippet",
                "q": query,
                "type": "video",
                "order": "relevance",
                "maxResults": SEARCH_PAGE_SIZE,
            },
            "YouTube search",
        )
        items = data.get("items") or []
        video_ids = [
            it["id"]["videoId"]
            for it in items
            if isinstance(it.get("id"), dict) and it["id"].get("videoId")
        ][:DETAIL_LIMIT]
        if not video_ids:
            raise NoResults("No videos found for this search query. Try a different keyword.")

        details = self._call_api(
            YOUTUBE_VIDEOS_URL,
            {"part": "snippet,contentDetails,statistics", "id": ",".join(video_ids)},
            "YouTube videos API",
        )
        vitems = details.get("items") or []
        if not vitems:
            raise NoResults("No video details found. The videos may be private or unavailable.")

        videos = [to_trending_video(v) for v in vitems]
        videos.sort(key=lambda v: v.get("views", 0), reverse=True)
        logger.info("Search %r: %d detailed videos", query, len(videos))
        return videos[:TOP_N]

    def popular(
        self, category_id: str = "0", region_code: str = "US", max_results: int = 5
    ) -> List[TrendingVideo]:
        """Return the most-popular chart for a category and region."""
        if self.test_mode():
            return self._mock_videos(f"popular {region_code}", max_results)

        data = self._call_api(
            YOUTUBE_VIDEOS_URL,
            {
                "part": "snippet,contentDetails,statistics",
                "chart": "mostPopular",
                "videoCategoryId": category_id,
                "maxResults": max_results,
                "regionCode": region_code,
            },
            "YouTube API",
        )
        items = data.get("items") or []
        if not items:
            raise NoResults(
                "No popular videos found. This might be due to regional restrictions or API limits."
            )
        return [to_trending_video(v) for v in items]

    @staticmethod
    def _mock_videos(query: str, count: int) -> List[TrendingVideo]:
        now_iso = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
        slug = re.sub(r"[^a-z0-9]+", "-", query.lower()).strip("-")[:20]
        videos: List[TrendingVideo] = []
        for i in range(min(int(count), TOP_N)):
            vid = f"mock{i}-{slug}"[:11].ljust(11, "x")
            likes = 1000 - i * 100
            videos.append(
                {
                    "id": vid,
                    "url": f"https://www.youtube.com/watch?v={vid}",
                    "caption": f"Mock result {i + 1} for '{query}'",
                    "author": "Mock Channel",
                    "thumbnail": f"https://i.ytimg.com/vi/{vid}/hqdefault.jpg",
                    "likes": likes,
                    "comments": 50 - i * 5,
                    "shares": int(likes * SHARE_RATIO),
                    "views": 100000 - i * 10000,
                    "duration": 60 + i * 10,
                    "publishedAt": now_iso,
                }
            )
        return videos


__all__ = ["TrendResearcher", "iso8601_duration_to_seconds", "to_trending_video"]
