"""Social analytics API client (followers, engagement, quality per platform)."""

import logging
from typing import Optional, Dict, Any
from dataclasses import dataclass

import httpx

from config import settings

logger = logging.getLogger(__name__)


@dataclass
class PlatformAnalytics:
    """Normalized analytics for one social account."""
    platform: str
    handle: str
    followers: int
    avg_likes: float
    avg_comments: float
    quality_score: float

    @classmethod
    def from_api(cls, platform: str, handle: str, data: Dict[str, Any]) -> "PlatformAnalytics":
        """Create PlatformAnalytics from API response.

        The API nests the profile under "data" on some platforms.
        """
        payload = data.get("data", data) or {}

        followers = payload.get("followers", payload.get("follower_count", 0))
        return cls(
            platform=platform,
            handle=handle,
            followers=int(followers or 0),
            avg_likes=float(payload.get("avgLikes", payload.get("avg_likes", 0)) or 0),
            avg_comments=float(payload.get("avgComments", payload.get("avg_comments", 0)) or 0),
            quality_score=float(payload.get("qualityScore", payload.get("quality_score", 0)) or 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "platform": self.platform,
            "handle": self.handle,
            "followers": self.followers,
            "avg_likes": self.avg_likes,
            "avg_comments": self.avg_comments,
            "quality_score": self.quality_score,
        }


class SocialAnalyticsClient:
    """Client for the social analytics provider."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or settings.analytics_api_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.analytics_api_key
        self.timeout = timeout or settings.analytics_timeout
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self):
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    async def get_platform_analytics(
        self,
        platform: str,
        handle: str,
    ) -> Optional[PlatformAnalytics]:
        """
        Fetch analytics for one social account.

        Args:
            platform: instagram, tiktok, twitter or facebook
            handle: Account handle without @

        Returns:
            PlatformAnalytics or None if the request failed
        """
        if not self.api_key:
            logger.warning("Analytics API key not configured; skipping %s/%s", platform, handle)
            return None

        try:
            client = await self._get_client()
            response = await client.get(
                f"{self.base_url}/{platform}/profile",
                params={"handle": handle.lstrip("@")},
                headers=self._headers(),
            )
            response.raise_for_status()
            return PlatformAnalytics.from_api(platform, handle, response.json())

        except httpx.HTTPError as e:
            logger.error(f"Analytics request failed for {platform}/{handle}: {e}")
            return None
        except (ValueError, TypeError, AttributeError) as e:
            logger.error(f"Malformed analytics response for {platform}/{handle}: {e}")
            return None
