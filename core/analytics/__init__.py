from .client import PlatformAnalytics, SocialAnalyticsClient

__all__ = ["PlatformAnalytics", "SocialAnalyticsClient"]
