"""Creator tier service: pulls analytics and stores tier snapshots."""

import logging
from typing import Dict, Optional

from config.constants import SOCIAL_PLATFORMS
from core.analytics import SocialAnalyticsClient
from core.errors import NotFoundError, ValidationError
from core.tiers import CreatorMetrics, TierResult, classify_best, tier_result_for
from database.connection import Database
from database.models import SocialAccount
from database.repositories import CreatorRepository, UserRepository

logger = logging.getLogger(__name__)


class TierService:
    """Service for evaluating and storing creator tiers."""

    def __init__(self, db: Database, analytics_client: Optional[SocialAnalyticsClient] = None):
        self.db = db
        self.user_repo = UserRepository(db)
        self.creator_repo = CreatorRepository(db)
        self.analytics = analytics_client or SocialAnalyticsClient()

    async def link_social_account(self, creator_id: int, platform: str, handle: str) -> SocialAccount:
        """Link (or replace) a creator's handle on a supported platform."""
        creator = await self.user_repo.get_by_id(creator_id)
        if not creator or not creator.is_creator:
            raise NotFoundError("Creator")
        platform = (platform or "").strip().lower()
        if platform not in SOCIAL_PLATFORMS:
            raise ValidationError(f"Unsupported platform: {platform}")
        if not (handle or "").strip().lstrip("@"):
            raise ValidationError("Handle is required")
        account = await self.creator_repo.add_social_account(creator_id, platform, handle.strip())
        logger.info(f"Creator {creator_id} linked {platform} @{account.handle}")
        return account

    async def evaluate_creator(self, creator_id: int) -> TierResult:
        """
        Re-evaluate a creator's tier from live analytics.

        The best tier across all linked platforms is stored on the user
        (None when not qualified) and a history row is appended.

        Raises:
            NotFoundError: Creator does not exist
            ValidationError: No linked accounts or no analytics could be fetched
        """
        creator = await self.user_repo.get_by_id(creator_id)
        if not creator or not creator.is_creator:
            raise NotFoundError("Creator")

        accounts = await self.creator_repo.get_social_accounts(creator_id)
        if not accounts:
            raise ValidationError("Creator has no linked social accounts")

        snapshots = []
        for account in accounts:
            analytics = await self.analytics.get_platform_analytics(account.platform, account.handle)
            if analytics is not None:
                snapshots.append(analytics)

        # Keep the previous tier rather than downgrading on a provider outage
        if not snapshots:
            raise ValidationError("No analytics available for creator")

        result = classify_best(CreatorMetrics.from_analytics(a) for a in snapshots)

        async with self.db.transaction():
            await self.user_repo.update_tier(creator_id, result.tier if result.qualified else None)
            await self.creator_repo.add_tier_history(
                creator_id,
                result.tier,
                result.commission_percent,
                [a.to_dict() for a in snapshots],
            )

        logger.info(
            f"Creator {creator_id} tier: {result.tier} ({result.label}, "
            f"{result.commission_percent}% commission)"
        )
        return result

    async def recompute_all(self) -> Dict[str, int]:
        """
        Monthly job: re-evaluate every creator with linked accounts.

        Returns:
            Counts of updated, failed and skipped creators
        """
        creators = await self.creator_repo.get_creators()
        stats = {"updated": 0, "failed": 0, "skipped": 0, "total": len(creators)}

        for creator in creators:
            accounts = await self.creator_repo.get_social_accounts(creator.id)
            if not accounts:
                stats["skipped"] += 1
                continue
            try:
                await self.evaluate_creator(creator.id)
                stats["updated"] += 1
            except Exception as e:
                logger.error(f"Tier recompute failed for creator {creator.id}: {e}")
                stats["failed"] += 1

        logger.info(
            f"Tier recompute done: {stats['updated']} updated, {stats['failed']} failed, "
            f"{stats['skipped']} skipped of {stats['total']}"
        )
        return stats

    async def get_current_tier(self, creator_id: int) -> TierResult:
        """Stored tier snapshot for a creator."""
        creator = await self.user_repo.get_by_id(creator_id)
        if not creator:
            raise NotFoundError("Creator")
        return tier_result_for(creator.tier)
