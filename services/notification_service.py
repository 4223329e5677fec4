"""Best-effort user notifications: in-app record plus optional SMS."""

import logging
from typing import Any, Dict, List, Optional

from core.notifications import TermiiSmsClient
from database.connection import Database
from database.models import Notification
from database.repositories import NotificationRepository, UserRepository
from utils.validators import validate_phone

logger = logging.getLogger(__name__)


class NotificationService:
    """Fire-and-forget notifications. Failures are logged, never raised."""

    def __init__(self, db: Database, sms_sender: Optional[TermiiSmsClient] = None):
        self.db = db
        self.notification_repo = NotificationRepository(db)
        self.user_repo = UserRepository(db)
        self.sms_sender = sms_sender

    async def notify(
        self,
        user_id: Optional[int],
        kind: str,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """
        Notify a user.

        Args:
            user_id: Recipient (None is ignored)
            kind: Notification type, see config.constants NOTIFY_*
            title: Short title
            message: Body text
            data: Extra payload stored with the notification

        Returns:
            True if the in-app notification was stored
        """
        if user_id is None:
            return False

        try:
            await self.notification_repo.create(user_id, kind, title, message, data)

            if self.sms_sender is not None and self.sms_sender.is_configured:
                user = await self.user_repo.get_by_id(user_id)
                phone = validate_phone(user.phone) if user else None
                if phone:
                    await self.sms_sender.send_sms(phone, f"{title}: {message}")

            return True

        except Exception as e:
            logger.error(f"Failed to send {kind} notification to user {user_id}: {e}")
            return False

    async def list_for_user(
        self, user_id: int, unread_only: bool = False, limit: int = 20
    ) -> List[Notification]:
        """Notifications for a user, newest first."""
        return await self.notification_repo.get_for_user(user_id, unread_only, limit)

    async def mark_read(self, notification_id: int, user_id: int) -> bool:
        return await self.notification_repo.mark_read(notification_id, user_id)
