import logging
from typing import Optional

from sqlalchemy.orm import Session

from appraisal_manager.core.config import settings
from appraisal_manager.models.notification import Notification

logger = logging.getLogger(__name__)


class NotificationService:
    @staticmethod
    def create_notification(
        db: Session,
        user_id: str,
        title: str,
        message: str,
        priority: str = "medium",
        link: Optional[str] = None,
        type: str = "appraisal"
    ) -> Notification:
        """
        Internal utility for creating notifications.
        """
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            priority=priority,
            link=link
        )
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def notify_user(
        db: Session,
        user_id: str,
        title: str,
        message: str,
        priority: str = "medium",
        link: Optional[str] = None,
        type: str = "appraisal"
    ) -> Optional[Notification]:
        """
        Fire-and-forget notification trigger.
        A delivery failure is logged and never propagates to the triggering operation.
        """
        if not user_id:
            return None
        try:
            return NotificationService.create_notification(
                db, user_id, title, message, priority, link or settings.workflow.appraisal_link, type
            )
        except Exception as e:
            db.rollback()
            logger.warning(f"Notification to {user_id} failed: {e}", exc_info=True)
            return None
