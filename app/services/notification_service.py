# app/services/notification_service.py

from loguru import logger

from app.schemas.auth import Principal


class NotificationService:
    """Push-notification registration. Messaging is off unless enabled."""

    def __init__(self, enabled: bool = False):
        self.enabled = enabled
        self.granted: set[str] = set()

    async def request_permission(self, principal: Principal) -> bool:
        if not self.enabled:
            logger.debug("Notifications not configured; skipping request for {}", principal.id)
            return False

        self.granted.add(principal.id)
        logger.info("Notification permission registered for {}", principal.email)
        return True
