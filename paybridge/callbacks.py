import logging
from typing import Any, Callable, Mapping, Optional

from . import signer
from .config import GatewayConfig
from .errors import InvalidParameter, InvalidSignature

logger = logging.getLogger(__name__)

NotificationHook = Callable[[Mapping[str, Any]], None]


class CallbackVerifier:
    """Authenticates gateway notifications before handing them to business logic."""

    def __init__(self, config: GatewayConfig, hook: Optional[NotificationHook] = None):
        self.config = config
        self.hook = hook

    def authenticate(self, notification: Mapping[str, Any]):
        self.config.ensure_secret()
        order_sn = notification.get("order_sn")

        if signer.SIGN_FIELD not in notification:
            if self.config.allow_unsigned_notifications:
                logger.warning("Accepting unsigned notification for order %s", order_sn)
                return
            logger.error("Rejected unsigned notification for order %s", order_sn)
            raise InvalidSignature("Missing signature")

        try:
            valid = signer.verify(notification, self.config.secret_key)
        except InvalidParameter as e:
            logger.error("Rejected notification for order %s: %s", order_sn, e)
            raise InvalidSignature()

        if not valid:
            logger.error(
                "Invalid signature on notification for order %s (fields: %s)",
                order_sn,
                ", ".join(sorted(k for k in notification if k != signer.SIGN_FIELD)),
            )
            raise InvalidSignature()

    def handle(self, notification: Mapping[str, Any]) -> str:
        """Verify ``notification``, run the hook and return the text the gateway expects."""
        self.authenticate(notification)
        logger.info("Valid notification for order %s", notification.get("order_sn"))
        if self.hook is not None:
            self.hook(notification)
        return self.config.acknowledgement
