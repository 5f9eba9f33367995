import logging
import threading
import time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Optional

from . import signer
from .config import GatewayConfig
from .errors import BelowMinimum, InvalidAmount

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_IP = "0.0.0.0"
# largest accepted amount is below 10**16 major units
MAX_AMOUNT_DIGITS = 15


class OrderReferenceGenerator:
    """Issues ``p<milliseconds>`` order references that never repeat within the process.

    Two requests landing in the same millisecond get consecutive values, so the
    reference keeps tracking wall-clock time while staying strictly increasing.
    """

    def __init__(self, prefix: str = "p", clock=time.time):
        self.prefix = prefix
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            now = int(self._clock() * 1000)
            self._last = now if now > self._last else self._last + 1
            return f"{self.prefix}{self._last}"


generate_order_sn = OrderReferenceGenerator()


def parse_amount(value: Any) -> Decimal:
    """Turn user input into a positive Decimal amount in major units."""
    if value is None or isinstance(value, bool):
        raise InvalidAmount("Amount is required" if value is None else None)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise InvalidAmount("Amount is required")
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmount(f"Amount is not a number: {value!r}")
    if not amount.is_finite() or amount <= 0:
        raise InvalidAmount()
    if amount.adjusted() > MAX_AMOUNT_DIGITS:
        raise InvalidAmount("Amount is too large")
    return amount


def to_minor_units(amount: Decimal) -> int:
    """Convert major units to minor units (cents, paisa), rounding half away from zero."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def check_minimum(amount: Decimal, minimum: Optional[Decimal]):
    if minimum is not None and amount < minimum:
        raise BelowMinimum(required=minimum, actual=amount)


class OrderBuilder:
    def __init__(self, config: GatewayConfig, reference=generate_order_sn):
        self.config = config
        self.reference = reference

    def compose(self, minor_units: int, client_ip: Optional[str] = None) -> Dict[str, Any]:
        return {
            "app_id": self.config.merchant_id,
            "trade_type": self.config.trade_type,
            "order_sn": self.reference(),
            "money": str(minor_units),
            "notify_url": self.config.notify_url,
            "ip": client_ip or DEFAULT_CLIENT_IP,
            "remark": self.config.remark,
        }

    def build(self, amount: Any, client_ip: Optional[str] = None) -> Dict[str, Any]:
        """Validate ``amount`` and return the signed order map ready to post to the gateway."""
        self.config.ensure_complete()

        value = parse_amount(amount)
        check_minimum(value, self.config.minimum_amount)
        minor_units = to_minor_units(value)
        if minor_units < 1:
            raise InvalidAmount("Amount is smaller than one minor unit")

        if not self.config.notify_url:
            logger.warning("LGPAY_NOTIFY_URL is not set, the gateway will not send notifications")

        params = self.compose(minor_units, client_ip)
        signed = signer.sign_attached(params, self.config.secret_key)
        logger.info("Built order %s for %s minor units", signed["order_sn"], minor_units)
        return signed


def build_order(amount: Any, config: GatewayConfig, client_ip: Optional[str] = None) -> Dict[str, Any]:
    return OrderBuilder(config).build(amount, client_ip=client_ip)
