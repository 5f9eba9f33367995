import os
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from .errors import ConfigMissing

# grab env vars from .env file
load_dotenv()

DEFAULT_API_URL = "https://www.lg-pay.com/api/order/create"
DEFAULT_URL_FIELDS = ["pay_url", "payment_url", "payUrl", "url", "redirect_url", "qr_url"]
DEFAULT_SUCCESS_CODES = ["1", "0", "200", "success", "ok", "true"]
DEFAULT_PAID_STATUSES = ["1", "success", "paid", "true"]


def _split(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _decimal_or_none(raw: Optional[str]) -> Optional[Decimal]:
    if raw is None or not raw.strip() or raw.strip().lower() in ("off", "none", "disabled"):
        return None
    try:
        return Decimal(raw.strip())
    except InvalidOperation:
        raise ValueError(f"LGPAY_MIN_AMOUNT is not a number: {raw!r}")


class GatewayConfig(BaseModel):
    """Everything the order builder, callback verifier and gateway client need."""

    merchant_id: str = ""
    secret_key: str = ""
    trade_type: str = ""
    notify_url: str = ""
    api_url: str = DEFAULT_API_URL
    minimum_amount: Optional[Decimal] = None
    response_url_fields: List[str] = list(DEFAULT_URL_FIELDS)
    remark: str = "remark001"
    timeout: float = 30
    allow_unsigned_notifications: bool = False
    acknowledgement: str = "success"
    success_codes: List[str] = list(DEFAULT_SUCCESS_CODES)
    paid_statuses: List[str] = list(DEFAULT_PAID_STATUSES)

    def is_paid(self, notification) -> bool:
        """A notification reports a completed payment only when its ``status`` says so."""
        status = notification.get("status")
        return status is not None and str(status).lower() in {s.lower() for s in self.paid_statuses}

    def missing_fields(self) -> List[str]:
        required = {
            "merchant_id": self.merchant_id,
            "secret_key": self.secret_key,
            "trade_type": self.trade_type,
        }
        return [name for name, value in required.items() if not value]

    def ensure_complete(self):
        missing = self.missing_fields()
        if missing:
            raise ConfigMissing(missing)

    def ensure_secret(self):
        if not self.secret_key:
            raise ConfigMissing(["secret_key"])

    def __repr__(self):
        # keep the secret out of logs and tracebacks
        return f"GatewayConfig(merchant_id={self.merchant_id!r}, trade_type={self.trade_type!r}, api_url={self.api_url!r})"

    __str__ = __repr__


class Settings:
    # app settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS stuff
    _origins_raw: str = os.getenv("ALLOWED_ORIGINS", "*")
    ALLOWED_ORIGINS: List[str] = _split(_origins_raw) if _origins_raw else ["*"]

    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./paybridge.db")

    # LG-Pay
    LGPAY_APP_ID: str = os.getenv("LGPAY_APP_ID", "")
    LGPAY_SECRET_KEY: str = os.getenv("LGPAY_SECRET_KEY", "")
    LGPAY_TRADE_TYPE: str = os.getenv("LGPAY_TRADE_TYPE", "")
    LGPAY_NOTIFY_URL: str = os.getenv("LGPAY_NOTIFY_URL", "")
    LGPAY_API_URL: str = os.getenv("LGPAY_API_URL", DEFAULT_API_URL)
    LGPAY_MIN_AMOUNT: Optional[Decimal] = _decimal_or_none(os.getenv("LGPAY_MIN_AMOUNT"))
    LGPAY_REMARK: str = os.getenv("LGPAY_REMARK", "remark001")
    LGPAY_TIMEOUT_SECONDS: float = float(os.getenv("LGPAY_TIMEOUT_SECONDS", "30"))
    LGPAY_ALLOW_UNSIGNED_NOTIFY: bool = os.getenv("LGPAY_ALLOW_UNSIGNED_NOTIFY", "false").lower() in ("1", "true", "yes")
    LGPAY_RESPONSE_URL_FIELDS: List[str] = _split(os.getenv("LGPAY_RESPONSE_URL_FIELDS", "")) or list(DEFAULT_URL_FIELDS)
    LGPAY_PAID_STATUSES: List[str] = _split(os.getenv("LGPAY_PAID_STATUSES", "")) or list(DEFAULT_PAID_STATUSES)

    # Razorpay
    RAZORPAY_KEY_SECRET: Optional[str] = os.getenv("RAZORPAY_KEY_SECRET")
    RAZORPAY_WEBHOOK_SECRET: Optional[str] = os.getenv("RAZORPAY_WEBHOOK_SECRET")

    def gateway_config(self) -> GatewayConfig:
        return GatewayConfig(
            merchant_id=self.LGPAY_APP_ID,
            secret_key=self.LGPAY_SECRET_KEY,
            trade_type=self.LGPAY_TRADE_TYPE,
            notify_url=self.LGPAY_NOTIFY_URL,
            api_url=self.LGPAY_API_URL,
            minimum_amount=self.LGPAY_MIN_AMOUNT,
            response_url_fields=self.LGPAY_RESPONSE_URL_FIELDS,
            remark=self.LGPAY_REMARK,
            timeout=self.LGPAY_TIMEOUT_SECONDS,
            allow_unsigned_notifications=self.LGPAY_ALLOW_UNSIGNED_NOTIFY,
            paid_statuses=self.LGPAY_PAID_STATUSES,
        )


settings = Settings()


def get_gateway_config() -> GatewayConfig:
    return settings.gateway_config()
