import logging
from typing import Any, Iterable, Mapping, Optional

import requests

from .config import GatewayConfig
from .errors import GatewayError, NetworkError

logger = logging.getLogger(__name__)

MESSAGE_FIELDS = ("msg", "message", "error", "errmsg")


def extract_payment_url(response: Any, fields: Iterable[str]) -> Optional[str]:
    """Find the payment link in a gateway response.

    Top-level fields are tried first in priority order, then the same names
    inside a nested ``data`` object.
    """
    if not isinstance(response, Mapping):
        return None
    fields = list(fields)
    sources = [response]
    if isinstance(response.get("data"), Mapping):
        sources.append(response["data"])
    for source in sources:
        for name in fields:
            value = source.get(name)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return None


def gateway_message(body: Any) -> Optional[str]:
    if isinstance(body, Mapping):
        for name in MESSAGE_FIELDS:
            if body.get(name):
                return str(body[name])
    return None


def is_failure(body: Any, success_codes: Iterable[str]) -> bool:
    """A JSON body with a ``status`` or ``code`` outside ``success_codes`` is a gateway failure."""
    if not isinstance(body, Mapping):
        return False
    codes = {str(c).lower() for c in success_codes}
    for name in ("status", "code"):
        if name in body:
            return str(body[name]).lower() not in codes
    return False


class LgPayClient:
    def __init__(self, config: GatewayConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()
        self.order = self.Order(self)  # client.order.create(...)

    class Order:
        def __init__(self, client):
            self.client = client

        def create(self, signed: Mapping[str, Any]) -> dict:
            """Post a signed order and return ``{"order_sn", "payment_url", "response"}``."""
            config = self.client.config
            order_sn = signed.get("order_sn")
            logger.info("Creating LG-Pay order %s", order_sn)
            try:
                resp = self.client.session.post(
                    config.api_url,
                    data=dict(signed),
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                    timeout=config.timeout,
                )
            except requests.exceptions.Timeout:
                logger.error("LG-Pay timed out after %ss for order %s", config.timeout, order_sn)
                raise NetworkError("Payment gateway timed out")
            except requests.exceptions.RequestException as e:
                logger.error("LG-Pay request failed for order %s: %s", order_sn, e)
                raise NetworkError(body=str(e))

            body = self.client.parse_body(resp)
            if resp.status_code >= 400:
                logger.error("LG-Pay answered HTTP %s for order %s: %s", resp.status_code, order_sn, body)
                raise NetworkError(
                    gateway_message(body) or f"Payment gateway returned HTTP {resp.status_code}",
                    body=body,
                )

            logger.debug("LG-Pay response for order %s: %s", order_sn, body)
            if is_failure(body, config.success_codes):
                raise GatewayError(gateway_message(body) or "Order creation failed", body=body)

            payment_url = extract_payment_url(body, config.response_url_fields)
            logger.info("LG-Pay order %s created, payment url %s", order_sn, payment_url)
            return {
                "order_sn": order_sn,
                "payment_url": payment_url,
                "response": body,
            }

    @staticmethod
    def parse_body(resp: requests.Response) -> Any:
        try:
            return resp.json()
        except ValueError:
            return resp.text
