import hashlib
import hmac
from typing import Optional


# --- Razorpay checkout and webhook signatures ---
# Same math the razorpay library runs in utility.verify_payment_signature
# and utility.verify_webhook_signature, without pulling in the SDK.
def _hmac_sha256(secret: str, message: bytes) -> str:
    return hmac.new(bytes(secret, "utf-8"), message, hashlib.sha256).hexdigest()


def payment_signature(order_id: str, payment_id: str, secret: str) -> str:
    # Formula: HMAC_SHA256(order_id + "|" + payment_id, secret)
    return _hmac_sha256(secret, bytes(f"{order_id}|{payment_id}", "utf-8"))


def verify_payment_signature(order_id: str, payment_id: str, signature: Optional[str], secret: str) -> bool:
    if not signature:
        return False
    expected = payment_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


def webhook_signature(body: bytes, secret: str) -> str:
    return _hmac_sha256(secret, body)


def verify_webhook_signature(body: bytes, signature: Optional[str], secret: str) -> bool:
    if not signature:
        return False
    expected = webhook_signature(body, secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))
