"""Canonical MD5 signing used by the LG-Pay gateway.

The gateway recomputes the signature on its side, so the string that gets
hashed has to be built exactly the same way every time:

1. Drop the ``sign`` field if present.
2. Drop fields whose value is ``None`` or an empty string.
3. Sort the remaining field names by their UTF-8 bytes.
4. Join ``name=value`` pairs with ``&`` using the raw, unencoded values.
5. Append ``&key=<secret>`` (just ``key=<secret>`` when nothing is left).
6. MD5 the result and render it as uppercase hex.

The same routine signs outgoing orders and checks incoming notifications.
"""

import hashlib
import hmac
from decimal import Decimal
from typing import Any, Dict, Mapping

from .errors import InvalidParameter

SIGN_FIELD = "sign"


def render_value(value: Any) -> str:
    """Render a scalar the way it appears in the string to sign."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            raise InvalidParameter(f"Cannot sign non-finite number {value!r}")
        value = Decimal(repr(value))
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise InvalidParameter(f"Cannot sign non-finite number {value!r}")
        if value == value.to_integral_value():
            return str(int(value))
        return format(value.normalize(), "f")
    if isinstance(value, str):
        return value
    raise InvalidParameter(f"Cannot sign value of type {type(value).__name__}")


def signable_fields(params: Mapping[str, Any]) -> Dict[str, str]:
    """Return the rendered fields that take part in the signature."""
    fields = {}
    for name, value in params.items():
        if name == SIGN_FIELD or value is None:
            continue
        if isinstance(value, (dict, list, tuple, set, frozenset)):
            raise InvalidParameter(f"Field {name!r} holds a collection")
        rendered = render_value(value)
        if rendered == "":
            continue
        fields[str(name)] = rendered
    return fields


def canonical_query(params: Mapping[str, Any]) -> str:
    fields = signable_fields(params)
    ordered = sorted(fields, key=lambda name: name.encode("utf-8"))
    return "&".join(f"{name}={fields[name]}" for name in ordered)


def string_to_sign(params: Mapping[str, Any], secret: str) -> str:
    # contains the secret, never log it
    query = canonical_query(params)
    suffix = f"key={secret}"
    return f"{query}&{suffix}" if query else suffix


def sign(params: Mapping[str, Any], secret: str) -> str:
    raw = string_to_sign(params, secret)
    return hashlib.md5(raw.encode("utf-8")).hexdigest().upper()


def sign_attached(params: Mapping[str, Any], secret: str) -> Dict[str, Any]:
    """Return a copy of ``params`` with the ``sign`` field set."""
    signed = {k: v for k, v in params.items() if k != SIGN_FIELD}
    signed[SIGN_FIELD] = sign(signed, secret)
    return signed


def verify(params: Mapping[str, Any], secret: str) -> bool:
    """Check the ``sign`` field of ``params`` against a freshly computed one."""
    claimed = params.get(SIGN_FIELD)
    if claimed is None or claimed == "":
        return False
    expected = sign(params, secret)
    return hmac.compare_digest(expected.encode("utf-8"), str(claimed).encode("utf-8"))


__all__ = [
    "SIGN_FIELD",
    "canonical_query",
    "render_value",
    "sign",
    "sign_attached",
    "signable_fields",
    "string_to_sign",
    "verify",
]
