from decimal import Decimal
import itertools

import pytest

from paybridge import signer
from paybridge.errors import InvalidParameter

SECRET = "secret"

ORDER = {
    "app_id": "1001",
    "trade_type": "INRUPI",
    "order_sn": "p123",
    "money": 19950,
}


def test_known_vector():
    # md5("app_id=1001&money=19950&order_sn=p123&trade_type=INRUPI&key=secret")
    assert signer.sign(ORDER, SECRET) == "6CE7DA7E5C0B437283072348535F1EA3"


def test_string_to_sign_is_sorted_and_raw():
    params = {"notify_url": "https://x.example/cb?a=1&b=2", "remark": "hello world", "app_id": "1"}
    assert signer.string_to_sign(params, "k") == (
        "app_id=1&notify_url=https://x.example/cb?a=1&b=2&remark=hello world&key=k"
    )


def test_empty_map_signs_key_only():
    assert signer.string_to_sign({}, SECRET) == "key=secret"
    assert signer.sign({}, SECRET) == "80353F06772F9B5C80204F40D0D34FDA"


def test_only_empty_fields_degenerates_to_key_only():
    assert signer.sign({"a": "", "b": None, "sign": "X"}, SECRET) == signer.sign({}, SECRET)


def test_keys_sorted_bytewise():
    # uppercase sorts before lowercase in byte order
    assert signer.canonical_query({"a": "2", "B": "1"}) == "B=1&a=2"
    assert signer.sign({"a": "2", "B": "1"}, "k") == "0AF37DABD443BF48214BD1FABBB27569"


def test_insertion_order_does_not_matter():
    expected = signer.sign(ORDER, SECRET)
    for keys in itertools.permutations(ORDER):
        assert signer.sign({k: ORDER[k] for k in keys}, SECRET) == expected


@pytest.mark.parametrize("empty", ["", None])
def test_empty_values_are_excluded(empty):
    assert signer.sign({**ORDER, "remark": empty}, SECRET) == signer.sign(ORDER, SECRET)


def test_existing_sign_field_is_excluded():
    assert signer.sign({**ORDER, "sign": "garbage"}, SECRET) == signer.sign(ORDER, SECRET)


def test_signature_is_uppercase_hex():
    token = signer.sign(ORDER, SECRET)
    assert len(token) == 32
    assert token == token.upper()
    int(token, 16)


@pytest.mark.parametrize(
    "value, rendered",
    [
        (100, "100"),
        (100.0, "100"),
        (199.5, "199.5"),
        (Decimal("19950.00"), "19950"),
        (Decimal("1.50"), "1.5"),
        (Decimal("1E+2"), "100"),
        (-3, "-3"),
        (True, "true"),
        ("007", "007"),
    ],
)
def test_numeric_rendering(value, rendered):
    assert signer.render_value(value) == rendered


def test_int_and_text_values_sign_the_same():
    assert signer.sign({**ORDER, "money": 19950}, SECRET) == signer.sign({**ORDER, "money": "19950"}, SECRET)


@pytest.mark.parametrize("value", [{"a": 1}, [1, 2], ("a",), {1}])
def test_collections_are_rejected(value):
    with pytest.raises(InvalidParameter):
        signer.sign({"a": "1", "nested": value}, SECRET)


def test_non_finite_numbers_are_rejected():
    with pytest.raises(InvalidParameter):
        signer.sign({"a": float("nan")}, SECRET)


def test_sign_attached_keeps_fields_and_adds_sign():
    signed = signer.sign_attached(ORDER, SECRET)
    assert set(signed) == set(ORDER) | {"sign"}
    assert {k: v for k, v in signed.items() if k != "sign"} == ORDER
    assert signed["sign"] == signer.sign(ORDER, SECRET)
    assert "sign" not in ORDER


def test_sign_attached_replaces_stale_sign():
    signed = signer.sign_attached({**ORDER, "sign": "stale"}, SECRET)
    assert signed["sign"] == signer.sign(ORDER, SECRET)


def test_verify_round_trip():
    assert signer.verify(signer.sign_attached(ORDER, SECRET), SECRET)


def test_verify_rejects_other_secret():
    assert not signer.verify(signer.sign_attached(ORDER, "k1"), "k2")


def test_verify_rejects_tampered_field():
    signed = signer.sign_attached(ORDER, SECRET)
    signed["money"] = "1"
    assert not signer.verify(signed, SECRET)


def test_verify_is_case_sensitive():
    signed = signer.sign_attached(ORDER, SECRET)
    signed["sign"] = signed["sign"].lower()
    assert not signer.verify(signed, SECRET)


@pytest.mark.parametrize("claimed", [None, "", "ü" * 32])
def test_verify_rejects_missing_or_odd_sign(claimed):
    params = dict(ORDER)
    if claimed is not None:
        params["sign"] = claimed
    assert not signer.verify(params, SECRET)


def test_known_notification_vector():
    # md5("money=100&order_sn=p123&key=secret")
    notification = {"order_sn": "p123", "money": "100", "sign": "EDFF7DCC3EF063B0B9C18E51F16B381C"}
    assert signer.verify(notification, SECRET)
