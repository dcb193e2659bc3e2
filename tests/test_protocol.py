import hashlib

import pytest

from arkham_oracle.errors import InvalidInputError, MalformedResponseError
from arkham_oracle.protocol import (
    SignedPriceData,
    create_message_hash,
    encode_message,
    hash_message,
    keccak256,
    to_fixed_point,
)

# price=1234560000 (0x4995E400), timestamp=1700000000 (0x6553F100), each little-endian
REFERENCE_MESSAGE = bytes.fromhex("00e4954900000000" "00f1536500000000")


def test_encode_reference_pair():
    assert encode_message(1234560000, 1700000000) == REFERENCE_MESSAGE


def test_encode_matches_per_field_little_endian():
    price, ts = 150250000, 1712345678
    msg = encode_message(price, ts)
    assert len(msg) == 16
    assert msg[:8] == price.to_bytes(8, "little")
    assert msg[8:] == ts.to_bytes(8, "little", signed=True)


def test_encode_negative_timestamp_is_twos_complement():
    assert encode_message(0, -1) == b"\x00" * 8 + b"\xff" * 8


def test_encode_extremes():
    msg = encode_message(2 ** 64 - 1, -(2 ** 63))
    assert msg == b"\xff" * 8 + b"\x00" * 7 + b"\x80"


@pytest.mark.parametrize(
    "price,timestamp",
    [(-1, 0), (2 ** 64, 0), (0, 2 ** 63), (0, -(2 ** 63) - 1), (1.5, 0), (True, 0), ("1", 0)],
)
def test_encode_rejects_values_outside_fixed_width(price, timestamp):
    with pytest.raises(InvalidInputError):
        encode_message(price, timestamp)


def test_keccak_is_legacy_padding_not_sha3():
    assert keccak256(b"").hex() == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
    assert keccak256(REFERENCE_MESSAGE) != hashlib.sha3_256(REFERENCE_MESSAGE).digest()


def test_message_hash_is_deterministic():
    first = create_message_hash(1234560000, 1700000000)
    second = create_message_hash(1234560000, 1700000000)
    assert first == second
    assert len(first) == 32
    assert first == keccak256(REFERENCE_MESSAGE)


def test_message_hash_depends_on_both_fields():
    base = create_message_hash(100, 200)
    assert create_message_hash(101, 200) != base
    assert create_message_hash(100, 201) != base


def test_hash_message_requires_canonical_length():
    with pytest.raises(InvalidInputError):
        hash_message(b"\x00" * 15)


@pytest.mark.parametrize(
    "raw,expected",
    [
        (1.234567, 1234567),
        (0.0000001, 0),
        (150.25, 150250000),
        (43250.67, 43250670000),
        (1, 1000000),
        (0.9999999, 999999),
    ],
)
def test_fixed_point_truncates(raw, expected):
    assert to_fixed_point(raw) == expected


@pytest.mark.parametrize("raw", [-0.5, float("nan"), float("inf"), 2.0e13, "1.0", None])
def test_fixed_point_rejects_unusable_prices(raw):
    with pytest.raises(InvalidInputError):
        to_fixed_point(raw)


# --- wire record ---------------------------------------------------------------

SIG = bytes(range(64))


def wire(**overrides):
    record = {"price": "150250000", "timestamp": "1700000000", "signature": SIG.hex()}
    record.update(overrides)
    return {k: v for k, v in record.items() if v is not None}


def test_wire_record_uses_decimal_strings_and_lowercase_hex():
    data = SignedPriceData(price=150250000, timestamp=1700000000, signature=SIG)
    assert data.to_wire() == {
        "price": "150250000",
        "timestamp": "1700000000",
        "signature": SIG.hex(),
    }


def test_from_wire_parses_record():
    data = SignedPriceData.from_wire(wire(signature=SIG.hex().upper()))
    assert data == SignedPriceData(price=150250000, timestamp=1700000000, signature=SIG)


def test_from_wire_accepts_full_width_values():
    data = SignedPriceData.from_wire(wire(price=str(2 ** 64 - 1), timestamp=str(-(2 ** 63))))
    assert data.price == 2 ** 64 - 1
    assert data.timestamp == -(2 ** 63)


def test_from_wire_accepts_negative_timestamp():
    assert SignedPriceData.from_wire(wire(timestamp="-5")).timestamp == -5


@pytest.mark.parametrize(
    "record",
    [
        wire(signature=None),
        wire(price=None),
        wire(timestamp=None),
        wire(price="-1"),
        wire(price="1.5"),
        wire(price=str(2 ** 64)),
        wire(timestamp=str(2 ** 63)),
        wire(timestamp="soon"),
        wire(price="1" * 5000),
        wire(timestamp="9" * 5000),
        wire(price="0" * 21),
        wire(price="150250000\n"),
        wire(timestamp="1700000000\n"),
        wire(signature=SIG.hex() + "\n"),
        wire(signature="zz" * 64),
        wire(signature="ab" * 63),
        wire(signature="abc"),
        wire(price=150250000),
        ["150250000", "1700000000"],
    ],
)
def test_from_wire_rejects_malformed_records(record):
    with pytest.raises(MalformedResponseError):
        SignedPriceData.from_wire(record)


def test_record_is_immutable():
    data = SignedPriceData(price=1, timestamp=2, signature=SIG)
    with pytest.raises(AttributeError):
        data.price = 3


def test_record_requires_64_byte_signature():
    with pytest.raises(InvalidInputError):
        SignedPriceData(price=1, timestamp=2, signature=b"\x00" * 63)
