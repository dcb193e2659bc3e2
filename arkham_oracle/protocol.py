# arkham_oracle/protocol.py
"""
Arkham Oracle — attestation protocol

The byte layout below is the whole interoperability contract between the
oracle and anything that checks its signatures (SDKs, on-chain programs):

    message = LE64(price) || LE64(timestamp)      16 bytes, no framing
    digest  = Keccak-256(message)                 32 bytes, original padding
    sig     = Ed25519(oracle_key, digest)         64 bytes

There is no version tag. Changing any of this breaks every verifier silently.
"""

import math
import re
import struct
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal

from Crypto.Hash import keccak

from arkham_oracle.errors import InvalidInputError, MalformedResponseError
from arkham_oracle import keys

PRICE_DECIMALS = 6
PRICE_SCALE = 10 ** PRICE_DECIMALS

UINT64_MAX = 2 ** 64 - 1
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

MESSAGE_SIZE = 16
DIGEST_SIZE = 32

_MESSAGE_LAYOUT = struct.Struct("<Qq")
_UINT_RE = re.compile(r"[0-9]{1,20}")
_INT_RE = re.compile(r"-?[0-9]{1,19}")
_HEX_RE = re.compile(r"(?:[0-9a-fA-F]{2})+")


def _check_int(name, value, lo, hi):
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{name} must be an integer, got {type(value).__name__}")
    if not lo <= value <= hi:
        raise InvalidInputError(f"{name} {value} out of range [{lo}, {hi}]")


def encode_message(price: int, timestamp: int) -> bytes:
    """Canonical 16-byte message: price (u64) then timestamp (i64), little-endian."""
    _check_int("price", price, 0, UINT64_MAX)
    _check_int("timestamp", timestamp, INT64_MIN, INT64_MAX)
    return _MESSAGE_LAYOUT.pack(price, timestamp)


def keccak256(data: bytes) -> bytes:
    """Legacy Keccak-256. Not interchangeable with hashlib.sha3_256."""
    return keccak.new(digest_bits=256, data=bytes(data)).digest()


def hash_message(message: bytes) -> bytes:
    if len(message) != MESSAGE_SIZE:
        raise InvalidInputError(f"message must be {MESSAGE_SIZE} bytes, got {len(message)}")
    return keccak256(message)


def create_message_hash(price: int, timestamp: int) -> bytes:
    """The 32-byte digest the oracle signs for (price, timestamp)."""
    return hash_message(encode_message(price, timestamp))


def to_fixed_point(price_usd: float) -> int:
    """
    Convert a USD price to 6-decimal fixed point, truncating toward zero.

    The float is read through its shortest decimal form, so 1.234567
    becomes 1234567 rather than falling one unit short on binary error.
    """
    if isinstance(price_usd, bool) or not isinstance(price_usd, (int, float)):
        raise InvalidInputError(f"price must be a number, got {type(price_usd).__name__}")
    if not math.isfinite(price_usd) or price_usd < 0:
        raise InvalidInputError(f"price must be finite and non-negative, got {price_usd!r}")

    scaled = Decimal(repr(float(price_usd))) * PRICE_SCALE
    value = int(scaled.to_integral_value(rounding=ROUND_DOWN))
    if value > UINT64_MAX:
        raise InvalidInputError(f"price {price_usd!r} does not fit in 64 bits")
    return value


@dataclass(frozen=True)
class SignedPriceData:
    """A signed price attestation: the record that travels producer -> consumer."""

    price: int
    timestamp: int
    signature: bytes

    def __post_init__(self):
        _check_int("price", self.price, 0, UINT64_MAX)
        _check_int("timestamp", self.timestamp, INT64_MIN, INT64_MAX)
        if len(self.signature) != keys.SIGNATURE_SIZE:
            raise InvalidInputError(
                f"signature must be {keys.SIGNATURE_SIZE} bytes, got {len(self.signature)}"
            )

    def create_oracle_message_hash(self) -> bytes:
        """Rebuild the digest the oracle signed. This plus `signature` is what verifiers need."""
        return create_message_hash(self.price, self.timestamp)

    def verify(self, public_key: bytes) -> bool:
        return keys.verify(public_key, self.create_oracle_message_hash(), self.signature)

    def to_wire(self) -> dict:
        return {
            "price": str(self.price),
            "timestamp": str(self.timestamp),
            "signature": self.signature.hex(),
        }

    @classmethod
    def from_wire(cls, record) -> "SignedPriceData":
        """Parse a JSON wire record. Any missing or bad field is a MalformedResponseError."""
        if not isinstance(record, dict):
            raise MalformedResponseError(f"expected a JSON object, got {type(record).__name__}")

        fields = {}
        for name in ("price", "timestamp", "signature"):
            value = record.get(name)
            if not isinstance(value, str) or not value:
                raise MalformedResponseError(f"missing or non-string field '{name}'")
            fields[name] = value

        if not _UINT_RE.fullmatch(fields["price"]):
            raise MalformedResponseError(f"unparseable price: {fields['price'][:32]!r}")
        if not _INT_RE.fullmatch(fields["timestamp"]):
            raise MalformedResponseError(f"unparseable timestamp: {fields['timestamp'][:32]!r}")
        if not _HEX_RE.fullmatch(fields["signature"]):
            raise MalformedResponseError("signature is not a hex string")
        signature = bytes.fromhex(fields["signature"])

        try:
            return cls(
                price=int(fields["price"]),
                timestamp=int(fields["timestamp"]),
                signature=signature,
            )
        except InvalidInputError as e:
            raise MalformedResponseError(str(e)) from e
