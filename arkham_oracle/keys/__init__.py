# arkham_oracle/keys/__init__.py
"""
Ed25519 oracle identity.

The private key is handled in its 64-byte form (32-byte seed followed by the
32-byte public key), the layout Solana and Go tooling use. The key is passed
explicitly to whatever signs with it; nothing in this package holds it in
module state.
"""

import json
import os
from pathlib import Path

from nacl.encoding import HexEncoder
from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from arkham_oracle.errors import InvalidInputError, InvalidKeyError

KEYS_DIR = Path(__file__).parent
KEY_PATH = KEYS_DIR / "oracle_ed25519.key"

SEED_SIZE = 32
PUBLIC_KEY_SIZE = 32
PRIVATE_KEY_SIZE = 64
SIGNATURE_SIZE = 64
DIGEST_SIZE = 32


def _signing_key(private_key: bytes) -> SigningKey:
    if not isinstance(private_key, (bytes, bytearray)) or len(private_key) != PRIVATE_KEY_SIZE:
        size = len(private_key) if isinstance(private_key, (bytes, bytearray)) else type(private_key).__name__
        raise InvalidKeyError(f"invalid private key size: expected {PRIVATE_KEY_SIZE}, got {size}")
    sk = SigningKey(bytes(private_key[:SEED_SIZE]))
    if sk.verify_key.encode() != bytes(private_key[SEED_SIZE:]):
        raise InvalidKeyError("private key does not match its embedded public key")
    return sk


def sign(private_key: bytes, digest: bytes) -> bytes:
    """Sign a 32-byte digest with a 64-byte Ed25519 private key."""
    sk = _signing_key(private_key)
    if len(digest) != DIGEST_SIZE:
        raise InvalidInputError(f"digest must be {DIGEST_SIZE} bytes, got {len(digest)}")
    return sk.sign(bytes(digest)).signature


def verify(public_key: bytes, digest: bytes, signature: bytes) -> bool:
    """
    Check an Ed25519 signature over a digest.

    A signature that does not match returns False. Only wrong-sized inputs
    raise (InvalidInputError).
    """
    if len(public_key) != PUBLIC_KEY_SIZE:
        raise InvalidInputError(f"public key must be {PUBLIC_KEY_SIZE} bytes, got {len(public_key)}")
    if len(signature) != SIGNATURE_SIZE:
        raise InvalidInputError(f"signature must be {SIGNATURE_SIZE} bytes, got {len(signature)}")
    if len(digest) != DIGEST_SIZE:
        raise InvalidInputError(f"digest must be {DIGEST_SIZE} bytes, got {len(digest)}")
    try:
        VerifyKey(bytes(public_key)).verify(bytes(digest), bytes(signature))
    except BadSignatureError:
        return False
    return True


def parse_private_key(text: str) -> bytes:
    """
    Decode key material from text: 128 hex characters, or a JSON array of
    64 byte values (Solana CLI keypair file).
    """
    text = text.strip()
    if text.startswith("["):
        try:
            values = json.loads(text)
            raw = bytes(values)
        except (ValueError, TypeError) as e:
            raise InvalidKeyError(f"invalid JSON key array: {e}") from e
    else:
        if text.startswith("0x"):
            text = text[2:]
        try:
            raw = bytes.fromhex(text)
        except ValueError as e:
            raise InvalidKeyError(f"invalid hex private key: {e}") from e
    _signing_key(raw)
    return raw


class OracleIdentity:
    """Long-term oracle keypair. Read-only once constructed."""

    def __init__(self, private_key: bytes):
        self._sk = _signing_key(private_key)
        self._private_key = bytes(private_key)

    @classmethod
    def generate(cls) -> "OracleIdentity":
        sk = SigningKey.generate()
        return cls(sk.encode() + sk.verify_key.encode())

    @classmethod
    def from_text(cls, text: str) -> "OracleIdentity":
        return cls(parse_private_key(text))

    @property
    def public_key(self) -> bytes:
        return self._sk.verify_key.encode()

    @property
    def public_key_hex(self) -> str:
        return self._sk.verify_key.encode(HexEncoder).decode()

    def private_key_hex(self) -> str:
        return self._private_key.hex()

    def sign_digest(self, digest: bytes) -> bytes:
        return sign(self._private_key, digest)

    def __repr__(self):
        return f"OracleIdentity(pubkey={self.public_key_hex[:16]}...)"


def load_or_create_key(path: Path = KEY_PATH) -> OracleIdentity:
    """Load an existing key file, or generate a persistent one with mode 0600."""
    path = Path(path)
    if path.exists():
        return OracleIdentity.from_text(path.read_text())

    identity = OracleIdentity.generate()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(identity.private_key_hex())
    os.chmod(str(path), 0o600)
    return identity
