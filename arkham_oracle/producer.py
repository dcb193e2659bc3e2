# arkham_oracle/producer.py
"""
Attestation producer: gate -> price -> fixed point -> timestamp -> sign.

Each call is independent. Nothing is cached, so every attestation re-fetches
the raw price and re-signs.
"""

import logging
import time
from typing import Callable, Iterable, Optional

from arkham_oracle.errors import (
    InvalidInputError,
    MissingTokenError,
    PriceNotFoundError,
    PriceSourceError,
    UnauthorizedError,
)
from arkham_oracle.keys import OracleIdentity
from arkham_oracle.protocol import SignedPriceData, create_message_hash, to_fixed_point

log = logging.getLogger(__name__)


class AttestationProducer:
    def __init__(
        self,
        identity: OracleIdentity,
        price_source,
        trusted_client_keys: Iterable[str] = (),
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            identity: the oracle keypair used for every signature.
            price_source: anything with ``get_usd_price(token) -> float``.
            trusted_client_keys: allow-list; empty means anyone may request.
            clock: Unix-seconds source, replaceable in tests.
        """
        self.identity = identity
        self.price_source = price_source
        self.trusted_client_keys = frozenset(trusted_client_keys)
        self.clock = clock

    @property
    def gated(self) -> bool:
        return bool(self.trusted_client_keys)

    def authorize(self, client_key: Optional[str]):
        if self.gated and client_key not in self.trusted_client_keys:
            log.warning("rejected request: client key not on allow-list")
            raise UnauthorizedError("Unauthorized")

    def attest(self, token: str, client_key: Optional[str] = None) -> SignedPriceData:
        # Gate first so unauthorized callers never cost an upstream lookup.
        self.authorize(client_key)
        if not token:
            raise MissingTokenError("Token parameter is required")

        price_usd = self.price_source.get_usd_price(token)
        # Sources report unknown ids as 0; a zero price is never attested.
        if price_usd == 0:
            raise PriceNotFoundError(f"Price for token '{token}' not found")
        try:
            price = to_fixed_point(price_usd)
        except InvalidInputError as e:
            raise PriceSourceError(f"unusable price for '{token}': {e}") from e

        timestamp = int(self.clock())
        digest = create_message_hash(price, timestamp)
        signature = self.identity.sign_digest(digest)

        log.info("attested %s price=%d timestamp=%d digest=%s", token, price, timestamp, digest.hex()[:16])
        return SignedPriceData(price=price, timestamp=timestamp, signature=signature)
