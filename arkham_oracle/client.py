# arkham_oracle/client.py
"""
Arkham Oracle — consumer client

This client:
- fetches one signed price record per call
- parses it strictly (no partially populated records)
- rebuilds the Keccak-256 message hash the oracle signed

Design goals:
- explicit failure modes (MalformedResponseError for anything unusable)
- no retries, caching, or discovery

Usage:
    python -m arkham_oracle.client https://oracle.example/api/price solana \\
        --trusted-key k1 --pubkey <hex>
"""

import argparse
import logging
import sys
from typing import Optional

import requests

from arkham_oracle.errors import InvalidInputError, MalformedResponseError
from arkham_oracle.protocol import SignedPriceData

log = logging.getLogger(__name__)


class OracleClient:
    def __init__(self, base_url: str, session=None, timeout: Optional[float] = None):
        """
        Args:
            base_url: full URL of the price endpoint, e.g. ``https://host/api/price``.
            session: requests-compatible session; a fresh ``requests.Session`` if omitted.
            timeout: per-request timeout in seconds, passed straight to the session.
        """
        self.base_url = base_url
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch_signed_price(self, token: str, trusted_key: Optional[str] = None) -> SignedPriceData:
        params = {"token": token}
        if trusted_key:
            params["trustedClientKey"] = trusted_key

        try:
            resp = self.session.get(self.base_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise MalformedResponseError(f"failed to call oracle API: {e}") from e

        if resp.status_code != 200:
            detail = ""
            try:
                body = resp.json()
                if isinstance(body, dict) and body.get("error"):
                    detail = f" - {body['error']}"
            except ValueError:
                pass
            raise MalformedResponseError(f"oracle API returned non-200 status: {resp.status_code}{detail}")

        try:
            record = resp.json()
        except ValueError as e:
            raise MalformedResponseError(f"failed to decode oracle API response: {e}") from e

        data = SignedPriceData.from_wire(record)
        log.debug("fetched %s price=%d timestamp=%d", token, data.price, data.timestamp)
        return data


def main(argv=None):
    parser = argparse.ArgumentParser(description="Fetch and check a signed price from an Arkham oracle")
    parser.add_argument("base_url", help="Oracle price endpoint URL")
    parser.add_argument("token", help="Token id, e.g. solana")
    parser.add_argument("--trusted-key", default=None, help="trustedClientKey for gated oracles")
    parser.add_argument("--pubkey", default=None, help="Oracle public key (hex) to verify against")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    args = parser.parse_args(argv)

    client = OracleClient(args.base_url, timeout=args.timeout)
    try:
        data = client.fetch_signed_price(args.token, args.trusted_key)
    except MalformedResponseError as e:
        print(f"  ✗ Fetch failed: {e}")
        return 1

    print(f"  Price:        {data.price} ({data.price / 1_000_000:,.6f} USD)")
    print(f"  Timestamp:    {data.timestamp}")
    print(f"  Signature:    {data.signature.hex()}")
    print(f"  Message hash: {data.create_oracle_message_hash().hex()}")

    if args.pubkey:
        try:
            valid = data.verify(bytes.fromhex(args.pubkey))
        except (ValueError, InvalidInputError) as e:
            print(f"  ✗ Bad public key: {e}")
            return 1
        print(f"  Signature:    {'VALID' if valid else 'INVALID'}")
        return 0 if valid else 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
