# arkham_oracle/server.py
"""
Arkham Oracle — HTTP service

Endpoints:
  GET /api/price?token=<id>[&trustedClientKey=<k>]  — signed price record
  GET /pubkey                                       — oracle public key
  GET /health                                       — liveness + pubkey

Run:
  python -m arkham_oracle.server [port]
  uvicorn --factory arkham_oracle.server:create_app
"""

import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from arkham_oracle import __version__
from arkham_oracle.config import OracleConfig
from arkham_oracle.errors import OracleError, PriceNotFoundError, PriceSourceError
from arkham_oracle.feeds import CoinGeckoPriceSource
from arkham_oracle.keys import OracleIdentity
from arkham_oracle.producer import AttestationProducer

log = logging.getLogger(__name__)


def create_app(
    config: Optional[OracleConfig] = None,
    identity: Optional[OracleIdentity] = None,
    price_source=None,
) -> FastAPI:
    """Build the oracle app. Key material is resolved here, so a bad key fails startup."""
    config = config or OracleConfig.from_env()
    identity = identity or config.load_identity()
    price_source = price_source or CoinGeckoPriceSource(
        url=config.data_source_url, timeout=config.http_timeout
    )
    producer = AttestationProducer(identity, price_source, config.trusted_client_keys)

    app = FastAPI(
        title="Arkham Oracle",
        description="Signed token/USD prices — Keccak-256 digest, Ed25519 signature",
        version=__version__,
    )
    app.state.producer = producer

    @app.exception_handler(OracleError)
    async def oracle_error_handler(request: Request, exc: OracleError):
        if isinstance(exc, PriceSourceError) and not isinstance(exc, PriceNotFoundError):
            log.warning("price source failure on %s: %s", request.url.path, exc)
            message = "Failed to fetch price data"
        else:
            message = str(exc)
        return JSONResponse({"error": message}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        log.exception("unhandled error on %s", request.url.path)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    @app.get("/api/price")
    def signed_price(
        token: Optional[str] = None,
        trusted_client_key: Optional[str] = Query(None, alias="trustedClientKey"),
    ):
        record = producer.attest(token or "", client_key=trusted_client_key)
        return JSONResponse(record.to_wire())

    @app.get("/pubkey")
    def pubkey():
        return {
            "pubkey": identity.public_key_hex,
            "scheme": "ed25519",
            "hash": "keccak256",
            "message": "le_u64(price) || le_i64(timestamp)",
            "price_decimals": 6,
        }

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "version": __version__,
            "pubkey": identity.public_key_hex,
            "gated": producer.gated,
        }

    return app


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    config = OracleConfig.from_env()
    logging.basicConfig(level=config.log_level, format="%(asctime)s [arkham-oracle] %(levelname)s %(message)s")

    port = int(argv[0]) if argv else config.port
    identity = config.load_identity()
    app = create_app(config, identity=identity)

    log.info("Arkham Oracle %s starting on %s:%d", __version__, config.host, port)
    log.info("  Public key: %s", identity.public_key_hex)
    log.info("  Price source: %s", config.data_source_url or "CoinGecko (default)")
    log.info("  Endpoint: GET /api/price (%s)", "gated" if config.trusted_client_keys else "public")
    uvicorn.run(app, host=config.host, port=port)


if __name__ == "__main__":
    main()
