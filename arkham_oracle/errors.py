# arkham_oracle/errors.py
"""
Error kinds for the Arkham price oracle.

Every error carries the HTTP status the producer endpoint answers with, so
the server can map any OracleError to a JSON body without a lookup table.
"""


class OracleError(Exception):
    """Base class for all oracle errors."""

    status_code = 500


class InvalidKeyError(OracleError):
    """Key material has the wrong size or does not form a valid keypair."""


class InvalidInputError(OracleError):
    """Wrong-sized key, signature or digest, or an out-of-range integer."""


class UnauthorizedError(OracleError):
    """Caller identifier is not on the configured allow-list."""

    status_code = 401


class MissingTokenError(OracleError):
    """The token query parameter was not supplied."""

    status_code = 400


class PriceSourceError(OracleError):
    """Upstream price lookup failed: unreachable, bad status or bad body."""


class PriceNotFoundError(PriceSourceError):
    """Token absent from the price source (or quoted at exactly zero)."""

    status_code = 404


class MalformedResponseError(OracleError):
    """The oracle's wire record could not be fetched or parsed."""
