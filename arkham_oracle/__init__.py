"""
Arkham Oracle — signed token/USD price attestations.

Producer and consumer share one protocol module: the canonical 16-byte
encoding, its Keccak-256 digest and the Ed25519 signature over it.
"""

__version__ = "1.0.0"
