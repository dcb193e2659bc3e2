# arkham_oracle/config.py
"""
Runtime configuration, read once from the environment at startup.

    ORACLE_PRIVATE_KEY   64-byte key, hex or JSON byte array (wins over path)
    ORACLE_KEY_PATH      key file; generated on first start if missing
    TRUSTED_CLIENT_KEYS  comma-separated allow-list; empty = public endpoint
    DATA_SOURCE_URL      alternate price source (CoinGecko convention)
    ORACLE_HTTP_TIMEOUT  seconds for upstream calls; empty = no timeout
    ORACLE_HOST / ORACLE_PORT / ORACLE_LOG_LEVEL
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from arkham_oracle.keys import KEY_PATH, OracleIdentity, load_or_create_key

DEFAULT_PORT = 9120


def _split_keys(raw: str) -> Tuple[str, ...]:
    return tuple(k.strip() for k in raw.split(",") if k.strip())


@dataclass(frozen=True)
class OracleConfig:
    trusted_client_keys: Tuple[str, ...] = ()
    data_source_url: Optional[str] = None
    http_timeout: Optional[float] = None
    private_key_text: Optional[str] = field(default=None, repr=False)
    key_path: Path = KEY_PATH
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ=None) -> "OracleConfig":
        env = os.environ if environ is None else environ
        timeout = env.get("ORACLE_HTTP_TIMEOUT", "").strip()
        return cls(
            trusted_client_keys=_split_keys(env.get("TRUSTED_CLIENT_KEYS", "")),
            data_source_url=env.get("DATA_SOURCE_URL") or None,
            http_timeout=float(timeout) if timeout else None,
            private_key_text=env.get("ORACLE_PRIVATE_KEY") or None,
            key_path=Path(env.get("ORACLE_KEY_PATH") or KEY_PATH),
            host=env.get("ORACLE_HOST", "0.0.0.0"),
            port=int(env.get("ORACLE_PORT", DEFAULT_PORT)),
            log_level=env.get("ORACLE_LOG_LEVEL", "INFO").upper(),
        )

    def load_identity(self) -> OracleIdentity:
        """Inline key if given, else the key file. Bad key material raises InvalidKeyError."""
        if self.private_key_text:
            return OracleIdentity.from_text(self.private_key_text)
        return load_or_create_key(self.key_path)
