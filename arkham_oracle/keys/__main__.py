"""
Oracle key generator

Usage:
    python -m arkham_oracle.keys --output oracle_ed25519.key

Writes a 64-byte Ed25519 key (hex) with mode 0600 and prints the public key
that consumers should pin. An existing file is loaded, never overwritten.
"""

import argparse
from pathlib import Path

from arkham_oracle.keys import KEY_PATH, load_or_create_key


def main(argv=None):
    parser = argparse.ArgumentParser(description="Generate or inspect the oracle signing key")
    parser.add_argument("--output", default=str(KEY_PATH), help="Key file path")
    args = parser.parse_args(argv)

    path = Path(args.output)
    existed = path.exists()
    identity = load_or_create_key(path)

    print(f"{'Loaded' if existed else 'Generated'} oracle key: {path}")
    print(f"  Public key (hex): {identity.public_key_hex}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
