#!/usr/bin/env python3
"""Print the application public key in the single-line form PalmPay's dashboard expects.

Usage: python scripts/palmpay_public_key.py [path/to/public_key.pem]
Without a path, PALMPAY_PUBLIC_KEY_PATH or keys/public_key.pem is used.
"""
from __future__ import annotations

import sys

from infrastructure.external.payments import get_key_store
from infrastructure.external.payments.exceptions import KeyNotFoundError


def main(argv: list[str]) -> int:
    path = argv[1] if len(argv) > 1 else None
    try:
        key = get_key_store().load_public_key_for_upload(path)
    except KeyNotFoundError as exc:
        print(exc.message, file=sys.stderr)
        return 1
    print(key.blob)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
