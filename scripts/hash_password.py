#!/usr/bin/env python3
"""
Generate an Argon2 hash usable as ADMIN_PASSWORD.

Usage:
  python scripts/hash_password.py [--password secret]
"""
from __future__ import annotations

import argparse
import getpass
import sys

from vitrine.core.security import hash_password


def main() -> None:
    ap = argparse.ArgumentParser(description="Hash the admin password")
    ap.add_argument("--password", help="Password to hash (default: prompt)")
    args = ap.parse_args()

    password = args.password or getpass.getpass("Mot de passe admin: ")
    if not password:
        raise SystemExit("Mot de passe vide")
    print(hash_password(password))


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:  # pragma: no cover - CLI usage
        sys.stderr.write("Annulé\n")
        raise SystemExit(1)
