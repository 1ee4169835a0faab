# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import secrets
from functools import lru_cache
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from blogauth.errors import EmptyPassword

# Fixed work factor; changing these only affects hashes written afterwards.
_PH = PasswordHasher(time_cost=3, memory_cost=65536, parallelism=4, hash_len=32, salt_len=16)


def hash_password(plain: str) -> str:
    if plain is None or not str(plain).strip():
        raise EmptyPassword()
    return _PH.hash(plain)


def verify_password(plain: str, hash_value: Optional[str]) -> bool:
    if not hash_value or not plain:
        return False
    try:
        return _PH.verify(hash_value, plain)
    except (VerificationError, InvalidHashError, UnicodeError):
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return _PH.hash(secrets.token_hex(16))


def burn_verify(plain: str) -> None:
    """Run a verify against a throwaway hash so unknown users cost the same as known ones."""
    verify_password(plain or "x", _dummy_hash())
