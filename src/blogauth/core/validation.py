# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import re
from typing import Any, Dict, Optional

from blogauth.errors import EmptyPassword, ValidationError

EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")

UPDATABLE_FIELDS = ("username", "email", "password")


def clean(s: Optional[str]) -> str:
    """Trim a possibly-missing string field."""
    return str(s or "").strip()


def validate_username(username: Optional[str]) -> str:
    u = clean(username)
    if not u:
        raise ValidationError("Username is required.")
    return u


def validate_email(email: Optional[str]) -> str:
    e = clean(email)
    if not e:
        raise ValidationError("Email is required.")
    if not EMAIL_RE.match(e):
        raise ValidationError("Email is not valid.")
    return e


def validate_password(password: Optional[str]) -> str:
    # Returned untouched: surrounding whitespace is part of the secret.
    if password is None or not str(password).strip():
        raise EmptyPassword()
    return str(password)


def validate_registration(username: Optional[str], email: Optional[str], password: Optional[str]) -> Dict[str, str]:
    return {
        "username": validate_username(username),
        "email": validate_email(email),
        "password": validate_password(password),
    }


def validate_update(fields: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Check a partial update; returns the normalised subset of known fields."""
    data = {k: v for k, v in (fields or {}).items() if v is not None}
    unknown = sorted(set(data) - set(UPDATABLE_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown field(s): {', '.join(unknown)}.")
    if not data:
        raise ValidationError("Nothing to update.")

    out: Dict[str, str] = {}
    if "username" in data:
        out["username"] = validate_username(data["username"])
    if "email" in data:
        out["email"] = validate_email(data["email"])
    if "password" in data:
        out["password"] = validate_password(data["password"])
    return out
