# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from itsdangerous import BadData, URLSafeTimedSerializer

from blogauth.config import AuthSettings
from blogauth.errors import SigningError

ACCESS = "access"
REFRESH = "refresh"

MIN_SECRET_LENGTH = 16

_SALTS = {
    ACCESS: "blogauth.access.v1",
    REFRESH: "blogauth.refresh.v1",
}


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class TokenClaims:
    subject: str
    kind: str
    issued_at: datetime
    nonce: Optional[str] = None


class TokenIssuer:
    """Mints and checks the signed access/refresh tokens.

    Tokens are itsdangerous timed signatures: the signer stamps the issue time
    and ``decode`` rejects anything older than the configured lifetime. There
    is no token store, so a token stays usable until it expires.
    """

    def __init__(self, settings: AuthSettings) -> None:
        secret = settings.secret_key or ""
        if len(secret) < MIN_SECRET_LENGTH:
            raise SigningError(
                f"Signing secret missing or shorter than {MIN_SECRET_LENGTH} characters "
                "(set BLOGAUTH_SECRET_KEY)"
            )
        self._lifetimes = {
            ACCESS: settings.access_token_seconds,
            REFRESH: settings.refresh_token_seconds,
        }
        self._serializers = {
            kind: URLSafeTimedSerializer(secret_key=secret, salt=salt) for kind, salt in _SALTS.items()
        }

    def issue(self, user_id: str) -> TokenPair:
        sub = str(user_id or "").strip()
        if not sub:
            raise ValueError("Cannot issue tokens without a subject")
        access = self._serializers[ACCESS].dumps({"sub": sub, "typ": ACCESS})
        refresh = self._serializers[REFRESH].dumps(
            {"sub": sub, "typ": REFRESH, "nonce": secrets.token_hex(16)}
        )
        return TokenPair(access_token=access, refresh_token=refresh)

    def decode(self, token: str, kind: str = ACCESS) -> Optional[TokenClaims]:
        if not token or kind not in self._serializers:
            return None
        try:
            data, ts = self._serializers[kind].loads(
                token, max_age=self._lifetimes[kind], return_timestamp=True
            )
        except BadData:
            return None
        if not isinstance(data, dict) or data.get("typ") != kind:
            return None
        sub = str(data.get("sub") or "").strip()
        if not sub:
            return None
        return TokenClaims(subject=sub, kind=kind, issued_at=ts, nonce=data.get("nonce"))
