# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from fastapi import Response

from blogauth.auth.tokens import TokenPair
from blogauth.config import AuthSettings

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


class SessionTransport:
    """Writes the token pair to (and wipes it from) the outgoing response."""

    def __init__(self, settings: AuthSettings) -> None:
        self.secure = settings.cookie_secure
        self.access_max_age = settings.access_token_seconds
        self.refresh_max_age = settings.refresh_token_seconds

    def cookie_settings(self) -> dict:
        return {"httponly": True, "samesite": "strict", "secure": self.secure, "path": "/"}

    def attach(self, tokens: TokenPair, response: Response) -> None:
        response.set_cookie(
            ACCESS_COOKIE, tokens.access_token, max_age=self.access_max_age, **self.cookie_settings()
        )
        response.set_cookie(
            REFRESH_COOKIE, tokens.refresh_token, max_age=self.refresh_max_age, **self.cookie_settings()
        )

    def clear(self, response: Response) -> None:
        # Same attributes as attach, otherwise browsers keep the original cookie.
        for name in (ACCESS_COOKIE, REFRESH_COOKIE):
            response.set_cookie(name, "", max_age=0, expires=0, **self.cookie_settings())
