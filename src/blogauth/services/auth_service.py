# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from fastapi import Response

from blogauth.auth.passwords import burn_verify, verify_password
from blogauth.auth.session import SessionTransport
from blogauth.auth.tokens import TokenIssuer
from blogauth.auth.users import UserStore
from blogauth.core.validation import clean, validate_registration
from blogauth.errors import AuthError, DuplicateIdentity, InternalError, InvalidCredentials, ValidationError

logger = logging.getLogger(__name__)


@contextmanager
def reraise_as_auth_error(action: str, message: str = "") -> Iterator[None]:
    """Let taxonomy errors through; anything else becomes an opaque InternalError."""
    try:
        yield
    except AuthError:
        raise
    except Exception as e:
        logger.exception("Unexpected failure during %s", action)
        raise InternalError(message) from e


class AuthService:
    """Register / login / logout.

    Session state lives only in the client's cookies: login attaches a fresh
    token pair, logout overwrites the cookies. Nothing is invalidated on the
    server, so an unexpired token keeps working after logout.
    """

    def __init__(self, store: UserStore, issuer: TokenIssuer, transport: SessionTransport) -> None:
        self.store = store
        self.issuer = issuer
        self.transport = transport

    def register(self, username: Optional[str], email: Optional[str], password: Optional[str]) -> Dict[str, str]:
        data = validate_registration(username, email, password)
        with reraise_as_auth_error("register"):
            if self.store.find_by_email(data["email"]) is not None:
                logger.warning("Registration rejected, email already in use (username=%s)", data["username"])
                raise DuplicateIdentity()
            user = self.store.create(data["username"], data["email"], data["password"])
        logger.info("Registered user %s", user.username)
        return user.public_dict()

    def login(self, username: Optional[str], password: Optional[str], response: Response) -> Dict[str, str]:
        u = clean(username)
        if not u or not password:
            raise ValidationError("Username and password are required.")

        with reraise_as_auth_error("login"):
            user = self.store.find_by_username(u)
            if user is None:
                burn_verify(password)
                ok = False
            else:
                ok = verify_password(password, user.password_hash)
            if not ok:
                logger.warning("Failed login for username=%s", u)
                raise InvalidCredentials()

            tokens = self.issuer.issue(user.id)
            self.transport.attach(tokens, response)
        logger.info("User %s logged in", user.username)
        return {"message": "Login successful."}

    def logout(self, response: Response) -> Dict[str, str]:
        with reraise_as_auth_error("logout", "An error occurred while logging out."):
            self.transport.clear(response)
        return {"message": "Logout successful."}
