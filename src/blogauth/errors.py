# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy shared by the auth core and the HTTP layer.

Every ``AuthError`` carries a stable ``kind`` (machine-checkable) and the
HTTP status it maps to. ``SigningError`` sits outside that tree:
it is a configuration fault raised at startup and never rendered per request.
"""

from __future__ import annotations


class AuthError(Exception):
    kind = "AuthError"
    status_code = 500
    default_message = "Request failed."

    def __init__(self, message: str = "") -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"kind": self.kind, "error": self.message}


class ValidationError(AuthError):
    kind = "ValidationError"
    status_code = 400
    default_message = "Invalid input."


class EmptyPassword(ValidationError):
    kind = "EmptyPassword"
    default_message = "Password must not be empty."


class DuplicateIdentity(AuthError):
    kind = "DuplicateIdentity"
    status_code = 400
    default_message = "User already exists."


class InvalidCredentials(AuthError):
    kind = "InvalidCredentials"
    status_code = 400
    default_message = "Invalid username or password."


class NotFound(AuthError):
    kind = "NotFound"
    status_code = 404
    default_message = "User not found."


class PersistenceError(AuthError):
    kind = "PersistenceError"
    status_code = 500
    default_message = "Storage error."


class InternalError(AuthError):
    kind = "InternalError"
    status_code = 500
    default_message = "Internal server error."


class SigningError(RuntimeError):
    """Missing or unusable token signing secret."""
