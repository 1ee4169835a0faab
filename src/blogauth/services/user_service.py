# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Dict, List, Optional

from blogauth.auth.users import UserRecord, UserStore
from blogauth.core.validation import validate_email
from blogauth.errors import NotFound
from blogauth.services.auth_service import reraise_as_auth_error


def _found(user: Optional[UserRecord]) -> Dict[str, str]:
    if user is None:
        raise NotFound()
    return user.public_dict()


class UserService:
    """Read/update/delete of user records; never exposes password hashes."""

    def __init__(self, store: UserStore) -> None:
        self.store = store

    def list_users(self) -> List[Dict[str, str]]:
        with reraise_as_auth_error("list users"):
            return [u.public_dict() for u in self.store.list_users()]

    def get_user(self, user_id: str) -> Dict[str, str]:
        with reraise_as_auth_error("get user"):
            return _found(self.store.find_by_id(user_id))

    def get_by_username(self, username: str) -> Dict[str, str]:
        with reraise_as_auth_error("get user by username"):
            return _found(self.store.find_by_username(username))

    def get_by_email(self, email: str) -> Dict[str, str]:
        e = validate_email(email)
        with reraise_as_auth_error("get user by email"):
            return _found(self.store.find_by_email(e))

    def update_user(self, user_id: str, fields: Dict[str, Optional[str]]) -> Dict[str, str]:
        with reraise_as_auth_error("update user"):
            return _found(self.store.update_fields(user_id, fields))

    def delete_user(self, user_id: str) -> Dict[str, str]:
        with reraise_as_auth_error("delete user"):
            if not self.store.delete_by_id(user_id):
                raise NotFound()
        return {"message": "User deleted successfully"}
