# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import os
import secrets
import threading
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import yaml

from blogauth.auth.passwords import hash_password
from blogauth.core.validation import validate_registration, validate_update
from blogauth.errors import DuplicateIdentity, PersistenceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserRecord:
    id: str
    username: str
    email: str
    password_hash: str

    def public_dict(self) -> Dict[str, str]:
        return {"id": self.id, "username": self.username, "email": self.email}


def _email_key(email: str) -> str:
    return (email or "").strip().casefold()


def _load_users_file(path: Path) -> Dict[str, UserRecord]:
    if not path.exists():
        return {}
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    users = (raw.get("users") or {}) if isinstance(raw, dict) else {}
    out: Dict[str, UserRecord] = {}
    for uid, udata in users.items():
        if not isinstance(udata, dict):
            continue
        user_id = str(uid).strip()
        username = str(udata.get("username") or "").strip()
        if not user_id or not username:
            continue
        out[user_id] = UserRecord(
            id=user_id,
            username=username,
            email=str(udata.get("email") or "").strip(),
            password_hash=str(udata.get("password_hash") or "").strip(),
        )
    return out


def _dump_users_file(path: Path, users: Dict[str, UserRecord]) -> None:
    raw = {
        "version": 1,
        "users": {
            u.id: {"username": u.username, "email": u.email, "password_hash": u.password_hash}
            for u in users.values()
        },
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + f".tmp_{secrets.token_hex(4)}")
    try:
        tmp.write_text(yaml.safe_dump(raw, sort_keys=False, allow_unicode=True), encoding="utf-8")
        os.replace(tmp, path)
    finally:
        tmp.unlink(missing_ok=True)


class UserStore:
    """Users persisted in a YAML file.

    Lookups reload the file only when its mtime changes. Every
    check-then-write sequence runs under one lock, so uniqueness holds for
    concurrent requests within the process. Passwords go through ``hasher``
    before anything is written; the plaintext is never kept.
    """

    def __init__(self, path: Path, *, hasher: Callable[[str], str] = hash_password) -> None:
        self.path = Path(path)
        self._hasher = hasher
        self._lock = threading.RLock()
        self._cache: Tuple[float, Dict[str, UserRecord]] = (0.0, {})

    # ------------------ storage ------------------

    def _read(self) -> Dict[str, UserRecord]:
        try:
            mtime = self.path.stat().st_mtime if self.path.exists() else 0.0
            cached_mtime, cached_users = self._cache
            if mtime and mtime == cached_mtime and cached_users:
                return dict(cached_users)
            users = _load_users_file(self.path)
        except (OSError, UnicodeDecodeError, yaml.YAMLError, AttributeError) as e:
            logger.error("Could not read users file %s: %s", self.path, type(e).__name__)
            raise PersistenceError() from e
        self._cache = (mtime, users)
        return dict(users)

    def _write(self, users: Dict[str, UserRecord]) -> None:
        try:
            _dump_users_file(self.path, users)
            mtime = self.path.stat().st_mtime
        except (OSError, yaml.YAMLError) as e:
            logger.error("Could not write users file %s: %s", self.path, type(e).__name__)
            raise PersistenceError() from e
        self._cache = (mtime, dict(users))

    # ------------------ lookups ------------------

    def list_users(self) -> List[UserRecord]:
        return list(self._read().values())

    def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        uid = (user_id or "").strip()
        if not uid:
            return None
        return self._read().get(uid)

    def find_by_username(self, username: str) -> Optional[UserRecord]:
        u = (username or "").strip()
        if not u:
            return None
        return next((r for r in self._read().values() if r.username == u), None)

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        key = _email_key(email)
        if not key:
            return None
        return next((r for r in self._read().values() if _email_key(r.email) == key), None)

    # ------------------ mutations ------------------

    @staticmethod
    def _check_unique(
        users: Dict[str, UserRecord], *, username: str = "", email: str = "", exclude_id: str = ""
    ) -> None:
        # Email first, then username.
        others = [u for u in users.values() if u.id != exclude_id]
        if email and any(_email_key(u.email) == _email_key(email) for u in others):
            raise DuplicateIdentity()
        if username and any(u.username == username for u in others):
            raise DuplicateIdentity()

    def create(self, username: str, email: str, password: str) -> UserRecord:
        data = validate_registration(username, email, password)
        password_hash = self._hasher(data["password"])
        with self._lock:
            users = self._read()
            self._check_unique(users, username=data["username"], email=data["email"])
            record = UserRecord(
                id=secrets.token_hex(12),
                username=data["username"],
                email=data["email"],
                password_hash=password_hash,
            )
            users[record.id] = record
            self._write(users)
        logger.info("User created: %s", record.username)
        return record

    def update_fields(self, user_id: str, fields: Dict[str, Optional[str]]) -> Optional[UserRecord]:
        data = validate_update(fields)
        changes: Dict[str, str] = {}
        if "username" in data:
            changes["username"] = data["username"]
        if "email" in data:
            changes["email"] = data["email"]
        if "password" in data:
            changes["password_hash"] = self._hasher(data["password"])

        with self._lock:
            users = self._read()
            current = users.get((user_id or "").strip())
            if current is None:
                return None
            self._check_unique(
                users,
                username=changes.get("username", ""),
                email=changes.get("email", ""),
                exclude_id=current.id,
            )
            updated = replace(current, **changes)
            users[current.id] = updated
            self._write(users)
        logger.info("User updated: %s (%s)", updated.username, ", ".join(sorted(data)))
        return updated

    def delete_by_id(self, user_id: str) -> bool:
        with self._lock:
            users = self._read()
            removed = users.pop((user_id or "").strip(), None)
            if removed is None:
                return False
            self._write(users)
        logger.info("User deleted: %s", removed.username)
        return True
