# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

# Anchor the default users.yml path to the project root (works well with editable installs).
BASE_DIR = Path(__file__).resolve().parents[2]
DEFAULT_USERS_PATH = BASE_DIR / "data" / "users.yml"

_DURATION_RE = re.compile(r"^(\d+)\s*([smhd]?)$")
_UNIT_SECONDS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value: str) -> int:
    """Parse '900', '15m', '1h' or '7d' into seconds."""
    s = str(value or "").strip().lower()
    m = _DURATION_RE.match(s)
    if not m:
        raise ValueError(f"Invalid duration: {value!r}")
    seconds = int(m.group(1)) * _UNIT_SECONDS[m.group(2)]
    if seconds <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    return seconds


def _first(env: Mapping[str, str], *names: str) -> str:
    for n in names:
        v = (env.get(n) or "").strip()
        if v:
            return v
    return ""


@dataclass(frozen=True)
class AuthSettings:
    secret_key: str
    access_token_seconds: int = 15 * 60
    refresh_token_seconds: int = 7 * 86400
    environment: str = "development"
    users_path: Path = DEFAULT_USERS_PATH

    @property
    def cookie_secure(self) -> bool:
        return self.environment.strip().lower() == "production"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "AuthSettings":
        env = os.environ if env is None else env
        return cls(
            secret_key=_first(env, "BLOGAUTH_SECRET_KEY", "SECRET_KEY", "TOKEN_SECRET"),
            access_token_seconds=parse_duration(_first(env, "ACCESS_TOKEN_EXPIRATION") or "15m"),
            refresh_token_seconds=parse_duration(_first(env, "REFRESH_TOKEN_EXPIRATION") or "7d"),
            environment=_first(env, "BLOGAUTH_ENV", "NODE_ENV") or "development",
            users_path=Path(_first(env, "BLOGAUTH_USERS_PATH") or str(DEFAULT_USERS_PATH)).resolve(),
        )
