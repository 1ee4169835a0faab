# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication core.

This package provides:
- Password hashing/verification (argon2)
- User store persisted in data/users.yml
- Signed access/refresh tokens (itsdangerous)
- Session cookies carrying those tokens
"""
