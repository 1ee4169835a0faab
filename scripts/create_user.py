#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from blogauth.auth.users import UserStore
from blogauth.config import AuthSettings
from blogauth.errors import AuthError


def main() -> None:
    settings = AuthSettings.from_env()
    store = UserStore(settings.users_path)

    username = input("Username: ").strip()
    email = input("Email: ").strip()

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    try:
        user = store.create(username, email, pw1)
    except AuthError as e:
        raise SystemExit(f"{e.kind}: {e.message}")

    print(f"OK {user.id} -> {store.path}")


if __name__ == "__main__":
    main()
