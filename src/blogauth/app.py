# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from blogauth.auth.session import SessionTransport
from blogauth.auth.tokens import TokenIssuer
from blogauth.auth.users import UserStore
from blogauth.config import AuthSettings
from blogauth.errors import AuthError, InternalError, ValidationError
from blogauth.services.auth_service import AuthService
from blogauth.services.user_service import UserService

logger = logging.getLogger(__name__)


class RegisterBody(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginBody(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class UpdateBody(BaseModel):
    model_config = {"extra": "allow"}

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


def _auth(request: Request) -> AuthService:
    return request.app.state.auth_service


def _users(request: Request) -> UserService:
    return request.app.state.user_service


# ------------------ Routes ------------------

# Handlers are plain `def`: Starlette runs them in its thread pool, which keeps
# argon2 hashing off the event loop.
router = APIRouter(prefix="/user", tags=["users"])


@router.post("/register", status_code=201)
def register(request: Request, body: Optional[RegisterBody] = None):
    b = body or RegisterBody()
    return _auth(request).register(b.username, b.email, b.password)


@router.post("/login")
def login(request: Request, response: Response, body: Optional[LoginBody] = None):
    b = body or LoginBody()
    return _auth(request).login(b.username, b.password, response)


@router.post("/logout")
def logout(request: Request, response: Response):
    return _auth(request).logout(response)


@router.get("")
def list_users(request: Request):
    return _users(request).list_users()


@router.get("/username/{username}")
def get_user_by_username(request: Request, username: str):
    return _users(request).get_by_username(username)


@router.get("/email/{email}")
def get_user_by_email(request: Request, email: str):
    return _users(request).get_by_email(email)


@router.get("/{user_id}")
def get_user(request: Request, user_id: str):
    return _users(request).get_user(user_id)


@router.put("/{user_id}")
def update_user(request: Request, user_id: str, body: Optional[UpdateBody] = None):
    fields = body.model_dump(exclude_none=True) if body else {}
    return _users(request).update_user(user_id, fields)


@router.delete("/{user_id}")
def delete_user(request: Request, user_id: str):
    return _users(request).delete_user(user_id)


# ------------------ Error handlers ------------------


async def _auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    err = ValidationError("Malformed request body.")
    return JSONResponse(err.to_dict(), status_code=err.status_code)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    err = InternalError()
    return JSONResponse(err.to_dict(), status_code=err.status_code)


def create_app(settings: Optional[AuthSettings] = None) -> FastAPI:
    """Build the app. Raises SigningError when no usable secret is configured."""
    settings = settings or AuthSettings.from_env()
    issuer = TokenIssuer(settings)
    store = UserStore(settings.users_path)

    app = FastAPI(title="blogauth")
    app.state.settings = settings
    app.state.token_issuer = issuer
    app.state.user_store = store
    app.state.auth_service = AuthService(store, issuer, SessionTransport(settings))
    app.state.user_service = UserService(store)

    app.add_exception_handler(AuthError, _auth_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
    app.include_router(router)

    logger.info(
        "blogauth ready (users=%s, env=%s, secure_cookies=%s)",
        settings.users_path,
        settings.environment,
        settings.cookie_secure,
    )
    return app
