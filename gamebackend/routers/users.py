from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from ..auth_utils import fail, get_registry, read_password
from ..constants import SESSION_COOKIE
from ..errors import BodyReadError, RegistryError
from ..registry import UserRegistry

router = APIRouter(prefix="", tags=["users"])
logger = logging.getLogger(__name__)


@router.post("/signup/{user_id}", response_class=PlainTextResponse)
async def signup(user_id: str, request: Request, registry: UserRegistry = Depends(get_registry)):
    try:
        password = await read_password(request)
    except BodyReadError as exc:
        return fail("Read Body Error", exc)

    try:
        await run_in_threadpool(registry.register, user_id, password)
    except RegistryError as exc:
        return fail("SignUp Error", exc)

    logger.info("Joined a new user id=%s", user_id)
    return PlainTextResponse(f"Hello, {user_id}!\n")


@router.post("/login/{user_id}", response_class=PlainTextResponse)
async def login(user_id: str, request: Request, registry: UserRegistry = Depends(get_registry)):
    try:
        password = await read_password(request)
    except BodyReadError as exc:
        return fail("Read Body Error", exc)

    try:
        view = await run_in_threadpool(registry.authenticate, user_id, password)
    except RegistryError as exc:
        return fail("Login Error", exc)

    response = PlainTextResponse(f"Login Success\nUID : {view.uid}\n")
    response.set_cookie(
        SESSION_COOKIE,
        view.session_id,
        path="/",
        httponly=True,
        secure=request.app.state.settings.secure_cookie,
    )
    logger.info("User logged in id=%s uid=%s", user_id, view.uid)
    return response
