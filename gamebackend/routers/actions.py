from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from ..auth_utils import fail, get_registry, get_session_id, parse_uid
from ..errors import CookieMissing, NumberParseError, RegistryError
from ..registry import UserRegistry

router = APIRouter(prefix="", tags=["actions"])
logger = logging.getLogger(__name__)


# Plain ``def``: FastAPI runs it on the threadpool, one worker per request.
@router.get("/action/{uid}/{action}", response_class=PlainTextResponse)
def perform_action(uid: str, action: str, request: Request, registry: UserRegistry = Depends(get_registry)):
    try:
        session_id = get_session_id(request)
    except CookieMissing as exc:
        return fail("Cookie Error", exc)

    try:
        numeric_uid = parse_uid(uid)
    except NumberParseError as exc:
        return fail("Int Parse Error", exc)

    try:
        count = registry.perform_action(action, numeric_uid, session_id)
    except RegistryError as exc:
        return fail("Ping Error", exc)

    logger.info("Done action %s uid=%s count=%s", action, numeric_uid, count)
    return PlainTextResponse(f"[Ping:{count}] Done Action {action}\n")
