"""Waitlist signup endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from waitlist.schemas import JoinWaitlistRequest, SignupResult
from waitlist.signup import SignupHandler, SignupRequest
from waitlist.store import WaitlistStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter()

# Every method is routed here so that non-POST requests get the JSON 405 body;
# CORS preflights are answered by CORSMiddleware before reaching the route
SIGNUP_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

SIGNUP_RESPONSES = {
    400: {"model": SignupResult, "description": "Invalid or missing email"},
    405: {"model": SignupResult, "description": "Method other than POST"},
    500: {"model": SignupResult, "description": "Store unavailable or write failed"},
}


def get_signup_handler(store: WaitlistStore = Depends(get_store)) -> SignupHandler:
    """Dependency providing a handler bound to the process-wide store."""
    return SignupHandler(store)


async def read_json_body(request: Request) -> Any:
    """Decoded JSON body, or None if the body is empty or not JSON."""
    if request.method.upper() != "POST":
        return None
    try:
        return await request.json()
    except ValueError:
        logger.debug("Request body is not valid JSON")
        return None


async def _join_waitlist(request: Request, handler: SignupHandler) -> JSONResponse:
    body = await read_json_body(request)
    # pymongo is blocking; keep it off the event loop
    result = await run_in_threadpool(
        handler.handle, SignupRequest(method=request.method, body=body)
    )
    return JSONResponse(status_code=result.status_code, content=result.body)


@router.api_route(
    "/join-waitlist",
    methods=SIGNUP_METHODS,
    response_model=SignupResult,
    responses=SIGNUP_RESPONSES,
    openapi_extra={
        "requestBody": {
            "content": {
                "application/json": {"schema": JoinWaitlistRequest.model_json_schema()}
            }
        }
    },
)
async def join_waitlist(
    request: Request,
    handler: SignupHandler = Depends(get_signup_handler),
) -> JSONResponse:
    """Add an email to the waitlist."""
    return await _join_waitlist(request, handler)


@router.api_route(
    "/api/join-waitlist",
    methods=SIGNUP_METHODS,
    response_model=SignupResult,
    responses=SIGNUP_RESPONSES,
    include_in_schema=False,
)
async def join_waitlist_api_path(
    request: Request,
    handler: SignupHandler = Depends(get_signup_handler),
) -> JSONResponse:
    """Same endpoint under the path the serverless deployment uses."""
    return await _join_waitlist(request, handler)
