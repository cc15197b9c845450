"""Serverless entry point for the signup endpoint.

Accepts API Gateway proxy events (REST v1 or HTTP API v2). The store is
created on the first invocation and reused by warm instances.
"""

import base64
import binascii
import json
import logging
from typing import Any, Optional

from waitlist.config import get_settings
from waitlist.logging_config import configure_logging
from waitlist.signup import SignupHandler, SignupRequest, SignupResponse, build_handler

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Accept",
}

_handler: Optional[SignupHandler] = None


def get_handler() -> SignupHandler:
    """Handler cached for the lifetime of the function instance."""
    global _handler
    if _handler is None:
        configure_logging(get_settings().debug)
        _handler = build_handler()
    return _handler


def event_method(event: dict) -> str:
    """HTTP method from a v1 or v2 proxy event."""
    method = event.get("httpMethod")
    if not method:
        method = event.get("requestContext", {}).get("http", {}).get("method", "")
    return method.upper()


def event_body(event: dict) -> Any:
    """Decoded JSON body, or None if missing or malformed."""
    raw = event.get("body")
    if raw is None or isinstance(raw, dict):
        return raw
    try:
        if event.get("isBase64Encoded"):
            raw = base64.b64decode(raw).decode("utf-8")
        return json.loads(raw)
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError):
        logger.debug("Event body is not valid JSON")
        return None


def to_proxy_response(result: SignupResponse) -> dict:
    return {
        "statusCode": result.status_code,
        "headers": {"Content-Type": "application/json", **CORS_HEADERS},
        "body": json.dumps(result.body),
    }


def lambda_handler(event: dict, context: Any = None, handler: Optional[SignupHandler] = None) -> dict:
    """
    Handle one API Gateway proxy event.

    Args:
        event: Proxy event
        context: Lambda context (unused)
        handler: Signup handler override, defaults to the cached one

    Returns:
        Proxy response dict with statusCode, headers and JSON body
    """
    method = event_method(event)
    if method == "OPTIONS":
        return {"statusCode": 204, "headers": dict(CORS_HEADERS), "body": ""}

    body = event_body(event) if method == "POST" else None
    result = (handler or get_handler()).handle(SignupRequest(method=method, body=body))
    return to_proxy_response(result)
