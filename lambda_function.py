"""AWS Lambda entry point for DMN decision execution."""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any

from config import configure_logging, get_settings
from decision_engine.coercion import decode_payload
from decision_engine.handler import RequestHandler
from models.schemas import DmnResponse


configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

_handler: RequestHandler | None = None


def get_handler() -> RequestHandler:
    """Request handler reused across warm invocations."""
    global _handler
    if _handler is None:
        _handler = RequestHandler()
    return _handler


def _is_proxy_event(event: Any) -> bool:
    return isinstance(event, dict) and isinstance(event.get("body"), str)


def _read_body(event: dict[str, Any]) -> Any:
    body = event["body"]
    if event.get("isBase64Encoded"):
        body = base64.b64decode(body).decode("utf-8")
    return decode_payload(body)


def _proxy_response(response: DmnResponse) -> dict[str, Any]:
    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(response.to_payload(), default=str),
    }


def lambda_handler(event: Any, context: Any) -> dict[str, Any]:
    """
    Execute a DMN decision for a Lambda event.

    Direct invocations pass the request object as the event and get the
    response envelope back. Proxy invocations (API Gateway, function URLs)
    carry the request as a JSON body and get an HTTP response wrapping it.
    """
    request_id = getattr(context, "aws_request_id", None)
    if request_id:
        logger.info("Lambda request id: %s", request_id)

    if not _is_proxy_event(event):
        return get_handler().handle(event).to_payload()

    try:
        payload = _read_body(event)
    except (json.JSONDecodeError, binascii.Error, UnicodeDecodeError) as e:
        logger.error("Request body could not be decoded: %s", e)
        return _proxy_response(DmnResponse.failure(f"Request body is not valid JSON: {e}"))

    return _proxy_response(get_handler().handle(payload))
