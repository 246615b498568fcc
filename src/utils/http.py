"""
API Gateway helpers shared by the Lambda handlers.
"""

import base64
import json
from typing import Any, Dict

# CORS headers for API Gateway responses
CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
}


def api_response(status_code: int, body: dict, headers: dict = None) -> dict:
    """Build API Gateway proxy response."""
    response_headers = dict(CORS_HEADERS)
    if headers:
        response_headers.update(headers)

    return {
        "statusCode": status_code,
        "headers": response_headers,
        "body": json.dumps(body, default=str),
        "isBase64Encoded": False,
    }


def is_proxy_event(event: Any) -> bool:
    """True for API Gateway proxy events, False for direct invocations."""
    return isinstance(event, dict) and "body" in event


def parse_event_body(event: Any) -> Dict[str, Any]:
    """
    Extract the request payload from a Lambda event.

    Proxy events carry the payload in ``body`` (a JSON string, possibly base64
    encoded, or an already decoded dict). Direct invocations are the payload.

    Raises:
        ValueError: If the body is not valid JSON or not a JSON object
    """
    if not is_proxy_event(event):
        return event if isinstance(event, dict) else {}

    body = event.get("body")
    if body is None or body == "":
        return {}

    if isinstance(body, str):
        if event.get("isBase64Encoded"):
            body = base64.b64decode(body).decode("utf-8")
        body = json.loads(body)

    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return body
