"""Executes serialized requests against the target API with `requests`."""

import base64
import json
import logging
import time

import requests

from openapi_tryout.config import DEFAULT_TIMEOUT
from openapi_tryout.proxy.url_guard import validate_proxy_url
from openapi_tryout.synth.models import BODY_METHODS, AuthConfig, RequestDescriptor, ResponseModel

logger = logging.getLogger(__name__)


class RequestExecutionError(RuntimeError):
    """Raised when a request is rejected or fails in transport.

    The message is safe to show to the user.
    """


def apply_auth(headers: dict[str, str], auth: AuthConfig) -> dict[str, str]:
    """Return a copy of `headers` with the credentials from `auth` applied."""
    headers = dict(headers)
    if auth.type == "bearer" and auth.token:
        headers["Authorization"] = f"Bearer {auth.token}"
    elif auth.type == "api-key" and auth.api_key:
        headers["X-API-Key"] = auth.api_key
    elif auth.type == "basic" and auth.username and auth.password:
        credentials = base64.b64encode(f"{auth.username}:{auth.password}".encode("utf-8")).decode("ascii")
        headers["Authorization"] = f"Basic {credentials}"
    return headers


def execute_request(
    descriptor: RequestDescriptor,
    timeout: float = DEFAULT_TIMEOUT,
    session: requests.Session | None = None,
) -> ResponseModel:
    """Send `descriptor` and normalize the response.

    Raises RequestExecutionError if the URL is not allowed or the request fails.
    """
    start = time.monotonic()

    validation = validate_proxy_url(descriptor.url)
    if not validation.valid:
        raise RequestExecutionError(f"Invalid URL: {validation.error}")

    method = descriptor.method.upper()
    headers = apply_auth(descriptor.headers, descriptor.auth)
    data = descriptor.body.encode("utf-8") if descriptor.body and method in BODY_METHODS else None

    client = session or requests
    try:
        response = client.request(method, descriptor.url, headers=headers, data=data, timeout=timeout)
    except requests.Timeout as e:
        logger.error("Request timed out: %s %s", method, descriptor.url)
        raise RequestExecutionError(f"Request timeout ({timeout:g}s exceeded)") from e
    except requests.RequestException as e:
        # Headers are left out of the log since they may carry credentials.
        logger.error("Request failed: %s %s: %s", method, descriptor.url, e)
        raise RequestExecutionError(str(e) or "Request failed") from e

    elapsed_ms = int((time.monotonic() - start) * 1000)
    body = _decode_body(response)
    body_text = body if isinstance(body, str) else json.dumps(body, separators=(",", ":"), ensure_ascii=False)

    logger.info("%s %s -> %d in %dms", method, descriptor.url, response.status_code, elapsed_ms)
    return ResponseModel(
        status=response.status_code,
        status_text=response.reason or "",
        time=elapsed_ms,
        size=len(body_text.encode("utf-8")) / 1024,
        headers={k.lower(): v for k, v in response.headers.items()},
        body=body,
    )


def error_response(message: str) -> ResponseModel:
    """The response shown in place of a real one when execution fails."""
    return ResponseModel(
        status=0,
        status_text="Error",
        time=0,
        size=0,
        headers={},
        body={"error": message},
    )


def _decode_body(response: requests.Response):
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError:
            return response.text
    if "text/" in content_type:
        return response.text
    return {"type": content_type, "message": "Binary response (use Download to save)"}
