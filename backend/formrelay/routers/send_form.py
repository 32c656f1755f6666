"""
Form submission relay router.

Accepts a JSON form submission from a browser front-end and relays it as an
HTML email through the Resend delivery client.

Environment variables
---------------------
RESEND_API_KEY   Delivery credential. Without it every POST answers 500.
CORS_ORIGINS     Comma-separated origins allowed to call the endpoint, on top
                 of the local dev front-ends.
FORM_SENDER      Sender identity for relayed mail.

Endpoints:
  OPTIONS /send-form   - pre-flight probe, 200 with an empty body
  POST    /send-form   - validate, render and relay one submission
  other   /send-form   - 405 {"error": "Method not allowed"}

Every response from this router carries the CORS headers, and every error
body has the shape {"error": "<message>"}.
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from formrelay.config import MAX_BODY_BYTES, get_cors_origins
from formrelay.mailer import email_client
from formrelay.services.submission import SubmissionError, build_outbound_email

logger = logging.getLogger(__name__)

router = APIRouter()

_ALLOWED_METHODS = "POST, OPTIONS"
_ALLOWED_HEADERS = "Content-Type, Accept"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _cors_headers(origin: Optional[str]) -> dict:
    """
    Build the CORS response headers for a request from `origin`.

    Allowed origins are echoed back; anything else gets the first configured
    origin, which the browser will refuse to match.
    """
    allowed = get_cors_origins()
    allow_origin = origin if origin in allowed else allowed[0]
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Vary": "Origin",
        "Access-Control-Allow-Methods": _ALLOWED_METHODS,
        "Access-Control-Allow-Headers": _ALLOWED_HEADERS,
    }


def _error(status_code: int, message: str, headers: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def _read_json_body(request: Request):
    """
    Read and decode the request body.

    A declared Content-Length over MAX_BODY_BYTES is rejected before any of
    the body is read; otherwise the stream is counted as it arrives. An empty
    body decodes to an empty dict.

    Raises:
        SubmissionError: 413 when the body exceeds MAX_BODY_BYTES,
                         400 when it is not valid JSON.
    """
    # The attachment is the only unbounded field
    content_length = request.headers.get("content-length", "")
    if content_length.isdigit() and int(content_length) > MAX_BODY_BYTES:
        raise SubmissionError(413, "Attachment too large.")

    chunks: list[bytes] = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > MAX_BODY_BYTES:
            raise SubmissionError(413, "Attachment too large.")
        chunks.append(chunk)

    raw = b"".join(chunks)
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except (ValueError, RecursionError):
        raise SubmissionError(400, "Invalid JSON body.")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.options("/send-form")
async def send_form_preflight(request: Request):
    """Answer a browser pre-flight probe with an empty 200."""
    return Response(status_code=200, headers=_cors_headers(request.headers.get("origin")))


@router.post("/send-form")
async def send_form(request: Request):
    """
    Relay one form submission as an email.

    Returns:
        200 {"ok": true, "message": ..., "result": <Resend result>}

    Error responses:
        400 invalid JSON, missing `to` / `form` / `form.email`, malformed attachment
        413 request body or attachment too large
        500 delivery client not configured, or delivery failed
    """
    headers = _cors_headers(request.headers.get("origin"))

    try:
        payload = await _read_json_body(request)

        if email_client is None:
            logger.warning("Rejecting submission: RESEND_API_KEY is not configured")
            return _error(500, "Missing RESEND_API_KEY on server.", headers)

        message = build_outbound_email(payload)
        result = jsonable_encoder(await email_client.send(message))

    except SubmissionError as e:
        return _error(e.status_code, e.message, headers)
    except Exception as e:
        logger.exception(f"Failed to relay form submission: {e}")
        return _error(500, str(e) or "Server error", headers)

    logger.info(
        f"Relayed form submission to {message.to[0]} "
        f"({len(message.attachments)} attachment(s))"
    )
    return JSONResponse(
        status_code=200,
        content={"ok": True, "message": "Email sent.", "result": result},
        headers=headers,
    )


async def send_form_method_not_allowed(request: Request):
    return _error(405, "Method not allowed", _cors_headers(request.headers.get("origin")))


# Registered last with no method list so it matches every method (TRACE,
# PROPFIND, custom verbs) that the routes above did not take.
router.add_route("/send-form", send_form_method_not_allowed, include_in_schema=False)
