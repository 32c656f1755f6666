"""
Form submission service.

Validates an inbound form submission payload and shapes it into an
OutboundEmail ready for the delivery client.

Public API:
  build_outbound_email(payload: dict, sender: str) -> OutboundEmail
  extract_attachments(attachment) -> list[EmailAttachment]
  render_submission_html(tracking_id, form: dict, meta) -> str

Validation short-circuits on the first failure and raises SubmissionError
carrying the HTTP status and the message returned to the caller. No field
other than `to`, `form` and `form.email` is checked for type or format.
"""

import html
import logging
from typing import Any

from formrelay.config import (
    DEFAULT_SUBJECT,
    FORM_SENDER,
    MAX_ATTACHMENT_BASE64_CHARS,
)
from formrelay.models.submission import EmailAttachment, OutboundEmail

logger = logging.getLogger(__name__)


class SubmissionError(Exception):
    """A client-caused problem with the submission payload."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------

def _is_set(value: Any) -> bool:
    """
    Truthiness as the browser form evaluates JSON values: only null, false,
    0 and "" are unset. Empty lists and objects count as set.
    """
    if isinstance(value, (list, dict)):
        return True
    return bool(value)


def _safe(value: Any) -> str:
    """
    Stringify a display value the way the form front-end would.

    None renders as an empty string, booleans as true/false, integral floats
    without the trailing ".0", lists comma-joined, objects as "[object Object]".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ",".join(_safe(v) for v in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def _field(value: Any) -> str:
    return html.escape(_safe(value))


def render_submission_html(tracking_id: Any, form: dict, meta: Any) -> str:
    """
    Render the notification body for a submission.

    Every interpolated value is null-safe and HTML-escaped. `agree` renders
    as Yes/No by truthiness. An empty tracking ID renders as "-".
    """
    if not isinstance(meta, dict):
        meta = {}

    return f"""
      <h2>New Submission</h2>
      <p><b>Tracking ID:</b> {_field(tracking_id) or "-"}</p>
      <p><b>First Name:</b> {_field(form.get("firstName"))}</p>
      <p><b>Last Name:</b> {_field(form.get("lastName"))}</p>
      <p><b>Email:</b> {_field(form.get("email"))}</p>
      <p><b>Phone:</b> {_field(form.get("phone"))}</p>
      <p><b>City:</b> {_field(form.get("city"))}</p>
      <p><b>Agreed:</b> {"Yes" if _is_set(form.get("agree")) else "No"}</p>
      <hr />
      <p><b>Page URL:</b> {_field(meta.get("url"))}</p>
      <p><b>User Agent:</b> {_field(meta.get("userAgent"))}</p>
      <p><b>Time:</b> {_field(meta.get("timestamp"))}</p>
    """


# ---------------------------------------------------------------------------
# Attachment handling
# ---------------------------------------------------------------------------

def extract_attachments(attachment: Any) -> list[EmailAttachment]:
    """
    Turn an optional {name, dataUrl} object into zero or one EmailAttachment.

    The data URL looks like "data:image/png;base64,iVBORw0...". Only the part
    after the first comma is forwarded, still base64-encoded.

    Raises:
        SubmissionError: 400 when the data URL has no comma,
                         413 when the base64 payload exceeds the ceiling.
    """
    if not isinstance(attachment, dict):
        return []

    name = attachment.get("name")
    data_url = attachment.get("dataUrl")
    if not _is_set(name) or not _is_set(data_url):
        return []

    parts = _safe(data_url).split(",", 1)
    if len(parts) < 2:
        raise SubmissionError(400, "Invalid attachment format.")

    content = parts[1]
    if len(content) > MAX_ATTACHMENT_BASE64_CHARS:
        logger.info(
            f"Rejecting attachment '{name}': {len(content)} base64 chars "
            f"exceeds {MAX_ATTACHMENT_BASE64_CHARS}"
        )
        raise SubmissionError(413, "Attachment too large.")

    return [EmailAttachment(filename=_safe(name), content=content)]


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def build_outbound_email(payload: Any, sender: str = FORM_SENDER) -> OutboundEmail:
    """
    Validate a submission payload and build the email to relay.

    Checks run in order and stop at the first failure:
      1. `to` is a non-empty string
      2. `form` is an object
      3. `form.email` is present and non-empty
      4. the attachment, when both name and dataUrl are given, is well formed
         and within the size ceiling

    A payload that is not a JSON object is treated as empty.

    Raises:
        SubmissionError with the status code and message for the response.
    """
    if not isinstance(payload, dict):
        payload = {}

    to = payload.get("to")
    if not to or not isinstance(to, str):
        raise SubmissionError(400, "Missing or invalid 'to' email.")

    form = payload.get("form")
    if not isinstance(form, dict):
        raise SubmissionError(400, "Missing form data.")

    if not _is_set(form.get("email")):
        raise SubmissionError(400, "Missing form.email.")

    attachments = extract_attachments(payload.get("attachment"))

    subject = payload.get("subject")

    return OutboundEmail(
        sender=sender,
        to=[to],
        subject=_safe(subject) if _is_set(subject) else DEFAULT_SUBJECT,
        html=render_submission_html(
            payload.get("trackingId"), form, payload.get("meta")
        ),
        reply_to=_safe(form.get("email")),
        attachments=attachments,
    )
