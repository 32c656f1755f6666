"""
Runtime configuration.

Values come from the process environment, optionally seeded from a .env file.
The delivery credential is never hardcoded; when RESEND_API_KEY is missing the
relay refuses to send (see formrelay.mailer).
"""

import os
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

RESEND_API_KEY: Optional[str] = os.getenv("RESEND_API_KEY") or None

FORM_SENDER = os.getenv("FORM_SENDER", "Forms <onboarding@resend.dev>")

DEFAULT_SUBJECT = "New Submission"

# Base64 characters, not decoded bytes
MAX_ATTACHMENT_BASE64_CHARS = 12_000_000

MAX_BODY_BYTES = 10 * 1024 * 1024

_DEFAULT_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3001",
]


def get_cors_origins() -> List[str]:
    """
    Build the explicit list of origins allowed to call the relay.

    Always includes the local dev front-ends (ports 3000 and 3001). Extra
    origins are read from CORS_ORIGINS as a comma-separated list, e.g.:
        CORS_ORIGINS=https://aichallenge.framer.website,https://forms.example.com

    Duplicates are removed while preserving order.
    """
    extra_origins: List[str] = []
    cors_env = os.getenv("CORS_ORIGINS", "").strip()
    if cors_env:
        extra_origins = [o.strip() for o in cors_env.split(",") if o.strip()]

    seen: set = set()
    origins: List[str] = []
    for origin in _DEFAULT_ORIGINS + extra_origins:
        if origin not in seen:
            seen.add(origin)
            origins.append(origin)

    return origins
