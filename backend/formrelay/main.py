"""
Form Relay API
FastAPI application that relays website form submissions as email.
"""

import logging
import os

from fastapi import FastAPI

from formrelay.config import get_cors_origins
from formrelay.mailer import email_client
from formrelay.routers import send_form

# Configure logging to output to console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Form Relay API",
    description="Relays website form submissions as HTML email via Resend",
    version="0.1.0",
)

# CORS headers are set by the send-form router itself so that pre-flight
# probes get an empty 200 and errors keep the {"error": ...} shape.
app.include_router(send_form.router, prefix="/api", tags=["send-form"])


@app.on_event("startup")
async def log_startup() -> None:
    """
    Log where the API listens and whether delivery is configured.

    The port shown is taken from ``HOST_PORT`` so Docker-mapped ports are
    reported correctly. Defaults to 8000.
    """
    host_port = os.getenv("HOST_PORT", "8000")
    logger.info(
        "Form Relay API running at http://localhost:%s (delivery %s, origins: %s)",
        host_port,
        "configured" if email_client is not None else "NOT configured",
        ", ".join(get_cors_origins()),
    )


@app.get("/")
async def root():
    return {"message": "Form Relay API", "version": "0.1.0"}


@app.get("/health")
async def health():
    return {"status": "ok"}
