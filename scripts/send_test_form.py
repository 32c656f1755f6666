#!/usr/bin/env python3
"""
Dev helper: send a test form submission to the local Form Relay backend.

Builds a submission payload like the one the website form posts, optionally
attaches a real image as a data URL, and POSTs it to /api/send-form.

Usage
-----
# Basic submission without an attachment, targeting localhost:8000
python scripts/send_test_form.py --to you@example.com

# Attach an image
python scripts/send_test_form.py --to you@example.com --file photo.png

# Target a different backend URL
python scripts/send_test_form.py --to you@example.com --url http://staging.example.com

# Print the payload instead of sending it
python scripts/send_test_form.py --to you@example.com --dry-run

Environment / .env
------------------
FORM_TEST_TO   Default recipient when --to is not given.
"""

import argparse
import base64
import json
import mimetypes
import os
import sys
import textwrap
import uuid
from datetime import datetime, timezone
from pathlib import Path

import httpx
from dotenv import load_dotenv


# ---------------------------------------------------------------------------
# Payload builder
# ---------------------------------------------------------------------------

def _to_data_url(path: Path) -> str:
    """Encode a file as data:<mime>;base64,<payload>."""
    mime = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return f"data:{mime};base64,{base64.b64encode(path.read_bytes()).decode()}"


def _build_payload(args: argparse.Namespace) -> dict:
    payload = {
        "to": args.to,
        "subject": args.subject,
        "trackingId": f"test-{uuid.uuid4().hex[:8]}",
        "form": {
            "firstName": args.first_name,
            "lastName": args.last_name,
            "email": args.email,
            "phone": "+1 555 0100",
            "city": "Springfield",
            "agree": True,
        },
        "meta": {
            "url": "http://localhost:3000/contact",
            "userAgent": "send_test_form.py",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    }
    if args.file:
        path = Path(args.file)
        payload["attachment"] = {"name": path.name, "dataUrl": _to_data_url(path)}
    return payload


# ---------------------------------------------------------------------------
# Pretty printer
# ---------------------------------------------------------------------------

def _print_response(response: httpx.Response) -> None:
    status = response.status_code
    symbol = "OK" if status == 200 else "FAIL"
    print(f"\n[{symbol}] HTTP {status}")
    try:
        print(json.dumps(response.json(), indent=2))
    except ValueError:
        print(response.text)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> int:
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    load_dotenv(project_root / "backend" / ".env")

    parser = argparse.ArgumentParser(
        prog="send_test_form.py",
        description="Send a test form submission to the Form Relay backend.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            Examples:
              python scripts/send_test_form.py --to you@example.com
              python scripts/send_test_form.py --to you@example.com --file photo.png
              python scripts/send_test_form.py --to you@example.com --dry-run
        """),
    )
    parser.add_argument(
        "--url",
        default="http://localhost:8000",
        help="Backend base URL (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--to",
        default=os.getenv("FORM_TEST_TO"),
        help="Recipient mailbox (default: FORM_TEST_TO env var)",
    )
    parser.add_argument("--subject", default="Test Submission")
    parser.add_argument("--first-name", default="Jane")
    parser.add_argument("--last-name", default="Doe")
    parser.add_argument(
        "--email",
        default="jane.doe@example.com",
        help="Submitter address, used as Reply-To (default: jane.doe@example.com)",
    )
    parser.add_argument(
        "--file",
        default=None,
        metavar="PATH",
        help="Image to attach as a data URL.",
    )
    parser.add_argument(
        "--origin",
        default="http://localhost:3000",
        help="Origin header to send (default: http://localhost:3000)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the payload JSON without sending it.",
    )

    args = parser.parse_args()

    if not args.to:
        print("ERROR: No recipient. Pass --to or set FORM_TEST_TO.", file=sys.stderr)
        return 1
    if args.file and not Path(args.file).exists():
        print(f"ERROR: File not found: {args.file}", file=sys.stderr)
        return 1

    payload = _build_payload(args)
    endpoint = f"{args.url.rstrip('/')}/api/send-form"

    print(f"Endpoint  : {endpoint}")
    print(f"To        : {args.to}")
    print(f"Reply-To  : {args.email}")
    print(f"Attachment: {args.file or '(none)'}")

    if args.dry_run:
        display = dict(payload)
        if "attachment" in display:
            data_url = display["attachment"]["dataUrl"]
            display["attachment"] = {
                **display["attachment"],
                "dataUrl": "<data URL, %d chars>" % len(data_url),
            }
        print("\n[DRY RUN] Payload:")
        print(json.dumps(display, indent=2))
        return 0

    try:
        response = httpx.post(
            endpoint,
            json=payload,
            headers={"Origin": args.origin, "Accept": "application/json"},
            timeout=60.0,
        )
    except httpx.HTTPError as e:
        print(f"\n[FAIL] Request error: {e}", file=sys.stderr)
        return 1

    _print_response(response)
    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
