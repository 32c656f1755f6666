"""
Shared test setup.

Environment variables are set here, before any test module is collected, so
that formrelay.config and formrelay.mailer see them at import time.
"""

import os

os.environ.setdefault("RESEND_API_KEY", "re_test_key")
