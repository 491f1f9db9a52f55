"""
totp_core package
=================

Time-based One-Time Passwords (RFC 6238) for two-factor authentication:
secret generation, Base32 handling and window-tolerant verification.

──────────────────────────────────────────────
Core algorithm
──────────────────────────────────────────────
- HOTP (RFC 4226):
  code = Truncate(HMAC-SHA1(key=secret, msg=counter)) mod 10^digits

- TOTP (RFC 6238):
  HOTP with counter = floor(unix_time / 60)
  → 60-second step, 6 digits, SHA-1 (fixed: authenticator apps expect these).

- Verification:
  Accept the code of any step within ±4 steps of "now" (clock drift).

──────────────────────────────────────────────
Usage
──────────────────────────────────────────────
Enrollment (show the secret to the user once, store it yourself):

    >>> from totp_core import generate_encoded_secret, format_for_display
    >>> secret = generate_encoded_secret()
    >>> print(format_for_display(secret))      # "ABCD EFGH ..."

Login (the current time is always passed in):

    >>> import time
    >>> from totp_core import decode_secret, verify_code
    >>> verify_code(decode_secret(secret), user_input, time.time())

The package logs through the standard `logging` module under the
"totp_core" logger and stays silent unless the application configures it.
Secrets and codes are never logged.
"""

import logging

from .errors import (
    HmacAlgorithmUnavailable,
    MalformedSecret,
    RandomSourceUnavailable,
    TotpError,
    UnsupportedDigitCount,
)
from .key_manager import (
    SECRET_BYTES,
    decode_secret,
    encode_secret,
    format_for_display,
    format_otpauth_uri,
    generate_encoded_secret,
    generate_secret,
)
from .totp_engine import (
    CODE_DIGITS,
    STEP_INTERVAL,
    VERIFY_WINDOW,
    compute_code,
    current_code,
    current_time_step,
    find_matching_step,
    format_code,
    is_valid_code,
    seconds_remaining,
    verify_code,
)

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "CODE_DIGITS",
    "SECRET_BYTES",
    "STEP_INTERVAL",
    "VERIFY_WINDOW",
    "HmacAlgorithmUnavailable",
    "MalformedSecret",
    "RandomSourceUnavailable",
    "TotpError",
    "UnsupportedDigitCount",
    "compute_code",
    "current_code",
    "current_time_step",
    "decode_secret",
    "encode_secret",
    "find_matching_step",
    "format_code",
    "format_for_display",
    "format_otpauth_uri",
    "generate_encoded_secret",
    "generate_secret",
    "is_valid_code",
    "seconds_remaining",
    "verify_code",
]
