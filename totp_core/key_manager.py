"""
key_manager.py — Secret generation and Base32 handling for TOTP enrollment.

Scope:
- Generate the raw shared secret (20 random bytes).
- Encode / decode it as Base32 (RFC 4648), the form typed into or scanned by
  authenticator apps (Google Authenticator, Authy, ...).
- Format the encoded secret for humans, build the otpauth:// enrollment URI.

Nothing here touches files or the network; storing the secret is the caller's
job. Never log or print the raw secret.
"""

import base64
import binascii
import logging
import os
from urllib.parse import quote, urlencode

from .errors import MalformedSecret, RandomSourceUnavailable

logger = logging.getLogger(__name__)

# --- Config / constants ----------------------------------------------------
SECRET_BYTES = 20           # 160-bit secret, RFC 4226 recommended length
DISPLAY_GROUP_SIZE = 4      # "ABCD EFGH ..." when shown to the user
BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

# otpauth parameters must match totp_engine's wire constants
_URI_ALGORITHM = "SHA1"
_URI_DIGITS = 6
_URI_PERIOD = 60


# --- Generation ------------------------------------------------------------
def generate_secret() -> bytes:
    """
    Generate a new raw secret from the OS CSPRNG.

    Returns:
        bytes: SECRET_BYTES random bytes

    Raises:
        RandomSourceUnavailable: the platform has no usable randomness source
    """
    try:
        raw = os.urandom(SECRET_BYTES)
    except (NotImplementedError, OSError) as e:
        raise RandomSourceUnavailable("secure random source is not available") from e
    logger.debug("Generated %d-bit secret", SECRET_BYTES * 8)
    return raw


def generate_encoded_secret() -> str:
    """Shortcut for encode_secret(generate_secret())."""
    return encode_secret(generate_secret())


# --- Base32 ----------------------------------------------------------------
def encode_secret(key: bytes) -> str:
    """
    Encode a raw secret as uppercase Base32 without '=' padding.

    A 20-byte secret always gives 32 characters, so nothing is lost by dropping
    the padding; shorter keys are re-padded by decode_secret().
    """
    return base64.b32encode(bytes(key)).decode("ascii").rstrip("=")


def decode_secret(encoded: str) -> bytes:
    """
    Decode a Base32 secret back to raw bytes.

    - Case-insensitive ("jbswy3dp" == "JBSWY3DP").
    - Trailing '=' padding is optional.
    - Spaces are NOT stripped here: format_for_display() output must be
      un-grouped by the caller.

    Arguments:
        encoded: Base32 secret

    Raises:
        MalformedSecret: invalid character, impossible length, or empty secret
    """
    stripped = encoded.rstrip("=")
    if not stripped:
        raise MalformedSecret("secret is empty")
    padded = stripped + "=" * (-len(stripped) % 8)
    try:
        return base64.b32decode(padded, casefold=True)
    except (binascii.Error, ValueError) as e:
        # binascii.Error: bad digit / padding, ValueError: non-ASCII input
        raise MalformedSecret("invalid Base32 secret") from e


# --- Display / enrollment --------------------------------------------------
def format_for_display(encoded: str) -> str:
    """
    Group an encoded secret in blocks of four for manual transcription.

    >>> format_for_display("jbswy3dpehpk3pxp")
    'JBSW Y3DP EHPK 3PXP'

    Whitespace already present is dropped first, so formatting twice gives
    the same result. The last group may be shorter than four characters.
    """
    compact = "".join(encoded.split()).upper()
    return " ".join(
        compact[i:i + DISPLAY_GROUP_SIZE]
        for i in range(0, len(compact), DISPLAY_GROUP_SIZE)
    )


def format_otpauth_uri(encoded: str, account: str, issuer: str) -> str:
    """
    Build the otpauth:// URI used to enroll the secret in an authenticator app.

    - Format: otpauth://totp/{issuer}:{account}?secret=...&issuer=...
      &algorithm=SHA1&digits=6&period=60
    - Label and query values are percent-encoded (spaces as %20).
    - The secret is normalized to compact uppercase Base32.

    Arguments:
        encoded: Base32 secret (grouped display form is accepted too)
        account: account label, e.g. 'alice@example.com'
        issuer: issuer label, e.g. 'MyService'

    Returns:
        str: provisioning URI (render it as a QR code elsewhere)
    """
    secret = "".join(encoded.split()).upper().rstrip("=")
    label = quote(issuer) + ":" + quote(account)
    params = {
        "secret": secret,
        "issuer": issuer,
        "algorithm": _URI_ALGORITHM,
        "digits": _URI_DIGITS,
        "period": _URI_PERIOD,
    }
    return "otpauth://totp/{0}?{1}".format(label, urlencode(params).replace("+", "%20"))
