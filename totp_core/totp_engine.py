"""
totp_engine.py — RFC 6238 TOTP computation and verification.

Pure functions: every time-dependent call takes the current Unix time as an
argument (`now`), so the engine never reads the clock itself and is trivially
testable against fixed timestamps. Only current_code() / is_valid_code() read
a clock, and even there it is injectable.

Algorithm (RFC 6238 on top of RFC 4226):
    step  = floor(now / STEP_INTERVAL)
    hash  = HMAC-SHA1(key=secret, msg=step as 8-byte big-endian)
    code  = DynamicTruncate(hash) mod 10^digits

Wire constants (STEP_INTERVAL, CODE_DIGITS, HMAC_ALGORITHM) must match the
authenticator app exactly; changing them breaks every enrolled device.
"""

import hmac
import logging
import struct
import time
from typing import Callable, Optional, Union

from .errors import HmacAlgorithmUnavailable, UnsupportedDigitCount
from .key_manager import decode_secret

logger = logging.getLogger(__name__)

# --- Config / constants ----------------------------------------------------
STEP_INTERVAL = 60          # seconds per time step
CODE_DIGITS = 6             # length of the displayed code
HMAC_ALGORITHM = "sha1"     # hashlib name, HMAC-SHA1 as in RFC 6238 / Google Authenticator
VERIFY_WINDOW = 4           # accepted step drift in each direction
DIGITS_POWER = tuple(10 ** n for n in range(9))     # supported digit counts: 0..8

PresentedCode = Union[int, str]


# --- RFC helpers -----------------------------------------------------------
def step_to_bytes(step: int) -> bytes:
    """
    Serialize a time step as the 8-byte big-endian HMAC message.

    Example: step_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
    """
    try:
        return struct.pack(">q", step)
    except struct.error as e:
        raise ValueError("time step does not fit in 64 bits: {}".format(step)) from e


def dynamic_truncate(digest: bytes) -> int:
    """
    RFC 4226 dynamic truncation.

    - offset = low nibble of the last byte (0..15, always inside a 20-byte digest)
    - take 4 bytes from offset, clear the top bit of the first one
    - result is an unsigned 31-bit integer
    """
    offset = digest[-1] & 0x0F
    return (
        ((digest[offset] & 0x7F) << 24)
        | ((digest[offset + 1] & 0xFF) << 16)
        | ((digest[offset + 2] & 0xFF) << 8)
        | (digest[offset + 3] & 0xFF)
    )


def _check_digits(digits: int) -> None:
    if isinstance(digits, bool) or not isinstance(digits, int) or not 0 <= digits < len(DIGITS_POWER):
        raise UnsupportedDigitCount(
            "digits must be an integer between 0 and {}, got {!r}".format(len(DIGITS_POWER) - 1, digits)
        )


# --- Time ------------------------------------------------------------------
def current_time_step(now: float) -> int:
    """Return floor(now / STEP_INTERVAL) for Unix time `now` (UTC seconds)."""
    return int(now // STEP_INTERVAL)


def seconds_remaining(now: float) -> int:
    """Seconds left before the code for `now` rolls over (1..STEP_INTERVAL)."""
    return STEP_INTERVAL - int(now) % STEP_INTERVAL


# --- Codes -----------------------------------------------------------------
def compute_code(secret: bytes, step: int, digits: int = CODE_DIGITS) -> int:
    """
    Compute the one-time code of `secret` for a given time step.

    Steps:
    1. Message = 8-byte big-endian step
    2. HMAC-SHA1(key=secret, message)
    3. Dynamic truncate -> 31-bit integer
    4. code = value % 10^digits

    Arguments:
        secret: raw secret bytes (decode_secret() output)
        step: time step, see current_time_step()
        digits: code length, 0..8

    Returns:
        int: the code; use format_code() to get the zero-padded string

    Raises:
        UnsupportedDigitCount: digits outside 0..8
        HmacAlgorithmUnavailable: SHA-1 HMAC is not available on this platform
    """
    _check_digits(digits)
    msg = step_to_bytes(step)
    try:
        digest = hmac.new(bytes(secret), msg, HMAC_ALGORITHM).digest()
    except ValueError as e:
        raise HmacAlgorithmUnavailable("HMAC-{} is not available".format(HMAC_ALGORITHM.upper())) from e
    return dynamic_truncate(digest) % DIGITS_POWER[digits]


def format_code(code: int, digits: int = CODE_DIGITS) -> str:
    """Render a code with leading zeros, e.g. 4321 -> '004321'."""
    _check_digits(digits)
    return str(code).zfill(digits)


def _normalize_code(presented: PresentedCode, digits: int) -> Optional[str]:
    # Returns the zero-padded form, or None when the input cannot be a valid code.
    if isinstance(presented, bool):
        return None
    if isinstance(presented, int):
        value = presented
    elif isinstance(presented, str):
        text = presented.strip()
        if not text or not text.isascii() or not text.isdigit():
            return None
        value = int(text)
    else:
        return None
    if not 0 <= value < DIGITS_POWER[digits]:
        return None
    return format_code(value, digits)


# --- Verification ----------------------------------------------------------
def find_matching_step(
    secret: bytes,
    presented_code: PresentedCode,
    now: float,
    window: int = VERIFY_WINDOW,
) -> Optional[int]:
    """
    Look for the time step whose code equals `presented_code`.

    Probes steps current-window .. current+window in that order and stops at
    the first match. Codes are compared on their zero-padded form, so 12345,
    "12345" and "012345" are the same 6-digit code.

    The same code stays valid for the whole window; to make codes single-use,
    remember the returned step and reject anything <= it on the next call.

    Returns:
        int | None: the matched step, or None if nothing in the window matches
    """
    if window < 0:
        raise ValueError("window must be non-negative")
    expected_form = _normalize_code(presented_code, CODE_DIGITS)
    current = current_time_step(now)
    if expected_form is None:
        logger.debug("Rejected non-numeric or out-of-range code at step=%d", current)
        return None

    for offset in range(-window, window + 1):
        candidate = format_code(compute_code(secret, current + offset), CODE_DIGITS)
        if hmac.compare_digest(candidate, expected_form):
            logger.debug("TOTP match at step=%d (offset %+d)", current + offset, offset)
            return current + offset
    logger.debug("No TOTP match within +/-%d steps of step=%d", window, current)
    return None


def verify_code(
    secret: bytes,
    presented_code: PresentedCode,
    now: float,
    window: int = VERIFY_WINDOW,
) -> bool:
    """
    Check a user-supplied code against `secret` at time `now`.

    Returns True if the code matches any step within +/-window of the current
    step, False otherwise. A wrong or garbled code is never an exception.
    """
    return find_matching_step(secret, presented_code, now, window) is not None


# --- Base32 convenience wrappers ------------------------------------------
def current_code(encoded_secret: str, clock: Callable[[], float] = time.time) -> int:
    """
    Current 6-digit code for a Base32 secret.

    Raises:
        MalformedSecret: the secret is not valid Base32
    """
    return compute_code(decode_secret(encoded_secret), current_time_step(clock()))


def is_valid_code(
    encoded_secret: str,
    presented_code: PresentedCode,
    clock: Callable[[], float] = time.time,
    window: int = VERIFY_WINDOW,
) -> bool:
    """verify_code() for a Base32 secret, reading the time from `clock`."""
    return verify_code(decode_secret(encoded_secret), presented_code, clock(), window)
