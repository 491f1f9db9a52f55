"""
errors.py — Error kinds raised by the TOTP core.

None of these are retried: the core is a pure computation, so the only failures
are a broken platform (no CSPRNG, no SHA-1 HMAC) or bad input from the caller.
A wrong OTP code is NOT an error; verification just returns False.
"""


class TotpError(Exception):
    """Base class for every error raised by totp_core."""


class RandomSourceUnavailable(TotpError):
    """The platform's secure random source is missing or failed."""


class MalformedSecret(TotpError, ValueError):
    """The encoded secret is not valid Base32 (bad character, length or empty)."""


class UnsupportedDigitCount(TotpError, ValueError):
    """Requested a code length outside the supported 0..8 range."""


class HmacAlgorithmUnavailable(TotpError):
    """HMAC-SHA1 cannot be computed on this platform (e.g. a FIPS-restricted OpenSSL)."""
