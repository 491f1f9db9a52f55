"""Shared fixtures for the TOTP core tests."""

from __future__ import annotations

import pytest

# RFC 4226 Appendix D / RFC 6238 Appendix B SHA-1 secret
RFC_SECRET = b"12345678901234567890"


@pytest.fixture
def rfc_secret() -> bytes:
    return RFC_SECRET


@pytest.fixture
def fixed_now() -> int:
    # 2009-02-13T23:31:30Z, middle of step 20576131
    return 1234567890
