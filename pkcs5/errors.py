"""
errors.py — exception hierarchy for the pkcs5 package.

Every error raised on purpose by the engine derives from PBKDF2Error, so
callers can catch the whole family with a single except clause. The
argument-shaped errors also subclass ValueError.

Copyright:
  (c) 2025 Robert Dowell. Educational use encouraged.
"""

from __future__ import annotations

# =========================
# Exceptions
# =========================

class PBKDF2Error(Exception):
    """Base class for all pkcs5 errors."""

class UnsupportedPRF(PBKDF2Error, ValueError):
    """Raised at construction when the PRF selector is not a supported variant."""

class DerivedKeyTooLong(PBKDF2Error, ValueError):
    """Raised when dk_len exceeds (2^32 - 1) * hLen (RFC 2898, 5.2 step 1)."""

class InvalidIterationCount(PBKDF2Error, ValueError):
    """Raised when the iteration count is not an integer >= 1."""

class InvalidDerivedKeyLength(PBKDF2Error, ValueError):
    """Raised when dk_len is negative or not an integer."""

class PRFProviderFailure(PBKDF2Error):
    """Raised when the HMAC/digest layer fails; the original error is chained."""

class EngineClosed(PBKDF2Error):
    """Raised when a closed engine (salt already wiped) is used again."""
