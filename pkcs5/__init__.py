"""
pkcs5 — PBKDF2 (RFC 2898) key derivation over HMAC-SHA-256/-512,
HMAC-RIPEMD-160 and HMAC-Whirlpool.

Copyright:
  (c) 2025 Robert Dowell. Educational use encouraged.
"""

from __future__ import annotations
import logging

from .errors import (
    DerivedKeyTooLong,
    EngineClosed,
    InvalidDerivedKeyLength,
    InvalidIterationCount,
    PBKDF2Error,
    PRFProviderFailure,
    UnsupportedPRF,
)
from .pbkdf2 import DEFAULT_PRF, MAX_BLOCK_INDEX, PBKDF2, derive_key
from .prf import PRF, HmacPRF, digest_available

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "PBKDF2",
    "PRF",
    "HmacPRF",
    "derive_key",
    "digest_available",
    "DEFAULT_PRF",
    "MAX_BLOCK_INDEX",
    "PBKDF2Error",
    "UnsupportedPRF",
    "DerivedKeyTooLong",
    "InvalidIterationCount",
    "InvalidDerivedKeyLength",
    "PRFProviderFailure",
    "EngineClosed",
]
