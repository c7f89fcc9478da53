"""
prf.py — HMAC pseudorandom functions for PBKDF2.

A PRF choice is a plain enum member naming a (HMAC, digest) pair; HmacPRF
turns it into the capability the engine consumes:

    prf = HmacPRF(PRF.HMAC_SHA256)
    prf.init(key)            # key the PRF (precomputes the HMAC pads)
    prf.update(data)         # streaming form ...
    out = prf.finalize()     # ... returns output_size bytes, ready for reuse
    out = prf.compute(data)  # one-shot form under the same key

SHA-256, SHA-512 and RIPEMD-160 come from hashlib (OpenSSL); a digest the
local OpenSSL build lacks surfaces as PRFProviderFailure when the provider
is created. Whirlpool is not in the default OpenSSL 3 provider, so it is
built on the `whirlpool` package instead.

Copyright:
  (c) 2025 Robert Dowell. Educational use encouraged.
"""

from __future__ import annotations
import enum
import hashlib
import hmac
from typing import Any, Callable, Dict, Optional, Union

import whirlpool

from .errors import PRFProviderFailure, UnsupportedPRF

# =========================
# PRF choices
# =========================

class PRF(enum.Enum):
    """Supported PRFs: value is (hashlib name, display name)."""

    HMAC_SHA256 = ("sha256", "SHA-256/HMAC")
    HMAC_SHA512 = ("sha512", "SHA-512/HMAC")
    HMAC_RIPEMD160 = ("ripemd160", "RIPEMD160/HMAC")
    HMAC_WHIRLPOOL = ("whirlpool", "Whirlpool/HMAC")

    @property
    def digest_name(self) -> str:
        return self.value[0]

    @property
    def algorithm_name(self) -> str:
        return self.value[1]

    @property
    def digestmod(self) -> Union[str, Callable[..., Any]]:
        """What hmac.new() gets as digestmod: a hashlib name or a constructor."""
        return _CONSTRUCTORS.get(self.digest_name, self.digest_name)

    @classmethod
    def resolve(cls, choice: Union["PRF", str]) -> "PRF":
        """
        Accept a member, a member name ("HMAC_SHA256") or a digest name
        ("sha256"), case-insensitively. Anything else is UnsupportedPRF.
        """
        if isinstance(choice, cls):
            return choice
        if isinstance(choice, str):
            key = choice.strip().upper().replace("-", "_")
            for member in cls:
                if key in (member.name, member.digest_name.upper(), "HMAC_" + member.digest_name.upper()):
                    return member
        raise UnsupportedPRF(f"unsupported PRF: {choice!r}; expected one of {[m.name for m in cls]}")


# digests hashlib cannot be relied on to provide
_CONSTRUCTORS: Dict[str, Callable[..., Any]] = {
    "whirlpool": whirlpool.new,
}

def _new_digest(name: str) -> Any:
    ctor = _CONSTRUCTORS.get(name)
    return ctor() if ctor is not None else hashlib.new(name)

def digest_available(name: str) -> bool:
    """True if the named digest can be built here."""
    try:
        _new_digest(name)
    except ValueError:
        return False
    return True

# =========================
# HMAC provider
# =========================

class HmacPRF:
    """
    HMAC over a hashlib (or whirlpool) digest. Re-keying with the same key
    is a clone of the keyed template, so the password pads are hashed once
    per init().
    """

    def __init__(self, prf: PRF):
        self.prf = prf
        try:
            self._output_size = _new_digest(prf.digest_name).digest_size
        except ValueError as e:
            raise PRFProviderFailure(
                f"{prf.algorithm_name}: digest '{prf.digest_name}' is not available in this Python/OpenSSL build"
            ) from e
        self._keyed: Optional[hmac.HMAC] = None
        self._state: Optional[hmac.HMAC] = None

    @property
    def output_size(self) -> int:
        return self._output_size

    @property
    def algorithm_name(self) -> str:
        return self.prf.algorithm_name

    def init(self, key: bytes) -> None:
        try:
            self._keyed = hmac.new(key, digestmod=self.prf.digestmod)
        except (TypeError, ValueError) as e:
            raise PRFProviderFailure(f"{self.algorithm_name}: cannot key HMAC: {e}") from e
        self._state = self._keyed.copy()

    def update(self, data: bytes) -> None:
        self._require_key()
        self._state.update(data)

    def finalize(self) -> bytes:
        """Return the output for everything since init()/reset(), then reset."""
        self._require_key()
        out = self._state.digest()
        self._state = self._keyed.copy()
        return out

    def reset(self) -> None:
        self._require_key()
        self._state = self._keyed.copy()

    def compute(self, data: bytes) -> bytes:
        self._require_key()
        h = self._keyed.copy()
        h.update(data)
        return h.digest()

    def clear(self) -> None:
        """Drop the keyed state; init() is required before the next use."""
        self._keyed = None
        self._state = None

    def _require_key(self) -> None:
        if self._keyed is None:
            raise PRFProviderFailure(f"{self.algorithm_name}: PRF used before init()")

    def __repr__(self) -> str:
        return f"HmacPRF({self.prf.name}, output_size={self._output_size})"
