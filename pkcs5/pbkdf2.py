"""
pbkdf2.py — PKCS #5 v2.0 password-based key derivation (RFC 2898, 5.2).

An engine is bound to one PRF and one salt, and can derive any number of
keys from different passwords / iteration counts / lengths:

    with PBKDF2(PRF.HMAC_SHA256) as kdf:          # random hLen-byte salt
        key = kdf.derive_key("correct horse", 100_000, 32)
        salt = kdf.salt                            # store next to the data

    with PBKDF2("ripemd160", bytes.fromhex("12345678")) as kdf:
        kdf.derive_key("password", 5, 4).hex()    # '7a3d7c03'

------------------------------------------------------------------
SECRET HANDLING
------------------------------------------------------------------
• The salt lives in an engine-owned bytearray. close() (or leaving the
  `with` block) overwrites it with zeros; a weakref finalizer does the
  same for engines that are simply dropped. A closed engine raises
  EngineClosed.
• Each derive_key() call works in a private bytearray laid out as

      [ U(n-1) | U(n) | T | BE32(block) ]      (3*hLen + 4 bytes)

  U(n-1)/U(n) alternate between the first two slots; the running XOR is
  kept as an int and stored in T once per block. The buffer and the
  encoded password are zeroed on every exit path.
• Python cannot wipe the immutable bytes returned by hashlib/hmac, nor
  the int accumulator; those die with their last reference.

------------------------------------------------------------------
THREADING
------------------------------------------------------------------
derive_key() holds a per-engine lock: the PRF key state is rebuilt for
each call and shared across it. Use one engine per thread if derivations
must run in parallel.

Copyright:
  (c) 2025 Robert Dowell. Educational use encouraged.
"""

from __future__ import annotations
import logging
import secrets
import threading
import weakref
from typing import Optional, Union

from .byteutil import store_int32_be, wipe, wiped
from .errors import (
    DerivedKeyTooLong,
    EngineClosed,
    InvalidDerivedKeyLength,
    InvalidIterationCount,
)
from .prf import PRF, HmacPRF

log = logging.getLogger(__name__)

# =========================
# Constants
# =========================

MAX_BLOCK_INDEX = 2**32 - 1   # block counter is a 32-bit big-endian integer
DEFAULT_PRF = PRF.HMAC_SHA256

BytesLike = Union[bytes, bytearray, memoryview]

# =========================
# Internal helpers
# =========================

def _check_key_length(dk_len: int, h_len: int) -> None:
    if isinstance(dk_len, bool) or not isinstance(dk_len, int):
        raise InvalidDerivedKeyLength(f"dk_len must be an int; got {type(dk_len).__name__}")
    if dk_len < 0:
        raise InvalidDerivedKeyLength(f"dk_len must be >= 0; got {dk_len}")
    if dk_len > MAX_BLOCK_INDEX * h_len:
        raise DerivedKeyTooLong(f"derived key too long: {dk_len} > (2^32 - 1) * {h_len}")

def _check_iterations(iterations: int) -> None:
    if isinstance(iterations, bool) or not isinstance(iterations, int):
        raise InvalidIterationCount(f"iterations must be an int; got {type(iterations).__name__}")
    if iterations < 1:
        raise InvalidIterationCount(f"iterations must be >= 1; got {iterations}")

def _password_bytes(password: Union[str, BytesLike]) -> bytearray:
    """UTF-8 for text, verbatim for bytes. Always a fresh, wipeable copy."""
    if isinstance(password, str):
        return bytearray(password, "utf-8")
    if isinstance(password, (bytes, bytearray, memoryview)):
        return bytearray(password)
    raise TypeError(f"password must be str or bytes-like; got {type(password).__name__}")

# =========================
# Engine
# =========================

class PBKDF2:
    """
    PBKDF2 engine for one (PRF, salt) pair.

    PBKDF2(prf)        -> random salt of prf_size bytes (secrets.token_bytes)
    PBKDF2(prf, salt)  -> caller's salt, copied verbatim (any length)
    """

    def __init__(self, prf: Union[PRF, str], salt: Optional[BytesLike] = None):
        choice = PRF.resolve(prf)       # UnsupportedPRF: nothing allocated yet
        self._prf = HmacPRF(choice)
        self._h_len = self._prf.output_size
        self._lock = threading.Lock()

        if salt is None:
            self._salt = bytearray(secrets.token_bytes(self._h_len))
            source = "random"
        elif isinstance(salt, (bytes, bytearray, memoryview)):
            self._salt = bytearray(salt)
            source = "supplied"
        else:
            raise TypeError(f"salt must be bytes-like; got {type(salt).__name__}")

        try:
            self._finalizer = weakref.finalize(self, wipe, self._salt)
        except BaseException:
            wipe(self._salt)
            raise

        log.debug("PBKDF2 engine: prf=%s hLen=%d salt=%d bytes (%s)",
                  choice.algorithm_name, self._h_len, len(self._salt), source)

    # ---- accessors ----

    @property
    def prf(self) -> PRF:
        return self._prf.prf

    @property
    def prf_name(self) -> str:
        return self._prf.algorithm_name

    @property
    def prf_size(self) -> int:
        return self._h_len

    @property
    def salt(self) -> bytes:
        """A copy of the salt; mutating it does not affect the engine."""
        self._check_open()
        return bytes(self._salt)

    @property
    def salt_size(self) -> int:
        return len(self._salt)

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    # ---- lifecycle ----

    def close(self) -> None:
        """Zero the salt. Idempotent."""
        with self._lock:
            if self._finalizer.alive:
                self._finalizer()
                self._prf.clear()
                log.debug("PBKDF2 engine closed (%s)", self.prf_name)

    def __enter__(self) -> "PBKDF2":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _check_open(self) -> None:
        if self.closed:
            raise EngineClosed("PBKDF2 engine is closed; its salt has been wiped")

    # ---- derivation ----

    def derive_key(self, password: Union[str, BytesLike], iterations: int,
                   dk_len: Optional[int] = None) -> bytes:
        """
        Derive dk_len bytes (default: prf_size) from password.

        Raises DerivedKeyTooLong / InvalidDerivedKeyLength / InvalidIterationCount
        before any PRF work, EngineClosed after close(), and PRFProviderFailure
        if the HMAC layer fails. No partial key is ever returned.
        """
        if dk_len is None:
            dk_len = self._h_len
        _check_key_length(dk_len, self._h_len)
        _check_iterations(iterations)

        key = _password_bytes(password)
        with self._lock, wiped(key):
            self._check_open()
            if dk_len == 0:
                return b""
            return self._derive(key, iterations, dk_len)

    def _derive(self, key: bytearray, iterations: int, dk_len: int) -> bytes:
        h = self._h_len
        blocks = -(-dk_len // h)
        log.debug("derive: prf=%s iterations=%d dk_len=%d blocks=%d",
                  self.prf_name, iterations, dk_len, blocks)

        # slot offsets inside the working buffer
        ctr = 3 * h
        t = 2 * h
        work = bytearray(3 * h + 4)
        out = bytearray(dk_len)
        prf = self._prf

        try:
            with wiped(work, out), memoryview(work) as view:
                prf.init(key)
                pos = 0
                for block in range(1, blocks + 1):
                    store_int32_be(block, work, ctr)

                    # U1 = PRF(P, S || INT(i)); T = U1
                    prf.update(self._salt)
                    prf.update(view[ctr:ctr + 4])
                    u = prf.finalize()
                    view[0:h] = u
                    acc = int.from_bytes(u, "big")

                    src, dst = 0, h
                    for _ in range(1, iterations):
                        u = prf.compute(view[src:src + h])
                        view[dst:dst + h] = u
                        acc ^= int.from_bytes(u, "big")
                        src, dst = dst, src
                    view[t:t + h] = acc.to_bytes(h, "big")

                    n = min(dk_len - pos, h)
                    out[pos:pos + n] = view[t:t + n]
                    pos += n

                return bytes(out)
        finally:
            prf.clear()

    def __repr__(self) -> str:
        state = "closed" if self.closed else f"salt_size={self.salt_size}"
        return f"PBKDF2({self.prf.name}, {state})"

# =========================
# Convenience
# =========================

def derive_key(password: Union[str, BytesLike], salt: BytesLike, iterations: int,
               dk_len: Optional[int] = None, prf: Union[PRF, str] = DEFAULT_PRF) -> bytes:
    """One-shot derivation; the temporary engine's salt copy is wiped on return."""
    with PBKDF2(prf, salt) as engine:
        return engine.derive_key(password, iterations, dk_len)
