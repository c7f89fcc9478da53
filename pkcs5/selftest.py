#!/usr/bin/env python3
"""
selftest.py — known-answer and invariant checks for the PBKDF2 engine.

- HMAC-RIPEMD-160 and HMAC-Whirlpool vectors (TruPax / TrueCrypt PKCS #5 values)
- HMAC-SHA-256 vectors (RFC 7914 section 11 and the common "password"/"salt" set)
- Cross-check against hashlib.pbkdf2_hmac for every digest it can build
- Truncation consistency, default length, error paths, salt wiping

Digests missing from the local OpenSSL build are reported as OK with a
note, never as failures.

Usage:
    from pkcs5 import selftest
    report = selftest.run_self_test()
    report["all_passed"]

Copyright:
  (c) 2025 Robert Dowell. Educational use encouraged.
"""

from __future__ import annotations
import hashlib
import secrets
from typing import Any, Dict, List, Tuple

from .errors import DerivedKeyTooLong, EngineClosed, InvalidIterationCount, UnsupportedPRF
from .pbkdf2 import MAX_BLOCK_INDEX, PBKDF2
from .prf import PRF, digest_available

# =========================
# Known answers
# =========================

RIPEMD160_VECTOR = {
    "salt": bytes.fromhex("12345678"),
    "password": "password",
    "iterations": 5,
    "key": bytes.fromhex("7a3d7c03"),
}

# same inputs, HMAC-Whirlpool (TrueCrypt PKCS #5 self-test)
WHIRLPOOL_VECTOR = {
    "salt": bytes.fromhex("12345678"),
    "password": "password",
    "iterations": 5,
    "key": bytes.fromhex("507c366f"),
}

# (password, salt, iterations, expected key)
SHA256_VECTORS: List[Tuple[str, bytes, int, bytes]] = [
    ("password", b"salt", 1,
     bytes.fromhex("120fb6cffcf8b32c43e7225256c4f837a86548c92ccc35480805987cb70be17b")),
    ("password", b"salt", 2,
     bytes.fromhex("ae4d0c95af6b46d32d0adff928f06dd02a303f8ef3c251dfd6e2d85a95474c43")),
    ("passwd", b"salt", 1,
     bytes.fromhex("55ac046e56e3089fec1691c22544b605f94185216dde0465e68b9d57c20dacbc"
                   "49ca9cccf179b645991664b39d77ef317c71b845b1e30bd509112041d3a19783")),
]

def _ok(why: str = "") -> Dict[str, Any]:
    return {"ok": True, "why": why}

def _fail(why: str) -> Dict[str, Any]:
    return {"ok": False, "why": why}

# =========================
# Checks
# =========================

def _check_ripemd160_vector() -> Dict[str, Any]:
    if not digest_available(PRF.HMAC_RIPEMD160.digest_name):
        return _ok("ripemd160 not available in this OpenSSL build")
    v = RIPEMD160_VECTOR
    with PBKDF2(PRF.HMAC_RIPEMD160, v["salt"]) as kdf:
        got = kdf.derive_key(v["password"], v["iterations"], len(v["key"]))
    return _ok() if got == v["key"] else _fail(f"got {got.hex()}, want {v['key'].hex()}")

def _check_whirlpool_vector() -> Dict[str, Any]:
    v = WHIRLPOOL_VECTOR
    with PBKDF2(PRF.HMAC_WHIRLPOOL, v["salt"]) as kdf:
        got = kdf.derive_key(v["password"], v["iterations"], len(v["key"]))
    return _ok() if got == v["key"] else _fail(f"got {got.hex()}, want {v['key'].hex()}")

def _check_sha256_vectors() -> Dict[str, Any]:
    for password, salt, iterations, want in SHA256_VECTORS:
        with PBKDF2(PRF.HMAC_SHA256, salt) as kdf:
            got = kdf.derive_key(password, iterations, len(want))
        if got != want:
            return _fail(f"{password!r}/{salt!r}/c={iterations}: got {got.hex()}")
    return _ok()

def _check_against_hashlib() -> Dict[str, Any]:
    checked = []
    for prf in PRF:
        if not digest_available(prf.digest_name):
            continue
        salt = secrets.token_bytes(16)
        with PBKDF2(prf, salt) as kdf:
            dk_len = kdf.prf_size * 2 + 3
            got = kdf.derive_key("hunter2", 7, dk_len)
        try:
            want = hashlib.pbkdf2_hmac(prf.digest_name, b"hunter2", salt, 7, dk_len)
        except ValueError:
            continue
        if got != want:
            return _fail(f"{prf.name} disagrees with hashlib.pbkdf2_hmac")
        checked.append(prf.name)
    return _ok(", ".join(checked))

def _check_truncation() -> Dict[str, Any]:
    with PBKDF2(PRF.HMAC_SHA256) as kdf:
        h = kdf.prf_size
        full = kdf.derive_key("pw", 3, h)
        longer = kdf.derive_key("pw", 3, h + 1)
        two = kdf.derive_key("pw", 3, 2 * h)
        default = kdf.derive_key("pw", 3)
    if longer[:h] != full:
        return _fail("hLen key is not a prefix of the hLen+1 key")
    if two[:h + 1] != longer:
        return _fail("hLen+1 key is not a prefix of the 2*hLen key")
    if default != full:
        return _fail("default length differs from dk_len=hLen")
    return _ok()

def _check_errors() -> Dict[str, Any]:
    try:
        PBKDF2("md5")
        return _fail("unsupported PRF accepted")
    except UnsupportedPRF:
        pass
    with PBKDF2(PRF.HMAC_SHA256, b"salt") as kdf:
        try:
            kdf.derive_key("pw", 1, MAX_BLOCK_INDEX * kdf.prf_size + 1)
            return _fail("oversized dk_len accepted")
        except DerivedKeyTooLong:
            pass
        try:
            kdf.derive_key("pw", 0)
            return _fail("iterations=0 accepted")
        except InvalidIterationCount:
            pass
    return _ok()

def _check_close_wipes_salt() -> Dict[str, Any]:
    kdf = PBKDF2(PRF.HMAC_SHA256, b"\x01" * 16)
    salt_buf = kdf._salt
    kdf.close()
    if any(salt_buf):
        return _fail("salt not zeroed by close()")
    try:
        kdf.derive_key("pw", 1)
        return _fail("closed engine still derives")
    except EngineClosed:
        return _ok()

_CHECKS = (
    ("ripemd160_vector", _check_ripemd160_vector),
    ("whirlpool_vector", _check_whirlpool_vector),
    ("sha256_vectors", _check_sha256_vectors),
    ("hashlib_parity", _check_against_hashlib),
    ("truncation", _check_truncation),
    ("errors", _check_errors),
    ("close_wipes_salt", _check_close_wipes_salt),
)

def run_self_test() -> Dict[str, Any]:
    tests: Dict[str, Dict[str, Any]] = {}
    for name, check in _CHECKS:
        try:
            tests[name] = check()
        except Exception as e:
            tests[name] = _fail(f"exception: {type(e).__name__}: {e}")

    return {
        "engine": PBKDF2.__name__,
        "prfs": {p.name: digest_available(p.digest_name) for p in PRF},
        "all_passed": all(t["ok"] for t in tests.values()),
        "tests": tests,
    }

def print_report(rep: Dict[str, Any]) -> None:
    print(f"Engine: {rep['engine']}")
    print("PRFs  :", ", ".join(f"{k}={'yes' if v else 'n/a'}" for k, v in rep["prfs"].items()))
    print("All passed:", rep["all_passed"])
    for name, r in rep["tests"].items():
        status = "OK " if r["ok"] else "FAIL"
        why = f"  ({r['why']})" if r["why"] else ""
        print(f" - {name:18s}: {status}{why}")

if __name__ == "__main__":  # pragma: no cover
    report = run_self_test()
    print_report(report)
    raise SystemExit(0 if report["all_passed"] else 1)
