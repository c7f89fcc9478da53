#!/usr/bin/env python3
"""
cli.py — PBKDF2 command line (pbkdf2-cli / python -m pkcs5).

Usage:
  pbkdf2-cli vector
  pbkdf2-cli derive [--prf NAME] [--iterations N] [--length N] [--salt VAL] [--pass STR] [--raw]
  pbkdf2-cli selftest
  pbkdf2-cli bench [--iterations N] [--trials N]

Commands:
  vector     Check the HMAC-RIPEMD-160 reference vector and print the result.
  derive     Derive a key. --salt takes hex or @path; if omitted, a random
             salt of prf_size bytes is generated and printed. The password is
             prompted for unless --pass is given. Output is hex (or raw bytes
             on stdout with --raw).
  selftest   Run the built-in known-answer / invariant checks.
  bench      Time one derivation per available PRF.

Global options:
  -v, --verbose   DEBUG logging (otherwise PBKDF2_LOG_LEVEL, default WARNING)

Env:
  PBKDF2_LOG_LEVEL=DEBUG|INFO|WARNING|...
  BENCH_ITERATIONS=N      default --iterations for `bench` (10000)

Exit codes: 0=OK, 1=vector/self-test mismatch, 2=usage/error.

Copyright:
  (c) 2025 Robert Dowell. Educational use encouraged.
"""

from __future__ import annotations
import argparse
import getpass
import logging
import os
import sys
from time import perf_counter

from . import selftest
from .byteutil import arrays_are_equal, bytes_to_hex, human_readable_byte_count
from .pbkdf2 import DEFAULT_PRF, PBKDF2
from .prf import PRF, digest_available

DEFAULT_ITERATIONS = 10000

log = logging.getLogger(__name__)


# ---------------- helpers ----------------

def _read_salt(spec: str) -> bytes:
    """'@path' -> file bytes, otherwise an even-length hex string."""
    s = spec.strip()
    if s.startswith("@"):
        with open(s[1:], "rb") as f:
            return f.read()
    try:
        return bytes.fromhex(s)
    except ValueError:
        raise ValueError(f"--salt must be hex or @path; got {spec!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        log.warning("ignoring %s=%r (not an integer)", name, raw)
        return default


def _setup_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else os.getenv("PBKDF2_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(level=getattr(logging, level, logging.WARNING),
                        format="%(levelname)s %(name)s: %(message)s")


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="pbkdf2-cli",
        description="PKCS #5 PBKDF2 key derivation (RFC 2898)",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="DEBUG logging")
    prf_names = [p.name for p in PRF]

    sub = ap.add_subparsers(dest="cmd", required=True)

    sub.add_parser("vector", help="Check the HMAC-RIPEMD-160 test vector")

    p_der = sub.add_parser("derive", help="Derive a key from a password")
    p_der.add_argument("--prf", default=DEFAULT_PRF.name, help=f"One of {prf_names} (default {DEFAULT_PRF.name})")
    p_der.add_argument("--iterations", type=int, default=DEFAULT_ITERATIONS)
    p_der.add_argument("--length", type=int, default=None, help="Derived key length in bytes (default: PRF size)")
    p_der.add_argument("--salt", default=None, help="Salt: hex or @path (default: random)")
    p_der.add_argument("--pass", dest="pw", default=None, help="Password (unsafe on shared shells)")
    p_der.add_argument("--raw", action="store_true", help="Write raw key bytes to stdout")

    sub.add_parser("selftest", help="Run the built-in self-test")

    p_bench = sub.add_parser("bench", help="Time derivations per PRF")
    p_bench.add_argument("--iterations", type=int, default=_env_int("BENCH_ITERATIONS", DEFAULT_ITERATIONS))
    p_bench.add_argument("--trials", type=int, default=1)

    return ap


# ---------------- commands ----------------

def _cmd_vector() -> int:
    v = selftest.RIPEMD160_VECTOR
    print("=================================")
    print("Test vector")
    print("=================================")
    print("Salt        (hex):", bytes_to_hex(v["salt"]))
    print("Derived key (hex):", bytes_to_hex(v["key"]))
    print("Password:         ", v["password"])
    print("Iterations:       ", v["iterations"])

    with PBKDF2(PRF.HMAC_RIPEMD160, v["salt"]) as kdf:
        key = kdf.derive_key(v["password"], v["iterations"], len(v["key"]))
        print("PRF:              ", kdf.prf_name)

    print("=================================")
    print("Result")
    print("=================================")
    print("Derived key (hex):", bytes_to_hex(key))
    matched = arrays_are_equal(v["key"], key)
    print("Derived key matches test vector." if matched else "Derived key does not match test vector.")
    print("=================================")
    return 0 if matched else 1


def _cmd_derive(args) -> int:
    salt = _read_salt(args.salt) if args.salt is not None else None
    pw = args.pw if args.pw is not None else getpass.getpass("Password: ")

    with PBKDF2(args.prf, salt) as kdf:
        key = kdf.derive_key(pw, args.iterations, args.length)
        if args.raw:
            sys.stdout.buffer.write(key)
            sys.stdout.flush()
            return 0
        print("PRF:       ", kdf.prf_name)
        print("Iterations:", args.iterations)
        print("Salt (hex):", bytes_to_hex(kdf.salt))
        print("Key  (hex):", bytes_to_hex(key))
    return 0


def _cmd_selftest() -> int:
    report = selftest.run_self_test()
    selftest.print_report(report)
    return 0 if report["all_passed"] else 1


def _cmd_bench(args) -> int:
    trials = max(1, args.trials)
    print("\nPBKDF2 Benchmark")
    print("----------------")
    print("Iterations:", args.iterations, "| Trials:", trials)
    for prf in PRF:
        if not digest_available(prf.digest_name):
            print(f"{prf.name:16s}  (not available)")
            continue
        with PBKDF2(prf) as kdf:
            kdf.derive_key("bench", 1)  # warm-up
            t0 = perf_counter()
            for _ in range(trials):
                kdf.derive_key("bench", args.iterations)
            dt = (perf_counter() - t0) / trials
            rate = args.iterations / dt if dt > 0 else float("inf")
            print(f"{prf.name:16s}  {dt * 1000:9.1f} ms/key  {rate:12.0f} it/s  "
                  f"({human_readable_byte_count(kdf.prf_size)} block)")
    return 0


def main(argv: list[str] | None = None) -> int:
    ap = _build_parser()
    args = ap.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        if args.cmd == "vector":
            return _cmd_vector()
        elif args.cmd == "derive":
            return _cmd_derive(args)
        elif args.cmd == "selftest":
            return _cmd_selftest()
        elif args.cmd == "bench":
            return _cmd_bench(args)
        else:
            print("Unknown command.", file=sys.stderr)
            return 2

    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        return 2
    except Exception as e:
        # Keep it simple for scripts/automation
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
