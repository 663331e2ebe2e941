#!/usr/bin/env python3
"""
Signing Benchmark
=================

Benchmark the cost of signing and verifying cookie values.

Measures:
  - Raw sign / unsign micro-cost
  - Unsign cost when the matching secret sits deeper in the keyring
  - Rejection cost for tampered values
"""

import logging
import time

from cookiesignature import InvalidSignatureError, Keyring, sign, unsign

# Suppress per-rejection logging during benchmarks
logging.getLogger("cookiesignature").setLevel(logging.ERROR)


# ── Helpers ──────────────────────────────────────────────────────────────────


def time_op(func, iterations: int = 10000) -> float:
    """Return average microseconds per call."""
    for _ in range(min(5, iterations)):
        func()
    start = time.perf_counter()
    for _ in range(iterations):
        func()
    return ((time.perf_counter() - start) / iterations) * 1_000_000


def expect_invalid(keyring: Keyring, signed: str):
    try:
        keyring.unsign(signed)
    except InvalidSignatureError:
        pass


# ── Benchmarks ───────────────────────────────────────────────────────────────


def benchmark_raw_sign_unsign():
    """Micro-benchmark of the stateless primitives."""
    print("\n🔐 Raw sign / unsign Micro-Benchmark")
    print("-" * 60)

    secret = b"benchmark-secret"
    for size in (16, 256, 4096):
        value = "x" * size
        signed = sign(value, secret)
        sign_t = time_op(lambda: sign(value, secret))
        unsign_t = time_op(lambda: unsign(signed, secret))
        print(f"  {size:>5} chars   sign {sign_t:7.2f}µs   unsign {unsign_t:7.2f}µs")


def benchmark_rotation_depth():
    """Unsign cost as the matching secret moves towards the end of the keyring."""
    print("\n🔑 Keyring Rotation Depth")
    print("-" * 60)

    secrets = [f"secret-{i}" for i in range(8)]
    keyring = Keyring(secrets)
    for depth in (0, 1, 3, 7):
        signed = sign("session=abc123", secrets[depth])
        t = time_op(lambda: keyring.unsign(signed))
        print(f"  match at index {depth}   {t:7.2f}µs")

    tampered = sign("session=abc123", b"unknown")
    t = time_op(lambda: expect_invalid(keyring, tampered))
    print(f"  no match ({len(keyring)} secrets)  {t:7.2f}µs")


def main():
    print("=" * 60)
    print("cookiesignature signing benchmark")
    print("=" * 60)
    benchmark_raw_sign_unsign()
    benchmark_rotation_depth()


if __name__ == "__main__":
    main()
