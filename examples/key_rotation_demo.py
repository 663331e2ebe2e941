#!/usr/bin/env python3
"""
Key Rotation Example
====================

Shows how to rotate a cookie signing secret without logging users out.

Usage:
    python key_rotation_demo.py
"""

from cookiesignature import InvalidSignatureError, Keyring, load_config_from_env


def main():
    print("=== Key Rotation Demo ===\n")

    # Day 1: a single secret
    keyring = Keyring(["2024-secret"])
    cookie = keyring.sign("user_id=42")
    print(f"🍪 Issued cookie: {cookie}")

    # Day 2: new secret goes first, the old one stays for verification
    rotated = Keyring(["2025-secret", "2024-secret"])
    print(f"✅ Old cookie still valid: {rotated.unsign(cookie)}")

    fresh = rotated.sign("user_id=42")
    print(f"🍪 New cookies use the new secret: {fresh}")

    # Day 30: the old secret is retired
    retired = Keyring(["2025-secret"])
    try:
        retired.unsign(cookie)
    except InvalidSignatureError as e:
        print(f"❌ Old cookie rejected after retirement: {e.kind.value}")

    # Binary payloads
    signed_blob = rotated.sign_base64(b"\x00\x01binary")
    print(f"📦 Binary payload: {rotated.unsign_base64(signed_blob)!r}")

    # Secrets from the environment, newest first
    config = load_config_from_env(environ={"COOKIE_SECRETS": "2025-secret,2024-secret"})
    print(f"🔧 Keyring from env: {Keyring.from_config(config)!r}")


if __name__ == "__main__":
    main()
