"""
Cookie Value Signing
====================

Stateless primitives that sign and verify string values with HMAC-SHA256.

The wire format is compatible with node-cookie-signature:

    <payload>.<tag>

where ``<tag>`` is the standard-alphabet base64 encoding of the raw
HMAC-SHA256 digest of ``<payload>`` with the trailing ``=`` padding removed.
The payload may itself contain ``.`` characters; only the text after the last
``.`` is treated as the tag.

Usage:
    from cookiesignature.signature import sign, unsign

    signed = sign("hello", b"tobiiscool")
    # 'hello.DGDUkGlIkCzPz+C0B064FNgHdEjox7ch8tOBGslZ5QI'

    value = unsign(signed, b"tobiiscool")
    # 'hello'
"""

import base64
import hashlib
import hmac
import logging
import string
from typing import Union

from .error_handling import (
    DecodingError,
    EmptyInputError,
    InvalidSignatureError,
    with_error_handling,
)

logger = logging.getLogger(__name__)

Secret = Union[str, bytes]

SEPARATOR = "."
DEFAULT_ENCODING = "utf-8"

_BASE64_ALPHABET = frozenset(string.ascii_letters + string.digits + "+/")


def secret_to_bytes(secret: Secret, encoding: str = DEFAULT_ENCODING) -> bytes:
    """Return the raw key material for ``secret``."""
    if isinstance(secret, str):
        return secret.encode(encoding)
    return bytes(secret)


@with_error_handling(DecodingError, catch=(UnicodeEncodeError,))
def compute_hmac_sha256(
    value: str, secret: Secret, encoding: str = DEFAULT_ENCODING
) -> bytes:
    """
    Compute the raw HMAC-SHA256 digest of ``value`` keyed by ``secret``.

    Produces the same digest as node-cookie-signature for the same inputs.

    Raises:
        DecodingError: If ``value`` or ``secret`` cannot be encoded with ``encoding``
    """
    return hmac.new(
        secret_to_bytes(secret, encoding), value.encode(encoding), hashlib.sha256
    ).digest()


def encode_unpadded(data: bytes) -> str:
    """Standard base64 encode ``data`` and strip trailing ``=`` padding."""
    return base64.b64encode(data).decode("ascii").rstrip("=")


def decode_unpadded(data: str) -> bytes:
    """
    Decode standard-alphabet base64 that carries no padding.

    Raises:
        DecodingError: If ``data`` contains a character outside the standard
            alphabet (``=`` included) or has an impossible length
    """
    for offset, char in enumerate(data):
        if char not in _BASE64_ALPHABET:
            raise DecodingError(
                f"illegal base64 data at input byte {offset}",
                {"offset": offset},
                offset=offset,
            )

    # A single leftover character cannot encode a whole byte
    if len(data) % 4 == 1:
        offset = len(data) - 1
        raise DecodingError(
            f"illegal base64 data at input byte {offset}",
            {"offset": offset},
            offset=offset,
        )

    return base64.b64decode(data + "=" * (-len(data) % 4), validate=True)


def sign(value: str, secret: Secret, encoding: str = DEFAULT_ENCODING) -> str:
    """
    Sign ``value`` and return ``<value>.<tag>``.

    Args:
        value: Non-empty string to sign
        secret: Key material; text secrets are encoded with ``encoding``
        encoding: Text encoding for ``value`` and text secrets

    Returns:
        The signed string

    Raises:
        EmptyInputError: If ``value`` is empty
    """
    if not value:
        raise EmptyInputError("unsigned value must be provided")

    tag = encode_unpadded(compute_hmac_sha256(value, secret, encoding))
    return f"{value}{SEPARATOR}{tag}"


def unsign(signed: str, secret: Secret, encoding: str = DEFAULT_ENCODING) -> str:
    """
    Verify ``signed`` against ``secret`` and return the original value.

    Everything before the last ``.`` is the payload, everything after it is the
    tag. The tag is compared to the recomputed digest in constant time.

    Raises:
        EmptyInputError: If ``signed`` is empty
        InvalidSignatureError: If there is no separator or the tag does not match
        DecodingError: If the tag is not valid unpadded base64, or the payload
            cannot be encoded with ``encoding``
    """
    if not signed:
        raise EmptyInputError("signed value must be provided")

    payload, separator, tag = signed.rpartition(SEPARATOR)
    if not separator:
        raise InvalidSignatureError(context={"reason": "missing separator"})

    provided = decode_unpadded(tag)
    expected = compute_hmac_sha256(payload, secret, encoding)

    # compare_digest runs in time independent of where the inputs differ
    if len(provided) != len(expected) or not hmac.compare_digest(provided, expected):
        raise InvalidSignatureError()

    logger.debug(f"Signature verified for payload of length {len(payload)}")
    return payload
