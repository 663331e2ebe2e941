"""
Keyring with Secret Rotation
============================

Holds an ordered list of secrets. The first (newest) secret signs outgoing
values; every secret is tried, in order, when verifying incoming ones.

Rotation:
- Add the new secret at the front of the list
- Keep retired secrets after it so previously issued values still verify
- Drop a secret from the end once nothing signed with it is still in use

Usage:
    from cookiesignature import Keyring

    keyring = Keyring(["new-secret", "old-secret"])
    signed = keyring.sign("user=42")
    value = keyring.unsign(signed)
"""

import base64
import logging
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from .config import KeyringConfig
from .error_handling import (
    EmptyInputError,
    EmptySecretError,
    NoSecretsProvidedError,
    SignatureConfigurationError,
    SignatureError,
)
from .signature import (
    DEFAULT_ENCODING,
    Secret,
    decode_unpadded,
    secret_to_bytes,
    sign,
    unsign,
)

logger = logging.getLogger(__name__)


class Keyring:
    """
    Ordered, immutable set of signing secrets.

    Safe to share between threads: nothing is mutated after construction.
    """

    __slots__ = ("_secrets", "_encoding")

    def __init__(self, secrets: Sequence[Secret], encoding: str = DEFAULT_ENCODING):
        """
        Initialize the keyring.

        Args:
            secrets: Secrets ordered newest first
            encoding: Text encoding for values and text secrets

        Raises:
            SignatureConfigurationError: If ``secrets`` is a single str or bytes
            NoSecretsProvidedError: If ``secrets`` is empty
            EmptySecretError: For the first empty secret, with its index
        """
        if isinstance(secrets, (str, bytes)):
            raise SignatureConfigurationError(
                "secrets must be a sequence of secrets, not a single secret",
                {"type": type(secrets).__name__},
            )
        if not secrets:
            raise NoSecretsProvidedError()

        converted = []
        for index, secret in enumerate(secrets):
            if not secret:
                raise EmptySecretError(index)
            converted.append(secret_to_bytes(secret, encoding))

        self._secrets: Tuple[bytes, ...] = tuple(converted)
        self._encoding = encoding
        logger.debug(f"Keyring initialized: secrets={len(self._secrets)}")

    @classmethod
    def from_config(cls, config: KeyringConfig) -> "Keyring":
        """Create a keyring from a KeyringConfig."""
        return cls(config.secrets, encoding=config.encoding)

    @property
    def current_secret(self) -> bytes:
        """The secret used for signing."""
        return self._secrets[0]

    @property
    def secrets(self) -> Tuple[bytes, ...]:
        return self._secrets

    @property
    def encoding(self) -> str:
        return self._encoding

    def __len__(self) -> int:
        return len(self._secrets)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(secrets=<{len(self._secrets)} hidden>, encoding={self._encoding!r})"

    def sign(self, value: str) -> str:
        """Sign ``value`` with the current secret."""
        if not value:
            raise EmptyInputError("unsigned value must be provided")
        return sign(value, self._secrets[0], self._encoding)

    def sign_base64(self, value: Union[str, bytes]) -> str:
        """
        Base64 encode ``value`` (with padding) and sign the encoded text.

        Text values are encoded with the keyring's encoding first.
        """
        if not value:
            raise EmptyInputError("unsigned value must be provided")
        raw = value.encode(self._encoding) if isinstance(value, str) else bytes(value)
        return self.sign(base64.b64encode(raw).decode("ascii"))

    def unsign(self, signed: str) -> str:
        """
        Verify ``signed`` against each secret in order.

        Returns the payload from the first secret that verifies. When none
        does, the error from the current secret is raised.
        """
        if not signed:
            raise EmptyInputError("signed value must be provided")

        first_error: Optional[SignatureError] = None
        for index, secret in enumerate(self._secrets):
            try:
                result = unsign(signed, secret, self._encoding)
            except SignatureError as e:
                if first_error is None:
                    first_error = e
                continue

            if index > 0:
                logger.debug(f"Value verified with retired secret at index {index}")
            return result

        logger.warning(
            f"Signature verification failed against all {len(self._secrets)} secret(s): "
            f"{first_error.kind.value}"
        )
        raise first_error

    def unsign_base64(self, signed: str) -> bytes:
        """
        Verify ``signed`` and base64 decode the payload.

        Any number of trailing ``=`` characters on the payload is accepted.

        Raises:
            DecodingError: If the payload is not valid base64
        """
        payload = self.unsign(signed)
        return decode_unpadded(payload.rstrip("="))

    def get_info(self) -> Dict[str, Any]:
        """Get non-sensitive information about the keyring."""
        return {
            "secret_count": len(self._secrets),
            "encoding": self._encoding,
        }


def create_keyring(
    secrets: Optional[Sequence[Secret]] = None,
    config: Optional[KeyringConfig] = None,
    **overrides,
) -> Keyring:
    """
    Factory function to create a keyring.

    Args:
        secrets: Secrets ordered newest first; takes precedence over ``config``
        config: Base configuration (if None, one is built from ``secrets``)
        **overrides: Override values for KeyringConfig fields

    Returns:
        Configured Keyring instance
    """
    if config is None:
        config = KeyringConfig()

    encoding = overrides.pop("encoding", config.encoding)
    for key in overrides:
        logger.warning(f"Unknown configuration parameter ignored: {key}")

    if secrets is None:
        secrets = config.secrets

    keyring = Keyring(secrets, encoding=encoding)
    logger.info(f"Created keyring with {len(keyring)} secret(s)")
    return keyring
