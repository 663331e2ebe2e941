"""
cookiesignature - HMAC-SHA256 cookie signing compatible with node-cookie-signature.

Values are signed as ``<value>.<tag>``, where the tag is the unpadded base64
encoding of an HMAC-SHA256 digest. Signing is for integrity only: the value
itself is not encrypted.

Key Features:
- Byte-for-byte interoperability with node-cookie-signature
- Constant-time signature comparison
- Secret rotation through an ordered keyring
- Typed errors with stable error kinds

Quick Start:
    >>> from cookiesignature import Keyring
    >>>
    >>> keyring = Keyring(["tobiiscool"])
    >>> keyring.sign("hello")
    'hello.DGDUkGlIkCzPz+C0B064FNgHdEjox7ch8tOBGslZ5QI'
    >>> keyring.unsign("hello.DGDUkGlIkCzPz+C0B064FNgHdEjox7ch8tOBGslZ5QI")
    'hello'
"""

from .config import KeyringConfig, load_config_from_dict, load_config_from_env
from .error_handling import (
    DecodingError,
    EmptyInputError,
    EmptySecretError,
    ErrorKind,
    InvalidSignatureError,
    NoSecretsProvidedError,
    SignatureConfigurationError,
    SignatureError,
)
from .keyring import Keyring, create_keyring
from .signature import sign, unsign

__version__ = "0.1.0"

__all__ = [
    # Stateless primitives
    "sign",
    "unsign",
    # Keyring
    "Keyring",
    "create_keyring",
    # Configuration
    "KeyringConfig",
    "load_config_from_dict",
    "load_config_from_env",
    # Errors
    "ErrorKind",
    "SignatureError",
    "SignatureConfigurationError",
    "NoSecretsProvidedError",
    "EmptySecretError",
    "EmptyInputError",
    "InvalidSignatureError",
    "DecodingError",
    # Version info
    "__version__",
]
