"""
Configuration Management for cookiesignature
============================================

Keyring settings as a validated dataclass, plus loaders for plain dicts and
environment variables.
"""

import codecs
import logging
import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional

from .error_handling import NoSecretsProvidedError, SignatureConfigurationError
from .signature import DEFAULT_ENCODING

logger = logging.getLogger(__name__)

DEFAULT_SECRETS_ENV_VAR = "COOKIE_SECRETS"
DEFAULT_SECRETS_SEPARATOR = ","


@dataclass
class KeyringConfig:
    """Configuration for a signing keyring.

    ``secrets`` are ordered newest first. Secret validation is left to
    :class:`~cookiesignature.keyring.Keyring` so that both entry points report
    the same errors.
    """

    secrets: List[str] = field(default_factory=list)
    encoding: str = DEFAULT_ENCODING

    def __post_init__(self):
        """Validate keyring configuration."""
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ValueError(f"Unknown text encoding: {self.encoding}") from e

        if isinstance(self.secrets, (str, bytes)):
            raise SignatureConfigurationError(
                "secrets must be a list of secrets, not a single secret",
                {"type": type(self.secrets).__name__},
            )
        self.secrets = list(self.secrets)
        logger.debug(
            f"Keyring configured: secrets={len(self.secrets)}, encoding={self.encoding}"
        )


def load_config_from_dict(data: Mapping[str, Any]) -> KeyringConfig:
    """
    Build a KeyringConfig from a mapping, ignoring unknown keys.

    Args:
        data: Mapping with ``secrets`` and optionally ``encoding``

    Returns:
        Validated KeyringConfig instance
    """
    known = {f.name for f in fields(KeyringConfig)}
    kwargs: Dict[str, Any] = {}
    for key, value in data.items():
        if key in known:
            kwargs[key] = value
        else:
            logger.warning(f"Unknown configuration parameter ignored: {key}")
    return KeyringConfig(**kwargs)


def load_config_from_env(
    var: str = DEFAULT_SECRETS_ENV_VAR,
    separator: str = DEFAULT_SECRETS_SEPARATOR,
    encoding: str = DEFAULT_ENCODING,
    environ: Optional[Mapping[str, str]] = None,
) -> KeyringConfig:
    """
    Build a KeyringConfig from a separator-delimited environment variable.

    ``COOKIE_SECRETS="newest,older,oldest"`` yields three secrets in that order.
    Surrounding whitespace is stripped from each secret.

    Raises:
        NoSecretsProvidedError: If the variable is unset or blank
    """
    environ = os.environ if environ is None else environ
    raw = environ.get(var, "")
    if not raw.strip():
        raise NoSecretsProvidedError(
            f"secret key must be provided via ${var}", {"env_var": var}
        )

    secrets = [part.strip() for part in raw.split(separator)]
    logger.debug(f"Loaded {len(secrets)} secret(s) from ${var}")
    return KeyringConfig(secrets=secrets, encoding=encoding)
