"""
Standardized Error Handling for cookiesignature
===============================================

This module defines the error kinds raised by signing and verification, and a
decorator that converts low-level failures into them.

Callers should match on ``error.kind`` (an :class:`ErrorKind`) or on the
exception class, never on object identity.
"""

import functools
import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional, Type

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Stable identifiers for every failure the package reports."""

    EMPTY_INPUT = "empty_input"
    NO_SECRETS_PROVIDED = "no_secrets_provided"
    EMPTY_SECRET = "empty_secret"
    INVALID_SIGNATURE = "invalid_signature"
    DECODING_ERROR = "decoding_error"


class SignatureError(Exception):
    """Base exception for all signing and verification errors."""

    kind: Optional[ErrorKind] = None
    log_level: int = logging.ERROR

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.context = context or {}
        super().__init__(message)

        # Log error with context for debugging
        context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        logger.log(
            self.log_level,
            f"Signature error: {message}" + (f" ({context_str})" if context_str else ""),
        )


class SignatureConfigurationError(SignatureError):
    """Raised when a keyring is built from invalid secrets."""

    pass


class NoSecretsProvidedError(SignatureConfigurationError):
    """Raised when a keyring is constructed without any secret."""

    kind = ErrorKind.NO_SECRETS_PROVIDED

    def __init__(
        self,
        message: str = "secret key must be provided",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, context)


class EmptySecretError(SignatureConfigurationError):
    """Raised when a secret in the list is empty."""

    kind = ErrorKind.EMPTY_SECRET

    def __init__(self, index: int, context: Optional[Dict[str, Any]] = None):
        self.index = index
        error_context = {"index": index}
        error_context.update(context or {})
        super().__init__(f"secret key at index {index} must not be empty", error_context)


class EmptyInputError(SignatureError):
    """Raised when the value to sign or unsign is an empty string."""

    kind = ErrorKind.EMPTY_INPUT
    log_level = logging.DEBUG


class InvalidSignatureError(SignatureError):
    """Raised when a tag is missing or does not match the recomputed digest."""

    kind = ErrorKind.INVALID_SIGNATURE
    log_level = logging.DEBUG

    def __init__(
        self,
        message: str = "invalid signature",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, context)


class DecodingError(SignatureError):
    """Raised when a tag or payload is not valid unpadded base64."""

    kind = ErrorKind.DECODING_ERROR
    log_level = logging.DEBUG

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        offset: Optional[int] = None,
    ):
        self.offset = offset
        super().__init__(message, context)


def with_error_handling(
    error_type: Type[SignatureError] = SignatureError,
    context: Optional[Dict[str, Any]] = None,
    catch: tuple = (Exception,),
):
    """
    Decorator that converts unexpected exceptions into ``error_type``.

    Args:
        error_type: Type of SignatureError to raise
        context: Additional context to include in error
        catch: Exception classes to convert; anything else propagates untouched
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except SignatureError:
                # Re-raise signature errors as-is
                raise
            except catch as e:
                error_context = (context or {}).copy()
                error_context.update(
                    {
                        "function": func.__name__,
                        "original_error": str(e),
                        "original_error_type": type(e).__name__,
                    }
                )
                raise error_type(f"Error in {func.__name__}: {e}", error_context) from e

        return wrapper

    return decorator
