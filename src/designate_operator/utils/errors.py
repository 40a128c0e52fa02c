"""Operator exceptions and error sanitization utilities."""

from __future__ import annotations

import re

from kubernetes.client.exceptions import ApiException


class OperatorError(Exception):
    """Base class for errors raised by the operator."""


class CollaboratorError(OperatorError):
    """A collaborator resource reported a failure."""


class DependencyNotReadyError(OperatorError):
    """A prerequisite resource does not exist yet or is still provisioning.

    This is an expected, recoverable state: callers report it with an
    informational condition and requeue after ``delay`` seconds.
    """

    def __init__(self, message: str, delay: float | None = None):
        super().__init__(message)
        self.delay = delay


def is_not_found(error: BaseException) -> bool:
    """Check whether an exception is a Kubernetes 404."""
    return isinstance(error, ApiException) and error.status == 404


def describe_api_error(error: Exception) -> str:
    """Return a short message for an exception, using the API reason when available."""
    if isinstance(error, ApiException):
        return f"({error.status}) {error.reason}"
    return str(error)


# Patterns that might expose sensitive information
SENSITIVE_PATTERNS = [
    r"(mysql\+pymysql://[^:/\s]+:)[^@\s]+@",
    r"(transport_url\s*=\s*\w+://[^:/\s]+:)[^@\s]+@",
]

# Fields to redact completely
SENSITIVE_FIELDS = {
    "password",
    "secret",
    "credentials",
    "token",
}


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove sensitive information.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with sensitive data redacted
    """
    sanitized = message

    # Credentials embedded in connection URLs
    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, r"\1[REDACTED]@", sanitized)

    for field in SENSITIVE_FIELDS:
        sanitized = re.sub(
            rf"{field}\s*[:=]\s*([^\s,;\)]+)",
            rf"{field}: [REDACTED]",
            sanitized,
            flags=re.IGNORECASE,
        )

    return sanitized


def sanitize_exception(error: BaseException) -> str:
    """Sanitize exception message.

    Args:
        error: Exception object

    Returns:
        Sanitized error message
    """
    if isinstance(error, ApiException):
        return sanitize_error_message(describe_api_error(error))
    return sanitize_error_message(str(error))

