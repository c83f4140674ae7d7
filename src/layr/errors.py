"""Error taxonomy shared by providers, the planner and plan storage."""

from __future__ import annotations

from enum import Enum


class LayrError(Exception):
    """Base exception for all Layr errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.code = code
        super().__init__(message)


class ProviderErrorKind(Enum):
    """Why a provider call failed.

    The CLI uses this to pick remediation guidance, so every ProviderError
    carries one.
    """

    NOT_CONFIGURED = "not_configured"
    AUTH = "auth"
    RATE_LIMITED = "rate_limited"
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"
    NETWORK = "network"
    EMPTY_RESPONSE = "empty_response"
    INVALID_RESPONSE = "invalid_response"
    REQUEST = "request"
    UNKNOWN = "unknown"


class ProviderError(LayrError):
    """Raised when an AI provider cannot produce a usable response."""

    def __init__(
        self,
        message: str,
        provider: str,
        kind: ProviderErrorKind = ProviderErrorKind.UNKNOWN,
        status_code: int | None = None,
    ) -> None:
        self.provider = provider
        self.kind = kind
        self.status_code = status_code
        self.detail = message
        super().__init__(f"[{provider}] {message}", code=kind.value)


class UnsupportedProviderError(LayrError):
    """Raised when the configured provider name is not registered."""

    def __init__(self, provider_type: str) -> None:
        self.provider_type = provider_type
        super().__init__(
            f'Unsupported AI provider: "{provider_type}"',
            code="unsupported_provider",
        )


class PlanParseError(LayrError):
    """Raised when no JSON object can be recovered from a model response."""

    def __init__(self, message: str, raw_text: str) -> None:
        self.raw_text = raw_text
        super().__init__(message, code="plan_parse")


class ConfigurationError(LayrError):
    """Raised for invalid or unreadable configuration."""


class FileSystemError(LayrError):
    """Raised when plan artifacts cannot be read or written."""


class TemplateError(LayrError):
    """Raised when a plan template cannot be loaded."""


# Patterns matched case-insensitively against transport error text
RATE_LIMIT_PATTERNS = [
    "rate limit",
    "rate_limit",
    "ratelimit",
    "429",
    "too many requests",
    "throttl",
    "quota",
]

AUTH_PATTERNS = [
    "401",
    "403",
    "unauthorized",
    "forbidden",
    "invalid api key",
    "api_key_invalid",
    "authentication",
]

UNAVAILABLE_PATTERNS = [
    "overloaded",
    "503",
    "502",
    "500",
    "unavailable",
    "service error",
    "temporarily",
    "try again later",
    "capacity",
]

TIMEOUT_PATTERNS = [
    "timed out",
    "timeout",
    "408",
    "504",
    "etimedout",
]

NETWORK_PATTERNS = [
    "connection",
    "network",
    "econnrefused",
    "enotfound",
    "name or service not known",
    "nodename nor servname",
    "unreachable",
]


def classify_api_error(error: Exception) -> ProviderErrorKind:
    """Classify a transport error by parsing its message."""
    error_str = str(error).lower()

    # Timeouts first: "connection timed out" is a timeout, not a network error
    for pattern in TIMEOUT_PATTERNS:
        if pattern in error_str:
            return ProviderErrorKind.TIMEOUT

    for pattern in AUTH_PATTERNS:
        if pattern in error_str:
            return ProviderErrorKind.AUTH

    for pattern in RATE_LIMIT_PATTERNS:
        if pattern in error_str:
            return ProviderErrorKind.RATE_LIMITED

    for pattern in UNAVAILABLE_PATTERNS:
        if pattern in error_str:
            return ProviderErrorKind.UNAVAILABLE

    for pattern in NETWORK_PATTERNS:
        if pattern in error_str:
            return ProviderErrorKind.NETWORK

    return ProviderErrorKind.UNKNOWN


def classify_status(status_code: int) -> ProviderErrorKind:
    """Map an HTTP status code to an error kind."""
    if status_code in (401, 403):
        return ProviderErrorKind.AUTH
    if status_code == 429:
        return ProviderErrorKind.RATE_LIMITED
    if status_code in (408, 504):
        return ProviderErrorKind.TIMEOUT
    if status_code in (500, 502, 503):
        return ProviderErrorKind.UNAVAILABLE
    if 400 <= status_code < 500:
        return ProviderErrorKind.REQUEST
    return ProviderErrorKind.UNKNOWN


_KIND_MESSAGES: dict[ProviderErrorKind, str] = {
    ProviderErrorKind.NOT_CONFIGURED: (
        "Provider is not configured. Set an API key or endpoint in settings."
    ),
    ProviderErrorKind.AUTH: "Authentication failed. Please verify your API key.",
    ProviderErrorKind.RATE_LIMITED: (
        "Rate limit or quota exceeded. Please wait a moment and try again."
    ),
    ProviderErrorKind.UNAVAILABLE: (
        "Service temporarily unavailable. Please try again in a few minutes."
    ),
    ProviderErrorKind.TIMEOUT: (
        "Request timed out. Try again with a simpler project description."
    ),
    ProviderErrorKind.NETWORK: (
        "Network connection error. Check your internet connection and "
        "firewall settings."
    ),
    ProviderErrorKind.EMPTY_RESPONSE: (
        "AI service returned an empty response. Please try again."
    ),
    ProviderErrorKind.INVALID_RESPONSE: (
        "AI service returned a malformed response. Please try again shortly."
    ),
    ProviderErrorKind.REQUEST: (
        "Request was rejected. Check the configured model and endpoint."
    ),
    ProviderErrorKind.UNKNOWN: "Unexpected error while contacting the AI service.",
}


def describe_error_kind(
    kind: ProviderErrorKind, status_code: int | None = None
) -> str:
    """Return a user-actionable message for an error kind."""
    message = _KIND_MESSAGES[kind]
    if status_code is not None:
        return f"{message} (HTTP {status_code})"
    return message
