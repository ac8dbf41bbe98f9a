"""
PlanetFeed Custom Exceptions
===========================

Custom exception hierarchy for PlanetFeed with error codes, context
information, and user-friendly error messages.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for categorizing exceptions."""

    # Configuration errors (C001-C099)
    CONFIG_INVALID = "C001"

    # Feed retrieval errors (F001-F099)
    FEED_NETWORK_ERROR = "F001"
    FEED_FETCH_TIMEOUT = "F002"
    FEED_PARSE_ERROR = "F003"
    FEED_HTTP_STATUS = "F004"

    # Author roster errors (R001-R099)
    ROSTER_NOT_FOUND = "R001"
    ROSTER_INVALID = "R002"

    # Publishing errors (L001-L099)
    PUBLISH_FAILED = "L001"


class FeedErrorKind(str, Enum):
    """Classification of a single feed retrieval failure."""

    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    PARSE = "parse"
    HTTP_STATUS = "http_status"


_FEED_ERROR_CODES = {
    FeedErrorKind.TRANSPORT: ErrorCode.FEED_NETWORK_ERROR,
    FeedErrorKind.TIMEOUT: ErrorCode.FEED_FETCH_TIMEOUT,
    FeedErrorKind.PARSE: ErrorCode.FEED_PARSE_ERROR,
    FeedErrorKind.HTTP_STATUS: ErrorCode.FEED_HTTP_STATUS,
}


class PlanetFeedError(Exception):
    """Base exception for all PlanetFeed errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        context: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        recoverable: bool = False,
    ):
        """Initialize PlanetFeed error.

        Args:
            message: Technical error message for logging
            error_code: Categorized error code
            context: Additional context information
            user_message: User-friendly error message
            recoverable: Whether the error is recoverable
        """
        super().__init__(message)
        self.error_code = error_code
        self.context = context or {}
        self.user_message = user_message or message
        self.recoverable = recoverable

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code.value if self.error_code else None,
            "error_message": str(self),
            "user_message": self.user_message,
            "context": self.context,
            "recoverable": self.recoverable,
        }

    def __str__(self) -> str:
        """String representation with error code."""
        if self.error_code:
            return f"[{self.error_code.value}] {super().__str__()}"
        return super().__str__()


class ConfigurationError(PlanetFeedError):
    """Configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        """Initialize configuration error.

        Args:
            message: Error message
            config_key: Configuration key that caused the error
            **kwargs: Additional arguments for PlanetFeedError
        """
        context = kwargs.get("context", {})
        if config_key:
            context["config_key"] = config_key

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.CONFIG_INVALID),
            context=context,
            user_message=kwargs.get("user_message", f"Configuration error: {message}"),
            **{
                k: v
                for k, v in kwargs.items()
                if k not in ["context", "error_code", "user_message"]
            },
        )


class FeedError(PlanetFeedError):
    """Retrieval or parsing failure for a single feed URI.

    Always recoverable: the retry policy retries it and the source reader
    absorbs it once the retry budget is spent.
    """

    def __init__(
        self,
        message: str,
        kind: FeedErrorKind,
        feed_url: str,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
        **kwargs,
    ):
        """Initialize feed error.

        Args:
            message: Error message
            kind: Failure classification
            feed_url: Feed URI that failed
            cause: Original exception, if any
            status_code: HTTP status, only for HTTP_STATUS failures
            **kwargs: Additional arguments for PlanetFeedError
        """
        self.kind = FeedErrorKind(kind)
        self.feed_url = feed_url
        self.cause = cause
        self.status_code = status_code

        context = kwargs.get("context", {})
        context["feed_url"] = feed_url
        context["kind"] = self.kind.value
        if status_code is not None:
            context["status_code"] = status_code
        if cause is not None:
            context["cause"] = repr(cause)

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", _FEED_ERROR_CODES[self.kind]),
            context=context,
            user_message=kwargs.get(
                "user_message", f"Feed retrieval failed: {message}"
            ),
            recoverable=True,
        )


class RosterError(PlanetFeedError):
    """Author roster could not be read or parsed."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if path:
            context["path"] = path

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.ROSTER_INVALID),
            context=context,
            user_message=kwargs.get("user_message", "Author roster unavailable"),
        )


class PublishError(PlanetFeedError):
    """Serialized feed could not be published."""

    def __init__(self, message: str, target: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if target:
            context["target"] = target

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.PUBLISH_FAILED),
            context=context,
            user_message=kwargs.get("user_message", "Publishing the feed failed"),
            recoverable=True,
        )


def get_user_friendly_message(exception: Exception) -> str:
    """Get user-friendly error message for any exception.

    Args:
        exception: Exception to get message for

    Returns:
        User-friendly error message
    """
    if isinstance(exception, PlanetFeedError):
        return exception.user_message

    return "An unexpected error occurred. Please try again later."
