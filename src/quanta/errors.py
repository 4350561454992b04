"""Custom exceptions for clearer error handling across the terminal."""


class QuantaError(Exception):
    """Base exception for all terminal-specific errors."""


class UnknownTimeframe(QuantaError, ValueError):
    """Raised when a timeframe identifier is outside the fixed catalog."""


class UpstreamUnavailable(QuantaError):
    """Raised when live market data cannot be obtained from the provider."""


class MalformedRecommendationResponse(QuantaError):
    """Raised when the advisory-text provider returns an unusable payload."""
