"""Application exception hierarchy.

Document-scoped failures (unsupported format, corrupt payload, oracle
credential or quota problems) stop one document's pipeline. Chunk- and
record-scoped failures (malformed oracle output, invalid records) are
absorbed by the question extractor and only logged.
"""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ConfigurationError(AppError):
    """Raised when configuration is invalid or missing."""
    pass


class NotFoundError(AppError):
    """Raised when a referenced document, question or context does not exist."""
    pass


class UploadRejectedError(AppError):
    """Raised when an uploaded file fails intake checks (type or size)."""

    def __init__(self, message: str, too_large: bool = False):
        super().__init__(message)
        self.too_large = too_large


class UnsupportedFormatError(AppError):
    """Raised when no extractor adapter exists for a media type."""
    pass


class ExtractionError(AppError):
    """Raised when a format library cannot parse a payload."""
    pass


class OracleError(AppError):
    """Base exception for generative and embedding oracle failures."""
    pass


class OracleAuthError(OracleError):
    """Raised when the oracle rejects the configured credentials."""
    pass


class OracleQuotaError(OracleError):
    """Raised when the oracle reports an exhausted quota."""
    pass


class OracleTimeoutError(OracleError):
    """Raised when an oracle call exceeds its request timeout."""
    pass


class OracleUnavailableError(OracleError):
    """Raised on transient oracle failures (network errors, 5xx, rate limiting)."""
    pass


class OracleMalformedOutputError(OracleError):
    """Raised when an oracle response does not have the expected shape."""
    pass


class RecordValidationError(AppError):
    """Raised when a single extracted question record fails validation."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
