"""Custom exceptions for Receipt Split."""


class ReceiptSplitError(Exception):
    """Base exception for all Receipt Split errors."""

    pass


class ConfigurationError(ReceiptSplitError):
    """Raised when configuration is invalid or missing."""

    pass


class ValidationError(ReceiptSplitError):
    """Raised when an expense or roster fails validation."""

    pass


class ReceiptError(ValidationError):
    """Raised when the receipt photo for an expense is missing or unusable."""

    def __init__(self, path: str, message: str | None = None):
        self.path = path
        super().__init__(message or f"Receipt photo is required: {path}")


class StorageError(ReceiptSplitError):
    """Raised when the expense list cannot be persisted."""

    pass


class ReportError(ReceiptSplitError):
    """Raised when the PDF report cannot be generated."""

    pass
