"""
CultiMap - Custom Exceptions Module

This module defines custom exception classes for specific error cases
in the CultiMap application.

Note that the selection engine itself never raises on pointer input:
out-of-order transitions are tolerated as no-ops. These exceptions cover
value validation and map file loading only.
"""


class CultiMapError(Exception):
    """Base exception for all CultiMap errors.

    All custom exceptions should inherit from this class to allow
    catching any CultiMap-specific error.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional technical details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class ValidationError(CultiMapError):
    """Raised when input validation fails."""

    def __init__(
        self,
        field: str,
        value: object = None,
        reason: str | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            field: Name of the field that failed validation
            value: Optional value that failed validation
            reason: Optional reason for the validation failure
        """
        self.field = field
        self.value = value
        self.reason = reason

        msg = f"Validation error for '{field}'"
        if reason:
            msg += f": {reason}"

        details = f"value={value!r}" if value is not None else None
        super().__init__(msg, details=details)


class MapFileNotFoundError(CultiMapError):
    """Raised when a placement map file does not exist."""

    def __init__(self, file_path: str) -> None:
        """Initialize the exception.

        Args:
            file_path: Path to the file that was not found
        """
        self.file_path = file_path
        super().__init__(f"Map file not found: {file_path}", details=f"path={file_path}")


class InvalidMapError(CultiMapError):
    """Raised when a placement map is malformed or inconsistent."""

    def __init__(self, source: str, reason: str | None = None) -> None:
        """Initialize the exception.

        Args:
            source: File path or description of the map being loaded
            reason: Optional reason why the map is invalid
        """
        self.source = source
        self.reason = reason
        msg = f"Invalid placement map: {source}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg, details=f"source={source}")


class ConfigurationError(CultiMapError):
    """Raised when there's a configuration-related error."""

    def __init__(self, setting_name: str | None = None, reason: str | None = None) -> None:
        """Initialize the exception.

        Args:
            setting_name: Optional name of the problematic setting
            reason: Optional reason for the error
        """
        self.setting_name = setting_name
        self.reason = reason

        if setting_name:
            msg = f"Configuration error for '{setting_name}'"
        else:
            msg = "Configuration error"

        if reason:
            msg += f": {reason}"

        super().__init__(msg)


# Exception hierarchy summary:
# CultiMapError (base)
# ├── ValidationError
# ├── MapFileNotFoundError
# ├── InvalidMapError
# └── ConfigurationError
