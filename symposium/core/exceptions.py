"""
Custom Exceptions - Application-specific error classes.

Each exception carries an HTTP status and a stable error code so the API
layer can render one consistent error body. Upstream failures are wrapped
here so callers never handle requests or SQLAlchemy exceptions directly.
"""
from typing import Iterable, Optional


class SymposiumError(Exception):
    """
    Base exception for all application errors.

    Subclass this for specific error types.
    """
    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Convert to error response dict."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ValidationError(SymposiumError):
    """Raised when input validation fails."""
    status_code = 400
    error_code = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, details=f"field={field}" if field else None)
        self.field = field


class NotFoundError(SymposiumError):
    """Raised when a symposium, consultant, message or card does not exist."""
    status_code = 404
    error_code = "not_found"

    def __init__(self, resource: str, resource_id):
        super().__init__(
            message=f"{resource} not found: {resource_id}",
            details=f"{resource.lower()}_id={resource_id}"
        )
        self.resource = resource
        self.resource_id = resource_id


class ConfigurationMissingError(SymposiumError):
    """Raised when a data-backed consultant has no usable API configuration."""
    status_code = 400
    error_code = "configuration_missing"

    def __init__(self, message: str, consultant_id: Optional[int] = None):
        super().__init__(
            message,
            details=f"consultant_id={consultant_id}" if consultant_id is not None else None
        )
        self.consultant_id = consultant_id


class SchemaMismatchError(SymposiumError):
    """Raised when a tabular query references columns absent from the table."""
    status_code = 400
    error_code = "schema_mismatch"

    def __init__(self, unknown_fields: Iterable[str], valid_fields: Iterable[str], table_name: str = ""):
        self.unknown_fields = sorted(set(unknown_fields))
        self.valid_fields = list(valid_fields)
        table = f' "{table_name}"' if table_name else ""
        super().__init__(
            message=(
                f"Unknown field(s) for table{table}: {', '.join(self.unknown_fields)}. "
                f"Valid fields are: {', '.join(self.valid_fields)}"
            ),
            details=f"table={table_name}" if table_name else None
        )


class LLMError(SymposiumError):
    """Raised when the LLM gateway fails or returns an unexpected payload."""
    status_code = 503
    error_code = "llm_error"

    def __init__(self, message: str = "LLM service unavailable"):
        super().__init__(message)


class DataSourceError(SymposiumError):
    """Raised when the tabular or search adapter fails."""
    status_code = 502
    error_code = "data_source_error"

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message, details=f"source={source}" if source else None)
        self.source = source


class DatabaseError(SymposiumError):
    """Raised when database operations fail."""
    status_code = 503
    error_code = "database_error"

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message)
