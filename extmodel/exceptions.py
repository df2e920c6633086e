"""
extmodel Exception Hierarchy

Centralized exception classes for structured error handling across the codebase.
All extmodel-specific exceptions inherit from ExtModelError.

Usage:
    from extmodel.exceptions import ParseFailure, UnexpectedShapeError

    try:
        parsed = parser.parse(text)
    except ParseFailure as e:
        logger.warning(f"Parse failed: {e}")
"""


class ExtModelError(Exception):
    """Base exception for all extmodel errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(ExtModelError):
    """Error in extmodel configuration."""

    pass


# =============================================================================
# Parse Errors
# =============================================================================


class ParseFailure(ExtModelError):
    """Source text could not be turned into a syntax tree."""

    def __init__(self, message: str, details: dict | None = None, cause: Exception | None = None):
        super().__init__(message, details)
        self.cause = cause


class SyntaxFailure(ParseFailure):
    """Source text parsed into a tree that contains syntax errors."""

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        cause: Exception | None = None,
    ):
        details = {}
        if line is not None:
            details["line"] = line
        if column is not None:
            details["column"] = column
        super().__init__(message, details, cause)
        self.line = line
        self.column = column


# =============================================================================
# Extraction Errors
# =============================================================================


class ExtractionError(ExtModelError):
    """Base class for recoverable extraction conditions."""

    pass


class UnexpectedShapeError(ExtractionError):
    """A declaration does not have the literal form its key requires."""

    def __init__(self, message: str, key: str | None = None, line: int | None = None):
        details = {}
        if key:
            details["key"] = key
        if line is not None:
            details["line"] = line
        super().__init__(message, details)
        self.key = key
        self.line = line


class UnresolvedReferenceError(ExtractionError):
    """A call chain cannot be statically resolved to a dotted class name."""

    pass


class DocParseAnomaly(ExtractionError):
    """A doc comment line matched no known tag shape."""

    pass


# =============================================================================
# Request / Registry Errors
# =============================================================================


class RequestValidationError(ExtModelError):
    """A parse request payload is structurally invalid."""

    def __init__(self, message: str, errors: list | None = None):
        details = {"errors": errors} if errors else {}
        super().__init__(message, details)
        self.errors = errors or []


class RegistryError(ExtModelError):
    """Error loading or querying the component registry."""

    pass
