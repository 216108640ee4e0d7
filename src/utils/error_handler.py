"""
Error handling utilities
"""

from typing import Optional
from src.models.response import ErrorResponse
from src.utils.logger import logger


class TrackerError(Exception):
    """Base exception for task tracker errors"""
    pass


class ValidationError(TrackerError):
    """Invalid input; raised before any store mutation"""
    pass


class StoreNotInitialized(TrackerError):
    """Task sheet does not exist yet"""

    def __init__(self, sheet_name: str):
        self.sheet_name = sheet_name
        super().__init__(
            f"Task sheet '{sheet_name}' not found. Please initialize the Task Manager first."
        )


class PartialBatchFailure(TrackerError):
    """One chunk of a batch append failed"""

    def __init__(self, chunk_index: int, chunk_size: int, cause: Exception):
        self.chunk_index = chunk_index
        self.chunk_size = chunk_size
        self.cause = cause
        super().__init__(f"Batch {chunk_index + 1} ({chunk_size} rows) failed: {cause}")


class APIError(TrackerError):
    """API error exception"""
    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


def handle_error(error: Exception) -> ErrorResponse:
    """
    Handle error and return user-friendly message

    Args:
        error: Exception to handle

    Returns:
        ErrorResponse with user-friendly message
    """
    if isinstance(error, ValidationError):
        logger.warning(f"Validation failed: {error}")
        return ErrorResponse(
            message=f"Validation error: {error}",
            error_code="validation_error",
        )

    if isinstance(error, StoreNotInitialized):
        logger.warning(str(error))
        return ErrorResponse(
            message=str(error),
            error_code="store_not_initialized",
        )

    logger.error(f"Error occurred: {error}", exc_info=True)

    if isinstance(error, APIError):
        return ErrorResponse(
            message=f"Spreadsheet API error: {error.message}",
            error_code=error.error_code,
        )

    # Generic error message
    return ErrorResponse(
        message=f"Operation failed: {error}",
    )


def format_error_message(error: Exception) -> str:
    """
    Format error message for user

    Args:
        error: Exception to format

    Returns:
        User-friendly error message
    """
    error_response = handle_error(error)
    return error_response.message
