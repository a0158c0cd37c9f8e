# habit_tracker/utils/error_handler.py
"""
Centralized error handling and validation for htrack.
"""
import json
import logging
from functools import wraps
from typing import Any

logger = logging.getLogger(__name__)


class HabitError(Exception):
    """Base class for every error htrack reports to the user."""
    pass


class ValidationError(ValueError):
    """Raised when data validation fails."""
    pass


class InvalidDate(ValidationError):
    """Raised for a malformed date string or a date after today."""

    def __init__(self, value: Any, reason: str = "not a valid YYYY-MM-DD date"):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid date '{value}': {reason}")


class HabitNotFound(HabitError):
    """Raised when an operation names a habit that is not in the collection."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Habit '{name}' not found.")


class DuplicateHabit(HabitError):
    """Raised when adding a habit whose name is already taken."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Habit '{name}' already exists.")


class TerminalUnavailable(HabitError):
    """Raised when the terminal width cannot be determined."""
    pass


class StorageError(HabitError):
    """Raised when the habit data file cannot be read or written."""
    pass


def handle_storage_errors(operation_name: str):
    """Decorator for consistent data-file error handling."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except StorageError:
                raise
            except json.JSONDecodeError as e:
                logger.error(f"{operation_name} - Corrupt data file: {e}")
                raise StorageError(
                    f"Data file is not valid JSON (line {e.lineno}, column {e.colno})") from e
            except UnicodeDecodeError as e:
                logger.error(f"{operation_name} - Corrupt data file: {e}")
                raise StorageError(
                    f"Data file is not valid UTF-8 (byte {e.start})") from e
            except OSError as e:
                logger.error(f"{operation_name} - IO error: {e}")
                raise StorageError(f"{operation_name} failed: {e}") from e
            except ValidationError as e:
                logger.warning(f"{operation_name} - Validation error: {e}")
                raise
            except Exception as e:
                logger.error(
                    f"{operation_name} - Unexpected error: {e}", exc_info=True)
                raise
        return wrapper
    return decorator
