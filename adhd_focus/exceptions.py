"""
Standardized exception hierarchy for the gamification engine
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class FocusEngineError(Exception):
    """
    Base exception for all gamification engine errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise FocusEngineError(
            message="Failed to persist game state",
            user_id="user-1",
            operation="process_event",
            context={"event_type": "task_complete"}
        )
    """

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "Something went wrong. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # 'message' is reserved by LogRecord
            "request_id": self.request_id,
            "user_id": self.user_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for API responses"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Input Errors
# ==========================================

class InvalidInputError(FocusEngineError):
    """
    Raised when engine input fails validation, before any state changes

    Examples:
    - Negative XP amount
    - Activity date earlier than the last active date
    - Streak shields outside 0-3

    Example:
        raise InvalidInputError(
            message="XP amount must not be negative",
            field="xp_amount",
            value=-5,
        )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        kwargs.setdefault("user_message", f"Invalid {field}: {message}" if field else message)
        super().__init__(
            message=message,
            context={"field": field, "value": value},
            **kwargs
        )


class CatalogError(InvalidInputError):
    """Static catalog data references an unknown code or is malformed"""

    def __init__(
        self,
        message: str,
        catalog: Optional[str] = None,
        code: Optional[str] = None,
        **kwargs
    ):
        self.catalog = catalog
        self.code = code
        super().__init__(
            message=message,
            field=f"{catalog}.code" if catalog else "code",
            value=code,
            user_message="The game catalog is misconfigured. Please contact support.",
            **kwargs
        )


# ==========================================
# Store Errors (host side)
# ==========================================

class StoreError(FocusEngineError):
    """
    Base class for errors raised by the persistence boundary
    """
    pass


class RecordNotFoundError(StoreError):
    """Requested user, quest or habit record does not exist"""

    def __init__(
        self,
        message: str,
        record_type: Optional[str] = None,
        record_id: Optional[str] = None,
        **kwargs
    ):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(
            message=message,
            user_message=f"{record_type or 'Record'} not found.",
            context={"record_type": record_type, "record_id": record_id},
            **kwargs
        )


class StateConflictError(StoreError):
    """Game state was written by another event since it was read"""

    def __init__(
        self,
        message: str,
        expected_version: Optional[int] = None,
        actual_version: Optional[int] = None,
        **kwargs
    ):
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            message=message,
            user_message="Your progress changed while we were saving. Please try again.",
            context={"expected_version": expected_version, "actual_version": actual_version},
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(FocusEngineError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )


# ==========================================
# Helper Functions
# ==========================================

def wrap_store_exception(
    error: Exception,
    operation: str,
    user_id: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> FocusEngineError:
    """
    Wrap exceptions raised by a host store into our exception hierarchy

    Args:
        error: Original exception
        operation: What operation was being performed
        user_id: User ID if applicable
        context: Additional context

    Returns:
        Appropriate FocusEngineError subclass

    Example:
        try:
            await store.save_user_state(user_id, state)
        except Exception as e:
            raise wrap_store_exception(e, operation="save_user_state", user_id=user_id)
    """
    if isinstance(error, FocusEngineError):
        return error

    if isinstance(error, KeyError):
        return RecordNotFoundError(
            message=f"{operation} failed: missing record {error}",
            record_id=str(error.args[0]) if error.args else None,
            user_id=user_id,
            operation=operation,
            cause=error
        )

    if isinstance(error, (ValueError, TypeError)):
        return InvalidInputError(
            message=f"{operation} failed: {str(error)}",
            user_id=user_id,
            operation=operation,
            cause=error
        )

    return StoreError(
        message=f"{operation} failed: {str(error)}",
        user_id=user_id,
        operation=operation,
        context=context,
        cause=error
    )
