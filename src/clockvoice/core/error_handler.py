"""Global Error Handling for ClockVoice

Exception hierarchy and centralized error logging. Operator mistakes in a
spoken or typed command are not exceptions: they come back from the
validator as a ValidationResult. The classes here cover the failures of the
surrounding machinery (configuration, collaborators, capture engine).
"""

import logging
import sys
from enum import Enum
from typing import Callable, Dict, Optional, Type


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ClockVoiceError(Exception):
    """Base exception class for ClockVoice."""
    
    def __init__(self, message: str, severity: ErrorSeverity = ErrorSeverity.MEDIUM):
        self.message = message
        self.severity = severity
        super().__init__(self.message)


class ConfigurationError(ClockVoiceError):
    """Error raised when configuration is invalid."""
    
    def __init__(self, message: str):
        super().__init__(message, ErrorSeverity.HIGH)


class ResolverError(ClockVoiceError):
    """Error raised when a date resolver or tagger collaborator misbehaves."""
    pass


class CaptureError(ClockVoiceError):
    """Error raised by the speech capture boundary."""
    pass


class RequestBuildError(ClockVoiceError):
    """Error raised when a command cannot be turned into a CRUD request."""
    pass


class ErrorHandler:
    """Logs errors at their severity and dispatches registered callbacks."""
    
    def __init__(self):
        """Initialize error handler."""
        self.logger = logging.getLogger(__name__)
        self.error_callbacks: Dict[Type[Exception], Callable[[Exception], None]] = {}
        
    def register_error_callback(self, exception_type: Type[Exception], 
                              callback: Callable[[Exception], None]):
        """Register a callback for specific exception types.
        
        Args:
            exception_type: The exception type to handle
            callback: Function to call when this exception occurs
        """
        self.error_callbacks[exception_type] = callback
        
    def handle_error(self, error: Exception, context: Optional[str] = None) -> bool:
        """Handle an error with appropriate logging and callbacks.
        
        Args:
            error: The exception that occurred
            context: Additional context about where the error occurred
            
        Returns:
            True if a registered callback handled the error, False otherwise
        """
        severity = self._get_error_severity(error)
        error_message = self._format_error_message(error, context)
        
        self._log_error(error_message, severity)
        
        # Most specific registered type wins
        for error_type in type(error).__mro__:
            callback = self.error_callbacks.get(error_type)
            if callback is not None:
                callback(error)
                return True
                
        return False
        
    def _get_error_severity(self, error: Exception) -> ErrorSeverity:
        """Determine error severity based on exception type.
        
        Args:
            error: The exception to analyze
            
        Returns:
            Appropriate severity level
        """
        if isinstance(error, ClockVoiceError):
            return error.severity
            
        # Mapping standard exceptions to severity levels
        severity_map = {
            FileNotFoundError: ErrorSeverity.MEDIUM,
            PermissionError: ErrorSeverity.HIGH,
            ValueError: ErrorSeverity.MEDIUM,
            MemoryError: ErrorSeverity.CRITICAL,
            KeyboardInterrupt: ErrorSeverity.LOW,
        }
        
        return severity_map.get(type(error), ErrorSeverity.MEDIUM)
        
    def _format_error_message(self, error: Exception, context: Optional[str] = None) -> str:
        message = str(error)
        if context:
            message = f"{context}: {message}"
            
        return message
        
    def _log_error(self, message: str, severity: ErrorSeverity):
        log_methods = {
            ErrorSeverity.LOW: self.logger.info,
            ErrorSeverity.MEDIUM: self.logger.warning,
            ErrorSeverity.HIGH: self.logger.error,
            ErrorSeverity.CRITICAL: self.logger.critical,
        }
        
        log_method = log_methods[severity]
        log_method(message, exc_info=sys.exc_info()[0] is not None)
