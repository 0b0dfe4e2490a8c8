"""Command Validators for Timeclock Edits

Checks a parsed command against the caller's vocabulary and the required
fields of each verb. Checks run in a fixed order and the first failure is
the one reported.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from ..core.logging_manager import LoggingManager
from ..intelligence.entity_extractor import NameResolver
from .models import InterpreterConfig, ParsedCommand


class ValidationErrorCode(Enum):
    """Reasons a parsed command is rejected."""
    MISSING_VERB = "MissingVerb"
    INVALID_VERB = "InvalidVerb"
    MISSING_NAME = "MissingName"
    EMPLOYEE_NOT_FOUND = "EmployeeNotFound"
    MISSING_ROW_NUMBER = "MissingRowNumber"
    INVALID_ROW_NUMBER = "InvalidRowNumber"
    MISSING_DATE_TIME = "MissingDateTime"
    INVALID_DATE_TIME = "InvalidDateTime"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one command."""
    valid: bool
    error: Optional[str] = None
    error_code: Optional[ValidationErrorCode] = None
    
    @classmethod
    def success(cls) -> 'ValidationResult':
        return cls(valid=True)
    
    @classmethod
    def failure(cls, code: ValidationErrorCode, message: str) -> 'ValidationResult':
        return cls(valid=False, error=message, error_code=code)
    
    def to_dict(self):
        return {
            "valid": self.valid,
            "error": self.error,
            "errorCode": self.error_code.value if self.error_code else None
        }


ROW_VERBS = ('change', 'delete')
DATE_TIME_VERBS = ('add', 'change')


class CommandValidator:
    """Ordered checklist over a ParsedCommand."""
    
    def __init__(self):
        self.logger = LoggingManager.get_logger(__name__)
        
    def _build_checks(self) -> List[Callable[[ParsedCommand, InterpreterConfig], Optional[ValidationResult]]]:
        return [
            self._check_verb,
            self._check_employee,
            self._check_row_number,
            self._check_date_time,
        ]
    
    def validate(self, command: ParsedCommand, config: InterpreterConfig) -> ValidationResult:
        """Validate a parsed command.
        
        Args:
            command: Fields extracted from the operator sentence
            config: Allowed verbs and roster for this call
            
        Returns:
            Success, or the first failing check
        """
        for check in self._build_checks():
            result = check(command, config)
            if result is not None:
                self.logger.debug(f"Validation failed: {result.error_code.value}")
                return result
        return ValidationResult.success()
    
    def _check_verb(self, command: ParsedCommand, config: InterpreterConfig) -> Optional[ValidationResult]:
        if not command.verb:
            return ValidationResult.failure(
                ValidationErrorCode.MISSING_VERB,
                'Could not identify action verb. Please say "add", "change", or "delete".'
            )
        
        if config.allowed_verbs is not None and command.verb not in config.allowed_verbs:
            return ValidationResult.failure(
                ValidationErrorCode.INVALID_VERB,
                f"Invalid verb. Must be one of: {', '.join(config.allowed_verbs)}"
            )
        return None
    
    def _check_employee(self, command: ParsedCommand, config: InterpreterConfig) -> Optional[ValidationResult]:
        if not command.employee_name:
            return ValidationResult.failure(
                ValidationErrorCode.MISSING_NAME,
                "Could not identify employee name."
            )
        
        if config.has_roster and NameResolver.match_roster(command.employee_name, config.available_employees) is None:
            return ValidationResult.failure(
                ValidationErrorCode.EMPLOYEE_NOT_FOUND,
                f'Employee "{command.employee_name}" not found in employee list. '
                f"Available: {', '.join(config.available_employees)}"
            )
        return None
    
    def _check_row_number(self, command: ParsedCommand, config: InterpreterConfig) -> Optional[ValidationResult]:
        row_number = command.row_number
        
        if row_number is None:
            if command.verb in ROW_VERBS:
                return ValidationResult.failure(
                    ValidationErrorCode.MISSING_ROW_NUMBER,
                    "Row number is required for change and delete actions."
                )
            return None
        
        # A row given with any verb must still be a positive integer
        if not isinstance(row_number, int) or isinstance(row_number, bool) or row_number < 1:
            return ValidationResult.failure(
                ValidationErrorCode.INVALID_ROW_NUMBER,
                "Row number must be a positive number."
            )
        return None
    
    def _check_date_time(self, command: ParsedCommand, config: InterpreterConfig) -> Optional[ValidationResult]:
        if command.verb not in DATE_TIME_VERBS:
            return None
        
        if command.date_time is None:
            return ValidationResult.failure(
                ValidationErrorCode.MISSING_DATE_TIME,
                "Date and time are required for add and change actions."
            )
        
        if not command.date_time.is_valid():
            return ValidationResult.failure(
                ValidationErrorCode.INVALID_DATE_TIME,
                "Invalid date/time format."
            )
        return None
