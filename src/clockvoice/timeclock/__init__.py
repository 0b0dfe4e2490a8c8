"""Timeclock command models, validation and request building."""

from .models import CommandVerb, DateTimeComponents, InterpreterConfig, ParsedCommand, PunchStatus
from .validators import CommandValidator, ValidationErrorCode, ValidationResult
from .request_builder import build_crud_request

__all__ = [
    "CommandVerb",
    "DateTimeComponents",
    "InterpreterConfig",
    "ParsedCommand",
    "PunchStatus",
    "CommandValidator",
    "ValidationErrorCode",
    "ValidationResult",
    "build_crud_request"
]
