"""ClockVoice - Spoken Timeclock Edits

Turns free-form operator sentences such as "change row 3 for carmen to
january 20 at 1420 status out" into validated timeclock commands.
"""

__version__ = "0.1.0"
__author__ = "ClockVoice Team"
__description__ = "Natural language interpreter for timeclock edits"

from .timeclock.command_interpreter import CommandInterpreter, InterpretationResult, interpret
from .timeclock.models import DateTimeComponents, InterpreterConfig, ParsedCommand
from .timeclock.validators import ValidationErrorCode, ValidationResult

__all__ = [
    "CommandInterpreter",
    "InterpretationResult",
    "interpret",
    "DateTimeComponents",
    "InterpreterConfig",
    "ParsedCommand",
    "ValidationErrorCode",
    "ValidationResult"
]
