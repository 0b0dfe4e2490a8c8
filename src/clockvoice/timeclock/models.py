"""Timeclock Command Models

Immutable value types exchanged between the extractors, the validator and
the caller of the interpreter.
"""

import calendar
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class CommandVerb(Enum):
    """Canonical timeclock edit verbs."""
    ADD = "add"
    CHANGE = "change"
    DELETE = "delete"


class PunchStatus(Enum):
    """Punch direction recorded with a timeclock row."""
    IN = "In"
    OUT = "Out"


CANONICAL_VERBS: Tuple[str, ...] = tuple(verb.value for verb in CommandVerb)

# A leap year, so that February 29 stays a valid wall-clock day
_VALIDATION_YEAR = 2000


@dataclass(frozen=True)
class DateTimeComponents:
    """Wall-clock month/day/hour/minute with no year or timezone attached."""
    month: int
    day: int
    hour: int
    minute: int
    
    @classmethod
    def from_datetime(cls, value: datetime) -> 'DateTimeComponents':
        return cls(month=value.month, day=value.day, hour=value.hour, minute=value.minute)
    
    def is_valid(self) -> bool:
        """Check that the components name a real calendar instant."""
        values = (self.month, self.day, self.hour, self.minute)
        if not all(isinstance(value, int) and not isinstance(value, bool) for value in values):
            return False
        if not 1 <= self.month <= 12:
            return False
        if not 0 <= self.hour <= 23 or not 0 <= self.minute <= 59:
            return False
        _, days_in_month = calendar.monthrange(_VALIDATION_YEAR, self.month)
        return 1 <= self.day <= days_in_month
    
    def to_datetime(self, year: int) -> datetime:
        """Anchor the components in a caller-chosen year."""
        return datetime(year, self.month, self.day, self.hour, self.minute)
    
    def time_string(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"
    
    def to_dict(self) -> Dict[str, int]:
        return {
            "month": self.month,
            "day": self.day,
            "hour": self.hour,
            "minute": self.minute
        }


@dataclass(frozen=True)
class ParsedCommand:
    """Fields extracted from one operator sentence.
    
    Every field except ``raw_text`` may be None when its extractor found
    nothing; only the validator decides whether that is acceptable.
    """
    verb: Optional[str] = None
    employee_name: Optional[str] = None
    row_number: Optional[int] = None
    date_time: Optional[DateTimeComponents] = None
    status: Optional[str] = None
    raw_text: str = ""
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "verb": self.verb,
            "employeeName": self.employee_name,
            "rowNumber": self.row_number,
            "dateTime": self.date_time.to_dict() if self.date_time else None,
            "status": self.status,
            "rawText": self.raw_text
        }


@dataclass(frozen=True)
class InterpreterConfig:
    """Per-call vocabulary supplied by the caller.
    
    ``allowed_verbs`` of None means any canonical verb is accepted; an empty
    ``available_employees`` means there is no roster to check names against.
    """
    allowed_verbs: Optional[Tuple[str, ...]] = CANONICAL_VERBS
    available_employees: Tuple[str, ...] = field(default_factory=tuple)
    
    def __post_init__(self):
        # Accept lists from callers while keeping the instance hashable
        if self.allowed_verbs is not None and not isinstance(self.allowed_verbs, tuple):
            object.__setattr__(self, 'allowed_verbs', tuple(self.allowed_verbs))
        if not isinstance(self.available_employees, tuple):
            object.__setattr__(self, 'available_employees', tuple(self.available_employees))
    
    @property
    def has_roster(self) -> bool:
        return len(self.available_employees) > 0
