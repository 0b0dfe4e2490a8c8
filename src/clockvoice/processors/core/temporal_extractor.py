"""Temporal Extractor for Timeclock Commands

Natural language date and time resolution for punch edits. The resolver finds
date and time expressions, records which calendar components were actually
stated (certain) and which were filled in from the reference moment
(implied), and the extractor turns the first result into wall-clock
month/day/hour/minute components.
"""

import re
import calendar
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Any, Tuple

from dateutil import relativedelta
from dateutil.tz import gettz

from ...core.error_handler import ResolverError
from ...core.logging_manager import LoggingManager
from ...timeclock.models import DateTimeComponents


COMPONENT_NAMES = ("year", "month", "day", "hour", "minute")


def _build_month_names() -> Dict[str, int]:
    """Build month name to number mapping, including abbreviations."""
    months = {}
    for i, name in enumerate(calendar.month_name[1:], 1):
        months[name.lower()] = i
        months[name[:3].lower()] = i
    months["sept"] = 9
    return months


def _build_day_names() -> Dict[str, int]:
    """Build day name to weekday number mapping (0=Monday)."""
    return {name.lower(): i for i, name in enumerate(calendar.day_name)}


MONTH_NAMES = _build_month_names()
DAY_NAMES = _build_day_names()

MONTH_PATTERN = "|".join(sorted(MONTH_NAMES, key=len, reverse=True))
WEEKDAY_PATTERN = "|".join(DAY_NAMES)
MERIDIEM_PATTERN = r"a\.?m\.?|p\.?m\.?"

# Combine a date and a time only when they sit this close together
COMBINE_WINDOW = 50


@dataclass
class ParsedComponents:
    """Calendar components of one resolved expression.
    
    Known values were stated in the text; implied values were defaulted
    from the reference moment.
    """
    known_values: Dict[str, int] = field(default_factory=dict)
    implied_values: Dict[str, int] = field(default_factory=dict)
    
    def get(self, component: str) -> Optional[int]:
        if component in self.known_values:
            return self.known_values[component]
        return self.implied_values.get(component)
    
    def is_certain(self, component: str) -> bool:
        return component in self.known_values
    
    def assign(self, component: str, value: int):
        self.known_values[component] = value
        self.implied_values.pop(component, None)
    
    def imply(self, component: str, value: int):
        if component not in self.known_values:
            self.implied_values[component] = value
    
    def date(self) -> datetime:
        """Best-guess instant built from known and implied values."""
        values = [self.get(name) for name in COMPONENT_NAMES]
        if any(value is None for value in values):
            raise ResolverError(f"Incomplete components: {self.known_values} / {self.implied_values}")
        return datetime(*values)


@dataclass
class ParsedResult:
    """One date/time expression found in the text."""
    index: int
    text: str
    start: ParsedComponents
    reference: datetime


class DateResolver(ABC):
    """Natural-language date/time resolver capability."""
    
    @abstractmethod
    def parse(self, text: str, reference: Optional[datetime] = None) -> List[ParsedResult]:
        """Find date/time expressions in text, ordered by position."""


@dataclass
class _Span:
    start: int
    end: int
    kind: str
    values: Dict[str, int]
    implied: Dict[str, int] = field(default_factory=dict)


class PatternDateResolver(DateResolver):
    """Regex-driven resolver for the date and time phrasing operators use.
    
    Understands absolute dates ("december 15", "15th of march", "12/15",
    "2024-12-15"), relative days ("today", "yesterday", "last friday"),
    clock times ("9 am", "14:20", "2:30 pm", "at 7", "noon") and coarse
    periods ("morning"), which only imply an hour.
    """
    
    def __init__(self, timezone: Optional[str] = None, reference: Optional[datetime] = None):
        """Initialize resolver.
        
        Args:
            timezone: Timezone whose wall clock supplies "now" (e.g. 'America/Los_Angeles')
            reference: Fixed reference moment; overrides the clock when given
        """
        self.logger = LoggingManager.get_logger(__name__)
        self.timezone = timezone
        self.reference = reference
        
        self.date_patterns = self._build_date_patterns()
        self.relative_patterns = self._build_relative_patterns()
        self.time_patterns = self._build_time_patterns()
        
    def _build_date_patterns(self) -> List[Dict[str, Any]]:
        """Build patterns for absolute date expressions."""
        return [
            {
                "pattern": re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b"),
                "type": "iso_date"
            },
            {
                "pattern": re.compile(r"\b(\d{1,2})/(\d{1,2})(?:/(\d{4}|\d{2}))?(?![\w/])"),
                "type": "us_date"
            },
            {
                "pattern": re.compile(
                    rf"\b({MONTH_PATTERN})\.?\s+(\d{{1,2}})(?:st|nd|rd|th)?(?![\w:])"
                    rf"(?:,?\s+(\d{{4}})(?![\w:]))?",
                    re.IGNORECASE
                ),
                "type": "month_day"
            },
            {
                "pattern": re.compile(
                    rf"\b(\d{{1,2}})(?:st|nd|rd|th)?\s+(?:of\s+)?({MONTH_PATTERN})\b\.?"
                    rf"(?:,?\s+(\d{{4}})(?![\w:]))?",
                    re.IGNORECASE
                ),
                "type": "day_month"
            }
        ]
    
    def _build_relative_patterns(self) -> List[Dict[str, Any]]:
        """Build patterns for relative day expressions."""
        return [
            {
                "pattern": re.compile(r"\b(today|tonight|now)\b", re.IGNORECASE),
                "type": "same_day",
                "delta": relativedelta.relativedelta(days=0)
            },
            {
                "pattern": re.compile(r"\b(tomorrow|tmrw)\b", re.IGNORECASE),
                "type": "next_day",
                "delta": relativedelta.relativedelta(days=1)
            },
            {
                "pattern": re.compile(r"\b(yesterday)\b", re.IGNORECASE),
                "type": "previous_day",
                "delta": relativedelta.relativedelta(days=-1)
            },
            {
                "pattern": re.compile(rf"\b(?:(this|next|last|past)\s+)?({WEEKDAY_PATTERN})\b", re.IGNORECASE),
                "type": "weekday"
            }
        ]
    
    def _build_time_patterns(self) -> List[Dict[str, Any]]:
        """Build patterns for time expressions, most specific first."""
        return [
            {
                "pattern": re.compile(
                    rf"\b(\d{{1,2}}):(\d{{2}})(?::(\d{{2}}))?(?:\s*({MERIDIEM_PATTERN}))?(?![\w:])",
                    re.IGNORECASE
                ),
                "type": "clock_time"
            },
            {
                "pattern": re.compile(rf"\b(\d{{1,2}})\s*({MERIDIEM_PATTERN})(?!\w)", re.IGNORECASE),
                "type": "hour_only"
            },
            {
                "pattern": re.compile(r"(?:\bat|@)\s*(\d{1,2})(?![\w:/])", re.IGNORECASE),
                "type": "at_hour"
            },
            {
                "pattern": re.compile(r"\b(noon|midday|midnight)\b", re.IGNORECASE),
                "type": "named_time"
            },
            {
                "pattern": re.compile(r"\b(morning|afternoon|evening|night)\b", re.IGNORECASE),
                "type": "time_of_day_general"
            }
        ]
    
    def parse(self, text: str, reference: Optional[datetime] = None) -> List[ParsedResult]:
        """Resolve every date/time expression in text.
        
        Args:
            text: Input text (clock tokens already normalized to HH:MM)
            reference: Moment used for implied components and relative days
            
        Returns:
            Results ordered by position in the text
        """
        reference = reference or self._get_reference()
        occupied: List[Tuple[int, int]] = []
        
        dates = self._extract_dates(text, reference, occupied)
        times = self._extract_times(text, occupied)
        
        results = self._combine_date_time_spans(text, dates, times, reference)
        results.sort(key=lambda result: result.index)
        
        self.logger.debug(f"Resolved {len(results)} temporal expressions in '{text}'")
        return results
    
    def _get_reference(self) -> datetime:
        """Current wall-clock time in the configured timezone, without tzinfo."""
        if self.reference is not None:
            return self.reference
        tzinfo = gettz(self.timezone) if self.timezone else None
        return datetime.now(tzinfo).replace(tzinfo=None)
    
    @staticmethod
    def _overlaps(start: int, end: int, occupied: List[Tuple[int, int]]) -> bool:
        return any(start < used_end and used_start < end for used_start, used_end in occupied)
    
    def _extract_dates(
        self,
        text: str,
        reference: datetime,
        occupied: List[Tuple[int, int]]
    ) -> List[_Span]:
        spans = []
        
        for pattern_config in self.date_patterns:
            for match in pattern_config["pattern"].finditer(text):
                if self._overlaps(match.start(), match.end(), occupied):
                    continue
                values = self._parse_absolute_date(match, pattern_config["type"], reference)
                if values is None:
                    continue
                spans.append(_Span(match.start(), match.end(), "date", values))
                occupied.append((match.start(), match.end()))
        
        for pattern_config in self.relative_patterns:
            for match in pattern_config["pattern"].finditer(text):
                if self._overlaps(match.start(), match.end(), occupied):
                    continue
                spans.append(self._parse_relative_date(match, pattern_config, reference))
                occupied.append((match.start(), match.end()))
        
        return spans
    
    def _parse_absolute_date(
        self,
        match: re.Match,
        date_type: str,
        reference: datetime
    ) -> Optional[Dict[str, int]]:
        """Parse absolute date from regex match.
        
        Returns:
            Known components, or None when the date does not exist
        """
        if date_type == "iso_date":
            year, month, day = (int(group) for group in match.groups())
        elif date_type == "us_date":
            month, day = int(match.group(1)), int(match.group(2))
            year = self._expand_year(match.group(3))
        elif date_type == "month_day":
            month = MONTH_NAMES[match.group(1).lower()]
            day = int(match.group(2))
            year = self._expand_year(match.group(3))
        else:
            day = int(match.group(1))
            month = MONTH_NAMES[match.group(2).lower()]
            year = self._expand_year(match.group(3))
        
        check_year = year if year is not None else reference.year
        if not 1 <= month <= 12 or not 1 <= day <= calendar.monthrange(check_year, month)[1]:
            self.logger.debug(f"Ignoring impossible date '{match.group(0)}'")
            return None
        
        values = {"month": month, "day": day}
        if year is not None:
            values["year"] = year
        return values
    
    @staticmethod
    def _expand_year(year: Optional[str]) -> Optional[int]:
        if not year:
            return None
        value = int(year)
        if len(year) == 2:
            # Assume years 70-99 are 1970-1999, 00-69 are 2000-2069
            value += 1900 if value >= 70 else 2000
        return value
    
    def _parse_relative_date(
        self,
        match: re.Match,
        pattern_config: Dict[str, Any],
        reference: datetime
    ) -> _Span:
        if pattern_config["type"] == "weekday":
            target = reference + self._weekday_delta(match.group(2), match.group(1), reference)
            implied = {"year": target.year, "month": target.month, "day": target.day}
            return _Span(match.start(), match.end(), "date", {}, implied)
        
        target = reference + pattern_config["delta"]
        values = {"year": target.year, "month": target.month, "day": target.day}
        if match.group(1).lower() == "now":
            values.update(hour=reference.hour, minute=reference.minute)
        elif match.group(1).lower() == "tonight":
            return _Span(match.start(), match.end(), "date", values, {"hour": 22, "minute": 0})
        return _Span(match.start(), match.end(), "date", values)
    
    @staticmethod
    def _weekday_delta(
        weekday_name: str,
        modifier: Optional[str],
        reference: datetime
    ) -> relativedelta.relativedelta:
        """Offset from the reference day to the named weekday.
        
        A bare weekday means the closest such day, within three days either
        way; next/last shift that by a week.
        """
        target_weekday = DAY_NAMES[weekday_name.lower()]
        days = target_weekday - reference.weekday()
        if days > 3:
            days -= 7
        elif days < -3:
            days += 7
        
        modifier = (modifier or "").lower()
        if modifier == "next" and days <= 0:
            days += 7
        elif modifier in ("last", "past") and days >= 0:
            days -= 7
        
        return relativedelta.relativedelta(days=days)
    
    def _extract_times(self, text: str, occupied: List[Tuple[int, int]]) -> List[_Span]:
        spans = []
        
        for pattern_config in self.time_patterns:
            for match in pattern_config["pattern"].finditer(text):
                if self._overlaps(match.start(), match.end(), occupied):
                    continue
                span = self._parse_time_expression(match, pattern_config["type"])
                if span is None:
                    continue
                spans.append(span)
                occupied.append((match.start(), match.end()))
        
        return spans
    
    def _parse_time_expression(self, match: re.Match, time_type: str) -> Optional[_Span]:
        """Parse time expression from regex match.
        
        Returns:
            Time span, or None when hour/minute are out of range
        """
        if time_type == "clock_time":
            hour, minute = int(match.group(1)), int(match.group(2))
            hour = self._apply_meridiem(hour, match.group(4))
        elif time_type == "hour_only":
            hour, minute = self._apply_meridiem(int(match.group(1)), match.group(2)), 0
        elif time_type == "at_hour":
            hour, minute = int(match.group(1)), 0
        elif time_type == "named_time":
            hour = 0 if match.group(1).lower() == "midnight" else 12
            minute = 0
        else:
            period_hours = {
                "morning": 9,
                "afternoon": 14,
                "evening": 18,
                "night": 21
            }
            hour = period_hours[match.group(1).lower()]
            return _Span(match.start(), match.end(), "time", {}, {"hour": hour, "minute": 0})
        
        if hour is None or not 0 <= hour <= 23 or not 0 <= minute <= 59:
            self.logger.debug(f"Ignoring impossible time '{match.group(0)}'")
            return None
        
        return _Span(match.start(), match.end(), "time", {"hour": hour, "minute": minute})
    
    @staticmethod
    def _apply_meridiem(hour: int, meridiem: Optional[str]) -> Optional[int]:
        if not meridiem:
            return hour
        if not 1 <= hour <= 12:
            return None
        
        # Convert to 24-hour
        if meridiem.lower().startswith("p") and hour != 12:
            hour += 12
        elif meridiem.lower().startswith("a") and hour == 12:
            hour = 0
        return hour
    
    def _combine_date_time_spans(
        self,
        text: str,
        dates: List[_Span],
        times: List[_Span],
        reference: datetime
    ) -> List[ParsedResult]:
        """Pair each date with the nearest unused time and build results."""
        results = []
        used_times = set()
        
        for date_span in sorted(dates, key=lambda span: span.start):
            best_index = None
            best_distance = None
            
            for i, time_span in enumerate(times):
                if i in used_times:
                    continue
                distance = max(time_span.start - date_span.end, date_span.start - time_span.end, 0)
                if distance < COMBINE_WINDOW and (best_distance is None or distance < best_distance):
                    best_index, best_distance = i, distance
            
            spans = [date_span]
            if best_index is not None:
                used_times.add(best_index)
                spans.append(times[best_index])
            results.append(self._build_result(text, spans, reference))
        
        for i, time_span in enumerate(times):
            if i not in used_times:
                results.append(self._build_result(text, [time_span], reference))
        
        return results
    
    def _build_result(self, text: str, spans: List[_Span], reference: datetime) -> ParsedResult:
        components = ParsedComponents()
        
        for span in spans:
            for name, value in span.values.items():
                components.assign(name, value)
            for name, value in span.implied.items():
                components.imply(name, value)
        
        # Dates without a time default to midday, times without a date to the reference day
        defaults = {
            "year": reference.year,
            "month": reference.month,
            "day": reference.day,
            "hour": 12,
            "minute": 0
        }
        for name, value in defaults.items():
            if components.get(name) is None:
                components.imply(name, value)
        
        start = min(span.start for span in spans)
        end = max(span.end for span in spans)
        return ParsedResult(index=start, text=text[start:end], start=components, reference=reference)


class DateTimeExtractor:
    """Extracts wall-clock components from a sentence via a DateResolver."""
    
    def __init__(self, resolver: Optional[DateResolver] = None):
        """Initialize extractor.
        
        Args:
            resolver: Date resolver collaborator; defaults to PatternDateResolver
        """
        self.logger = LoggingManager.get_logger(__name__)
        self.resolver = resolver or PatternDateResolver()
        
    def extract(self, text: str, reference: Optional[datetime] = None) -> Optional[DateTimeComponents]:
        """Extract month/day/hour/minute from the first resolved expression.
        
        When both hour and minute were stated, the components are read
        literally. Otherwise the resolver's best-guess instant is decomposed.
        
        Args:
            text: Time-normalized operator sentence
            reference: Optional reference moment passed to the resolver
            
        Returns:
            Components, or None when nothing temporal was found
        """
        try:
            results = self.resolver.parse(text, reference)
            if not results:
                return None
            
            start = results[0].start
            if start.is_certain("hour") and start.is_certain("minute"):
                return DateTimeComponents(
                    month=start.get("month"),
                    day=start.get("day"),
                    hour=start.get("hour"),
                    minute=start.get("minute")
                )
            
            return DateTimeComponents.from_datetime(start.date())
            
        except (ResolverError, ValueError) as e:
            self.logger.warning(f"Date resolution failed for '{text}': {e}")
            return None
