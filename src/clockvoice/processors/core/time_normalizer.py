"""Time Normalizer for Spoken Clock Times

Speech engines transcribe "fourteen twenty" as "1420". The date/time resolver
only understands "14:20", so bare HHMM tokens that look like a time of day
are rewritten with a colon before anything else runs.
"""

import re

from ...core.logging_manager import LoggingManager


logger = LoggingManager.get_logger(__name__)

# HH 00-23 followed by MM 00-59, as a whole word
CLOCK_TOKEN_PATTERN = re.compile(r'\b([0-1][0-9]|2[0-3])([0-5][0-9])\b')

TIME_KEYWORD_PATTERN = re.compile(r'\b(?:at|on|in|time|:|am|pm|hour|hr)\b', re.IGNORECASE)

DATE_KEYWORD_PATTERN = re.compile(
    r'\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec|'
    r'january|february|march|april|june|july|august|september|october|november|december|'
    r'\d{1,2}(?:st|nd|rd|th)?)\b',
    re.IGNORECASE
)

DIGIT_PATTERN = re.compile(r'\d')

BEFORE_WINDOW = 20
AFTER_WINDOW = 10


def _looks_like_time(text: str, start: int, end: int) -> bool:
    before = text[max(0, start - BEFORE_WINDOW):start]
    after = text[end:end + AFTER_WINDOW]
    
    if TIME_KEYWORD_PATTERN.search(before + after):
        return True
    
    # A date right before the token makes it the time of that day
    if DATE_KEYWORD_PATTERN.search(before) and not DIGIT_PATTERN.search(after):
        return True
    
    return not DIGIT_PATTERN.search(before) and not DIGIT_PATTERN.search(after)


def normalize_time(text: str) -> str:
    """Rewrite the first clock-like HHMM token in ``text`` as HH:MM.
    
    Only one token is ever rewritten: a sentence carrying two bare times is
    left with the second one untouched.
    
    Args:
        text: Raw operator sentence
        
    Returns:
        New string with at most one colon inserted
    """
    for match in CLOCK_TOKEN_PATTERN.finditer(text):
        if _looks_like_time(text, match.start(), match.end()):
            hours, minutes = match.groups()
            normalized = f"{text[:match.start()]}{hours}:{minutes}{text[match.end():]}"
            logger.debug(f"Normalized clock token '{match.group(0)}' -> '{hours}:{minutes}'")
            return normalized
    
    return text
