"""Entity Extractor for Timeclock Commands

Extracts the row number, punch status and employee name from an operator
sentence. Each field has its own ordered chain of matchers; the first
matcher that produces a value wins and a field nobody matched stays None.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from ..core.logging_manager import LoggingManager
from ..processors.core.temporal_extractor import MONTH_NAMES, MONTH_PATTERN
from ..timeclock.models import PunchStatus
from .taggers import Tagger, safe_tag
from .verb_classifier import VERB_VOCABULARY


logger = LoggingManager.get_logger(__name__)


# Row numbers

EXPLICIT_ROW_PATTERN = re.compile(r'\brow\s*(?:number|#|num)?\s*(\d+)', re.IGNORECASE)

# 4-digit tokens are left alone: they are clock times the normalizer skipped
IMPLICIT_ROW_PATTERN = re.compile(r'\b(\d{1,3}|\d{5,})\b')

MONTH_BEFORE_PATTERN = re.compile(rf'\b(?:{MONTH_PATTERN})\.?\s*(?:the\s+)?$', re.IGNORECASE)
AT_BEFORE_PATTERN = re.compile(r'(?:\bat|@)\s*$', re.IGNORECASE)
TEMPORAL_AFTER_PATTERN = re.compile(
    rf"^\s*(?:a\.?m\.?|p\.?m\.?|o'?clock|(?:of\s+)?(?:{MONTH_PATTERN})\b)",
    re.IGNORECASE
)

ROW_VERBS = ('change', 'delete')


def _is_temporal_fragment(text: str, start: int, end: int) -> bool:
    """Whether the digits at text[start:end] belong to a date or time."""
    before = text[:start]
    after = text[end:]
    
    if before[-1:] in (':', '/', '-') or after[:1] in (':', '/', '-'):
        return True
    if MONTH_BEFORE_PATTERN.search(before) or AT_BEFORE_PATTERN.search(before):
        return True
    return bool(TEMPORAL_AFTER_PATTERN.match(after))


def extract_row_number(text: str, verb: Optional[str]) -> Optional[int]:
    """Extract the timeclock row the command refers to.
    
    An explicit "row N" is honored for every verb. A bare number is only
    taken as the row for change and delete, since add creates a new row.
    
    Args:
        text: Time-normalized operator sentence
        verb: Canonical verb already extracted from the sentence
        
    Returns:
        Row number, or None
    """
    match = EXPLICIT_ROW_PATTERN.search(text)
    if match:
        return int(match.group(1))
    
    if verb not in ROW_VERBS:
        return None
    
    for match in IMPLICIT_ROW_PATTERN.finditer(text):
        if _is_temporal_fragment(text, match.start(), match.end()):
            continue
        logger.debug(f"Using bare number '{match.group(1)}' as row number")
        return int(match.group(1))
    
    return None


# Punch status

_MONTH_WORDS = (
    'jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec|'
    'january|february|march|april|june|july|august|september|october|november|december'
)

EXPLICIT_STATUS_PATTERN = re.compile(r'\bstatus\s+(in|out)\b', re.IGNORECASE)
REVERSED_STATUS_PATTERN = re.compile(r'\b(in|out)\s+status\b', re.IGNORECASE)
VERB_PHRASE_STATUS_PATTERN = re.compile(r'\b(?:status|clock|punch|check)\s*(in|out)\b', re.IGNORECASE)
STANDALONE_STATUS_PATTERN = re.compile(
    rf'\b(in|out)\b(?=\s+(?:status|row|number|{_MONTH_WORDS}|\d{{1,2}})\b|[,.\s]*$)',
    re.IGNORECASE
)
DATE_PHRASE_PATTERN = re.compile(rf'\b(?:in|out)\s+(?:{_MONTH_WORDS}|\d{{1,2}})', re.IGNORECASE)

STATUS_CONTEXT_WINDOW = 20


def _match_status(pattern: re.Pattern) -> Callable[[str], Optional[str]]:
    def matcher(text: str) -> Optional[str]:
        match = pattern.search(text)
        return match.group(1) if match else None
    return matcher


def _standalone_status(text: str) -> Optional[str]:
    """A lone in/out word, unless it is glued to a name or sits in a date phrase."""
    for match in STANDALONE_STATUS_PATTERN.finditer(text):
        before = text[max(0, match.start() - STATUS_CONTEXT_WINDOW):match.start()]
        after = text[match.end():match.end() + STATUS_CONTEXT_WINDOW]
        
        is_standalone_word = not re.search(r'[a-z]$', before, re.IGNORECASE) and \
            not re.match(r'[a-z]', after, re.IGNORECASE)
        in_date_phrase = bool(DATE_PHRASE_PATTERN.search(before))
        
        if is_standalone_word and not in_date_phrase:
            return match.group(1)
    
    return None


STATUS_MATCHERS: List[Callable[[str], Optional[str]]] = [
    _match_status(EXPLICIT_STATUS_PATTERN),
    _match_status(REVERSED_STATUS_PATTERN),
    _match_status(VERB_PHRASE_STATUS_PATTERN),
    _standalone_status,
]


def extract_status(text: str) -> Optional[str]:
    """Extract the punch status as "In" or "Out".
    
    Args:
        text: Time-normalized operator sentence
        
    Returns:
        "In", "Out" or None
    """
    for matcher in STATUS_MATCHERS:
        value = matcher(text)
        if value:
            return PunchStatus.IN.value if value.lower() == 'in' else PunchStatus.OUT.value
    return None


# Employee names

NAME_PUNCTUATION_PATTERN = re.compile(r'[.,!?;:]')
CLOCK_FRAGMENT_PATTERN = re.compile(r'^\d{1,2}:\d{2}')

STOP_WORDS = frozenset(
    list(VERB_VOCABULARY) +
    list(MONTH_NAMES) +
    [
        'row', 'number', 'num', 'the', 'a', 'an', 'and', 'or',
        'at', 'on', 'to', 'for', 'of', 'from', 'by', 'with', 'in', 'out', 'into',
        'status', 'clock', 'punch', 'check',
        'am', 'pm', 'hour', 'hr', 'time', 'date', 'today', 'tomorrow', 'yesterday',
        'tonight', 'now', 'noon', 'midnight', 'morning', 'afternoon', 'evening', 'night',
    ]
)

MAX_NAME_LENGTH = 25


def clean_name(name: str) -> str:
    return NAME_PUNCTUATION_PATTERN.sub('', name).strip()


@dataclass(frozen=True)
class NameResolution:
    """Outcome of reconciling name candidates with a roster."""
    name: Optional[str]
    matched: bool = False


class NameExtractor:
    """Collects employee name candidates, best first."""
    
    def __init__(self, tagger: Optional[Tagger] = None, verb_window: int = 50):
        """Initialize name extractor.
        
        Args:
            tagger: Optional proper-noun tagger for the second tier
            verb_window: Characters after the verb in which words are
                promoted as likely names
        """
        self.logger = LoggingManager.get_logger(__name__)
        self.tagger = tagger
        self.verb_window = verb_window
        
    def extract_candidates(self, text: str, verb_position: Optional[int] = None,
                           roster: Sequence[str] = ()) -> List[str]:
        """Return name candidates from the first tier that finds any.
        
        Args:
            text: Time-normalized operator sentence
            verb_position: Offset of the verb in text, or None
            roster: Known employee names; may be empty

        Returns:
            Candidates in priority order, possibly empty
        """
        tiers = [
            lambda: self._roster_candidates(text, roster),
            lambda: self._proper_noun_candidates(text),
            lambda: self._word_candidates(text, verb_position),
        ]
        
        for tier in tiers:
            candidates = tier()
            if candidates:
                self.logger.debug(f"Name candidates: {candidates}")
                return candidates
        return []
    
    def _roster_candidates(self, text: str, roster: Sequence[str]) -> List[str]:
        candidates = []
        for employee in roster:
            if not employee.strip():
                continue
            match = re.search(re.escape(employee), text, re.IGNORECASE)
            if match:
                candidates.append(match.group(0))
        return candidates
    
    def _proper_noun_candidates(self, text: str) -> List[str]:
        """Runs of adjacent person tokens, each run one candidate."""
        candidates = []
        run_start = run_end = None
        
        for token in safe_tag(self.tagger, text):
            if not token.is_person:
                if run_start is not None:
                    candidates.append(text[run_start:run_end])
                    run_start = None
                continue
            if run_start is None:
                run_start = token.start
            run_end = token.start + len(token.text)
        
        if run_start is not None:
            candidates.append(text[run_start:run_end])
        return candidates
    
    def _word_candidates(self, text: str, verb_position: Optional[int]) -> List[str]:
        promoted: List[str] = []
        others: List[str] = []
        
        for match in re.finditer(r'\S+', text):
            word = match.group(0)
            cleaned = NAME_PUNCTUATION_PATTERN.sub('', word.lower())
            
            if len(cleaned) < 2 or cleaned in STOP_WORDS or cleaned.isdigit():
                continue
            if CLOCK_FRAGMENT_PATTERN.match(word) or not word[0].isalpha():
                continue
            if len(word) > MAX_NAME_LENGTH:
                continue
            
            after_verb = verb_position is not None and \
                verb_position < match.start() < verb_position + self.verb_window
            (promoted if after_verb else others).append(word)
        
        # Remove duplicates while preserving order
        return list(dict.fromkeys(promoted + others))


class NameResolver:
    """Reconciles name candidates with the roster of known employees."""
    
    @staticmethod
    def _exact_match(name: str, roster: Sequence[str]) -> Optional[str]:
        name_lower = name.lower().strip()
        for employee in roster:
            if name_lower and employee.lower().strip() == name_lower:
                return employee
        return None
    
    @staticmethod
    def _partial_match(name: str, roster: Sequence[str]) -> Optional[str]:
        name_lower = name.lower().strip()
        for employee in roster:
            employee_lower = employee.lower().strip()
            if name_lower and employee_lower and \
                    (name_lower in employee_lower or employee_lower in name_lower):
                return employee
        return None
    
    @classmethod
    def match_roster(cls, name: str, roster: Sequence[str]) -> Optional[str]:
        """Find the roster entry a name refers to.
        
        Exact case-insensitive equality is tried first, then containment in
        either direction. Short names are not disambiguated: "Ann" matches
        whichever of "Ann"/"Anna" comes first once no exact match exists.
        """
        return cls._exact_match(name, roster) or cls._partial_match(name, roster)
    
    def resolve(self, candidates: Sequence[str], roster: Sequence[str] = ()) -> NameResolution:
        """Pick the working name from the candidates.
        
        Every candidate gets an exact roster lookup before any candidate is
        tried as a partial match.
        
        Args:
            candidates: Name candidates, best first
            roster: Known employee names; may be empty
            
        Returns:
            The canonical roster entry when one matches, otherwise the first
            candidate stripped of punctuation
        """
        cleaned = [name for name in (clean_name(candidate) for candidate in candidates) if name]
        if not cleaned:
            return NameResolution(name=None)
        
        if roster:
            for lookup in (self._exact_match, self._partial_match):
                for name in cleaned:
                    employee = lookup(name, roster)
                    if employee is not None:
                        return NameResolution(name=employee, matched=True)
        
        return NameResolution(name=cleaned[0], matched=False)
