"""Verb Classifier for Timeclock Commands

Finds which edit the operator asked for and folds synonyms onto the three
canonical verbs.
"""

import re
from typing import Dict, List, Optional

from ..core.logging_manager import LoggingManager
from .taggers import Tagger, TaggedToken, safe_tag


# Enumeration order decides ties: the first word found wins
VERB_VOCABULARY: List[str] = ['add', 'change', 'delete', 'update', 'remove', 'create', 'modify']

VERB_SYNONYMS: Dict[str, str] = {
    'update': 'change',
    'modify': 'change',
    'remove': 'delete',
    'create': 'add',
}

VERB_POSITION_PATTERN = re.compile(r'\b(?:' + '|'.join(VERB_VOCABULARY) + r')\b', re.IGNORECASE)


def canonical_verb(word: str) -> str:
    return VERB_SYNONYMS.get(word, word)


def find_verb_position(text: str) -> Optional[int]:
    """Character offset of the first whole-word vocabulary verb, if any."""
    match = VERB_POSITION_PATTERN.search(text)
    return match.start() if match else None


class VerbClassifier:
    """Vocabulary matcher for the requested timeclock edit."""
    
    def __init__(self, tagger: Optional[Tagger] = None):
        """Initialize classifier.
        
        Args:
            tagger: Optional tagger whose verb tokens count as a second signal
        """
        self.logger = LoggingManager.get_logger(__name__)
        self.tagger = tagger
        
    def classify(self, text: str) -> Optional[str]:
        """Return the canonical verb mentioned in text, or None.
        
        Matching is plain substring containment, so "readd" still reads as
        add; no attempt is made to choose between several verbs.
        """
        lowered = text.lower()
        tagged_verbs = self._tagged_verbs(text)
        
        for word in VERB_VOCABULARY:
            if word in lowered or any(word in token for token in tagged_verbs):
                verb = canonical_verb(word)
                self.logger.debug(f"Verb '{word}' -> '{verb}'")
                return verb
        
        return None
    
    def _tagged_verbs(self, text: str) -> List[str]:
        tokens: List[TaggedToken] = safe_tag(self.tagger, text)
        return [token.text.lower() for token in tokens if token.is_verb]
