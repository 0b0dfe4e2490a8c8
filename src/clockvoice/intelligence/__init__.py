"""ClockVoice Intelligence Package

Field extractors for verbs, row numbers, punch status and employee names,
plus the optional part-of-speech tagger they consult.
"""

from .entity_extractor import NameExtractor, NameResolution, NameResolver, extract_row_number, extract_status
from .taggers import SpacyTagger, TaggedToken, Tagger
from .verb_classifier import VerbClassifier

__all__ = [
    "NameExtractor",
    "NameResolution",
    "NameResolver",
    "extract_row_number",
    "extract_status",
    "SpacyTagger",
    "TaggedToken",
    "Tagger",
    "VerbClassifier"
]
