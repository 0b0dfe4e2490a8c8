"""Part-of-Speech Tagging Collaborators

The interpreter never needs a tagger: it only uses one, when supplied, as a
secondary signal for verbs and as the proper-noun tier of name extraction.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from ..core.error_handler import ResolverError
from ..core.logging_manager import LoggingManager


@dataclass(frozen=True)
class TaggedToken:
    """A token classified by a tagger."""
    text: str
    start: int
    pos: str
    is_person: bool = False
    
    @property
    def is_verb(self) -> bool:
        return self.pos in ("VERB", "AUX")


class Tagger(ABC):
    """Part-of-speech / proper-noun tagger capability."""
    
    @abstractmethod
    def tag(self, text: str) -> List[TaggedToken]:
        """Classify the tokens of text, in text order."""


class SpacyTagger(Tagger):
    """Tagger backed by a spaCy pipeline.
    
    Person tokens are those inside a PERSON entity, or proper nouns when the
    pipeline has no entity recognizer.
    """
    
    def __init__(self, model_name: str = "en_core_web_sm", nlp=None):
        """Initialize tagger.
        
        Args:
            model_name: Installed spaCy model package to load
            nlp: Already-loaded spaCy Language object, used instead of loading
        """
        self.logger = LoggingManager.get_logger(__name__)
        self.model_name = model_name
        self._nlp = nlp
        
    @property
    def nlp(self):
        if self._nlp is None:
            try:
                import spacy
            except ImportError as e:
                raise ResolverError("spaCy is not installed; pip install clockvoice[tagger]") from e
            
            try:
                self._nlp = spacy.load(self.model_name)
            except OSError as e:
                raise ResolverError(f"spaCy model '{self.model_name}' is not installed: {e}") from e
            self.logger.info(f"Loaded spaCy model {self.model_name}")
        return self._nlp
    
    def tag(self, text: str) -> List[TaggedToken]:
        doc = self.nlp(text)
        has_ner = "ner" in self.nlp.pipe_names
        
        tokens = []
        for token in doc:
            if has_ner:
                is_person = token.ent_type_ == "PERSON"
            else:
                is_person = token.pos_ == "PROPN"
            tokens.append(TaggedToken(
                text=token.text,
                start=token.idx,
                pos=token.pos_,
                is_person=is_person
            ))
        return tokens


def safe_tag(tagger: Optional[Tagger], text: str) -> List[TaggedToken]:
    """Run an optional tagger; a failing tagger contributes no tokens."""
    if tagger is None:
        return []
    try:
        return tagger.tag(text)
    except ResolverError as e:
        LoggingManager.get_logger(__name__).warning(f"Tagger unavailable: {e}")
        return []
