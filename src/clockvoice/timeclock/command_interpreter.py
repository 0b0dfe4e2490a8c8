"""Command Interpreter for Timeclock Edits

Runs an operator sentence through normalization, the field extractors, name
resolution and validation, producing a parsed command together with its
validation verdict.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..core.logging_manager import LoggingManager
from ..intelligence.entity_extractor import (
    NameExtractor,
    NameResolver,
    extract_row_number,
    extract_status,
)
from ..intelligence.taggers import Tagger
from ..intelligence.verb_classifier import VerbClassifier, find_verb_position
from ..processors.core.temporal_extractor import DateResolver, DateTimeExtractor
from ..processors.core.time_normalizer import normalize_time
from .models import InterpreterConfig, ParsedCommand
from .validators import CommandValidator, ValidationResult


@dataclass(frozen=True)
class InterpretationResult:
    """Parsed command and the verdict on it.
    
    Callers must not act on ``command`` unless ``validation.valid``.
    """
    command: ParsedCommand
    validation: ValidationResult
    
    @property
    def valid(self) -> bool:
        return self.validation.valid
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "command": self.command.to_dict(),
            "validation": self.validation.to_dict()
        }


class CommandInterpreter:
    """Turns free-form timeclock sentences into validated commands."""
    
    def __init__(self, resolver: Optional[DateResolver] = None, tagger: Optional[Tagger] = None,
                 name_window: int = 50):
        """Initialize interpreter.
        
        Args:
            resolver: Date resolver; defaults to PatternDateResolver
            tagger: Optional part-of-speech tagger used by the verb and name tiers
            name_window: Characters after the verb in which name candidates are promoted
        """
        self.logger = LoggingManager.get_logger(__name__)
        
        self.verb_classifier = VerbClassifier(tagger)
        self.date_time_extractor = DateTimeExtractor(resolver)
        self.name_extractor = NameExtractor(tagger, verb_window=name_window)
        self.name_resolver = NameResolver()
        self.validator = CommandValidator()
        
    def parse(self, text: str, config: InterpreterConfig,
              reference: Optional[datetime] = None) -> ParsedCommand:
        """Extract every field from text without judging the result.
        
        Args:
            text: Raw operator sentence; may be empty
            config: Allowed verbs and roster for this call
            reference: Optional reference moment for relative dates
            
        Returns:
            Parsed command; fields nobody matched are None
        """
        normalized = normalize_time(text)
        if normalized != text:
            self.logger.debug(f"Normalized time: '{text}' -> '{normalized}'")
        
        verb = self.verb_classifier.classify(normalized)
        
        candidates = self.name_extractor.extract_candidates(
            normalized,
            verb_position=find_verb_position(normalized),
            roster=config.available_employees
        )
        resolution = self.name_resolver.resolve(candidates, config.available_employees)
        
        return ParsedCommand(
            verb=verb,
            employee_name=resolution.name,
            row_number=extract_row_number(normalized, verb),
            date_time=self.date_time_extractor.extract(normalized, reference),
            status=extract_status(normalized),
            raw_text=text
        )
    
    def interpret(self, text: str, config: Optional[InterpreterConfig] = None,
                  reference: Optional[datetime] = None) -> InterpretationResult:
        """Parse and validate one operator sentence.
        
        Args:
            text: Raw operator sentence; may be empty
            config: Allowed verbs and roster; defaults to all verbs, no roster
            reference: Optional reference moment for relative dates
            
        Returns:
            InterpretationResult carrying the command and its validation
        """
        config = config or InterpreterConfig()
        text = text or ""
        
        command = self.parse(text, config, reference)
        validation = self.validator.validate(command, config)
        
        if validation.valid:
            self.logger.info(
                f"Interpreted '{text}' as {command.verb} for {command.employee_name}"
            )
        else:
            self.logger.warning(f"Rejected '{text}': {validation.error}")
        
        return InterpretationResult(command=command, validation=validation)


def interpret(text: str, config: Optional[InterpreterConfig] = None) -> InterpretationResult:
    """Interpret a sentence with the default resolver and no tagger."""
    return CommandInterpreter().interpret(text, config)
