"""Core text processors."""

from .temporal_extractor import (
    DateResolver,
    DateTimeExtractor,
    ParsedComponents,
    ParsedResult,
    PatternDateResolver
)
from .time_normalizer import normalize_time

__all__ = [
    "DateResolver",
    "DateTimeExtractor",
    "ParsedComponents",
    "ParsedResult",
    "PatternDateResolver",
    "normalize_time"
]
