"""Text Processing Module

Time normalization and date/time resolution for operator sentences.
"""

from .core.temporal_extractor import DateResolver, DateTimeExtractor, PatternDateResolver
from .core.time_normalizer import normalize_time

__all__ = [
    "DateResolver",
    "DateTimeExtractor",
    "PatternDateResolver",
    "normalize_time"
]
