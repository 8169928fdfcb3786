"""Core processing module for PdfIt."""

from pdfit.core.filters import filter_paths, matches_any
from pdfit.core.models import ConversionJob, ConversionResult
from pdfit.core.skip import SkipDecision, decide

__all__ = [
    "ConversionJob",
    "ConversionResult",
    "SkipDecision",
    "decide",
    "filter_paths",
    "matches_any",
]
