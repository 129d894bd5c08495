"""
DRG Tools

Utilities for preparing MS-DRG descriptions as model features, separating
each description into a base DRG and a complication label.
"""

from .models import ComplicationLabel, ComplicationPattern, SeparatedDRG
from .patterns import AGE_PATTERN, DEFAULT_COMPLICATION_PATTERNS, load_patterns
from .separator import DRGSeparator, separate_drgs

__version__ = "1.0.0"
__all__ = [
    "ComplicationLabel",
    "ComplicationPattern",
    "SeparatedDRG",
    "AGE_PATTERN",
    "DEFAULT_COMPLICATION_PATTERNS",
    "load_patterns",
    "DRGSeparator",
    "separate_drgs",
]
