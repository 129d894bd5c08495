"""
Complication pattern table.

The qualifiers recognized by the separator are kept here as data so new
codings can be added, either by editing the table or by loading rules from
a JSON file, without touching the matching code.

JSON rule files hold a list of objects with "suffix" and "label" keys,
either at the top level or under a "patterns" key:

    {
        "patterns": [
            {"suffix": "WITH MCC", "label": "with MCC"}
        ]
    }
"""

import json
import logging
import re
from pathlib import Path
from typing import Iterable, List

from pydantic import ValidationError

from .models import ComplicationLabel, ComplicationPattern

logger = logging.getLogger(__name__)


DEFAULT_COMPLICATION_PATTERNS: List[ComplicationPattern] = [
    ComplicationPattern(suffix="W CC/MCC", label=ComplicationLabel.WITH_CC_MCC),
    ComplicationPattern(suffix="W/O CC/MCC", label=ComplicationLabel.WITHOUT_CC_MCC),
    ComplicationPattern(suffix="W CC", label=ComplicationLabel.WITH_CC),
    ComplicationPattern(suffix="W MCC", label=ComplicationLabel.WITH_MCC),
    ComplicationPattern(suffix="W/O CC", label=ComplicationLabel.WITHOUT_CC),
    ComplicationPattern(suffix="W/O MCC", label=ComplicationLabel.WITHOUT_MCC),
]

# Trailing age qualifier, e.g. "AGE 0-17", "AGE >17", "AGE >=65"
AGE_PATTERN = r"(?:^|[\s,;-]+)AGE\s*(?:[<>]=?\s*)?\d+(?:\s*-\s*\d+)?\s*$"

# Separators left behind once a qualifier is cut off the end
TRAILING_SEPARATORS = re.compile(r"[\s,;-]+$")


def order_patterns(patterns: Iterable[ComplicationPattern]) -> List[ComplicationPattern]:
    """
    Order patterns so the most specific suffix is tried first.

    "W CC" is contained in "W CC/MCC", so longer suffixes must be checked
    before shorter ones. Ties keep their table order.
    """
    return sorted(patterns, key=lambda p: len(p.suffix), reverse=True)


def compile_suffix(pattern: ComplicationPattern) -> "re.Pattern[str]":
    """Compile a suffix into a regex anchored at the end of a description."""
    words = [re.escape(word) for word in pattern.suffix.split(" ")]
    return re.compile(r"(?:^|\s)" + r"\s+".join(words) + r"\s*$", re.IGNORECASE)


def load_patterns(path: Path) -> List[ComplicationPattern]:
    """
    Load complication patterns from a JSON file.

    Args:
        path: JSON file holding a list of {"suffix", "label"} objects, or an
              object with that list under "patterns"

    Returns:
        List of ComplicationPattern in file order

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid JSON or a rule is malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Pattern file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Pattern file {path} is not valid JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("patterns")
    if not isinstance(data, list):
        raise ValueError(f"Pattern file {path} must contain a list of patterns")

    patterns = []
    for i, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ValueError(f"Pattern {i} in {path} must be an object with 'suffix' and 'label'")
        try:
            patterns.append(ComplicationPattern(**entry))
        except ValidationError as e:
            raise ValueError(f"Invalid pattern {i} in {path}: {e}") from e

    logger.info(f"Loaded {len(patterns)} complication patterns from {path}")
    return patterns


def merge_patterns(
    base: Iterable[ComplicationPattern],
    extra: Iterable[ComplicationPattern]
) -> List[ComplicationPattern]:
    """
    Append extra patterns to a base table.

    Repeating a suffix with the same label is ignored.

    Raises:
        ValueError: If a suffix is mapped to two different labels
    """
    merged = list(base)
    labels = {p.suffix: p.label for p in merged}

    for pattern in extra:
        existing = labels.get(pattern.suffix)
        if existing is None:
            merged.append(pattern)
            labels[pattern.suffix] = pattern.label
        elif existing != pattern.label:
            raise ValueError(
                f"Suffix '{pattern.suffix}' is already mapped to '{existing}', "
                f"cannot map it to '{pattern.label}'"
            )

    return merged
