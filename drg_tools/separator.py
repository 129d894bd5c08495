"""
DRG Separator

Splits MS-DRG descriptions into a base clinical category and a complication
label so each can be used as a categorical feature. For example:

    "ACUTE LEUKEMIA W/O MAJOR O.R. PROCEDURE W MCC"
        -> base "ACUTE LEUKEMIA W/O MAJOR O.R. PROCEDURE", complication "with MCC"

Usage:
    from drg_tools import separate_drgs

    result = separate_drgs(df["drg_description"], remove_age=True)
    print(result.head())

Only the qualifier codings in the pattern table are recognized. Descriptions
with any other coding get a missing complication label rather than an error;
use DRGSeparator.find_unsupported_codings to list them.
"""

import logging
import re
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd

from .models import ComplicationPattern, SeparatedDRG
from .patterns import (
    AGE_PATTERN,
    DEFAULT_COMPLICATION_PATTERNS,
    TRAILING_SEPARATORS,
    compile_suffix,
    load_patterns,
    merge_patterns,
    order_patterns,
)

logger = logging.getLogger(__name__)

OUTPUT_COLUMNS = ["msdrg", "msdrg_base", "msdrg_complication"]

# Unmatched text that still mentions a qualifier, e.g. "W CC OR TPA IN 24 HRS"
_QUALIFIER_HINT = re.compile(
    r"\b(?:W|W/O|WITH|WITHOUT)\s+(?:\S+\s+)*?(?:M?CC|COMPLICATIONS?|COMORBIDIT(?:Y|IES))\b",
    re.IGNORECASE
)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


class DRGSeparator:
    """
    Separates DRG descriptions into base DRG and complication label.

    The separator holds an ordered table of complication patterns and an
    age-qualifier pattern. Each description is handled independently, so
    results never depend on other rows.

    Example:
        >>> separator = DRGSeparator()
        >>> row = separator.split("SIMPLE PNEUMONIA & PLEURISY W CC")
        >>> row.msdrg_base, row.msdrg_complication
        ('SIMPLE PNEUMONIA & PLEURISY', 'with CC')
    """

    def __init__(
        self,
        patterns: Optional[List[ComplicationPattern]] = None,
        pattern_file: Optional[Path] = None,
        age_pattern: Optional[str] = None
    ):
        """
        Initialize the separator.

        Args:
            patterns: Complication patterns to use instead of the default table
            pattern_file: Optional JSON file whose patterns are added to the table
            age_pattern: Regex for a trailing age qualifier. Defaults to AGE_PATTERN.

        Raises:
            ValueError: If the same suffix is mapped to two labels
        """
        table = list(DEFAULT_COMPLICATION_PATTERNS) if patterns is None else merge_patterns([], patterns)
        if pattern_file:
            table = merge_patterns(table, load_patterns(pattern_file))

        self.patterns = order_patterns(table)
        self._compiled: List[Tuple["re.Pattern[str]", ComplicationPattern]] = [
            (compile_suffix(p), p) for p in self.patterns
        ]
        self.age_regex = re.compile(age_pattern or AGE_PATTERN, re.IGNORECASE)

    def split(self, drg: Optional[str], remove_age: bool = False) -> SeparatedDRG:
        """
        Separate a single DRG description.

        Args:
            drg: DRG description, or a missing value
            remove_age: Whether to strip a trailing age qualifier from the base DRG

        Returns:
            SeparatedDRG with the original text, base DRG and complication label

        Raises:
            TypeError: If drg is neither a string nor a missing value
        """
        if _is_missing(drg):
            return SeparatedDRG()
        if not isinstance(drg, str):
            raise TypeError(f"DRG descriptions must be strings, got {type(drg).__name__}")

        base, complication = self._strip_complication(drg.strip())
        if remove_age:
            base = self._strip_age(base)

        return SeparatedDRG(
            msdrg=drg,
            msdrg_base=base.strip(),
            msdrg_complication=complication
        )

    def separate(self, drgs: Iterable[Optional[str]], remove_age: bool = False) -> pd.DataFrame:
        """
        Separate a sequence of DRG descriptions.

        Args:
            drgs: List, tuple, numpy array, pandas Index or Series of descriptions.
                  Missing values are allowed.
            remove_age: Whether to strip trailing age qualifiers such as "AGE 0-17"

        Returns:
            DataFrame with columns msdrg, msdrg_base and msdrg_complication, one
            row per input in input order. A Series input keeps its index.

        Raises:
            TypeError: If drgs is a single string or contains non-string values
        """
        values, index = self._as_values(drgs)
        self._validate_values(values)

        rows = []
        for value in values:
            row = self.split(value, remove_age=remove_age)
            # Keep the original cell as given, including its missing-value flavor
            rows.append((value, row.msdrg_base, row.msdrg_complication))

        result = pd.DataFrame(rows, columns=OUTPUT_COLUMNS, index=index, dtype=object)

        missing = sum(1 for value in values if _is_missing(value))
        matched = int(result["msdrg_complication"].notna().sum())
        logger.debug(
            f"Separated {len(result)} DRGs: {matched} with complication qualifier, "
            f"{len(result) - matched - missing} without, {missing} missing"
        )

        return result

    def separate_column(
        self,
        df: pd.DataFrame,
        column: str,
        remove_age: bool = False,
        prefix: Optional[str] = None
    ) -> pd.DataFrame:
        """
        Add base DRG and complication columns to a DataFrame.

        Args:
            df: DataFrame holding DRG descriptions
            column: Name of the description column
            remove_age: Whether to strip trailing age qualifiers
            prefix: Prefix for the new columns. Defaults to the column name.

        Returns:
            Copy of df with "<prefix>_base" and "<prefix>_complication" inserted
            right after column

        Raises:
            KeyError: If column is not in df
            ValueError: If df already has a column with one of the new names
        """
        if column not in df.columns:
            raise KeyError(f"Column '{column}' not found in DataFrame")

        prefix = prefix or column
        base_col = f"{prefix}_base"
        complication_col = f"{prefix}_complication"
        for new_col in (base_col, complication_col):
            if new_col in df.columns:
                raise ValueError(
                    f"Column '{new_col}' already exists in DataFrame; choose another prefix"
                )

        separated = self.separate(df[column], remove_age=remove_age)

        out = df.copy()
        position = out.columns.get_loc(column) + 1
        out.insert(position, base_col, separated["msdrg_base"].values)
        out.insert(position + 1, complication_col, separated["msdrg_complication"].values)
        return out

    def find_unsupported_codings(
        self,
        drgs: Iterable[Optional[str]],
        complications: Optional[Iterable[Optional[str]]] = None
    ) -> pd.Series:
        """
        Find descriptions that look qualified but match no pattern.

        A description is flagged when no complication pattern matched but its
        text, anywhere in the string, still mentions CC, MCC or complications
        after a W, W/O, WITH or WITHOUT token. These are the codings to add to
        the pattern table.

        Args:
            drgs: Sequence of DRG descriptions
            complications: Complication labels already computed for drgs, in
                           the same order. If omitted, drgs are separated here.

        Returns:
            Series of counts indexed by description, most frequent first

        Raises:
            ValueError: If complications and drgs differ in length
        """
        if complications is None:
            result = self.separate(drgs)
        else:
            values, _ = self._as_values(drgs)
            labels, _ = self._as_values(complications)
            if len(values) != len(labels):
                raise ValueError(
                    f"Got {len(labels)} complication labels for {len(values)} descriptions"
                )
            result = pd.DataFrame({"msdrg": values, "msdrg_complication": labels}, dtype=object)

        unmatched = result.loc[
            result["msdrg_complication"].isna() & result["msdrg"].map(lambda v: not _is_missing(v)).astype(bool),
            "msdrg"
        ]
        flagged = unmatched[unmatched.map(lambda v: bool(_QUALIFIER_HINT.search(v))).astype(bool)]

        counts = flagged.value_counts()
        counts.name = "count"
        counts.index.name = "msdrg"
        return counts

    def pattern_table(self) -> pd.DataFrame:
        """Return the complication patterns in the order they are tried."""
        return pd.DataFrame(
            [p.model_dump() for p in self.patterns],
            columns=["suffix", "label"]
        )

    def _strip_complication(self, drg: str) -> Tuple[str, Optional[str]]:
        # Stacked qualifiers ("X W CC W MCC") are all removed; the last one labels the row
        base, label = drg, None
        while True:
            for regex, pattern in self._compiled:
                match = regex.search(base)
                if match:
                    base = TRAILING_SEPARATORS.sub("", base[:match.start()])
                    if label is None:
                        label = pattern.label
                    break
            else:
                return base, label

    def _strip_age(self, base: str) -> str:
        return TRAILING_SEPARATORS.sub("", self.age_regex.sub("", base))

    @staticmethod
    def _as_values(drgs: Any) -> Tuple[List[Any], Optional[pd.Index]]:
        if isinstance(drgs, (str, bytes)):
            raise TypeError("drgs must be a sequence of DRG descriptions, not a single string")
        if isinstance(drgs, pd.DataFrame):
            raise TypeError("drgs must be one column of descriptions; use separate_column for DataFrames")
        if isinstance(drgs, pd.Series):
            return drgs.tolist(), drgs.index
        if isinstance(drgs, (pd.Index, np.ndarray)):
            return list(drgs), None
        try:
            return list(drgs), None
        except TypeError as e:
            raise TypeError(f"drgs must be a sequence of DRG descriptions, got {type(drgs).__name__}") from e

    @staticmethod
    def _validate_values(values: List[Any]) -> None:
        for i, value in enumerate(values):
            if not _is_missing(value) and not isinstance(value, str):
                raise TypeError(
                    f"DRG descriptions must be strings; element {i} is {type(value).__name__}"
                )


_default_separator: Optional[DRGSeparator] = None


def _get_default_separator() -> DRGSeparator:
    global _default_separator
    if _default_separator is None:
        _default_separator = DRGSeparator()
    return _default_separator


def separate_drgs(drgs: Iterable[Optional[str]], remove_age: bool = False) -> pd.DataFrame:
    """
    Separate MS-DRG descriptions into base DRG and complication label.

    Recognized qualifiers are W CC, W MCC, W CC/MCC, W/O CC, W/O MCC and
    W/O CC/MCC at the end of the description. Any other coding leaves the
    complication label missing; such codings are not supported yet and
    should be reported so they can be added to the pattern table.

    Args:
        drgs: Sequence of DRG descriptions (list, array, Index or Series)
        remove_age: Whether to also remove age qualifiers such as "AGE 0-17"
                    from the base DRG

    Returns:
        DataFrame with columns msdrg (input unchanged), msdrg_base and
        msdrg_complication, one row per input in input order

    Example:
        >>> result = separate_drgs(["SIMPLE PNEUMONIA & PLEURISY W/O CC/MCC"])
        >>> result.loc[0, "msdrg_complication"]
        'without CC/MCC'
    """
    return _get_default_separator().separate(drgs, remove_age=remove_age)
