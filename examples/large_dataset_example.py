"""
DRG Separation on Large Encounter Tables

Encounter tables often hold millions of rows but only a few hundred distinct
DRG descriptions. Separating each distinct description once and mapping the
results back keeps memory and time proportional to the vocabulary.

Run with: python examples/large_dataset_example.py
"""

import logging
from pathlib import Path

import pandas as pd

from drg_tools import DRGSeparator

logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def separate_by_unique(separator: DRGSeparator, drgs: pd.Series, remove_age: bool = False) -> pd.DataFrame:
    """
    Separate a large column by its distinct values.

    Args:
        separator: Configured DRGSeparator
        drgs: Column of DRG descriptions
        remove_age: Whether to strip trailing age qualifiers

    Returns:
        DataFrame with the same index and columns as DRGSeparator.separate
    """
    distinct = pd.Series(drgs.dropna().unique(), dtype=object)
    lookup = separator.separate(distinct, remove_age=remove_age).set_index("msdrg")
    logger.info(f"Separated {len(lookup)} distinct descriptions for {len(drgs)} rows")

    return pd.DataFrame({
        "msdrg": drgs,
        "msdrg_base": drgs.map(lookup["msdrg_base"]),
        "msdrg_complication": drgs.map(lookup["msdrg_complication"]),
    }, index=drgs.index)


def main():
    sample = pd.read_csv(Path(__file__).parent.parent / "data" / "sample_drgs.csv")

    # Simulate a large table by repeating the sample encounters
    encounters = pd.concat([sample] * 10_000, ignore_index=True)
    logger.info(f"Encounter table: {len(encounters):,} rows")

    separator = DRGSeparator()
    result = separate_by_unique(separator, encounters["drg_description"], remove_age=True)

    print()
    print(result["msdrg_complication"].value_counts(dropna=False).to_string())
    print()


if __name__ == "__main__":
    main()
