"""
Example usage of DRG Tools.

This script demonstrates how to separate MS-DRG descriptions into base DRG
and complication label with various scenarios.
"""

from pathlib import Path

import pandas as pd

from drg_tools import DRGSeparator, separate_drgs


DATA_DIR = Path(__file__).parent / "data"


def example_1_documented_descriptions():
    """Example 1: The leukemia and pneumonia descriptions."""
    print("=" * 80)
    print("Example 1: Separating DRG Descriptions")
    print("=" * 80)

    drgs = [
        "ACUTE LEUKEMIA W/O MAJOR O.R. PROCEDURE W CC",
        "ACUTE LEUKEMIA W/O MAJOR O.R. PROCEDURE W MCC",
        "ACUTE LEUKEMIA W/O MAJOR O.R. PROCEDURE W/O CC/MCC",
        "SIMPLE PNEUMONIA & PLEURISY",
        "SIMPLE PNEUMONIA & PLEURISY AGE 0-17",
    ]

    result = separate_drgs(drgs)

    print(f"\n{'Base DRG':<45} {'Complication':<20}")
    print("-" * 80)
    for _, row in result.iterrows():
        print(f"{row['msdrg_base']:<45} {row['msdrg_complication'] or '-':<20}")
    print()


def example_2_remove_age():
    """Example 2: Removing age qualifiers."""
    print("=" * 80)
    print("Example 2: Removing Age Qualifiers")
    print("=" * 80)

    drgs = [
        "SIMPLE PNEUMONIA & PLEURISY AGE 0-17",
        "BRONCHITIS & ASTHMA AGE >17 W CC",
    ]

    kept = separate_drgs(drgs)
    removed = separate_drgs(drgs, remove_age=True)

    print(f"\n{'remove_age=False':<40} {'remove_age=True':<40}")
    print("-" * 80)
    for before, after in zip(kept["msdrg_base"], removed["msdrg_base"]):
        print(f"{before:<40} {after:<40}")
    print()


def example_3_dataframe_column():
    """Example 3: Separating a column of encounter data."""
    print("=" * 80)
    print("Example 3: Separating a DataFrame Column")
    print("=" * 80)

    encounters = pd.read_csv(DATA_DIR / "sample_drgs.csv")

    separator = DRGSeparator()
    result = separator.separate_column(encounters, "drg_description", remove_age=True, prefix="drg")

    print()
    print(result[["encounter_id", "drg_base", "drg_complication"]].to_string(index=False))
    print()

    # Codings the table does not know yet
    unsupported = separator.find_unsupported_codings(encounters["drg_description"])
    print("Unsupported complication codings:")
    for description, count in unsupported.items():
        print(f"  {count} x {description}")
    print()


def example_4_extra_patterns():
    """Example 4: Extending the pattern table from a JSON file."""
    print("=" * 80)
    print("Example 4: Extra Complication Patterns")
    print("=" * 80)

    separator = DRGSeparator(pattern_file=DATA_DIR / "extra_patterns.json")

    print()
    print(separator.pattern_table().to_string(index=False))
    print()

    row = separator.split("SEPTICEMIA OR SEVERE SEPSIS W/O MV >96 HOURS WITH MCC")
    print(f"Base DRG:     {row.msdrg_base}")
    print(f"Complication: {row.msdrg_complication}")
    print()


def example_5_model_features():
    """Example 5: Using the separated columns as model features."""
    print("=" * 80)
    print("Example 5: Categorical Features for Modeling")
    print("=" * 80)

    encounters = pd.read_csv(DATA_DIR / "sample_drgs.csv")
    separated = DRGSeparator().separate_column(encounters, "drg_description", remove_age=True, prefix="drg")

    features = pd.get_dummies(
        separated[["drg_complication", "length_of_stay"]],
        columns=["drg_complication"],
        dummy_na=True
    )

    print()
    print(f"Feature columns: {features.columns.tolist()}")
    print(f"Shape: {features.shape}")
    print()


if __name__ == "__main__":
    example_1_documented_descriptions()
    example_2_remove_age()
    example_3_dataframe_column()
    example_4_extra_patterns()
    example_5_model_features()
