"""
tutorials/make_synthetic_data.py

Creates a synthetic census income dataset in the raw UCI "Adult" file format.
It is not the real data, but it has the same columns, levels, missing-value
marker and capital-gain sentinel, so the modelling pipeline can run offline.

Outputs:
  data/adult_synthetic.data
  data/adult_synthetic.names
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd

from tutorials.census_data import ADULT_COLUMNS, CAPITAL_GAIN_SENTINEL


WORKCLASS = ["Private", "Self-emp-not-inc", "Self-emp-inc", "Federal-gov", "Local-gov", "State-gov"]
EDUCATION = [
    # (label, education_num)
    ("HS-grad", 9),
    ("Some-college", 10),
    ("Assoc-voc", 11),
    ("Bachelors", 13),
    ("Masters", 14),
    ("Doctorate", 16),
    ("11th", 7),
]
MARITAL = ["Married-civ-spouse", "Never-married", "Divorced", "Separated", "Widowed"]
OCCUPATION = [
    "Exec-managerial", "Prof-specialty", "Craft-repair", "Adm-clerical",
    "Sales", "Other-service", "Machine-op-inspct", "Tech-support",
]
RELATIONSHIP = ["Husband", "Wife", "Own-child", "Not-in-family", "Unmarried"]
RACE = ["White", "Black", "Asian-Pac-Islander", "Amer-Indian-Eskimo", "Other"]
COUNTRY = ["United-States", "Mexico", "Philippines", "Germany", "India"]

NAMES_TEXT = """\
| Synthetic stand-in for the UCI Adult census income data.
| Same attribute order and value conventions as adult.names.

>50K, <=50K.

age: continuous.
workclass: {workclass}.
fnlwgt: continuous.
education: {education}.
education-num: continuous.
marital-status: {marital}.
occupation: {occupation}.
relationship: {relationship}.
race: {race}.
sex: Female, Male.
capital-gain: continuous.
capital-loss: continuous.
hours-per-week: continuous.
native-country: {country}.
"""


def sigmoid(x: np.ndarray) -> np.ndarray:
    return 1 / (1 + np.exp(-x))


def generate_census_dataset(
    n_people: int = 5000,
    random_state: int = 42,
    missing_rate: float = 0.03,
    sentinel_rate: float = 0.005,
) -> pd.DataFrame:
    rng = np.random.default_rng(random_state)

    age = np.clip(rng.normal(38, 13, size=n_people), 17, 90).astype(int)
    workclass = rng.choice(WORKCLASS, size=n_people, p=[0.70, 0.08, 0.04, 0.04, 0.07, 0.07])
    fnlwgt = rng.integers(20_000, 1_000_000, size=n_people)

    edu_idx = rng.choice(len(EDUCATION), size=n_people, p=[0.32, 0.22, 0.05, 0.17, 0.06, 0.02, 0.16])
    education = np.array([EDUCATION[i][0] for i in edu_idx])
    education_num = np.array([EDUCATION[i][1] for i in edu_idx])

    marital = rng.choice(MARITAL, size=n_people, p=[0.46, 0.33, 0.14, 0.03, 0.04])
    occupation = rng.choice(OCCUPATION, size=n_people)
    sex = rng.choice(["Male", "Female"], size=n_people, p=[0.67, 0.33])

    married = marital == "Married-civ-spouse"
    relationship = np.where(
        married,
        np.where(sex == "Male", "Husband", "Wife"),
        rng.choice(RELATIONSHIP[2:], size=n_people),
    )
    race = rng.choice(RACE, size=n_people, p=[0.85, 0.09, 0.03, 0.01, 0.02])
    country = rng.choice(COUNTRY, size=n_people, p=[0.91, 0.03, 0.02, 0.02, 0.02])

    capital_gain = np.where(rng.random(n_people) < 0.08, rng.integers(1_000, 20_000, size=n_people), 0)
    capital_loss = np.where(rng.random(n_people) < 0.05, rng.integers(500, 2_500, size=n_people), 0)
    hours = np.clip(rng.normal(40, 12, size=n_people), 1, 99).astype(int)

    # Higher income odds with education, marriage, age (up to a point), hours and capital gains
    linear = (
        -8.5
        + 0.35 * education_num
        + 1.9 * married
        + 0.045 * np.minimum(age, 60)
        + 0.025 * hours
        + 0.00015 * capital_gain
        + 0.4 * np.isin(occupation, ["Exec-managerial", "Prof-specialty"])
        + rng.normal(0, 0.6, size=n_people)
    )
    label = np.where(rng.random(n_people) < sigmoid(linear), ">50K", "<=50K")

    df = pd.DataFrame(
        {
            "age": age,
            "workclass": workclass,
            "fnlwgt": fnlwgt,
            "education": education,
            "education_num": education_num,
            "marital_status": marital,
            "occupation": occupation,
            "relationship": relationship,
            "race": race,
            "sex": sex,
            "capital_gain": capital_gain,
            "capital_loss": capital_loss,
            "hours_per_week": hours,
            "native_country": country,
            "income": label,
        },
        columns=ADULT_COLUMNS,
    )

    # Raw-file quirks: "?" for unknown categoricals and a top-coded capital gain
    for c in ["workclass", "occupation", "native_country"]:
        df.loc[rng.random(n_people) < missing_rate, c] = "?"
    df.loc[rng.random(n_people) < sentinel_rate, "capital_gain"] = CAPITAL_GAIN_SENTINEL

    return df


def write_adult_files(df: pd.DataFrame, data_path: Path, names_path: Path) -> None:
    """Write `df` as ", "-separated rows without header, plus a names file."""
    data_path.parent.mkdir(parents=True, exist_ok=True)
    lines = df.astype(str).apply(", ".join, axis=1)
    data_path.write_text("\n".join(lines) + "\n")

    names_path.parent.mkdir(parents=True, exist_ok=True)
    names_path.write_text(
        NAMES_TEXT.format(
            workclass=", ".join(WORKCLASS),
            education=", ".join(e for e, _ in EDUCATION),
            marital=", ".join(MARITAL),
            occupation=", ".join(OCCUPATION),
            relationship=", ".join(RELATIONSHIP),
            race=", ".join(RACE),
            country=", ".join(COUNTRY),
        )
    )


def main() -> None:
    data_path = Path("data/adult_synthetic.data")
    names_path = Path("data/adult_synthetic.names")

    df = generate_census_dataset(n_people=5000, random_state=42)
    write_adult_files(df, data_path, names_path)

    # Print quick quality checks
    print(f"Wrote {len(df)} rows to {data_path} (names in {names_path})")
    print("Label rate (>50K):", (df["income"] == ">50K").mean().round(3))
    print("Rows with '?':", int((df == "?").any(axis=1).sum()))


if __name__ == "__main__":
    main()
