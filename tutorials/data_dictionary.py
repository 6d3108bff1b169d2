"""
tutorials/data_dictionary.py

Column descriptions shown by the Streamlit app for both tables the
tutorials produce.
"""

CENSUS_DICTIONARY = {
    "age": "Age in years.",
    "workclass": "Employer type (Private, Self-emp-inc, Federal-gov, ...).",
    "fnlwgt": "Census sampling weight (dropped before modelling).",
    "education": "Highest education level as text (dropped; duplicates education_num).",
    "education_num": "Highest education level as an ordered number.",
    "marital_status": "Marital status.",
    "occupation": "Occupation group.",
    "relationship": "Role within the household (Husband, Own-child, ...).",
    "race": "Race as recorded by the census.",
    "sex": "Sex as recorded by the census.",
    "capital_gain": "Capital gains in dollars (99999 is a top-code; such rows are dropped).",
    "capital_loss": "Capital losses in dollars.",
    "hours_per_week": "Usual hours worked per week.",
    "native_country": "Country of origin (dropped; almost all United-States).",
    "income": "Target: under_50K or over_50K annual income.",
}

COLLEGE_DICTIONARY = {
    "name": "College name as shown on the result card.",
    "grade": "Overall letter grade given by the ranking site.",
    "acceptance_rate": "Share of applicants admitted, in percent.",
    "net_price": "Average yearly cost after aid, in dollars.",
    "sat_range": "Middle 50% SAT score range, as text.",
    "page": "Search-results page the record was scraped from.",
}
