"""
app/streamlit_app.py

Purpose
-------
A Streamlit dashboard for the two tutorials:
  - Census models: runs the tree / pruning / random forest walk-through on a
    local adult.data file and shows the pruning table, forest tuning and the
    ROC comparison
  - College scrape: shows a table produced by `python -m tutorials.scrape`
    (upload it, or read data/colleges.csv)

Run
---
streamlit run app/streamlit_app.py
"""

from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd
import streamlit as st

from tutorials.census_data import DEFAULT_DATA_PATH
from tutorials.data_dictionary import CENSUS_DICTIONARY, COLLEGE_DICTIONARY
from tutorials.evaluation import plot_roc_curves
from tutorials.scrape import DEFAULT_OUT_PATH
from tutorials.train import run_pipeline
from tutorials.tree_models import describe_tree


# ---------------------------------------------------------------------
# Streamlit page configuration
# ---------------------------------------------------------------------
st.set_page_config(
    page_title="Trees & Scraping Tutorials",
    layout="wide",
)
st.title("🌳 Census Trees & College Scraping")


# ---------------------------------------------------------------------
# Caching helpers
# ---------------------------------------------------------------------
# Streamlit reruns the script top-to-bottom on every interaction; the
# walk-through refits many trees, so results are cached per settings.

@st.cache_resource
def get_results(data_path: str, names_path: str, n_estimators: int, mtry: tuple, random_state: int):
    return run_pipeline(
        Path(data_path),
        Path(names_path) if names_path else None,
        random_state=random_state,
        mtry=mtry,
        n_estimators=n_estimators,
        verbose=False,
    )


@st.cache_data
def read_table(path: str) -> pd.DataFrame:
    return pd.read_csv(path)


census_tab, college_tab = st.tabs(["Census models", "College scrape"])


# ---------------------------------------------------------------------
# Census models
# ---------------------------------------------------------------------
with census_tab:
    st.sidebar.header("Census controls")
    data_path = st.sidebar.text_input("adult.data path", value=str(DEFAULT_DATA_PATH))
    names_path = st.sidebar.text_input("adult.names path (optional)", value="")
    n_estimators = st.sidebar.slider("Trees in forest", min_value=50, max_value=1000, value=200, step=50)
    mtry = st.sidebar.multiselect("max_features grid", options=[1, 2, 3, 4, 6, 8, 12, 16, 24], default=[2, 4, 8])
    random_state = st.sidebar.number_input("Random seed", value=42, step=1)

    if not Path(data_path).exists():
        st.warning(
            f"No data at {data_path}. Download adult.data from UCI, or generate a stand-in: "
            "`python -m tutorials.make_synthetic_data`."
        )
    elif not mtry:
        st.warning("Pick at least one max_features value.")
    else:
        with st.spinner("Fitting trees and forest..."):
            results = get_results(data_path, names_path, n_estimators, tuple(sorted(mtry)), int(random_state))

        st.caption(f"{results.n_raw} raw rows, {results.n_clean} after cleaning.")

        col1, col2 = st.columns([1, 1])

        with col1:
            st.subheader("Test-set ROC-AUC")
            st.dataframe(results.comparison, use_container_width=True)

            st.subheader("ROC curves")
            st.pyplot(plot_roc_curves(results.curves))

        with col2:
            st.subheader("Pruning: CV error by complexity")
            fig = plt.figure()
            plt.errorbar(
                results.complexity["n_leaves"],
                results.complexity["cv_error"],
                yerr=results.complexity["cv_std"],
                fmt="o-",
                markersize=3,
            )
            plt.xscale("log")
            plt.xlabel("leaves")
            plt.ylabel("CV misclassification error")
            st.pyplot(fig)
            st.caption(f"Selected ccp_alpha = {results.ccp_alpha:.6f}")

            st.subheader("Forest tuning (CV ROC-AUC)")
            st.dataframe(results.forest_tuning, use_container_width=True)

        st.subheader("Pruned tree (top levels)")
        st.code(describe_tree(results.pruned_tree, results.feature_names, max_depth=3))

        with st.expander("Column descriptions"):
            st.table(pd.Series(CENSUS_DICTIONARY, name="description"))


# ---------------------------------------------------------------------
# College scrape
# ---------------------------------------------------------------------
with college_tab:
    st.caption("Produce a table with `python -m tutorials.scrape --last-page 3`.")

    file = st.file_uploader("Upload a scraped CSV", type="csv")
    if file:
        colleges = pd.read_csv(file)
    elif DEFAULT_OUT_PATH.exists():
        st.info(f"No file uploaded. Using {DEFAULT_OUT_PATH}.")
        colleges = read_table(str(DEFAULT_OUT_PATH))
    else:
        colleges = pd.DataFrame({c: pd.Series(dtype="object") for c in COLLEGE_DICTIONARY})

    if len(colleges) == 0:
        st.warning("No scraped records available.")
    else:
        st.dataframe(colleges, use_container_width=True)

        c1, c2 = st.columns(2)
        with c1:
            fig = plt.figure()
            plt.hist(colleges["acceptance_rate"].dropna(), bins=20)
            plt.xlabel("acceptance_rate (%)")
            plt.ylabel("count")
            st.pyplot(fig)
        with c2:
            fig = plt.figure()
            plt.scatter(colleges["acceptance_rate"], colleges["net_price"], s=12)
            plt.xlabel("acceptance_rate (%)")
            plt.ylabel("net_price ($)")
            st.pyplot(fig)

    with st.expander("Column descriptions"):
        st.table(pd.Series(COLLEGE_DICTIONARY, name="description"))
