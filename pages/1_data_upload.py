"""Step 1: Data Upload & Variable Configuration."""

import pandas as pd
import streamlit as st

from irr.data_transformer import (
    from_long_dataframe,
    from_wide_dataframe,
    load_table,
    parse_text,
)
from irr.errors import DataFormatError
from irr.models import INTERVAL, MEASUREMENT_LEVELS, ORDINAL

st.set_page_config(page_title="Data Upload - Reliability Calculator", layout="wide")

st.title("Step 1: Upload Your Data")

st.markdown("""
The app supports three formats:

- **Block text file**: one block per variable; the header line holds the
  variable name and the observers, each following line a unit and its
  values. An optional closing line such as `,ordinal,Low,Mid,High`
  declares the measurement level and the ordinal value order.
- **Long format CSV/XLSX**: columns `unit_id, coder, variable, value`
- **Wide CSV/XLSX**: one row per unit, one column per observer (single variable)
""")

with st.expander("Block format example"):
    st.code(
        "quality,Ann,Bob,Cid\n"
        "doc1,Low,Mid,\n"
        "doc2,High,High,High\n"
        "doc3,Mid,Mid,Low\n"
        ",ordinal,Low,Mid,High\n",
        language="text",
    )

st.markdown("---")

upload_mode = st.radio(
    "Select data format:",
    ["Block text file", "Long format table", "Wide table (one variable)"],
    index=0,
)

uploaded = st.file_uploader(
    "Upload a data file",
    type=['txt', 'csv', 'xlsx', 'xls'],
)

matrices = []

if uploaded is not None:
    try:
        if upload_mode == "Block text file":
            text = uploaded.getvalue().decode("utf-8")
            matrices = parse_text(text)

        elif upload_mode == "Long format table":
            df = load_table(uploaded)
            st.dataframe(df.head(10))
            df.columns = df.columns.str.lower()

            variables = [str(v) for v in pd.unique(df["variable"])] if "variable" in df else []
            levels, orders = {}, {}
            st.subheader("Configure Variables")
            for var in variables:
                col1, col2 = st.columns([1, 3])
                with col1:
                    levels[var] = st.selectbox(
                        f"Level of '{var}'", MEASUREMENT_LEVELS, key=f"level_{var}"
                    )
                if levels[var] == ORDINAL:
                    with col2:
                        observed = [str(v) for v in pd.unique(df.loc[df["variable"] == var, "value"].dropna())]
                        orders[var] = st.multiselect(
                            f"Value order of '{var}' (lowest first)",
                            observed,
                            default=observed,
                            key=f"order_{var}",
                        )
            matrices = from_long_dataframe(df, levels, orders)

        else:
            df = load_table(uploaded)
            st.dataframe(df.head(10))
            st.subheader("Configure Variable")
            variable = st.text_input("Variable name", value="variable")
            unit_column = st.selectbox("Unit ID column", df.columns.tolist(), index=0)
            level = st.selectbox("Measurement level", MEASUREMENT_LEVELS, index=0)
            order = None
            if level == ORDINAL:
                observed = sorted({
                    str(v) for c in df.columns if c != unit_column for v in df[c].dropna()
                })
                order = st.multiselect("Value order (lowest first)", observed, default=observed)
            matrices = [from_wide_dataframe(df, variable, unit_column, level, order)]

    except (DataFormatError, KeyError) as e:
        st.error(f"Could not load data: {e}")
        matrices = []

if matrices:
    st.success(f"Loaded {len(matrices)} variable(s).")
    for matrix in matrices:
        with st.expander(f"{matrix.variable} ({matrix.level})"):
            st.markdown(
                f"**{matrix.n_observers} observers**, **{matrix.n_units} units**, "
                f"**{matrix.n_observations} observations**"
            )
            st.markdown(f"**Values:** {', '.join(matrix.values)}")
            st.dataframe(matrix.to_dataframe().head(20))

    if st.button("Use this data", type="primary"):
        st.session_state.app_state['matrices'] = matrices
        st.session_state.app_state['analysis_complete'] = False
        st.session_state.app_state['current_step'] = 2
        st.success("Data saved. Continue to Run Analysis.")

if any(m.level == INTERVAL for m in matrices):
    st.info(
        "Krippendorff's alpha supports nominal and ordinal data only; "
        "interval variables get the kappa statistics."
    )
