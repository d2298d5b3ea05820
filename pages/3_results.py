"""Step 3: Results Dashboard."""

import streamlit as st

from irr.kappa import CohenKappa
from irr.krippendorff import KrippendorffAlpha
from irr.report import format_analysis, interpret_alpha
from visualization.charts import (
    color_by_alpha,
    plot_bootstrap_distribution,
    plot_coincidences,
    plot_estimates,
    plot_pairwise_kappa_heatmap,
)

st.set_page_config(page_title="Results - Reliability Calculator", layout="wide")

st.title("Step 3: Results Dashboard")

# Check prerequisites
if not st.session_state.app_state.get('analysis_complete'):
    st.warning("Please run the analysis on the Analysis page first.")
    st.stop()

analyses = st.session_state.app_state['analyses']
summary = st.session_state.app_state['summary']
levels = st.session_state.app_state['confidence_levels']

tab1, tab2, tab3 = st.tabs(["Overview", "Per-Variable", "Report"])

with tab1:
    st.header("Reliability Overview")

    if summary is None or summary.empty:
        st.info("No statistics were computed.")
    else:
        estimate_cols = ["estimate"] + [c for c in summary.columns if c.startswith("ci")]
        st.dataframe(
            summary.style.map(color_by_alpha, subset=["estimate"]).format(
                {c: "{:.3f}" for c in estimate_cols}
            ),
            use_container_width=True,
        )
        st.plotly_chart(plot_estimates(summary, confidence=levels[0]), use_container_width=True)

with tab2:
    if analyses:
        names = [a.variable for a in analyses]
        selected = st.selectbox("Variable", names)
        analysis = analyses[names.index(selected)]

        alpha = next((s for s in analysis.statistics if isinstance(s, KrippendorffAlpha)), None)
        if alpha is not None:
            label, color = interpret_alpha(alpha.point_estimate)
            st.metric("Krippendorff's α", f"{alpha.point_estimate:.3f}")
            st.markdown(f"**Status:** :{color}[{label}]")
            for warning in alpha.advisories():
                st.warning(warning)

            col1, col2 = st.columns(2)
            with col1:
                st.plotly_chart(plot_bootstrap_distribution(alpha, levels[0]), use_container_width=True)
            with col2:
                table = st.radio("Table", ["coincidences", "expected", "delta"], horizontal=True)
                st.plotly_chart(plot_coincidences(alpha, table), use_container_width=True)
        for name, message in analysis.failures.items():
            st.info(f"{name}: {message}")

        if any(isinstance(s, CohenKappa) for s in analysis.statistics):
            st.plotly_chart(plot_pairwise_kappa_heatmap(analysis), use_container_width=True)

        with st.expander("Full text output"):
            st.text(format_analysis(analysis, levels))

with tab3:
    report = st.session_state.app_state['report_text'] or ""
    st.download_button(
        "Download text report",
        data=report,
        file_name="reliability_report.txt",
        mime="text/plain",
    )
    if summary is not None:
        st.download_button(
            "Download summary CSV",
            data=summary.to_csv(index=False),
            file_name="reliability_summary.csv",
            mime="text/csv",
        )
    st.text(report)

    for variable, message in st.session_state.app_state.get('failures', {}).items():
        st.error(f"Analysis of '{variable}' failed: {message}")
