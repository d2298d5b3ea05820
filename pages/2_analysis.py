"""Step 2: Run Analysis."""

import logging

import streamlit as st

from irr.analysis import analyze_matrix
from irr.config import AnalysisConfig
from irr.errors import BootstrapInvariantError
from irr.report import format_report, results_frame

logger = logging.getLogger(__name__)

st.set_page_config(page_title="Run Analysis - Reliability Calculator", layout="wide")

st.title("Step 2: Run Reliability Analysis")

# Check prerequisites
matrices = st.session_state.app_state.get('matrices')
if not matrices:
    st.warning("Please upload your data on the Data Upload page first.")
    st.stop()

st.markdown(f"""
Ready to compute reliability statistics for **{len(matrices)} variable(s)**:
{', '.join(m.variable for m in matrices)}
""")

with st.expander("Settings", expanded=False):
    resamples = st.number_input(
        "Bootstrap resamples for alpha (0 disables)",
        min_value=0, max_value=200000, step=1000,
        value=st.session_state.app_state['resamples'],
    )
    levels = st.multiselect(
        "Confidence levels",
        [0.80, 0.90, 0.95, 0.99],
        default=list(st.session_state.app_state['confidence_levels']),
    )
    seed_text = st.text_input("Random seed (blank for random)", value="")
    fleiss_variance = st.checkbox(
        "Confidence intervals and tests for Fleiss' kappa",
        value=st.session_state.app_state['fleiss_variance'],
    )

st.markdown("---")

if st.button("Run Complete Analysis", type="primary", use_container_width=True):
    progress_bar = st.progress(0)
    status_text = st.empty()

    analyses = []
    failures = {}
    for i, matrix in enumerate(matrices):
        status_text.text(f"Analyzing '{matrix.variable}' ({i + 1}/{len(matrices)})...")

        def on_progress(done, total, i=i):
            fraction = (i + done / total) / len(matrices)
            progress_bar.progress(min(int(fraction * 100), 100))

        config = AnalysisConfig(
            resamples=int(resamples),
            confidence_levels=tuple(sorted(levels)) or (0.95,),
            seed=int(seed_text) if seed_text.strip().isdigit() else None,
            fleiss_variance=fleiss_variance,
            progress=on_progress,
        )
        try:
            analyses.append(analyze_matrix(matrix, config))
        except BootstrapInvariantError as e:
            logger.error("Analysis of '%s' failed: %s", matrix.variable, e)
            failures[matrix.variable] = str(e)

    progress_bar.progress(100)
    status_text.text("Analysis complete.")

    st.session_state.app_state.update({
        'analyses': analyses,
        'failures': failures,
        'confidence_levels': config.confidence_levels,
        'summary': results_frame(analyses, config.confidence_levels),
        'report_text': format_report(analyses, config.confidence_levels),
        'analysis_complete': True,
        'current_step': 3,
    })

    for variable, message in failures.items():
        st.error(f"Analysis of '{variable}' failed: {message}")
    st.success("Done. Continue to the Results page.")
