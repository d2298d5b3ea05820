"""
Inter-Rater Reliability Calculator
A Streamlit app for Krippendorff's alpha, Fleiss' and Cohen's kappa with
confidence intervals and significance tests.
"""

import logging

import streamlit as st

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

st.set_page_config(
    page_title="Inter-Rater Reliability Calculator",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Initialize session state
if 'app_state' not in st.session_state:
    st.session_state.app_state = {
        # Data
        'matrices': [],

        # Settings
        'resamples': 20000,
        'confidence_levels': (0.95, 0.99),
        'seed': None,
        'fleiss_variance': True,

        # Results
        'analyses': [],
        'failures': {},
        'summary': None,
        'report_text': None,

        # Navigation
        'current_step': 1,
        'analysis_complete': False,
    }


def render_progress_indicator():
    """Render the step progress indicator in sidebar."""
    st.sidebar.markdown("## Progress")

    steps = [
        ("1. Data Upload", 1),
        ("2. Run Analysis", 2),
        ("3. Results", 3),
    ]

    current = st.session_state.app_state['current_step']

    for name, step_num in steps:
        if step_num < current:
            st.sidebar.markdown(f"✅ {name}")
        elif step_num == current:
            st.sidebar.markdown(f"**➡️ {name}**")
        else:
            st.sidebar.markdown(f"⬜ {name}")


# Main page content
st.title("📊 Inter-Rater Reliability Calculator")
st.markdown("""
This tool helps you validate a subjective measurement procedure before
trusting the data it produces:

- **Krippendorff's alpha** for any number of observers, with missing data,
  for nominal and ordinal variables; confidence intervals and significance
  tests come from a bootstrapped sampling distribution
- **Fleiss' kappa** over the units rated by every observer
- **Cohen's kappa** for every pair of observers, with large-sample
  standard errors

### Interpreting the coefficients

| Value | Interpretation | Recommendation |
|-------|----------------|----------------|
| ≥ 0.80 | **Acceptable** reliability | Proceed with analysis |
| 0.667 – 0.80 | **Tentative** reliability | Draw tentative conclusions only |
| < 0.667 | **Insufficient** reliability | Revise codebook or retrain observers |

A confidence interval tells you how far the true coefficient may lie from
the estimate; the significance tests give the probability that the true
coefficient falls short of each threshold.

---
*Navigate using the pages in the sidebar →*
""")

render_progress_indicator()
