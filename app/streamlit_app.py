import bootstrap

import logging

import pandas as pd
import plotly.express as px
import streamlit as st
from sqlalchemy.exc import SQLAlchemyError

from core.config import history_enabled
from core.errors import TopsisError
from persistence.engine import get_engine, ping_db
from services.email_service import EmailError, EmailService, email_enabled
from services.evaluation_service import EvaluationOutcome, EvaluationService, artifact_frames
from services.table_reader import TableReadError, read_table

logger = logging.getLogger(__name__)

st.set_page_config(page_title="TOPSIS Ranker", layout="wide")

st.title("TOPSIS Ranker")
st.caption("Upload your dataset and rank its alternatives by similarity to the ideal solution.")

st.session_state.setdefault("user_name", "")
st.session_state.setdefault("last_outcome", None)
st.session_state.setdefault("last_source", None)

with st.sidebar:
    st.header("Settings")
    st.session_state["user_name"] = st.text_input("Your name", value=st.session_state["user_name"])

    st.divider()
    db_ok = history_enabled() and ping_db()
    st.write("History:", "✅" if db_ok else "⬜")
    if history_enabled() and not db_ok:
        st.warning("Database not reachable. Runs will not be saved. Check DATABASE_URL.")
    st.write("Email:", "✅" if email_enabled() else "⬜")

    st.divider()
    if st.button("Run History"):
        st.switch_page("pages/1_history.py")

# ----------------------------
# Inputs
# ----------------------------
left, right = st.columns([2, 3])

with left:
    upload = st.file_uploader("Dataset (CSV or Excel)", type=["csv", "xlsx"])
    weights = st.text_input("Weights", placeholder="e.g. 1, 1, 1, 1")
    impacts = st.text_input("Impacts", placeholder="e.g. +, +, -, +")
    email = st.text_input("Delivery email (optional)", placeholder="results@company.com")
    run_clicked = st.button("Run TOPSIS", type="primary")

with right:
    st.subheader("How it works")
    st.markdown(
        "- The first column names each alternative; every other column is a criterion.\n"
        "- Give one weight and one impact per criterion, comma separated.\n"
        "- `+` means higher is better, `-` means lower is better."
    )
    if upload is not None:
        try:
            preview = read_table(upload, upload.name)
            upload.seek(0)
            st.dataframe(pd.DataFrame(preview).head(20), use_container_width=True)
        except TableReadError as e:
            st.error(str(e))

# ----------------------------
# Run
# ----------------------------
if run_clicked:
    if upload is None:
        st.error("Please upload a file first.")
        st.stop()
    if not weights.strip():
        st.error("Please provide weights.")
        st.stop()
    if not impacts.strip():
        st.error("Please provide impacts (+/-).")
        st.stop()

    service = EvaluationService(get_engine() if db_ok else None)
    try:
        upload.seek(0)
        table = read_table(upload, upload.name)
        evaluation = service.evaluate(table, weights, impacts, source_name=upload.name)
    except (TableReadError, TopsisError) as e:
        st.session_state["last_outcome"] = None
        st.error(str(e))
        st.stop()

    run_id = None
    try:
        run_id = service.save(
            evaluation,
            weights,
            impacts,
            source_name=upload.name,
            executed_by=st.session_state["user_name"],
        )
    except SQLAlchemyError as e:
        logger.exception("Could not save run for %s", upload.name)
        st.warning(f"Ranking computed but the run was not saved: {e.__class__.__name__}")

    outcome = EvaluationOutcome(evaluation=evaluation, run_id=run_id)
    st.session_state["last_outcome"] = outcome
    st.session_state["last_source"] = upload.name
    if outcome.run_id:
        st.success(f"Run saved: {outcome.run_id}")

    if email.strip():
        if not email_enabled():
            st.warning("Email is not configured on this server; results were not sent.")
        else:
            try:
                EmailService().send_results(email, outcome.records)
                st.success(f"Results sent to {email.strip()}")
            except EmailError as e:
                st.warning(str(e))

outcome = st.session_state.get("last_outcome")
if outcome is None:
    st.stop()

st.divider()

# ----------------------------
# Ranking
# ----------------------------
st.subheader("Ranking")
scores_df = pd.DataFrame(outcome.records)
st.dataframe(scores_df, use_container_width=True)

source = st.session_state.get("last_source") or "table"
st.download_button(
    "Download Ranking CSV",
    data=scores_df.to_csv(index=False).encode("utf-8"),
    file_name=f"topsis_{source.rsplit('.', 1)[0]}.csv",
    mime="text/csv",
)

st.divider()

# ----------------------------
# TOPSIS details
# ----------------------------
st.subheader("TOPSIS Details")

frames = artifact_frames(outcome.evaluation)
tab1, tab2, tab3, tab4 = st.tabs(["Distances", "Ideals (PIS/NIS)", "Normalized Matrix", "Weighted Matrix"])

with tab1:
    st.dataframe(frames["distances"], use_container_width=True)
with tab2:
    st.dataframe(frames["ideals"], use_container_width=True)
with tab3:
    st.dataframe(frames["normalized"], use_container_width=True)
with tab4:
    st.dataframe(frames["weighted"], use_container_width=True)

st.subheader("Charts")

label_col = outcome.evaluation.identifier
fig_scores = px.bar(
    scores_df,
    x=label_col,
    y="score",
    hover_data=["rank"],
    title="TOPSIS Score by Alternative",
)
st.plotly_chart(fig_scores, use_container_width=True)

fig_scatter = px.scatter(
    frames["distances"],
    x="s_pos",
    y="s_neg",
    text="alternative",
    hover_data=["c_star"],
    title="Separation Measures: S+ vs S-",
)
fig_scatter.update_traces(textposition="top center")
st.plotly_chart(fig_scatter, use_container_width=True)
