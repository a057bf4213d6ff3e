import bootstrap

import pandas as pd
import plotly.express as px
import streamlit as st

from core.config import history_enabled
from persistence.engine import get_engine, ping_db
from persistence.repositories.result_repo import ResultRepo
from persistence.repositories.run_repo import RunRepo

st.title("Run History")

if st.button("Back: Ranker"):
    st.switch_page("streamlit_app.py")

st.divider()

if not history_enabled():
    st.info("Run history is disabled. Set DATABASE_URL to keep past rankings.")
    st.stop()

if not ping_db():
    st.error("Database not reachable. Fix DATABASE_URL then refresh.")
    st.stop()

engine = get_engine()
run_repo = RunRepo(engine)
result_repo = ResultRepo(engine)

runs = run_repo.list_runs(limit=200)
if not runs:
    st.info("No runs yet.")
    st.stop()


def run_label(r: dict) -> str:
    by = (r.get("executed_by") or "").strip()
    by_part = f" by {by}" if by else ""
    return f"{r['executed_at']} | {r.get('source_name') or 'table'}{by_part}"


st.subheader("Past Runs")
st.dataframe(pd.DataFrame(runs), use_container_width=True)

st.divider()

run_id = st.selectbox(
    "Select a run",
    options=[r["run_id"] for r in runs],
    format_func=lambda x: next(run_label(rr) for rr in runs if rr["run_id"] == x),
)

run = run_repo.get_run(run_id)
st.write(
    {
        "run_id": run["run_id"],
        "source": run.get("source_name"),
        "criteria": run["criteria"],
        "weights": run["weights_spec"],
        "impacts": run["impacts_spec"],
        "executed_at": str(run["executed_at"]),
        "executed_by": run.get("executed_by"),
    }
)

results_df = pd.DataFrame(result_repo.get_results(run_id))
st.subheader("Ranking")
st.dataframe(results_df, use_container_width=True)

st.download_button(
    "Download Ranking CSV",
    data=results_df.to_csv(index=False).encode("utf-8"),
    file_name=f"ranking_{run_id}.csv",
    mime="text/csv",
)

scores = pd.DataFrame(result_repo.get_scores_with_names(run_id))
if not scores.empty:
    fig = px.bar(scores, x="alternative_name", y="score", hover_data=["rank"], title="TOPSIS Score by Alternative")
    st.plotly_chart(fig, use_container_width=True)
