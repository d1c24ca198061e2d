# dreamydrift_app.py
from __future__ import annotations

import streamlit as st

from data.cache import _cached_checklist_items, _cached_sleep_records, _invalidate_repo_read_caches
from data.state_io import load_record_form_state, save_record_form_state
from domain.checklist import checklist_by_category
from domain.reasons import CATEGORY_LABELS, reason_label, reasons_by_category
from dreamydrift.calendar_grid import build_month_grid, shift_month
from dreamydrift.coach import checklist_progress, late_night_tier, sleep_balance
from dreamydrift.engine import classify, compute_stats, format_duration
from dreamydrift.plots import plot_category_distribution, plot_month_heatmap
from services.analysis_service import current_analysis, refresh_analysis, summary_narrative
from services.secrets_service import resolve_api_key
from storage.local_store import LocalJsonStore, StoreConfig
from storage.repo import DriftRepo, new_dump_entry


# ----------------------------
# Repo factory / session init
# ----------------------------

@st.cache_resource
def get_repo(data_dir: str = ".dreamydrift") -> DriftRepo:
    return DriftRepo(LocalJsonStore(StoreConfig(data_dir=data_dir)))


def init_session_defaults(repo: DriftRepo):
    today = repo.today()
    st.session_state.setdefault("record_date", today)
    st.session_state.setdefault("view_year", today.year)
    st.session_state.setdefault("view_month", today.month)
    st.session_state.setdefault("stats_window", 7)


# ----------------------------
# Pages
# ----------------------------

def render_recorder(repo: DriftRepo):
    st.subheader("Last night")
    st.date_input("Night of", key="record_date")
    if st.session_state.get("record_loaded_for") != st.session_state["record_date"].isoformat():
        load_record_form_state(repo)

    c1, c2 = st.columns(2)
    with c1:
        st.time_input("Fell asleep", key="record_sleep_time", step=300)
    with c2:
        st.time_input("Woke up", key="record_wake_time", step=300)

    q = classify(
        st.session_state["record_sleep_time"].strftime("%H:%M"),
        st.session_state["record_wake_time"].strftime("%H:%M"),
    )
    st.caption(f"Slept {format_duration(q.duration_minutes)}")

    if q.is_late:
        st.markdown("**What kept you up?**")
        selected = set(st.session_state.get("record_reasons", []))
        chosen = []
        for cat, reasons in reasons_by_category().items():
            st.caption(CATEGORY_LABELS[cat])
            for r in reasons:
                if st.checkbox(r.label, value=r.id in selected, key=f"reason_{st.session_state['record_date'].isoformat()}_{r.id}"):
                    chosen.append(r.id)
        st.session_state["record_reasons"] = chosen

    if st.button("Save", type="primary", use_container_width=True):
        try:
            save_record_form_state(repo)
            st.success("Saved.")
        except Exception as e:
            st.error(f"Save failed: {e}")


def render_checklist(repo: DriftRepo):
    today_iso = repo.today().isoformat()
    done = _cached_checklist_items(repo, today_iso)
    st.subheader("Before bed")
    st.progress(checklist_progress(done) / 100.0)
    for cat, items in checklist_by_category().items():
        st.caption(CATEGORY_LABELS[cat])
        for item in items:
            checked = st.checkbox(item.text, value=item.id in done, key=f"check_{today_iso}_{item.id}")
            if checked != (item.id in done):
                repo.toggle_checklist_item(today_iso, item.id)
                _invalidate_repo_read_caches()
                st.rerun()


def render_stats(repo: DriftRepo):
    records = _cached_sleep_records(repo)

    st.subheader("Heatmap")
    c1, c2, c3 = st.columns([1, 3, 1])
    with c1:
        if st.button("◀", key="prev_month"):
            st.session_state["view_year"], st.session_state["view_month"] = shift_month(
                st.session_state["view_year"], st.session_state["view_month"], -1
            )
            st.rerun()
    with c2:
        st.markdown(f"**{st.session_state['view_year']}-{st.session_state['view_month']:02d}**")
    with c3:
        if st.button("▶", key="next_month"):
            st.session_state["view_year"], st.session_state["view_month"] = shift_month(
                st.session_state["view_year"], st.session_state["view_month"], 1
            )
            st.rerun()
    grid = build_month_grid(st.session_state["view_year"], st.session_state["view_month"], records)
    st.pyplot(plot_month_heatmap(grid))

    window = st.radio("Window", [7, 30], horizontal=True, key="stats_window")
    stats = compute_stats(records, window)
    if stats.total_tracked == 0:
        st.info("Not enough data yet.")
        return

    tier_icon = {"none": "🎉", "few": "👌", "many": "🐼"}[late_night_tier(stats)]
    st.metric("Late nights", f"{stats.late_count} / {stats.total_tracked}", help=tier_icon)
    for r in stats.top_reasons:
        st.write(f"- {reason_label(r.id)} · {r.count}x")

    fig = plot_category_distribution(stats)
    if fig is not None:
        st.pyplot(fig)

    balance = sleep_balance(stats)
    if balance is not None:
        box = {"debt": st.error, "low": st.warning, "healthy": st.success}[balance.level]
        box(f"**{balance.title}** ({stats.insufficient_count} short nights). {balance.message}")

    st.subheader("Review")
    if st.button("Refresh review", key="refresh_review"):
        refresh_analysis(repo, summary_narrative, records, window)
    analysis = current_analysis(repo)
    if analysis:
        st.markdown(analysis)
    else:
        st.caption("No review in the last 24 hours.")


def render_dump(repo: DriftRepo):
    st.subheader("Notes")
    st.caption("Cleared automatically every day.")
    text = st.text_area("What's on your mind?", key="dump_text")
    c1, c2 = st.columns(2)
    with c1:
        if st.button("Drop it here", type="primary", use_container_width=True) and text.strip():
            repo.append_dump_entry(new_dump_entry(text.strip(), repo.now()))
    with c2:
        if st.button("Clear", use_container_width=True):
            repo.clear_dump_entries()

    for e in repo.current_dump_entries():
        when = repo.local_time(e.timestamp).strftime("%H:%M")
        if e.text:
            st.markdown(f"`{when}` {e.text}")
        if e.ai_response:
            st.caption(e.ai_response)

    with st.expander("API key"):
        key = st.text_input("Key", value=repo.get_api_key(), type="password")
        if st.button("Save key"):
            repo.set_api_key(key)
            st.success("Saved.")
        source = resolve_api_key(repo)[1]
        st.caption(f"Key source: {source}" if source else "No key configured.")


def main():
    st.set_page_config(page_title="Dreamy Drift", page_icon="🌙", layout="centered")
    repo = get_repo()
    init_session_defaults(repo)

    tab_record, tab_check, tab_stats, tab_dump = st.tabs(["Record", "Checklist", "Stats", "Notes"])
    with tab_record:
        render_recorder(repo)
    with tab_check:
        render_checklist(repo)
    with tab_stats:
        render_stats(repo)
    with tab_dump:
        render_dump(repo)


if __name__ == "__main__":
    main()
