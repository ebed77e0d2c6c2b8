"""
ESE Study Tracker - Lecture pacing dashboard

Streamlit application for tracking completed lectures per subject against
deadlines, with daily targets, export and import.

Usage:
    streamlit run app.py
"""

import logging
from datetime import date

import pandas as pd
import streamlit as st

from esetracker.config import load_config, setup_logging
from esetracker.tracker import (
    CatalogSource,
    FormatError,
    Navigator,
    SubjectFilter,
    ValidationError,
    visible_page_numbers,
)
from esetracker.viewer import (
    get_tracker_css,
    render_progress_ring,
    render_subject_card,
    render_subject_chip,
    render_subject_preview,
    render_today_schedule,
    status_label,
)


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

CONFIG = load_config()
setup_logging(CONFIG)
logger = logging.getLogger(__name__)

EXPORT_FILENAME = "ese-study-tracker-progress.json"
FILTER_LABELS = {
    SubjectFilter.ALL: "All",
    SubjectFilter.ACTIVE: "Active",
    SubjectFilter.UPCOMING: "Upcoming",
    SubjectFilter.COMPLETED: "Finished",
}

st.set_page_config(
    page_title="ESE Study Tracker",
    page_icon="📚",
    layout="wide",
    initial_sidebar_state="expanded",
)


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

def init_session_state():
    """Initialize session state variables."""
    if "navigator" not in st.session_state:
        st.session_state.navigator = Navigator.bootstrap(CONFIG)

    if "flash" not in st.session_state:
        st.session_state.flash = None  # (kind, message) shown once after a rerun

    if "import_digest" not in st.session_state:
        st.session_state.import_digest = None


def flash(kind: str, message: str):
    st.session_state.flash = (kind, message)


def show_flash():
    if st.session_state.flash:
        kind, message = st.session_state.flash
        getattr(st, kind)(message)
        st.session_state.flash = None


# -----------------------------------------------------------------------------
# Sidebar: Course Progress, Settings, Backup
# -----------------------------------------------------------------------------

def render_sidebar():
    """Render the sidebar with course counters, settings and backup."""
    nav = st.session_state.navigator
    today = date.today()

    st.sidebar.title("📚 ESE Study Tracker")
    st.sidebar.markdown(f"**{today:%a, %d %b %Y}** · Day {nav.course_day_number(today)}")
    st.sidebar.markdown(f"{nav.course_days_remaining(today)} days left in the course")
    st.sidebar.markdown(render_progress_ring(nav.overall_percentage()), unsafe_allow_html=True)

    if nav.catalog_source == CatalogSource.FALLBACK:
        st.sidebar.info("Using the built-in subject list (subjects.json not available).")
    elif nav.catalog_source == CatalogSource.EMPTY:
        st.sidebar.error("No subject catalog available.")

    st.sidebar.divider()
    render_settings()
    st.sidebar.divider()
    render_backup()


def render_settings():
    """Settings form: per-subject lecture targets and course dates."""
    nav = st.session_state.navigator

    with st.sidebar.expander("⚙️ Settings"):
        search = st.text_input("Find subject", key="settings_search").strip().lower()
        with st.form("settings_form"):
            start_date = st.date_input("Course start", value=nav.settings.start_date)
            end_date = st.date_input("Course end", value=nav.settings.end_date)

            targets = {}
            for subject in nav.subjects:
                progress = nav.store.progress_for(subject)
                if search and search not in subject.name.lower():
                    targets[subject.id] = progress.total_lectures
                    continue
                targets[subject.id] = int(st.number_input(
                    subject.name,
                    min_value=1,
                    value=progress.total_lectures,
                    step=1,
                    key=f"target_{subject.id}",
                ))

            if st.form_submit_button("Save settings", type="primary"):
                try:
                    nav.save_settings(targets, start_date, end_date)
                except ValidationError as e:
                    st.error(str(e))
                else:
                    flash("success", "⚙️ Settings saved!")
                    st.rerun()


def render_backup():
    """Export/import of the full progress snapshot."""
    nav = st.session_state.navigator

    st.sidebar.subheader("Backup")
    st.sidebar.download_button(
        "📁 Export progress",
        data=nav.export(),
        file_name=EXPORT_FILENAME,
        mime="application/json",
        use_container_width=True,
    )

    uploaded = st.sidebar.file_uploader("Import backup", type=["json"])
    if uploaded is None:
        return

    payload = uploaded.getvalue()
    digest = (uploaded.name, len(payload), hash(payload))
    if digest == st.session_state.import_digest:
        return
    st.session_state.import_digest = digest

    try:
        result = nav.import_snapshot(payload)
    except FormatError as e:
        logger.warning(f"Rejected import: {e}")
        st.sidebar.error("Invalid backup file")
        return

    flash("success", f"Imported progress for {result.subject_count} subjects")
    st.rerun()


# -----------------------------------------------------------------------------
# Main Content: Today
# -----------------------------------------------------------------------------

def render_today():
    """Overview metrics, the log form and today's schedule."""
    nav = st.session_state.navigator
    today = date.today()

    stats = nav.overview(today)
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Today's target", stats.today_target)
    col2.metric("Active subjects", stats.active_count)
    col3.metric("Completed (active)", stats.completed)
    col4.metric("Remaining (active)", stats.remaining)

    left, right = st.columns([3, 2])
    with left:
        render_log_form()
    with right:
        st.subheader("Today's schedule")
        st.markdown(render_today_schedule(nav.today_schedule(today)), unsafe_allow_html=True)


def render_log_form():
    """Subject chips, picker, preview and the log button."""
    nav = st.session_state.navigator
    today = date.today()

    st.subheader("Log lectures")

    chips = nav.chips(today)
    selected_id = nav.state.selected_subject_id
    st.markdown(
        "".join(render_subject_chip(item, item.subject.id == selected_id) for item in chips),
        unsafe_allow_html=True,
    )

    options = [None] + nav.picker_options(today)
    names = {s.id: s.name for s in nav.subjects}
    index = options.index(selected_id) if selected_id in options else 0

    col_prev, col_select, col_next = st.columns([1, 6, 1])
    with col_prev:
        if st.button("◀", key="select_prev"):
            nav.step_selection(-1, today)
            st.rerun()
    with col_select:
        choice = st.selectbox(
            "Subject",
            options,
            index=index,
            format_func=lambda sid: "Choose a subject" if sid is None else names[sid],
            label_visibility="collapsed",
        )
        if choice != selected_id:
            nav.select(choice)
            st.rerun()
    with col_next:
        if st.button("▶", key="select_next"):
            nav.step_selection(1, today)
            st.rerun()

    st.markdown(render_subject_preview(nav.preview(today)), unsafe_allow_html=True)

    count = st.number_input("Lectures completed", min_value=1, value=1, step=1)
    if st.button("Log progress", type="primary", use_container_width=True):
        try:
            result = nav.log_selected(int(count))
        except ValidationError as e:
            st.error(str(e))
            return
        flash("success", f"✅ {result.subject.name} - {result.count} lectures added!")
        st.rerun()


# -----------------------------------------------------------------------------
# Main Content: Subjects Grid
# -----------------------------------------------------------------------------

def render_subjects_grid():
    """Filter tabs, search, paginated grid and a summary table."""
    nav = st.session_state.navigator
    today = date.today()

    st.subheader("Subjects")

    col_filter, col_search = st.columns([3, 2])
    with col_filter:
        filters = list(FILTER_LABELS)
        chosen = st.radio(
            "Filter",
            filters,
            index=filters.index(nav.state.filter),
            format_func=FILTER_LABELS.get,
            horizontal=True,
            label_visibility="collapsed",
        )
        if chosen != nav.state.filter:
            nav.set_filter(chosen)
            st.rerun()
    with col_search:
        query = st.text_input("Search", placeholder="Search subjects", label_visibility="collapsed")
        if query.strip().lower() != nav.state.search_query:
            nav.set_search(query)
            st.rerun()

    page = nav.current_page(today)
    if not page.items:
        st.info("No subjects match.")
        return

    columns = st.columns(2)
    for i, subject in enumerate(page.items):
        with columns[i % 2]:
            st.markdown(
                render_subject_card(nav.pace_for(subject, today), nav.category_colors),
                unsafe_allow_html=True,
            )

    render_pagination(page)

    with st.expander("Table view"):
        rows = [nav.pace_for(s, today) for s in nav.filtered_subjects(today)]
        frame = pd.DataFrame([
            {
                "Subject": item.subject.name,
                "Status": status_label(item.status),
                "Completed": item.progress.completed,
                "Target": item.progress.total_lectures,
                "Days left": item.days_remaining,
                "Per day": round(item.daily_target, 1),
            }
            for item in rows
        ])
        st.dataframe(frame, hide_index=True, use_container_width=True)


def render_pagination(page):
    """Previous/next and numbered page buttons."""
    nav = st.session_state.navigator
    if page.total_pages <= 1:
        return

    numbers = visible_page_numbers(page.page, page.total_pages)
    cols = st.columns(len(numbers) + 2)
    with cols[0]:
        if st.button("←", disabled=not page.has_previous, key="page_prev"):
            nav.prev_page()
            st.rerun()
    for col, number in zip(cols[1:-1], numbers):
        with col:
            if st.button(
                str(number),
                key=f"page_{number}",
                type="primary" if number == page.page else "secondary",
            ):
                nav.go_to_page(number)
                st.rerun()
    with cols[-1]:
        if st.button("→", disabled=not page.has_next, key="page_next"):
            nav.next_page()
            st.rerun()


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    init_session_state()
    st.markdown(get_tracker_css(), unsafe_allow_html=True)
    render_sidebar()
    show_flash()
    render_today()
    st.divider()
    render_subjects_grid()


if __name__ == "__main__":
    main()
