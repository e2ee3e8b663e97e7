"""
Learning Center - Lessons unlocked by passing quizzes

Streamlit front end for the Learning Center progression engine. Sign-in is
handled elsewhere on the site; here the user id is entered in the sidebar.

Usage:
    streamlit run app.py
"""

import atexit

import streamlit as st

from learningcenter.classroom import (
    LessonAvailability,
    LessonSession,
    LessonStep,
    Navigator,
    load_catalog,
    passing_threshold,
)
from learningcenter.config import build_progress_store, configure_logging, load_settings
from learningcenter.errors import AnswerRequired, CatalogError, LessonLocked
from learningcenter.identity import StaticIdentityProvider
from learningcenter.viewer import (
    get_lesson_css,
    get_quiz_css,
    option_label,
    render_content_step,
    render_lesson_header,
    render_pre_quiz,
    render_progress_bar,
    render_quiz_question,
    render_quiz_result,
)


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

st.set_page_config(
    page_title="מרכז הלמידה",
    page_icon="📘",
    layout="wide",
    initial_sidebar_state="expanded",
)


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

@st.cache_resource
def get_progress_store(_settings, _catalog):
    """One ProgressStore per server process, closed when the process exits."""
    store = build_progress_store(_settings, _catalog)
    atexit.register(store.close)
    return store


def init_session_state():
    """Initialize session state variables."""
    if "settings" not in st.session_state:
        st.session_state.settings = load_settings()
        configure_logging(st.session_state.settings.log_level)

    if "catalog" not in st.session_state:
        try:
            st.session_state.catalog = load_catalog(st.session_state.settings.content)
        except CatalogError as e:
            st.session_state.catalog = None
            st.session_state.catalog_error = str(e)

    if "identity" not in st.session_state:
        st.session_state.identity = StaticIdentityProvider()

    if "navigator" not in st.session_state and st.session_state.catalog:
        st.session_state.navigator = Navigator(
            st.session_state.catalog,
            get_progress_store(st.session_state.settings, st.session_state.catalog),
            st.session_state.identity,
        )

    if "lesson_session" not in st.session_state:
        st.session_state.lesson_session = None

    if "save_future" not in st.session_state:
        st.session_state.save_future = None


# -----------------------------------------------------------------------------
# Sidebar: Sign-in and Progress
# -----------------------------------------------------------------------------

def render_sidebar():
    """Render the sidebar with the user id and progress summary."""
    st.sidebar.title("📘 מרכז הלמידה")

    identity = st.session_state.identity
    user_id = st.sidebar.text_input("User ID", value=identity.user_id or "")
    if user_id != (identity.user_id or ""):
        identity.user_id = user_id or None
        identity.admin = user_id in st.session_state.settings.admin_user_ids
        st.session_state.lesson_session = None
        st.session_state.save_future = None
        if identity.user_id:
            st.session_state.navigator.load_progress()
        st.rerun()
    if identity.is_admin():
        st.sidebar.caption("admin")


def render_save_status():
    """Surface a failed save with a retry control."""
    future = st.session_state.save_future
    if future is None or not future.done():
        return

    report = future.result()
    if report.ok:
        st.session_state.save_future = None
        return

    st.warning(
        "ההתקדמות שלך אולי לא נשמרה. "
        f"({', '.join(sorted(report.failures))})"
    )
    if st.button("נסה לשמור שוב"):
        retry_report = st.session_state.navigator.retry_save()
        if retry_report.ok:
            st.session_state.save_future = None
        st.rerun()


# -----------------------------------------------------------------------------
# Main Content: Catalog View
# -----------------------------------------------------------------------------

def render_catalog_view():
    """Render progress and the lesson grid."""
    nav = st.session_state.navigator

    load = nav.last_load or nav.load_progress()
    if load.degraded:
        st.warning("לא ניתן להתחבר לשרת. מוצגת ההתקדמות השמורה במכשיר.")
        if st.session_state.identity.is_admin():
            st.caption(load.warning)

    stats = nav.get_progress_summary()
    st.title("מרכז הלמידה")
    st.subheader("ההתקדמות שלך")
    st.markdown(get_lesson_css(), unsafe_allow_html=True)
    st.markdown(render_progress_bar(stats["completion_percent"]), unsafe_allow_html=True)
    st.caption(f"השלמת {stats['completed']} מתוך {stats['total_lessons']} שיעורים ({stats['completion_percent']}%)")

    st.divider()

    columns = st.columns(3)
    for nav_lesson in nav.get_navigation_tree():
        lesson = nav_lesson.lesson
        with columns[(nav_lesson.position - 1) % 3]:
            with st.container(border=True):
                indicator = nav.get_status_indicator(lesson.id)
                st.markdown(f"**{indicator} שיעור {nav_lesson.position}: {lesson.display_name}**")
                st.write(lesson.short_description)

                if nav_lesson.availability == LessonAvailability.LOCKED:
                    st.caption("נעול")
                    continue

                label = "הושלם" if nav_lesson.availability == LessonAvailability.COMPLETED else "זמין"
                st.caption(f"{label} · {nav_lesson.question_count} שאלות")
                if st.button("התחל", key=f"open_{lesson.id}", use_container_width=True):
                    open_lesson(lesson.id)


def open_lesson(lesson_id: str):
    try:
        st.session_state.lesson_session = st.session_state.navigator.open_lesson(lesson_id)
    except LessonLocked as e:
        st.error(f"השיעור נעול: {e.message}")
        return
    st.rerun()


def close_lesson():
    session = st.session_state.lesson_session
    if session is not None:
        session.close()
    st.session_state.lesson_session = None
    st.rerun()


# -----------------------------------------------------------------------------
# Main Content: Lesson View
# -----------------------------------------------------------------------------

def render_lesson_view(session: LessonSession):
    """Render the open lesson at its current step."""
    lesson = session.lesson

    if st.button("→ חזור"):
        close_lesson()

    st.markdown(get_lesson_css(), unsafe_allow_html=True)
    st.markdown(render_lesson_header(lesson), unsafe_allow_html=True)

    if session.step < LessonStep.PRE_QUIZ:
        st.progress((session.step + 1) / 4)
        st.markdown(render_content_step(lesson, int(session.step)), unsafe_allow_html=True)

        col1, col2 = st.columns(2)
        with col1:
            if st.button("הבא", type="primary", use_container_width=True):
                session.next()
                st.rerun()
        with col2:
            if st.button("הקודם", disabled=session.step == LessonStep.INTRO, use_container_width=True):
                session.prev()
                st.rerun()

    elif session.step == LessonStep.PRE_QUIZ:
        threshold = passing_threshold(len(session.questions))
        st.markdown(render_pre_quiz(lesson, threshold), unsafe_allow_html=True)
        if st.button("התחל מבחן", type="primary"):
            session.next()
            st.rerun()

    else:
        render_quiz(session)


def render_quiz(session: LessonSession):
    """Render the current question or the revealed result."""
    st.markdown(get_quiz_css(), unsafe_allow_html=True)

    if session.state.result_revealed:
        render_result(session)
        return

    question = session.current_question
    index = session.state.quiz_index
    st.markdown(
        render_quiz_question(question, index, len(session.questions), session.selected_answer),
        unsafe_allow_html=True,
    )

    for option_index, option in enumerate(question.options):
        if st.button(f"{option_label(option_index)}. {option}", key=f"answer_{index}_{option_index}"):
            session.select_answer(option_index)
            st.rerun()

    col1, col2 = st.columns(2)
    with col1:
        label = "סיים מבחן" if session.is_last_question else "הבא"
        if st.button(label, type="primary", disabled=session.selected_answer is None, use_container_width=True):
            try:
                result = session.next_question()
            except AnswerRequired:
                st.stop()
            if result is not None and result.passed:
                st.session_state.save_future = st.session_state.navigator.record_result(
                    session, background=True,
                )
            st.rerun()
    with col2:
        if st.button("הקודם", disabled=index == 0, use_container_width=True):
            session.previous_question()
            st.rerun()


def render_result(session: LessonSession):
    st.markdown(render_quiz_result(session.result), unsafe_allow_html=True)

    col1, col2 = st.columns(2)
    with col1:
        if st.button("חזור לרשימת השיעורים", use_container_width=True):
            close_lesson()
    with col2:
        if not session.passed and st.button("נסה שוב", use_container_width=True):
            session.retry()
            st.rerun()


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    init_session_state()

    if not st.session_state.catalog:
        st.error(f"Lesson content could not be loaded: {st.session_state.get('catalog_error')}")
        return

    render_sidebar()

    if not st.session_state.identity.current_user_id():
        st.title("נדרשת התחברות")
        st.info("כדי לגשת למרכז הלמידה, עליך להתחבר לחשבון שלך")
        return

    render_save_status()

    session = st.session_state.lesson_session
    if session is None:
        render_catalog_view()
    else:
        render_lesson_view(session)


if __name__ == "__main__":
    main()
