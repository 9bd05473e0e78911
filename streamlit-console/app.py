"""RosterDesk - admin console for the student roster API.

Routes:
- ``/``          login page (default; unknown paths fall back here)
- ``/dashboard`` roster view, behind the auth gate

Run with: streamlit run streamlit-console/app.py
"""

from typing import Callable

import streamlit as st
from auth_gate import AuthGate
from console_state import init_console_state, reset_roster
from dotenv import load_dotenv
from login_view import render_login_view
from roster_view import render_roster_view

from rosterdesk import ConsoleConfig, Session
from rosterdesk.logutils import get_logger, with_context

load_dotenv()

logger = get_logger(__name__)


@st.cache_resource
def load_config() -> ConsoleConfig:
    """Read the console configuration once per server."""
    config = ConsoleConfig.from_env()
    logger.info(f"Console using API at {config.api_url}")
    return config


def init_session_state() -> None:
    """Create this browser's session store, client and controllers on first run."""
    init_console_state(st.session_state, load_config())


def handle_logout() -> None:
    """Clear the stored session, drop the roster state and return to login."""
    with with_context(operation="logout"):
        st.session_state.session_store.clear()
        reset_roster(st.session_state)
    st.switch_page(LOGIN_PAGE)


def render_sidebar(session: Session) -> None:
    with st.sidebar:
        st.header("🎓 RosterDesk")
        st.markdown(f"**Logged in as:** {session.admin_name or 'Admin'}")
        if session.admin_email:
            st.caption(session.admin_email)
        st.divider()
        if st.button("🚪 Logout", width="stretch", key="sidebar_logout"):
            handle_logout()


def login_page() -> None:
    render_login_view(
        st.session_state.login_controller,
        on_success=lambda: st.switch_page(DASHBOARD_PAGE),
    )


def render_dashboard(redirect: Callable[[], None]) -> None:
    """Show the roster if this browser holds a session, otherwise ``redirect``."""
    gate = AuthGate(
        st.session_state.session_store,
        client=st.session_state.api_client,
        verify_token=load_config().verify_token,
    )

    def render(session: Session) -> None:
        render_sidebar(session)
        render_roster_view(st.session_state.roster_controller)

    gate.guard(render, redirect=redirect)


def dashboard_page() -> None:
    render_dashboard(redirect=lambda: st.switch_page(LOGIN_PAGE))


LOGIN_PAGE = st.Page(login_page, title="Login", icon="🔐", default=True)
DASHBOARD_PAGE = st.Page(dashboard_page, title="Dashboard", icon="🎓", url_path="dashboard")


def main() -> None:
    st.set_page_config(page_title="RosterDesk", page_icon="🎓", layout="wide")
    init_session_state()
    st.navigation([LOGIN_PAGE, DASHBOARD_PAGE], position="hidden").run()


if __name__ == "__main__":
    main()
