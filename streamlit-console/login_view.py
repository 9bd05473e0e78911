"""Login page for the roster console.

Submitting happens in two reruns: the first records the credentials and
re-renders the form disabled, the second performs the login. A failed attempt
re-enables the form and shows the server's message above it.
"""

from typing import Optional

import streamlit as st

from rosterdesk import ApiError, RosterApiClient, SessionStore
from rosterdesk.logutils import get_logger

logger = get_logger(__name__)

MISSING_CREDENTIALS_MESSAGE = "Please enter both email and password."


class LoginController:
    """State behind the login form."""

    def __init__(self, client: RosterApiClient, session_store: SessionStore) -> None:
        self.client = client
        self.session_store = session_store
        self.submitting = False
        self.error = ""
        self._pending: Optional[tuple[str, str]] = None

    def begin(self, email: str, password: str) -> bool:
        """Accept a form submission and lock the form.

        Returns:
            True if the credentials were accepted for submission, False if a
            required field was empty
        """
        self.error = ""
        email = (email or "").strip()
        if not email or not password:
            self.error = MISSING_CREDENTIALS_MESSAGE
            return False

        self._pending = (email, password)
        self.submitting = True
        return True

    def complete(self) -> bool:
        """Send the pending login and unlock the form.

        Returns:
            True if the admin is now logged in and the session is stored
        """
        if self._pending is None:
            self.submitting = False
            return False

        email, password = self._pending
        self._pending = None
        try:
            session = self.client.login(email, password)
        except ApiError as exc:
            self.error = exc.message
            return False
        finally:
            self.submitting = False

        self.session_store.save(session)
        return True

    def submit(self, email: str, password: str) -> bool:
        """Validate and log in in one step."""
        return self.begin(email, password) and self.complete()


def render_login_view(controller: LoginController, on_success) -> None:
    """Render the login form.

    Args:
        controller: Login state for this browser session
        on_success: Called after a successful login (navigates to the dashboard)
    """
    st.markdown(
        """
        <div style="text-align: center; margin: 2rem 0 1rem;">
            <h1 style="color: #1B5E20; margin-bottom: 0.25rem;">ADMIN LOGIN</h1>
            <p style="color: #2E7D32; font-weight: 600;">Student Management Portal</p>
        </div>
        """,
        unsafe_allow_html=True,
    )

    _, col, _ = st.columns([1, 2, 1])
    with col:
        if controller.error:
            st.error(f"⚠ {controller.error}")

        with st.form("login_form"):
            email = st.text_input(
                "Email Address",
                placeholder="admin@example.com",
                key="login_email",
                disabled=controller.submitting,
            )
            password = st.text_input(
                "Password",
                type="password",
                placeholder="Enter your password",
                key="login_password",
                disabled=controller.submitting,
            )
            submitted = st.form_submit_button(
                "Logging in..." if controller.submitting else "LOGIN",
                disabled=controller.submitting,
                width="stretch",
            )

        st.caption("Secure access to student management system")

    if submitted:
        # Redraw so the banner or the spinner reflects what begin() decided.
        controller.begin(email, password)
        st.rerun()

    if controller.submitting:
        with st.spinner("Logging in..."):
            logged_in = controller.complete()
        if logged_in:
            on_success()
        else:
            st.rerun()
