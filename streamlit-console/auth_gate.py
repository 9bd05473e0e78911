"""Route guard for the protected dashboard.

The gate is evaluated on every navigation to a protected page and never
caches its verdict: clearing the session locks the admin out on the very next
navigation. A page that is already rendered is left alone.

By default a stored token is trusted as-is. With ``verify_token`` enabled the
gate also asks the server to confirm the token, and drops a session the
server rejects.
"""

from enum import Enum
from typing import Callable, Optional

from rosterdesk import ApiError, RosterApiClient, Session, SessionStore
from rosterdesk.logutils import get_logger

logger = get_logger(__name__)


class GateState(Enum):
    """Gate verdicts. A gate sits in CHECKING only while it is evaluating."""

    CHECKING = "checking"
    ALLOW = "allow"
    DENY = "deny"


class AuthGate:
    """Decide whether the admin may enter a protected page."""

    def __init__(
        self,
        session_store: SessionStore,
        client: Optional[RosterApiClient] = None,
        verify_token: bool = False,
    ) -> None:
        if verify_token and client is None:
            raise ValueError("verify_token requires an API client")
        self.session_store = session_store
        self.client = client
        self.verify_token = verify_token
        self.state = GateState.CHECKING
        self.session: Optional[Session] = None

    def check(self) -> GateState:
        """Re-evaluate the stored session and return the verdict."""
        self.state = GateState.CHECKING
        self.session = self.session_store.read()

        if self.session is None:
            logger.debug("No session stored; denying access")
            self.state = GateState.DENY
            return self.state

        if self.verify_token and not self._token_still_valid():
            self.session = None
            self.state = GateState.DENY
            return self.state

        self.state = GateState.ALLOW
        return self.state

    def _token_still_valid(self) -> bool:
        try:
            self.client.verify_token()
        except ApiError as exc:
            if exc.status_code is not None:
                # The server looked at the token and refused it
                logger.info("Stored token rejected by server; clearing session")
                self.session_store.clear()
            else:
                logger.warning(f"Could not verify token: {exc.message}")
            return False
        return True

    def guard(self, render: Callable[[Session], None], redirect: Callable[[], None]) -> GateState:
        """Render protected content when allowed, otherwise redirect.

        Args:
            render: Called with the current session when access is allowed
            redirect: Called when access is denied (navigates to login)

        Returns:
            The verdict that was acted on
        """
        if self.check() is GateState.ALLOW:
            render(self.session)
        else:
            redirect()
        return self.state
