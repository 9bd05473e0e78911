"""Per-browser console state.

Each browser session gets its own session store, API client and view
controllers, kept in ``st.session_state``. A login in one browser never
lets another browser past the auth gate.
"""

from typing import Callable, MutableMapping, Optional

from login_view import LoginController
from roster_view import RosterController

from rosterdesk import ConsoleConfig, MemoryStorage, RosterApiClient, SessionStore
from rosterdesk.logutils import get_logger

logger = get_logger(__name__)

ClientFactory = Callable[[SessionStore], RosterApiClient]


def init_console_state(
    state: MutableMapping,
    config: ConsoleConfig,
    make_client: Optional[ClientFactory] = None,
) -> None:
    """Fill ``state`` with this browser's services on its first run.

    Args:
        state: The browser's session state (``st.session_state`` in the app)
        config: Server-wide console configuration
        make_client: Builds the API client around the session store;
            defaults to ``RosterApiClient.from_config``
    """
    if "session_store" not in state:
        state["session_store"] = SessionStore(MemoryStorage())
        logger.debug("Created session store for new browser session")

    if "api_client" not in state:
        if make_client is None:
            state["api_client"] = RosterApiClient.from_config(config, state["session_store"])
        else:
            state["api_client"] = make_client(state["session_store"])

    if "login_controller" not in state:
        state["login_controller"] = LoginController(state["api_client"], state["session_store"])

    if "roster_controller" not in state:
        state["roster_controller"] = RosterController(state["api_client"])


def reset_roster(state: MutableMapping) -> None:
    """End the current roster view; the next dashboard visit starts fresh."""
    controller = state.pop("roster_controller", None)
    if controller is not None:
        controller.dispose()
