"""Roster dashboard: student cards plus add, edit, marks and delete flows.

``RosterController`` owns the view state and talks to the API client;
``render_roster_view`` draws it with Streamlit. Only one modal is open at a
time, selected by ``Mode``:

    NONE  -> no modal, no target
    ADD   -> empty draft, no target
    EDIT  -> draft copied from the target student
    MARKS -> marks text copied from the target student

Every successful mutation is followed by a full roster refresh; a failed one
leaves the roster, the modal and the draft untouched so the admin can retry.
"""

from enum import Enum
from typing import Optional

import streamlit as st

from rosterdesk import ApiError, DraftValidationError, RosterApiClient, Student, StudentDraft
from rosterdesk.logutils import get_logger, with_context
from rosterdesk.models import format_marks, format_marks_input, parse_marks

logger = get_logger(__name__)

EMPTY_ROSTER_MESSAGE = "No students yet. Click “Add Student” to create the first record."
CARDS_PER_ROW = 3


class Mode(Enum):
    """Which modal, if any, is open."""

    NONE = "none"
    ADD = "add"
    EDIT = "edit"
    MARKS = "marks"


class RosterController:
    """State machine behind the roster dashboard.

    Two guards keep late responses from clobbering newer state. Each roster
    fetch gets an increasing request id and only the latest one may write the
    roster. Closing a modal bumps ``modal_generation``, so a submission that
    finishes after its modal was closed leaves the current modal alone. After
    ``dispose()`` no response changes anything.
    """

    def __init__(self, client: RosterApiClient) -> None:
        self.client = client
        self.roster: list[Student] = []
        self.loading = False
        self.error = ""
        self.mode = Mode.NONE
        self.target: Optional[Student] = None
        self.draft = StudentDraft()
        self.marks_text = ""
        self.pending_delete: Optional[Student] = None
        self.mounted = False
        self.modal_generation = 0
        self._last_request_id = 0
        self._disposed = False

    # -- lifetime ------------------------------------------------------

    def mount(self) -> None:
        """Load the roster the first time the view is shown."""
        if not self.mounted:
            self.mounted = True
            self.refresh()

    def dispose(self) -> None:
        """End the view's lifetime; later responses are ignored."""
        self._disposed = True

    @property
    def disposed(self) -> bool:
        return self._disposed

    # -- roster --------------------------------------------------------

    def refresh(self) -> bool:
        """Replace the roster with the server's current list.

        Returns:
            True if this fetch succeeded and its result was applied
        """
        if self._disposed:
            return False

        self._last_request_id += 1
        request_id = self._last_request_id
        self.loading = True

        try:
            students = self.client.list_students()
        except ApiError as exc:
            if self._is_latest(request_id):
                self.loading = False
                self.error = exc.message
            return False

        if not self._is_latest(request_id):
            logger.debug(f"Discarding roster response {request_id}; a newer fetch was issued")
            return False

        self.roster = list(students)
        self.error = ""
        self.loading = False
        return True

    def _is_latest(self, request_id: int) -> bool:
        return not self._disposed and request_id == self._last_request_id

    # -- modals --------------------------------------------------------

    def open_add(self) -> None:
        self._open(Mode.ADD, None, StudentDraft())

    def open_edit(self, student: Student) -> None:
        self._open(Mode.EDIT, student, StudentDraft.from_student(student))

    def open_marks(self, student: Student) -> None:
        self._open(Mode.MARKS, student, StudentDraft.from_student(student))
        self.marks_text = format_marks_input(student.marks)

    def _open(self, mode: Mode, target: Optional[Student], draft: StudentDraft) -> None:
        self.modal_generation += 1
        self.mode = mode
        self.target = target
        self.draft = draft
        self.marks_text = ""

    def close_modal(self) -> None:
        """Close whatever modal is open and discard its draft."""
        self.modal_generation += 1
        self.mode = Mode.NONE
        self.target = None
        self.draft = StudentDraft()
        self.marks_text = ""

    def update_draft(self, **fields: str) -> None:
        for name, value in fields.items():
            if not hasattr(self.draft, name):
                raise AttributeError(f"StudentDraft has no field {name!r}")
            setattr(self.draft, name, value)

    # -- mutations -----------------------------------------------------

    def submit_form(self) -> bool:
        """Send the add or edit draft, depending on the open modal."""
        if self.mode is Mode.ADD:
            return self._mutate(lambda: self.client.create_student(self.draft))
        if self.mode is Mode.EDIT and self.target is not None:
            target_id = self.target.id
            return self._mutate(lambda: self.client.update_student(target_id, self.draft))
        logger.debug(f"submit_form ignored in mode {self.mode.value}")
        return False

    def submit_marks(self) -> bool:
        """Send the marks entered in the marks modal."""
        if self.mode is not Mode.MARKS or self.target is None:
            logger.debug(f"submit_marks ignored in mode {self.mode.value}")
            return False

        try:
            marks = parse_marks(self.marks_text, required=True)
        except DraftValidationError as exc:
            self.error = str(exc)
            return False

        target_id = self.target.id
        return self._mutate(lambda: self.client.patch_marks(target_id, marks))

    def _mutate(self, call) -> bool:
        generation = self.modal_generation
        try:
            call()
        except (ApiError, DraftValidationError) as exc:
            if not self._disposed:
                self.error = getattr(exc, "message", str(exc))
            return False

        self.refresh()
        if not self._disposed and generation == self.modal_generation:
            self.close_modal()
        return True

    def request_delete(self, student: Student) -> None:
        """Ask for confirmation before deleting ``student``."""
        self.pending_delete = student

    def cancel_delete(self) -> None:
        self.pending_delete = None

    def confirm_delete(self) -> bool:
        student, self.pending_delete = self.pending_delete, None
        if student is None:
            return False
        return self.delete_student(student, confirmed=True)

    def delete_student(self, student: Student, confirmed: bool) -> bool:
        """Delete a student by email; does nothing unless ``confirmed``."""
        if not confirmed:
            return False

        with with_context(operation="delete_student", student_id=student.id):
            try:
                self.client.delete_student(student.email)
            except ApiError as exc:
                if not self._disposed:
                    self.error = exc.message
                return False

        self.refresh()
        return True


# ----------------------------------------------------------------------
# Rendering
# ----------------------------------------------------------------------


def render_roster_view(controller: RosterController) -> None:
    """Render the dashboard for the current controller state."""
    if not controller.mounted:
        with st.spinner("Loading students..."):
            controller.mount()

    title_col, add_col, refresh_col = st.columns([6, 1, 1])
    with title_col:
        st.markdown("## 🎓 Student Roster")
        st.caption(f"{len(controller.roster)} student(s)")
    with add_col:
        if st.button("➕ Add Student", key="open_add", width="stretch"):
            controller.open_add()
            st.rerun()
    with refresh_col:
        if st.button("🔄 Refresh", key="refresh_roster", width="stretch"):
            controller.refresh()
            st.rerun()

    if controller.error:
        st.warning(f"⚠ {controller.error}")

    if controller.mode in (Mode.ADD, Mode.EDIT):
        render_student_form(controller)
    elif controller.mode is Mode.MARKS:
        render_marks_form(controller)

    if controller.pending_delete is not None:
        render_delete_confirmation(controller)

    if not controller.roster:
        st.info(EMPTY_ROSTER_MESSAGE)
        return

    for start in range(0, len(controller.roster), CARDS_PER_ROW):
        columns = st.columns(CARDS_PER_ROW)
        for column, student in zip(columns, controller.roster[start : start + CARDS_PER_ROW]):
            with column:
                render_student_card(controller, student)


def render_student_card(controller: RosterController, student: Student) -> None:
    with st.container(border=True):
        st.markdown(f"### {student.name}")
        st.markdown(f"✉️ {student.email}")
        st.markdown(f"📚 {student.course or 'N/A'}")
        st.metric("Marks", format_marks(student.marks))

        edit_col, marks_col, delete_col = st.columns(3)
        if edit_col.button("✏️ Edit", key=f"edit_{student.id}", width="stretch"):
            controller.open_edit(student)
            st.rerun()
        if marks_col.button("📝 Marks", key=f"marks_{student.id}", width="stretch"):
            controller.open_marks(student)
            st.rerun()
        if delete_col.button("🗑️ Delete", key=f"delete_{student.id}", width="stretch"):
            controller.request_delete(student)
            st.rerun()


def _modal_header(controller: RosterController, title: str) -> None:
    title_col, close_col = st.columns([8, 1])
    title_col.markdown(f"#### {title}")
    if close_col.button("✕", key=f"close_modal_{controller.modal_generation}"):
        controller.close_modal()
        st.rerun()


def render_student_form(controller: RosterController) -> None:
    """Add/edit panel. Widget keys include the modal generation so each
    opening starts from the controller's draft rather than stale input."""
    generation = controller.modal_generation
    draft = controller.draft
    title = "Add Student" if controller.mode is Mode.ADD else f"Edit {controller.target.name}"

    with st.container(border=True):
        _modal_header(controller, title)
        with st.form(f"student_form_{generation}"):
            name = st.text_input("Name", value=draft.name, key=f"draft_name_{generation}")
            email = st.text_input("Email", value=draft.email, key=f"draft_email_{generation}")
            course = st.text_input("Course", value=draft.course, key=f"draft_course_{generation}")
            marks = st.text_input(
                "Marks (0-100, optional)", value=draft.marks, key=f"draft_marks_{generation}"
            )
            save_col, cancel_col = st.columns(2)
            saved = save_col.form_submit_button("💾 Save", width="stretch")
            cancelled = cancel_col.form_submit_button("Cancel", width="stretch")

    if cancelled:
        controller.close_modal()
        st.rerun()
    if saved:
        controller.update_draft(name=name, email=email, course=course, marks=marks)
        if controller.submit_form():
            st.toast("Student saved")
        st.rerun()


def render_marks_form(controller: RosterController) -> None:
    generation = controller.modal_generation
    student = controller.target

    with st.container(border=True):
        _modal_header(controller, f"Update Marks: {student.name}")
        with st.form(f"marks_form_{generation}"):
            st.caption(f"Current marks: {format_marks(student.marks)}")
            marks = st.text_input(
                "Marks (0-100)", value=controller.marks_text, key=f"marks_text_{generation}"
            )
            save_col, cancel_col = st.columns(2)
            saved = save_col.form_submit_button("💾 Update Marks", width="stretch")
            cancelled = cancel_col.form_submit_button("Cancel", width="stretch")

    if cancelled:
        controller.close_modal()
        st.rerun()
    if saved:
        controller.marks_text = marks
        if controller.submit_marks():
            st.toast("Marks updated")
        st.rerun()


def render_delete_confirmation(controller: RosterController) -> None:
    student = controller.pending_delete
    with st.container(border=True):
        st.markdown(f"**Delete {student.name} ({student.email})?** This cannot be undone.")
        confirm_col, cancel_col = st.columns(2)
        if confirm_col.button("🗑️ Delete", key=f"confirm_delete_{student.id}", type="primary"):
            if controller.confirm_delete():
                st.toast(f"Deleted {student.name}")
            st.rerun()
        if cancel_col.button("Cancel", key=f"cancel_delete_{student.id}"):
            controller.cancel_delete()
            st.rerun()
