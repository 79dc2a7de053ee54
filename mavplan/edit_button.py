"""A toggle button that switches a pose between viewing and editing."""

from __future__ import annotations

from typing import Callable

EditCallback = Callable[[str], None]

EDIT_TEXT = "Edit"
FINISH_TEXT = "Finish"
EDITING_STYLE = (
    "background-color: rgb(204, 255, 179); color: rgb(0, 0, 0); outline: none;"
)
IDLE_STYLE = (
    "background-color: rgb(255, 255, 204); color: rgb(0, 0, 0); outline: none;"
)


class EditButton:
    """Edit/Finish toggle bound to a pose by ``id``.

    ``on_started`` and ``on_finished`` are called with the id whenever editing
    starts or finishes.
    """

    def __init__(
        self,
        id: str,
        on_started: EditCallback | None = None,
        on_finished: EditCallback | None = None,
    ) -> None:
        self.id = id
        self.on_started = on_started
        self.on_finished = on_finished
        # The button starts out idle; nobody is listening yet.
        self._show_idle()

    def _show_idle(self) -> None:
        self.editing = False
        self.text = EDIT_TEXT
        self.style_sheet = IDLE_STYLE

    def toggle(self) -> None:
        """Start editing when idle, finish when editing."""
        if self.editing:
            self.finish_editing()
        else:
            self.start_editing()

    def start_editing(self) -> None:
        """Enter the editing state and report it."""
        self.editing = True
        self.text = FINISH_TEXT
        self.style_sheet = EDITING_STYLE
        if self.on_started is not None:
            self.on_started(self.id)

    def finish_editing(self) -> None:
        """Leave the editing state and report it."""
        self._show_idle()
        if self.on_finished is not None:
            self.on_finished(self.id)