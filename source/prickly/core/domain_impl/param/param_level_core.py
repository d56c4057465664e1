"""One navigable level of the param tree, composed recursively.

A level owns its composite payload, the row view and selection over it, at
most one edit session, and at most one child level. Opening a composite
child moves the child payload out of this level's slot (an empty composite
of the same kind stands in) and wraps it in a new level; closing the child
puts its payload back into the same slot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from prickly.core import constants as app_constants
from prickly.core.domain_impl.param.edit_session_service import (
    MODE_BROWSING,
    EditSession,
    begin_edit,
    commit_edit,
    handle_edit_event,
)
from prickly.core.domain_impl.param.label_corpus_service import LabelCorpus
from prickly.core.domain_impl.param.param_model_core import (
    ParamNode,
    child_at,
    clone_param,
    is_composite,
    set_child,
    take_child,
)
from prickly.core.domain_impl.param.row_projection_service import (
    RowView,
    project_rows,
    row_position_for_source_index,
)
from prickly.core.domain_impl.param.scalar_codec_service import is_steppable, step_value
from prickly.core.exceptions import StructuralViolation
from prickly.core.input_events import (
    MOD_SHIFT,
    InputEvent,
    KeyEvent,
    MouseEvent,
)
import logging
_LOG = logging.getLogger(__name__)


LEVEL_NONE = "none"
LEVEL_HANDLED = "handled"
LEVEL_EDITED = "edited"
LEVEL_EXIT = "exit"


@dataclass(slots=True)
class NavigationFrame:
    """Parent-side context captured when a child level is opened."""

    selection: int | None
    source_index: int
    display_name: str
    filter_text: str
    name_filter: Callable[[str], bool] | None


class ParamLevel:
    def __init__(
        self,
        param: ParamNode,
        corpus: LabelCorpus,
        frame: NavigationFrame | None = None,
        autocomplete_limit: int = app_constants.AUTOCOMPLETE_LIMIT_DEFAULT,
    ) -> None:
        if not is_composite(param):
            raise StructuralViolation(f"a level needs a list or struct, got {param.kind}")
        self.param = param
        self.corpus = corpus
        self.frame = frame
        self.autocomplete_limit = autocomplete_limit
        self.filter_text = ""
        self.name_filter: Callable[[str], bool] | None = None
        self.rows: list[RowView] = project_rows(param, corpus)
        self.selection: int | None = 0 if self.rows else None
        self.edit: EditSession | None = None
        self.child: ParamLevel | None = None

    # --- selection ---------------------------------------------------------

    def selected_row(self) -> RowView | None:
        if self.selection is None or not self.rows:
            return None
        return self.rows[self.selection]

    def selected_source_index(self) -> int | None:
        row = self.selected_row()
        return row.source_index if row is not None else None

    def move_down(self) -> None:
        if not self.rows:
            self.selection = None
            return
        if self.selection is None:
            self.selection = 0
        else:
            self.selection = (self.selection + 1) % len(self.rows)

    def move_up(self) -> None:
        if not self.rows:
            self.selection = None
            return
        if self.selection is None:
            self.selection = len(self.rows) - 1
        else:
            self.selection = (self.selection - 1) % len(self.rows)

    def select_row(self, position: int) -> None:
        if 0 <= position < len(self.rows):
            self.selection = position

    def select_source_index(self, source_index: int | None) -> None:
        self.selection = row_position_for_source_index(self.rows, source_index)

    # --- rows / filter -----------------------------------------------------

    def refresh_rows(self) -> None:
        """Re-derive rows, keeping the selected child by its source index."""
        keep = self.selected_source_index()
        self.rows = project_rows(self.param, self.corpus, self.name_filter)
        self.select_source_index(keep)

    def set_filter(self, name_filter: Callable[[str], bool] | None, text: str = "") -> None:
        self.name_filter = name_filter
        self.filter_text = str(text or "") if name_filter is not None else ""
        self.refresh_rows()

    # --- descent -----------------------------------------------------------

    def active(self) -> "ParamLevel":
        level = self
        while level.child is not None:
            level = level.child
        return level

    def open_child(self, source_index: int) -> "ParamLevel":
        """Descend into the composite child at `source_index`."""
        if self.child is not None:
            raise StructuralViolation("a child level is already open")
        target = child_at(self.param, source_index)
        if not is_composite(target):
            raise StructuralViolation(f"cannot enter a {target.kind} param")
        row = next((r for r in self.rows if r.source_index == source_index), None)
        if row is None:
            # Entering a row hidden by the filter; still record a usable name.
            row = project_rows(self.param, self.corpus)[source_index]
        frame = NavigationFrame(
            selection=self.selection,
            source_index=source_index,
            display_name=row.display_name,
            filter_text=self.filter_text,
            name_filter=self.name_filter,
        )
        self.cancel_edit()
        payload = take_child(self.param, source_index)
        self.child = ParamLevel(payload, self.corpus, frame, self.autocomplete_limit)
        _LOG.debug("entered %s (%s)", frame.display_name, payload.kind)
        return self.child

    def close_child(self) -> None:
        """Put the child level's payload back and restore the captured selection."""
        child = self.child
        if child is None:
            raise StructuralViolation("no child level is open")
        if child.child is not None:
            child.close_child()
        child.cancel_edit()
        frame = child.frame
        set_child(self.param, frame.source_index, child.param)
        self.child = None
        self.name_filter = frame.name_filter
        self.filter_text = frame.filter_text
        self.rows = project_rows(self.param, self.corpus, self.name_filter)
        if frame.selection is not None and frame.selection < len(self.rows):
            self.selection = frame.selection
        else:
            self.select_source_index(frame.source_index)

    def recreate_param(self) -> ParamNode:
        """Deep copy of this level's payload with any open child put back in place."""
        snapshot = clone_param(self.param)
        if self.child is not None:
            set_child(snapshot, self.child.frame.source_index, self.child.recreate_param())
        return snapshot

    # --- editing -----------------------------------------------------------

    def edit_mode(self) -> str:
        return self.edit.mode() if self.edit is not None else MODE_BROWSING

    def begin_edit(self, source_index: int) -> EditSession:
        self.edit = begin_edit(self.param, source_index, self.corpus, self.autocomplete_limit)
        return self.edit

    def cancel_edit(self) -> None:
        self.edit = None

    def submit_edit(self) -> bool:
        if self.edit is None:
            return False
        if not commit_edit(self.edit, self.param, self.corpus):
            return False
        self.edit = None
        self.refresh_rows()
        return True

    def step_selected(self, delta: int) -> bool:
        source_index = self.selected_source_index()
        if source_index is None:
            return False
        node = child_at(self.param, source_index)
        if not is_steppable(node):
            return False
        set_child(self.param, source_index, step_value(node, delta))
        self.refresh_rows()
        return True

    def enter_selected(self) -> bool:
        """Open the selected composite, or start editing the selected terminal."""
        row = self.selected_row()
        if row is None:
            return False
        if row.is_composite:
            self.open_child(row.source_index)
        else:
            self.begin_edit(row.source_index)
        return True

    # --- events ------------------------------------------------------------

    def handle_event(self, event: InputEvent) -> str:
        """Route an event to the open child, the edit session, or this level."""
        if self.child is not None:
            response = self.child.handle_event(event)
            if response == LEVEL_EXIT:
                self.close_child()
                return LEVEL_HANDLED
            return response
        if self.edit is not None:
            return self._handle_edit_event(event)
        if isinstance(event, MouseEvent):
            return self._handle_mouse_event(event)
        return self._handle_browse_key(event)

    def _handle_edit_event(self, event: InputEvent) -> str:
        match handle_edit_event(self.edit, event, self.corpus):
            case "submit":
                return LEVEL_EDITED if self.submit_edit() else LEVEL_HANDLED
            case "cancel":
                self.cancel_edit()
                return LEVEL_HANDLED
            case "handled":
                return LEVEL_HANDLED
            case _:
                return LEVEL_NONE

    def _handle_mouse_event(self, event: MouseEvent) -> str:
        match event.kind:
            case "scroll_up":
                self.move_up()
            case "scroll_down":
                self.move_down()
            case "click":
                if event.row is not None:
                    self.select_row(event.row)
            case _:
                return LEVEL_NONE
        return LEVEL_HANDLED

    def _handle_browse_key(self, event: KeyEvent) -> str:
        match event.code:
            case "Up":
                if event.has(MOD_SHIFT):
                    return LEVEL_EDITED if self.step_selected(1) else LEVEL_HANDLED
                self.move_up()
            case "Down":
                if event.has(MOD_SHIFT):
                    return LEVEL_EDITED if self.step_selected(-1) else LEVEL_HANDLED
                self.move_down()
            case "Enter":
                self.enter_selected()
            case "Backspace":
                return LEVEL_EXIT
            case _:
                return LEVEL_NONE
        return LEVEL_HANDLED
