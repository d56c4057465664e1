"""Host-facing param engine: document lifecycle, input routing and the navigation stack."""

from __future__ import annotations

from typing import Callable

from prickly.core import constants as app_constants
from prickly.core.domain_impl.param.label_corpus_service import LabelCorpus
from prickly.core.domain_impl.param.name_filter_service import (
    FILTER_EXIT,
    NameFilterInput,
)
from prickly.core.domain_impl.param.param_level_core import (
    LEVEL_EDITED,
    LEVEL_EXIT,
    LEVEL_NONE,
    NavigationFrame,
    ParamLevel,
)
from prickly.core.domain_impl.param.param_model_core import ParamNode, child_key, is_composite
from prickly.core.domain_impl.param.row_projection_service import RowView, display_name_for_key, label_lookup
from prickly.core.exceptions import StructuralViolation
from prickly.core.input_events import MOD_ALT, MOD_CONTROL, InputEvent, KeyEvent
import logging
_LOG = logging.getLogger(__name__)


RESPONSE_CONSUMED = "consumed"
RESPONSE_DOCUMENT_EDITED = "document_edited"
RESPONSE_REQUEST_EXIT = "request_exit"

MODE_PARAM_VIEW = "param_view"
MODE_FILTER_EDIT = "filter_edit"

FILTER_HOTKEY = "/"


class ParamEngine:
    """Owns the loaded document as a chain of levels rooted at the document root.

    `handle_input` is the only mutation path used by hosts; `enter`, `exit`
    and `set_filter` expose the same navigation to programmatic callers.
    """

    def __init__(
        self,
        corpus: LabelCorpus,
        autocomplete_limit: int = app_constants.AUTOCOMPLETE_LIMIT_DEFAULT,
    ) -> None:
        self.corpus = corpus
        self.autocomplete_limit = int(autocomplete_limit)
        self.root_level: ParamLevel | None = None
        self.mode = MODE_PARAM_VIEW
        self.filter_input = NameFilterInput()
        self.edited = False

    # --- document ----------------------------------------------------------

    def load(self, root: ParamNode) -> "ParamEngine":
        """Replace the document and navigation wholesale; selection resets to the root."""
        if not is_composite(root):
            raise StructuralViolation(f"document root must be a struct or list, got {root.kind}")
        self.root_level = ParamLevel(root, self.corpus, None, self.autocomplete_limit)
        self.mode = MODE_PARAM_VIEW
        self.filter_input = NameFilterInput()
        self.edited = False
        _LOG.info("loaded document with %d top-level params", len(root.value))
        return self

    def is_loaded(self) -> bool:
        return self.root_level is not None

    def current_document(self) -> ParamNode:
        """Snapshot of the whole document, including subtrees open in child levels."""
        return self._require_root().recreate_param()

    def mark_saved(self) -> None:
        self.edited = False

    # --- navigation stack --------------------------------------------------

    def levels(self) -> list[ParamLevel]:
        chain: list[ParamLevel] = []
        level = self.root_level
        while level is not None:
            chain.append(level)
            level = level.child
        return chain

    def active_level(self) -> ParamLevel:
        return self._require_root().active()

    def frames(self) -> list[NavigationFrame]:
        """One frame per level of descent; the length equals the nesting depth."""
        return [level.frame for level in self.levels()[1:]]

    def depth(self) -> int:
        return len(self.frames())

    def breadcrumb(self) -> list[str]:
        """Names of the opened children, re-derived so labels loaded later show up."""
        labels = label_lookup(self.corpus)
        names: list[str] = []
        for level in self.levels():
            if level.child is not None:
                key = child_key(level.param, level.child.frame.source_index)
                names.append(display_name_for_key(key, labels))
        return names

    def rows(self) -> list[RowView]:
        return self.active_level().rows if self.root_level is not None else []

    def enter(self, source_index: int) -> ParamLevel:
        """Open the composite child at `source_index` of the active level."""
        return self.active_level().open_child(source_index)

    def exit(self) -> bool:
        """Close the deepest level; False means already at the root."""
        chain = self.levels()
        if len(chain) < 2:
            return False
        chain[-2].close_child()
        return True

    def set_filter(self, predicate: Callable[[str], bool] | None, text: str = "") -> None:
        """Install or clear the name filter of the active level only."""
        self.active_level().set_filter(predicate, text)

    # --- input -------------------------------------------------------------

    def handle_input(self, event: InputEvent) -> str:
        if self.root_level is None:
            if isinstance(event, KeyEvent) and event.code == "Esc":
                return RESPONSE_REQUEST_EXIT
            return RESPONSE_CONSUMED
        if self.mode == MODE_FILTER_EDIT:
            self._handle_filter_event(event)
            return RESPONSE_CONSUMED
        response = self.root_level.handle_event(event)
        if response == LEVEL_EDITED:
            self.edited = True
            return RESPONSE_DOCUMENT_EDITED
        if response == LEVEL_EXIT:
            _LOG.debug("already at root")
            return RESPONSE_CONSUMED
        if response == LEVEL_NONE and isinstance(event, KeyEvent):
            return self._handle_engine_key(event)
        return RESPONSE_CONSUMED

    def _handle_engine_key(self, event: KeyEvent) -> str:
        if event.code == "Esc":
            return RESPONSE_REQUEST_EXIT
        if event.code == FILTER_HOTKEY and not event.has(MOD_CONTROL | MOD_ALT):
            level = self.active_level()
            self.filter_input.begin(level.filter_text, level.name_filter)
            self.mode = MODE_FILTER_EDIT
        return RESPONSE_CONSUMED

    def _handle_filter_event(self, event: InputEvent) -> None:
        if self.filter_input.handle_event(event) != FILTER_EXIT:
            return
        self.mode = MODE_PARAM_VIEW
        self.active_level().set_filter(self.filter_input.predicate, self.filter_input.submitted)

    def _require_root(self) -> ParamLevel:
        if self.root_level is None:
            raise StructuralViolation("no document is loaded")
        return self.root_level