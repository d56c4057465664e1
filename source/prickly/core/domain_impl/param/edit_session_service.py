"""Inline editing of one terminal param: scalar text edits and hash/label edits.

A session is bound to the child's `source_index` captured when editing
starts, so it always writes back to the node it was opened on.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from prickly.core import constants as app_constants
from prickly.core.domain_impl.param.hash_resolver_service import (
    HashCandidates,
    HashResolution,
    resolve,
)
from prickly.core.domain_impl.param.label_corpus_service import LabelCorpus
from prickly.core.domain_impl.param.param_model_core import (
    KIND_HASH,
    ParamNode,
    child_at,
    is_terminal,
    set_child,
)
from prickly.core.domain_impl.param.scalar_codec_service import format_terminal, parse_terminal
from prickly.core.exceptions import ParamParseError, StructuralViolation
from prickly.core.input_events import InputEvent, KeyEvent
import logging
_LOG = logging.getLogger(__name__)


MODE_BROWSING = "browsing"
MODE_EDITING_SCALAR = "editing_scalar"
MODE_EDITING_HASH = "editing_hash"

EDIT_NONE = "none"
EDIT_HANDLED = "handled"
EDIT_SUBMIT = "submit"
EDIT_CANCEL = "cancel"


@dataclass(slots=True)
class EditSession:
    source_index: int
    kind: str
    buffer: str
    parse_error: str | None = None
    candidates: HashCandidates | None = field(default=None)

    def mode(self) -> str:
        return MODE_EDITING_HASH if self.kind == KIND_HASH else MODE_EDITING_SCALAR

    def resolution(self, corpus: LabelCorpus) -> HashResolution | None:
        if self.kind != KIND_HASH:
            return None
        return resolve(self.buffer, corpus)

    def set_buffer(self, text: str, corpus: LabelCorpus) -> None:
        self.buffer = str(text)
        self.parse_error = None
        if self.candidates is not None:
            self.candidates.set_text(corpus, self.buffer)


def begin_edit(
    parent: ParamNode,
    source_index: int,
    corpus: LabelCorpus,
    autocomplete_limit: int = app_constants.AUTOCOMPLETE_LIMIT_DEFAULT,
) -> EditSession:
    """Start editing a terminal child, seeded with its current text."""
    node = child_at(parent, source_index)
    if not is_terminal(node):
        raise StructuralViolation(f"{node.kind} params are navigated, not edited")
    session = EditSession(
        source_index=source_index,
        kind=node.kind,
        buffer=format_terminal(node, corpus),
    )
    if node.kind == KIND_HASH:
        session.candidates = HashCandidates(limit=autocomplete_limit)
        session.candidates.set_text(corpus, session.buffer)
    return session


def commit_edit(session: EditSession, parent: ParamNode, corpus: LabelCorpus) -> bool:
    """Write the parsed buffer into the parent's slot; on failure keep the node as is."""
    try:
        value = parse_terminal(session.kind, session.buffer, corpus)
    except ParamParseError as exc:
        session.parse_error = str(exc)
        _LOG.debug("edit of child %d rejected: %s", session.source_index, exc)
        return False
    set_child(parent, session.source_index, ParamNode(session.kind, value))
    session.parse_error = None
    return True


def handle_edit_event(session: EditSession, event: InputEvent, corpus: LabelCorpus) -> str:
    """Apply one key to the buffer; Enter asks to submit, Esc to cancel."""
    if not isinstance(event, KeyEvent):
        return EDIT_NONE
    if event.is_char():
        session.set_buffer(session.buffer + event.code, corpus)
        return EDIT_HANDLED
    match event.code:
        case "Backspace":
            session.set_buffer(session.buffer[:-1], corpus)
            return EDIT_HANDLED
        case "Enter":
            return EDIT_SUBMIT
        case "Esc":
            return EDIT_CANCEL
        case "Down" | "Tab" | "Up" | "BackTab" if session.candidates is not None:
            return _handle_candidate_key(session, event.code, corpus)
        case _:
            return EDIT_HANDLED


def _handle_candidate_key(session: EditSession, code: str, corpus: LabelCorpus) -> str:
    candidates = session.candidates
    match code:
        case "Down":
            candidates.next()
        case "Up":
            candidates.previous()
        case "Tab":
            accepted = candidates.accept(corpus)
            if accepted is not None:
                session.buffer = accepted
                session.parse_error = None
        case "BackTab":
            candidates.previous()
    return EDIT_HANDLED
