"""Resolve edit text to hash keys and drive label autocomplete candidates."""

from __future__ import annotations

from dataclasses import dataclass, field

from prickly.core import constants as app_constants
from prickly.core.domain_impl.param.hash40_core import Hash40, hash40, is_hex_literal, parse_hex_literal
from prickly.core.domain_impl.param.label_corpus_service import LabelCorpus
from prickly.core.exceptions import InvalidHashLiteral, LabelCorpusUnavailable
import logging
_LOG = logging.getLogger(__name__)


STATUS_HASH = "hash"
STATUS_LABEL_EXISTS = "label_exists"
STATUS_LABEL_NOT_EXISTS = "label_not_exists"
STATUS_LABELS_UNAVAILABLE = "labels_unavailable"
STATUS_INVALID_HEX = "invalid_hex"


@dataclass(frozen=True, slots=True)
class HashResolution:
    status: str
    hash: Hash40 | None = None
    error: str | None = None

    def is_valid(self) -> bool:
        return self.hash is not None


def resolve(text: str, corpus: LabelCorpus) -> HashResolution:
    """Hex literal, known label, or a derived hash for an unknown label."""
    source = str(text)
    if is_hex_literal(source):
        try:
            return HashResolution(STATUS_HASH, parse_hex_literal(source))
        except InvalidHashLiteral as exc:
            return HashResolution(STATUS_INVALID_HEX, None, str(exc))
    try:
        known = corpus.hash_of(source)
    except LabelCorpusUnavailable as exc:
        _LOG.debug("resolving %r without labels", source, exc_info=exc)
        return HashResolution(STATUS_LABELS_UNAVAILABLE, hash40(source))
    if known is not None:
        return HashResolution(STATUS_LABEL_EXISTS, known)
    return HashResolution(STATUS_LABEL_NOT_EXISTS, hash40(source))


def resolve_or_raise(text: str, corpus: LabelCorpus) -> Hash40:
    resolution = resolve(text, corpus)
    if resolution.hash is None:
        raise InvalidHashLiteral(resolution.error or f"invalid hash literal: {text!r}")
    return resolution.hash


@dataclass(slots=True)
class HashCandidates:
    """Autocomplete state for one hash edit buffer.

    The cursor is None until the user asks for a candidate, and resets to
    None whenever the input text changes.
    """

    limit: int = app_constants.AUTOCOMPLETE_LIMIT_DEFAULT
    text: str = ""
    matches: list[str] = field(default_factory=list)
    cursor: int | None = None
    labels_available: bool = True

    def set_text(self, corpus: LabelCorpus, text: str) -> None:
        new_text = str(text)
        if new_text == self.text and self.labels_available:
            return
        self.text = new_text
        self.cursor = None
        self.refresh(corpus)

    def refresh(self, corpus: LabelCorpus) -> None:
        if is_hex_literal(self.text):
            self.matches = []
            self.labels_available = True
            return
        try:
            self.matches = corpus.matches_prefix(self.text, self.limit)
            self.labels_available = True
        except LabelCorpusUnavailable as exc:
            _LOG.debug("autocomplete degraded", exc_info=exc)
            self.matches = []
            self.labels_available = False

    def current(self) -> str | None:
        if self.cursor is None or not self.matches:
            return None
        return self.matches[self.cursor]

    def next(self) -> str | None:
        if not self.matches:
            return None
        if self.cursor is None:
            self.cursor = 0
        else:
            self.cursor = min(self.cursor + 1, len(self.matches) - 1)
        return self.current()

    def previous(self) -> str | None:
        if not self.matches or self.cursor is None:
            return None
        self.cursor = max(self.cursor - 1, 0)
        return self.current()

    def accept(self, corpus: LabelCorpus) -> str | None:
        """Replace the text with the current candidate (or the first match)."""
        chosen = self.current()
        if chosen is None and self.matches:
            chosen = self.matches[0]
        if chosen is None:
            return None
        self.text = chosen
        self.cursor = None
        self.refresh(corpus)
        return chosen
