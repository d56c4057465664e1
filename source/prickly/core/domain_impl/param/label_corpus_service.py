"""Process-wide label corpus: sorted known labels and their hash keys.

The corpus is populated once (possibly from a background loader thread) and
only read afterwards. Readers never block for long: if the lock cannot be
taken within the configured timeout, `read()` raises LabelCorpusUnavailable
and callers fall back to derived hashes.
"""

from __future__ import annotations

import bisect
import csv
import os
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from prickly.core import constants as app_constants
from prickly.core.domain_impl.param.hash40_core import Hash40, parse_hex_literal
from prickly.core.exceptions import AppRuntimeError, EXPECTED_ERRORS, InvalidHashLiteral, LabelCorpusUnavailable
import logging
_LOG = logging.getLogger(__name__)

# Sorts after every character a label line can contain.
_PREFIX_CEILING = "\U0010ffff"


@dataclass(slots=True)
class LabelTables:
    """Read-only view handed out under the corpus lock."""

    sorted_labels: list[str] = field(default_factory=list)
    hash_by_label: dict[str, Hash40] = field(default_factory=dict)
    label_by_hash: dict[Hash40, str] = field(default_factory=dict)

    def prefix_range(self, prefix: str) -> tuple[int, int]:
        lo = bisect.bisect_left(self.sorted_labels, prefix)
        hi = bisect.bisect_left(self.sorted_labels, prefix + _PREFIX_CEILING, lo)
        return lo, hi


def build_label_tables(rows: Iterable[tuple[Hash40, str]]) -> LabelTables:
    """Index `(hash, label)` rows; a label claimed by several hashes is dropped."""
    hashes_by_label: dict[str, set[Hash40]] = {}
    for key, label in rows:
        text = str(label)
        if text:
            hashes_by_label.setdefault(text, set()).add(key)
    hash_by_label: dict[str, Hash40] = {}
    label_by_hash: dict[Hash40, str] = {}
    for text, keys in hashes_by_label.items():
        if len(keys) > 1:
            _LOG.debug("dropping label %r shared by %d hashes", text, len(keys))
            continue
        key = next(iter(keys))
        hash_by_label[text] = key
        label_by_hash[key] = text
    return LabelTables(
        sorted_labels=sorted(hash_by_label),
        hash_by_label=hash_by_label,
        label_by_hash=label_by_hash,
    )


class LabelCorpus:
    def __init__(self, lock_timeout: float = app_constants.LABEL_LOCK_TIMEOUT_SECONDS) -> None:
        self._lock = threading.Lock()
        self._lock_timeout = float(lock_timeout)
        self._tables = LabelTables()
        self._populated = False

    @classmethod
    def from_rows(cls, rows: Iterable[tuple[Hash40, str]], **kwargs: Any) -> "LabelCorpus":
        corpus = cls(**kwargs)
        corpus.populate(rows)
        return corpus

    def is_populated(self) -> bool:
        return self._populated

    def populate(self, rows: Iterable[tuple[Hash40, str]]) -> int:
        """Fill the corpus from `(hash, label)` rows; allowed exactly once."""
        if self._populated:
            raise AppRuntimeError("Label corpus is already populated.")
        tables = build_label_tables(rows)
        with self._lock:
            if self._populated:
                raise AppRuntimeError("Label corpus is already populated.")
            self._tables = tables
            self._populated = True
        count = len(tables.sorted_labels)
        _LOG.info("label corpus populated with %d labels", count)
        return count

    @contextmanager
    def read(self) -> Iterator[LabelTables]:
        if not self._populated:
            raise LabelCorpusUnavailable("labels are still loading")
        if not self._lock.acquire(timeout=self._lock_timeout):
            raise LabelCorpusUnavailable("label corpus is busy")
        try:
            yield self._tables
        finally:
            self._lock.release()

    def __len__(self) -> int:
        try:
            with self.read() as tables:
                return len(tables.sorted_labels)
        except LabelCorpusUnavailable:
            return 0

    def label_of(self, key: Hash40) -> str | None:
        try:
            with self.read() as tables:
                return tables.label_by_hash.get(key)
        except LabelCorpusUnavailable as exc:
            _LOG.debug("label lookup degraded", exc_info=exc)
            return None

    def labels_by_hash(self) -> dict[Hash40, str] | None:
        """Hash-to-label map for a whole render pass; None while unavailable.

        Published tables are never mutated, so one lock acquisition covers
        every row of a level.
        """
        try:
            with self.read() as tables:
                return tables.label_by_hash
        except LabelCorpusUnavailable as exc:
            _LOG.debug("label lookup degraded", exc_info=exc)
            return None

    def display_hash(self, key: Hash40) -> str:
        label = self.label_of(key)
        return label if label is not None else key.to_hex()

    def hash_of(self, label: str) -> Hash40 | None:
        """Known hash for `label`; raises LabelCorpusUnavailable when busy."""
        with self.read() as tables:
            return tables.hash_by_label.get(str(label))

    def matches_prefix(self, text: str, limit: int = app_constants.AUTOCOMPLETE_LIMIT_DEFAULT) -> list[str]:
        """Known labels starting with `text`, ascending, at most `limit` entries.

        Raises LabelCorpusUnavailable when busy; an empty prefix matches nothing.
        """
        prefix = str(text)
        if not prefix or limit <= 0:
            return []
        with self.read() as tables:
            lo, hi = tables.prefix_range(prefix)
            return tables.sorted_labels[lo:min(hi, lo + int(limit))]


def read_label_rows(path: Any) -> list[tuple[Hash40, str]]:
    """Parse a `0x<hex>,<label>` CSV file; malformed lines are skipped."""
    rows: list[tuple[Hash40, str]] = []
    with open(path, "r", encoding="utf-8", newline="") as handle:
        for line_no, record in enumerate(csv.reader(handle), start=1):
            if len(record) < 2:
                continue
            hex_text = record[0].strip()
            label = ",".join(record[1:]).strip()
            try:
                key = parse_hex_literal(hex_text)
            except InvalidHashLiteral as exc:
                _LOG.debug("skipping label line %d", line_no, exc_info=exc)
                continue
            if label:
                rows.append((key, label))
    return rows


def default_label_paths(explicit: Any = None, configured: Any = None) -> list[str]:
    """Candidate label files: explicit, configured, cwd, then next to the program."""
    candidates: list[str] = []
    for value in (explicit, configured):
        text = str(value or "").strip()
        if text:
            candidates.append(os.path.abspath(os.path.expanduser(text)))
    candidates.append(os.path.abspath(app_constants.LABELS_FILENAME))
    try:
        program_dir = os.path.dirname(os.path.abspath(sys.argv[0] or ""))
        candidates.append(os.path.join(program_dir, app_constants.LABELS_FILENAME))
    except EXPECTED_ERRORS as exc:
        _LOG.debug('expected_error', exc_info=exc)
    deduped: list[str] = []
    for path in candidates:
        if path not in deduped:
            deduped.append(path)
    return deduped


def load_label_corpus(corpus: LabelCorpus, paths: Iterable[str]) -> str | None:
    """Populate `corpus` from the first readable label file; returns its path."""
    for path in paths:
        if not os.path.isfile(path):
            continue
        try:
            rows = read_label_rows(path)
        except EXPECTED_ERRORS as exc:
            _LOG.warning("could not read labels from %s: %s", path, exc)
            continue
        corpus.populate(rows)
        return path
    corpus.populate(())
    _LOG.info("no label file found; hashes display as raw hex")
    return None
