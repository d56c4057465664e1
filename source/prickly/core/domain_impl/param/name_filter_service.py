"""Regex name filter for a level's rows, plus its small text-entry state machine."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from prickly.core.exceptions import NameFilterError
from prickly.core.input_events import InputEvent, KeyEvent


FILTER_NONE = "none"
FILTER_HANDLED = "handled"
FILTER_EXIT = "exit"


def compile_name_filter(text: str) -> Callable[[str], bool] | None:
    """Predicate for `text` (regex search); empty text means no filter."""
    source = str(text or "")
    if not source:
        return None
    try:
        pattern = re.compile(source)
    except re.error as exc:
        raise NameFilterError(str(exc)) from exc
    return lambda name: pattern.search(name) is not None


@dataclass(slots=True)
class NameFilterInput:
    """Filter text being edited; `submitted` is the last text that compiled."""

    value: str = ""
    submitted: str = ""
    error: str | None = None
    predicate: Callable[[str], bool] | None = None

    def begin(self, text: str, predicate: Callable[[str], bool] | None) -> None:
        self.value = str(text or "")
        self.submitted = self.value
        self.predicate = predicate
        self.error = None

    def submit(self) -> bool:
        try:
            self.predicate = compile_name_filter(self.value)
        except NameFilterError as exc:
            self.error = str(exc)
            return False
        self.submitted = self.value
        self.error = None
        return True

    def cancel(self) -> None:
        self.value = self.submitted
        self.error = None

    def handle_event(self, event: InputEvent) -> str:
        if not isinstance(event, KeyEvent):
            return FILTER_NONE
        if event.is_char():
            self.value += event.code
            return FILTER_HANDLED
        match event.code:
            case "Backspace":
                self.value = self.value[:-1]
                return FILTER_HANDLED
            case "Enter":
                return FILTER_EXIT if self.submit() else FILTER_HANDLED
            case "Esc":
                self.cancel()
                return FILTER_EXIT
            case _:
                return FILTER_NONE
