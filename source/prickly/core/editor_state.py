"""Structured runtime state buckets for the editor host."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from prickly.core import constants as app_constants
from prickly.core.domain_impl.infra.settings_service import EditorSettings


@dataclass(slots=True)
class DocumentState:
    """Open document path and last status line."""

    path: str | None = None
    status: str = app_constants.STATUS_EMPTY


@dataclass(slots=True)
class DialogState:
    """Directories the open/save dialogs start in."""

    open_dir: str = ""
    save_dir: str = ""


@dataclass(slots=True)
class EditorState:
    """Top-level grouped state container for the host window."""

    document: DocumentState = field(default_factory=DocumentState)
    dialogs: DialogState = field(default_factory=DialogState)

    @classmethod
    def from_settings(cls, settings: EditorSettings) -> "EditorState":
        cwd = os.getcwd()
        return cls(dialogs=DialogState(open_dir=settings.open_dir or cwd, save_dir=settings.save_dir or cwd))

    def remember_open(self, path: str) -> None:
        self.document.path = path
        parent = os.path.dirname(os.path.abspath(path))
        if parent:
            self.dialogs.open_dir = parent

    def remember_save(self, path: str) -> None:
        self.document.path = path
        parent = os.path.dirname(os.path.abspath(path))
        if parent:
            self.dialogs.save_dir = parent

    def apply_to(self, settings: EditorSettings) -> EditorSettings:
        settings.open_dir = self.dialogs.open_dir
        settings.save_dir = self.dialogs.save_dir
        return settings
