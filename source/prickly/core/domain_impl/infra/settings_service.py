"""User settings: label file, last-used dialog directories and autocomplete size."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from typing import Any

from prickly.core import constants as app_constants
from prickly.core.domain_impl.infra.file_write_service import write_text_file_atomic
from prickly.core.exceptions import EXPECTED_ERRORS
import logging
_LOG = logging.getLogger(__name__)


@dataclass(slots=True)
class EditorSettings:
    labels_path: str = ""
    open_dir: str = ""
    save_dir: str = ""
    autocomplete_limit: int = app_constants.AUTOCOMPLETE_LIMIT_DEFAULT


def _clean_dir(value: Any) -> str:
    text = str(value or "").strip() if isinstance(value, str) else ""
    return text if text and os.path.isdir(text) else ""


def settings_from_payload(data: Any) -> EditorSettings:
    """Build settings from decoded JSON; ill-typed values fall back to defaults."""
    settings = EditorSettings()
    if not isinstance(data, dict):
        return settings
    labels_path = data.get("labels_path")
    if isinstance(labels_path, str):
        settings.labels_path = labels_path.strip()
    settings.open_dir = _clean_dir(data.get("open_dir"))
    settings.save_dir = _clean_dir(data.get("save_dir"))
    limit = data.get("autocomplete_limit")
    if isinstance(limit, bool):
        limit = None
    elif isinstance(limit, str) and limit.strip().isdigit():
        limit = int(limit.strip())
    if isinstance(limit, int) and 1 <= limit <= app_constants.AUTOCOMPLETE_LIMIT_MAX:
        settings.autocomplete_limit = limit
    return settings


def load_settings(path: Any) -> EditorSettings:
    """Load settings from `path`; a missing or broken file yields defaults."""
    if not path or not os.path.isfile(path):
        return EditorSettings()
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except EXPECTED_ERRORS as exc:
        _LOG.debug("ignoring unreadable settings file %s", path, exc_info=exc)
        return EditorSettings()
    return settings_from_payload(data)


def save_settings(path: Any, settings: EditorSettings) -> bool:
    try:
        payload = json.dumps(asdict(settings), ensure_ascii=False, indent=2) + "\n"
        write_text_file_atomic(path, payload, encoding="utf-8")
    except EXPECTED_ERRORS as exc:
        _LOG.warning("could not save settings to %s: %s", path, exc)
        return False
    return True
