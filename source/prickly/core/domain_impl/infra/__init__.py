"""Infra domain package exports."""

from __future__ import annotations

from . import file_write_service
from . import runtime_log_service
from . import runtime_paths_service
from . import settings_service

__all__ = [
    "file_write_service",
    "runtime_log_service",
    "runtime_paths_service",
    "settings_service",
]
