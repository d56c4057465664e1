"""Document io package exports."""

from __future__ import annotations

from . import document_io_service

__all__ = ["document_io_service"]
