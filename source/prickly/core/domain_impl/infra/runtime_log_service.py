"""Diagnostics log file setup and size trimming."""

import logging
import os
from typing import Any

from prickly.core import constants as app_constants
from prickly.core.exceptions import EXPECTED_ERRORS
_LOG = logging.getLogger(__name__)

_LOG_HANDLER_NAME = "prickly-diagnostics"


def trim_text_file_for_append(path: Any, max_bytes: Any, keep_bytes: Any) -> bool:
    """Cut a log down to its last `keep_bytes` once it grows past `max_bytes`."""
    if not os.path.isfile(path):
        return False
    if max_bytes <= 0 or keep_bytes <= 0:
        return False
    try:
        size = os.path.getsize(path)
    except EXPECTED_ERRORS as exc:
        _LOG.debug('expected_error', exc_info=exc)
        return False
    if size <= max_bytes:
        return False
    keep_bytes = min(int(keep_bytes), int(size))
    try:
        with open(path, "rb") as src:
            src.seek(size - keep_bytes)
            tail = src.read()
        with open(path, "wb") as dst:
            dst.write(b"\n--- log truncated ---\n")
            dst.write(tail)
    except EXPECTED_ERRORS as exc:
        _LOG.debug('expected_error', exc_info=exc)
        return False
    return True


def configure_logging(
    log_path: Any = None,
    level: Any = logging.INFO,
    max_bytes: Any = app_constants.DIAG_LOG_MAX_BYTES,
    keep_bytes: Any = app_constants.DIAG_LOG_KEEP_BYTES,
) -> logging.Handler | None:
    """Attach one diagnostics handler to the `prickly` logger; idempotent."""
    logger = logging.getLogger("prickly")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if handler.get_name() == _LOG_HANDLER_NAME:
            logger.removeHandler(handler)
            handler.close()
    if log_path:
        trim_text_file_for_append(log_path, max_bytes, keep_bytes)
        try:
            handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
        except EXPECTED_ERRORS as exc:
            _LOG.debug('expected_error', exc_info=exc)
            handler = logging.StreamHandler()
    else:
        handler = logging.StreamHandler()
    handler.set_name(_LOG_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(app_constants.DIAG_LOG_FORMAT))
    logger.addHandler(handler)
    return handler
