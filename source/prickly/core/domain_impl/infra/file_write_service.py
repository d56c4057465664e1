"""Atomic file writes shared by settings and document saves."""

import errno
import os
import sys
import tempfile
import time
from typing import Any

from prickly.core.exceptions import EXPECTED_ERRORS
import logging
_LOG = logging.getLogger(__name__)

# Sharing/lock violations reported by Windows while another process holds the file.
_WINDOWS_LOCK_ERRORS = (5, 32, 33)


def is_retryable_file_write_error(exc: Any, platform_name: Any = None) -> bool:
    if isinstance(exc, PermissionError):
        return True
    if not isinstance(exc, OSError):
        return False
    if str(platform_name or sys.platform) == "win32":
        return getattr(exc, "winerror", None) in _WINDOWS_LOCK_ERRORS
    return exc.errno == errno.EACCES


def _discard(temp_path: str | None) -> None:
    if not temp_path:
        return
    try:
        os.remove(temp_path)
    except FileNotFoundError:
        pass
    except EXPECTED_ERRORS as exc:
        _LOG.debug("could not remove temp file %s", temp_path, exc_info=exc)


def _write_once(target_path: str, payload: bytes) -> None:
    directory = os.path.dirname(target_path)
    fd, temp_path = tempfile.mkstemp(prefix=".prickly_tmp_", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
            handle.flush()
            try:
                os.fsync(handle.fileno())
            except EXPECTED_ERRORS as exc:
                _LOG.debug('expected_error', exc_info=exc)
        os.replace(temp_path, target_path)
    except BaseException:
        _discard(temp_path)
        raise


def write_bytes_atomic(
    path: Any,
    payload: bytes,
    retries: Any = 5,
    base_delay: Any = 0.08,
    is_retryable_fn: Any = None,
    sleep_fn: Any = None,
) -> None:
    """Replace `path` with `payload` in one step; lock errors are retried with backoff."""
    target_path = os.path.abspath(path)
    os.makedirs(os.path.dirname(target_path), exist_ok=True)
    attempts = max(1, int(retries))
    retryable = is_retryable_fn if callable(is_retryable_fn) else is_retryable_file_write_error
    sleeper = sleep_fn if callable(sleep_fn) else time.sleep
    for attempt in range(1, attempts + 1):
        try:
            _write_once(target_path, payload)
            return
        except EXPECTED_ERRORS as exc:
            if attempt >= attempts or not retryable(exc):
                raise
            _LOG.debug("retrying write of %s (attempt %d)", target_path, attempt, exc_info=exc)
            sleeper(base_delay * attempt)


def write_text_file_atomic(path: Any, text: Any, encoding: Any = "utf-8", **kwargs: Any) -> None:
    write_bytes_atomic(path, str(text).encode(encoding), **kwargs)
