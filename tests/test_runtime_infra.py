import logging

import pytest

from prickly.core.domain_impl.infra.file_write_service import (
    is_retryable_file_write_error,
    write_bytes_atomic,
    write_text_file_atomic,
)
from prickly.core.domain_impl.infra.runtime_log_service import configure_logging, trim_text_file_for_append
from prickly.core.domain_impl.infra.runtime_paths_service import (
    diag_log_path,
    runtime_data_dir,
    settings_path,
)


def test_runtime_dir_prefers_xdg_state_home(tmp_path):
    path = runtime_data_dir("Demo", create=True, platform_name="linux", env={"XDG_STATE_HOME": str(tmp_path)})
    assert path == str(tmp_path / "Demo")
    assert (tmp_path / "Demo").is_dir()
    assert settings_path(path).endswith("prickly_settings.json")
    assert diag_log_path(path).endswith("prickly_diagnostics.log")


def test_runtime_dir_on_windows_stays_under_home(tmp_path):
    path = runtime_data_dir("Demo", create=False, platform_name="win32", env={"LOCALAPPDATA": "/definitely/elsewhere"})
    assert path.endswith("Demo")
    assert "definitely" not in path


def test_atomic_write_replaces_content(tmp_path):
    target = tmp_path / "out.txt"
    write_text_file_atomic(target, "one")
    write_text_file_atomic(target, "two")
    assert target.read_text(encoding="utf-8") == "two"
    assert [p.name for p in tmp_path.iterdir()] == ["out.txt"]


def test_atomic_write_retries_retryable_errors(tmp_path, monkeypatch):
    import prickly.core.domain_impl.infra.file_write_service as file_write_service

    calls = []
    real_replace = file_write_service.os.replace

    def flaky_replace(src, dst):
        calls.append(dst)
        if len(calls) == 1:
            raise PermissionError("locked")
        real_replace(src, dst)

    monkeypatch.setattr(file_write_service.os, "replace", flaky_replace)
    sleeps = []
    write_bytes_atomic(tmp_path / "out.bin", b"data", sleep_fn=sleeps.append)
    assert len(calls) == 2
    assert len(sleeps) == 1
    assert (tmp_path / "out.bin").read_bytes() == b"data"


def test_non_retryable_errors_propagate(tmp_path, monkeypatch):
    import prickly.core.domain_impl.infra.file_write_service as file_write_service

    def broken_replace(src, dst):
        raise IsADirectoryError("nope")

    monkeypatch.setattr(file_write_service.os, "replace", broken_replace)
    with pytest.raises(IsADirectoryError):
        write_bytes_atomic(tmp_path / "out.bin", b"data", sleep_fn=lambda _delay: None)
    assert list(tmp_path.iterdir()) == []


def test_retryable_error_classification():
    assert is_retryable_file_write_error(PermissionError())
    assert not is_retryable_file_write_error(ValueError())
    assert not is_retryable_file_write_error(FileNotFoundError())


def test_trim_keeps_tail(tmp_path):
    log = tmp_path / "diag.log"
    log.write_bytes(b"a" * 100 + b"tail")
    assert trim_text_file_for_append(str(log), 50, 4)
    assert log.read_bytes().endswith(b"tail")
    assert len(log.read_bytes()) < 50
    assert not trim_text_file_for_append(str(log), 1000, 10)


def test_configure_logging_is_idempotent(tmp_path):
    log = tmp_path / "diag.log"
    first = configure_logging(str(log), level="DEBUG")
    second = configure_logging(str(log), level="DEBUG")
    logger = logging.getLogger("prickly")
    try:
        assert first not in logger.handlers
        assert second in logger.handlers
        logging.getLogger("prickly.core.test").debug("hello diagnostics")
        second.flush()
        assert "hello diagnostics" in log.read_text(encoding="utf-8")
    finally:
        logger.removeHandler(second)
        second.close()
