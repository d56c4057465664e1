"""Where the editor keeps its settings file and diagnostics log."""

import os
import sys
from typing import Any

from prickly.core import constants as app_constants
from prickly.core.exceptions import EXPECTED_ERRORS


def _home_dir() -> str:
    try:
        return os.path.abspath(os.path.expanduser("~"))
    except EXPECTED_ERRORS:
        return os.path.abspath(os.getcwd())


def _under_home(candidate: Any) -> str | None:
    # Env-provided bases that escape the user's home are ignored.
    text = str(candidate or "").strip()
    if not text:
        return None
    home = _home_dir()
    try:
        resolved = os.path.abspath(text)
        if os.path.commonpath([home, resolved]) == home:
            return resolved
    except EXPECTED_ERRORS:
        return None
    return None


def _state_base(platform_name: str, env: Any) -> str:
    match platform_name:
        case "win32":
            for name in ("LOCALAPPDATA", "APPDATA"):
                base = _under_home(env.get(name))
                if base:
                    return base
            return _home_dir()
        case _:
            xdg_state = str(env.get("XDG_STATE_HOME", "")).strip()
            if xdg_state:
                return os.path.abspath(xdg_state)
            return os.path.join(_home_dir(), ".local", "state")


def runtime_data_dir(
    runtime_dir_name: Any = app_constants.RUNTIME_DIR_NAME,
    create: Any = True,
    platform_name: Any = None,
    env: Any = None,
) -> str:
    """Per-user state directory; falls back to the cwd when it cannot be created."""
    use_env = os.environ if env is None else env
    target = os.path.join(_state_base(str(platform_name or sys.platform), use_env), runtime_dir_name)
    if create:
        try:
            os.makedirs(target, exist_ok=True)
        except EXPECTED_ERRORS:
            return os.getcwd()
    return target


def settings_path(runtime_dir: Any = None) -> str:
    return os.path.join(runtime_dir or runtime_data_dir(), app_constants.SETTINGS_FILENAME)


def diag_log_path(runtime_dir: Any = None) -> str:
    return os.path.join(runtime_dir or runtime_data_dir(), app_constants.DIAG_LOG_FILENAME)
