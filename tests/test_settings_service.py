import json

from prickly.core.domain_impl.infra.settings_service import (
    EditorSettings,
    load_settings,
    save_settings,
    settings_from_payload,
)
from prickly.core.editor_state import EditorState


def test_missing_or_broken_file_gives_defaults(tmp_path):
    assert load_settings(tmp_path / "missing.json") == EditorSettings()
    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")
    assert load_settings(str(broken)) == EditorSettings()


def test_save_then_load(tmp_path):
    path = tmp_path / "nested" / "prickly_settings.json"
    settings = EditorSettings(labels_path="labels.csv", open_dir=str(tmp_path), save_dir="", autocomplete_limit=12)
    assert save_settings(str(path), settings)
    assert json.loads(path.read_text(encoding="utf-8"))["autocomplete_limit"] == 12
    assert load_settings(str(path)) == settings


def test_invalid_values_fall_back(tmp_path):
    settings = settings_from_payload(
        {
            "labels_path": 5,
            "open_dir": str(tmp_path / "gone"),
            "save_dir": str(tmp_path),
            "autocomplete_limit": 0,
        }
    )
    assert settings.labels_path == ""
    assert settings.open_dir == ""
    assert settings.save_dir == str(tmp_path)
    assert settings.autocomplete_limit == EditorSettings().autocomplete_limit
    assert settings_from_payload({"autocomplete_limit": "32"}).autocomplete_limit == 32
    assert settings_from_payload({"autocomplete_limit": True}).autocomplete_limit == 64
    assert settings_from_payload([]) == EditorSettings()


def test_editor_state_remembers_dialog_dirs(tmp_path):
    settings = EditorSettings(open_dir=str(tmp_path))
    state = EditorState.from_settings(settings)
    assert state.dialogs.open_dir == str(tmp_path)
    target = tmp_path / "out" / "doc.json"
    state.remember_save(str(target))
    assert state.document.path == str(target)
    state.apply_to(settings)
    assert settings.save_dir == str(tmp_path / "out")
