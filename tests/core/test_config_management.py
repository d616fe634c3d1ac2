# tests/core/test_config_management.py
import pytest
import json

from webforge.core.managers.config_manager import ConfigManager, deep_merge
from webforge.core.handlers.config_handler import handle_config
from webforge.core.utils.path_utils import PathUtils

# A small, predictable configuration for the tests
MOCK_SETTINGS_CONTENT = {
    "debug": {
        "level": "WARNING"
    },
    "analyzer": {
        "pages_dir": "src/pages",
        "content": {
            "thin_words": 300,
            "duplicate_threshold": 0.7
        }
    }
}


@pytest.fixture
def config_env(tmp_path, monkeypatch):
    """
    Sets up an isolated environment for the ConfigManager:
    - writes a fake 'settings.json' to a temporary package root
    - points PathUtils at it
    """
    package_root = tmp_path / "webforge"
    package_root.mkdir()
    settings_file = package_root / "settings.json"
    settings_file.write_text(json.dumps(MOCK_SETTINGS_CONTENT))

    monkeypatch.setattr(PathUtils, 'get_settings_file', lambda: settings_file)

    # The global instance may already be loaded; force a reload from our file.
    manager = ConfigManager()
    manager.reset()
    return manager, tmp_path


# --- ConfigManager ---

def test_config_manager_load(config_env):
    manager, _ = config_env
    config = manager.get_all()
    assert config["debug"]["level"] == "WARNING"
    assert config["analyzer"]["content"]["thin_words"] == 300


def test_config_manager_is_a_singleton(config_env):
    manager, _ = config_env
    assert ConfigManager() is manager


def test_config_manager_get_nested(config_env):
    manager, _ = config_env
    assert manager.get_nested("analyzer.pages_dir") == "src/pages"
    assert manager.get_nested("non.existent.key", "default") == "default"
    assert manager.get_nested("analyzer.pages_dir.deeper", "default") == "default"


def test_config_manager_set_nested(config_env):
    manager, _ = config_env

    manager.set_nested("debug.level", "INFO")
    assert manager.get_nested("debug.level") == "INFO"

    # new keys are created on the fly
    manager.set_nested("analyzer.console_limit", 5)
    assert manager.get_nested("analyzer.console_limit") == 5

    # values are cast to the type of the existing value
    manager.set_nested("analyzer.content.thin_words", "250")
    assert manager.get_nested("analyzer.content.thin_words") == 250
    assert isinstance(manager.get_nested("analyzer.content.thin_words"), int)


def test_config_manager_reset(config_env):
    manager, _ = config_env
    manager.set_nested("debug.level", "DEBUG")
    manager.reset()
    assert manager.get_nested("debug.level") == "WARNING"


def test_load_overrides_deep_merges(config_env):
    manager, tmp_path = config_env
    overrides = tmp_path / ".webforge.json"
    overrides.write_text(json.dumps({"analyzer": {"pages_dir": "pages", "content": {"thin_words": 150}}}))

    assert manager.load_overrides(overrides) is True
    assert manager.get_nested("analyzer.pages_dir") == "pages"
    assert manager.get_nested("analyzer.content.thin_words") == 150
    # untouched siblings survive the merge
    assert manager.get_nested("analyzer.content.duplicate_threshold") == 0.7
    assert manager.overrides_file == overrides


def test_load_overrides_missing_or_invalid(config_env):
    manager, tmp_path = config_env
    assert manager.load_overrides(tmp_path / "absent.json") is False

    broken = tmp_path / "broken.json"
    broken.write_text("{ not json")
    assert manager.load_overrides(broken) is False
    assert manager.get_nested("analyzer.pages_dir") == "src/pages"


def test_deep_merge_does_not_mutate_inputs():
    base = {"a": {"b": 1, "c": 2}}
    merged = deep_merge(base, {"a": {"b": 10}, "d": [1]})
    assert merged == {"a": {"b": 10, "c": 2}, "d": [1]}
    assert base == {"a": {"b": 1, "c": 2}}


# --- 'config' command handler ---

def test_handle_config_list(config_env, capsys):
    assert handle_config(["list"]) == 0
    output_json = json.loads(capsys.readouterr().out)
    assert output_json["analyzer"]["content"]["thin_words"] == 300


def test_handle_config_get(config_env, capsys):
    assert handle_config(["get", "analyzer.content.thin_words"]) == 0
    assert capsys.readouterr().out.strip() == "300"

    assert handle_config(["get", "analyzer.content"]) == 0
    assert json.loads(capsys.readouterr().out)["duplicate_threshold"] == 0.7


def test_handle_config_errors(config_env, capsys):
    assert handle_config([]) == 1
    assert handle_config(["get"]) == 1
    assert handle_config(["get", "no.such.key"]) == 1
    assert handle_config(["bogus"]) == 1
    assert "Unknown config key 'no.such.key'" in capsys.readouterr().out
