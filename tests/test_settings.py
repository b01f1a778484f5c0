from pathlib import Path

import pytest

from vaultquery.settings import DEFAULT_QUERY_SETTINGS, SETTINGS_FILENAME, QuerySettings, find_settings, load_settings


def test_defaults():
    assert DEFAULT_QUERY_SETTINGS == QuerySettings()
    assert DEFAULT_QUERY_SETTINGS.render_null_as == "\\-"
    assert DEFAULT_QUERY_SETTINGS.task_completion_tracking is False
    assert DEFAULT_QUERY_SETTINGS.task_completion_text == "completion"


def test_load_top_level_and_query_table(tmp_path: Path) -> None:
    path = tmp_path / "settings.toml"
    path.write_text(
        'render_null_as = "n/a"\n'
        "unknown_key = 3\n"
        "\n"
        "[query]\n"
        "task_completion_tracking = true\n"
        'task_completion_text = "done"\n',
        encoding="utf-8",
    )

    settings = load_settings(path)

    assert settings.render_null_as == "n/a"
    assert settings.task_completion_tracking is True
    assert settings.task_completion_text == "done"
    assert settings.warn_on_empty_result is True


def test_wrong_type_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "settings.toml"
    path.write_text("warn_on_empty_result = \"no\"\n", encoding="utf-8")

    with pytest.raises(ValueError, match="warn_on_empty_result"):
        load_settings(path)


def test_find_settings_falls_back_to_defaults(vault_path: Path) -> None:
    assert find_settings(vault_path) is DEFAULT_QUERY_SETTINGS

    (vault_path / SETTINGS_FILENAME).write_text("warn_on_empty_result = false\n", encoding="utf-8")
    assert find_settings(vault_path).warn_on_empty_result is False


def test_module_is_documented():
    import vaultquery.settings

    assert vaultquery.settings.__doc__
