from pathlib import Path

import pytest
from pydantic import ValidationError

from restman.config import get_settings


def test_defaults(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in ("DATA_DIR", "LOG_LEVEL", "LOG_FILE", "HISTORY_LIMIT"):
        monkeypatch.delenv(f"RESTMAN_{name}", raising=False)

    settings = get_settings()

    assert settings.data_dir == Path.home() / ".restman"
    assert settings.log_level == "WARNING"
    assert settings.request_timeout_sec == 30.0
    assert settings.follow_redirects is True
    assert settings.history_limit == 100
    assert settings.environments_file.name == "environments.json"
    assert settings.history_file.name == "history.json"
    assert settings.saved_requests_file.name == "saved-requests.json"
    assert settings.resolved_log_file() == settings.data_dir / "restman.log"


def test_environment_overrides(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("RESTMAN_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("RESTMAN_LOG_LEVEL", "debug")
    monkeypatch.setenv("RESTMAN_HISTORY_LIMIT", "25")
    monkeypatch.setenv("RESTMAN_FOLLOW_REDIRECTS", "false")
    monkeypatch.setenv("RESTMAN_LOG_FILE", str(tmp_path / "custom.log"))

    settings = get_settings()

    assert settings.data_dir == tmp_path / "data"
    assert settings.log_level == "DEBUG"
    assert settings.history_limit == 25
    assert settings.follow_redirects is False
    assert settings.resolved_log_file() == tmp_path / "custom.log"


def test_explicit_overrides_win_and_none_is_ignored(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("RESTMAN_LOG_LEVEL", "ERROR")

    settings = get_settings(data_dir=str(tmp_path), log_level=None)

    assert settings.data_dir == tmp_path
    assert settings.log_level == "ERROR"


def test_data_dir_expands_user(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    assert get_settings(data_dir="~/rm").data_dir == tmp_path / "rm"


@pytest.mark.parametrize(("name", "value"), [("log_level", "LOUD"), ("history_limit", 0)])
def test_invalid_values_are_rejected(name: str, value) -> None:
    with pytest.raises(ValidationError):
        get_settings(**{name: value})
