
import pytest

from rpncalc.config import DEFAULT_PROMPT, Settings, load_settings


def test_defaults_without_environment():
    settings = load_settings()
    assert settings == Settings()
    assert settings.prompt == DEFAULT_PROMPT == "Enter an expression: "


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("RPNCALC_LOG_LEVEL", "debug")
    monkeypatch.setenv("RPNCALC_HISTORY_FILE", str(tmp_path / "hist"))
    monkeypatch.setenv("RPNCALC_HOST", "0.0.0.0")
    monkeypatch.setenv("RPNCALC_PORT", "9001")
    monkeypatch.setenv("RPNCALC_PROMPT", "> ")
    settings = load_settings(dotenv=False)
    assert settings.log_level == "DEBUG"
    assert settings.history_file == str(tmp_path / "hist")
    assert settings.host == "0.0.0.0"
    assert settings.port == 9001
    assert settings.prompt == "> "


def test_dotenv_file_is_read(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("RPNCALC_PORT=8123\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    settings = load_settings()
    assert settings.port == 8123


@pytest.mark.parametrize("value", ["abc", "0", "70000"])
def test_invalid_port_is_rejected(monkeypatch, value):
    monkeypatch.setenv("RPNCALC_PORT", value)
    with pytest.raises(ValueError, match="RPNCALC_PORT"):
        load_settings(dotenv=False)


def test_history_file_is_expanded(monkeypatch):
    monkeypatch.setenv("RPNCALC_HISTORY_FILE", "~/calc_history")
    settings = load_settings(dotenv=False)
    assert not settings.history_file.startswith("~")
    assert settings.history_file.endswith("calc_history")
