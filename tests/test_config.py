"""Tests for configuration loading."""

from codereviewer.config import DEFAULT_CONFIG, auth_configured, find_config_file, load_config


def test_defaults(tmp_path):
    config = load_config()
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG


def test_config_file_merges_sections(tmp_path):
    (tmp_path / ".codereviewer.yaml").write_text("review:\n  model: gemini-2.5-flash\nservice:\n  port: 9000\n")
    config = load_config()
    assert config["review"]["model"] == "gemini-2.5-flash"
    assert config["service"]["port"] == 9000
    assert config["service"]["host"] == "127.0.0.1"


def test_config_file_found_in_parent(tmp_path, monkeypatch):
    (tmp_path / ".codereviewer.yaml").write_text("review:\n  model: parent-model\n")
    child = tmp_path / "a" / "b"
    child.mkdir(parents=True)
    monkeypatch.chdir(child)
    assert find_config_file() == (tmp_path / ".codereviewer.yaml").resolve()
    assert load_config()["review"]["model"] == "parent-model"


def test_explicit_path(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("auth:\n  redirect_to: http://example.com/cb\n")
    config = load_config(path)
    assert config["auth"]["redirect_to"] == "http://example.com/cb"
    assert config["auth"]["providers"] == ["google", "github"]


def test_invalid_yaml_falls_back_to_defaults(tmp_path):
    (tmp_path / ".codereviewer.yaml").write_text("review: [unclosed\n")
    assert load_config()["review"]["model"] == "gemini-2.5-pro"


def test_environment_overrides(tmp_path, monkeypatch):
    (tmp_path / ".codereviewer.yaml").write_text("service:\n  port: 9000\n")
    monkeypatch.setenv("CODEREVIEWER_PORT", "9100")
    monkeypatch.setenv("CODEREVIEWER_MODEL", "gemini-2.5-flash")
    config = load_config()
    assert config["service"]["port"] == 9100
    assert config["review"]["model"] == "gemini-2.5-flash"


def test_invalid_port_ignored(monkeypatch):
    monkeypatch.setenv("CODEREVIEWER_PORT", "not-a-port")
    assert load_config()["service"]["port"] == 8765


def test_auth_configured(monkeypatch):
    assert auth_configured(load_config()) is False
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    assert auth_configured(load_config()) is True
