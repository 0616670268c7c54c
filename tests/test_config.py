import pytest

from reqkit.config.config import ClientConfig, ConfigurationError, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("REQKIT_CONFIG", "REQKIT_USER_AGENT", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_bundled_defaults():
    cfg = load_config()

    assert cfg.log_level == "INFO"
    assert cfg.user_agent == "reqkit/0.1.0"
    assert cfg.headers == {}


def test_yaml_file(tmp_path):
    path = tmp_path / "client.yaml"
    path.write_text("user_agent: custom/2\nheaders:\n  Accept: application/json\n")

    cfg = load_config(str(path))

    assert cfg == ClientConfig(log_level="INFO", user_agent="custom/2", headers={"Accept": "application/json"})


def test_env_overrides(tmp_path, monkeypatch):
    path = tmp_path / "client.yaml"
    path.write_text("user_agent: from-yaml\n")
    monkeypatch.setenv("REQKIT_CONFIG", str(path))
    monkeypatch.setenv("REQKIT_USER_AGENT", "from-env")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    cfg = load_config()

    assert cfg.user_agent == "from-env"
    assert cfg.log_level == "DEBUG"


def test_empty_yaml_is_allowed(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")

    cfg = load_config(str(path))

    assert cfg.user_agent is None
    assert cfg.headers == {}


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "LOUD")

    with pytest.raises(ConfigurationError):
        load_config()


@pytest.mark.parametrize(
    "contents",
    ["- a\n- b\n", "headers: [Accept]\n", "headers:\n  Retry: 3\n"],
)
def test_invalid_yaml_shapes(tmp_path, contents):
    path = tmp_path / "bad.yaml"
    path.write_text(contents)

    with pytest.raises(ConfigurationError):
        load_config(str(path))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))
