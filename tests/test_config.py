import pytest
from pathlib import Path

from helmbridge.core.config import BridgeConfig, load_config
from helmbridge.core.errors import ConfigError


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Keeps a developer's ./config.yaml out of the tests."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_flag_wins_over_environment_and_file(isolated_cwd):
    (isolated_cwd / "config.yaml").write_text("api_url: http://from-file\n")

    config = load_config(api_url="http://from-flag", environ={"API_URL": "http://from-env"})

    assert config.api_url == "http://from-flag"


def test_environment_wins_over_file(isolated_cwd):
    (isolated_cwd / "config.yaml").write_text("api_url: http://from-file\n")

    config = load_config(environ={"API_URL": "http://from-env"})

    assert config.api_url == "http://from-env"


def test_default_config_file_is_read(isolated_cwd):
    (isolated_cwd / "config.yaml").write_text(
        "api_url: http://bridge:8080/\ntimeout: 5\nvalues_file: chart/values.yaml\nhelm_bin: /opt/helm\n"
    )

    config = load_config(environ={})

    assert config.api_url == "http://bridge:8080"
    assert config.timeout == 5.0
    assert config.values_file == Path("chart/values.yaml")
    assert config.helm_bin == "/opt/helm"
    assert config.config_file == isolated_cwd / "config.yaml"


def test_explicit_config_file(tmp_path):
    path = tmp_path / "bridge.yaml"
    path.write_text("api_url: http://explicit\n")

    config = load_config(config_file=str(path), environ={})

    assert config.api_url == "http://explicit"


def test_explicit_config_file_must_exist():
    with pytest.raises(ConfigError, match="not found"):
        load_config(config_file="nope.yaml", environ={})


def test_config_file_must_be_a_mapping(isolated_cwd):
    (isolated_cwd / "config.yaml").write_text("- just\n- a list\n")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(api_url="http://x", environ={})


def test_missing_api_url():
    with pytest.raises(ConfigError, match="API URL is required"):
        load_config(environ={})


@pytest.mark.parametrize("timeout", ["soon", "0", "-3"])
def test_invalid_timeout(timeout):
    with pytest.raises(ConfigError, match="Invalid timeout"):
        load_config(api_url="http://x", environ={"BRIDGE_TIMEOUT": timeout})


def test_release_identity_comes_from_helm_environment():
    config = load_config(
        api_url="http://x",
        environ={"HELM_RELEASE_NAME": "web", "HELM_NAMESPACE": "prod", "HELM_BIN": "/usr/bin/helm"},
    )

    config.require_release()
    assert (config.release_name, config.namespace, config.helm_bin) == ("web", "prod", "/usr/bin/helm")


@pytest.mark.parametrize("release, namespace, missing", [
    ("", "prod", "HELM_RELEASE_NAME"),
    ("web", "", "HELM_NAMESPACE"),
])
def test_release_identity_is_required(release, namespace, missing):
    config = BridgeConfig(api_url="http://x", release_name=release, namespace=namespace)

    with pytest.raises(ConfigError, match=missing):
        config.require_release()
