import pydantic
import pytest
from click.testing import CliRunner

from vault_api.cli import cli
from vault_api.config.settings import Settings, get_settings


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for var in ["HOST", "PORT", "ENVIRONMENT", "NODE_ENV", "STORAGE_DIR", "API_BASE_URL", "LOG_LEVEL"]:
        monkeypatch.delenv(var, raising=False)
    # keep any .env in the working directory out of the way
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


def test_defaults(clean_env):
    settings = Settings()

    assert settings.port == 3000
    assert settings.storage_dir == "uploads"
    assert settings.environment == "production"
    assert not settings.is_development


def test_environment_variables(clean_env):
    clean_env.setenv("PORT", "8080")
    clean_env.setenv("NODE_ENV", "development")
    clean_env.setenv("API_BASE_URL", "http://vault.local:8080/")

    settings = Settings()

    assert settings.port == 8080
    assert settings.is_development
    assert settings.api_base_url == "http://vault.local:8080"


def test_invalid_environment(clean_env):
    with pytest.raises(pydantic.ValidationError):
        Settings(environment="staging")


def test_show_config(clean_env):
    clean_env.setenv("STORAGE_DIR", "/srv/vault")

    result = CliRunner().invoke(cli, ["show-config"])

    assert result.exit_code == 0
    assert "Storage Dir: /srv/vault" in result.output
    assert "Listen: 0.0.0.0:3000" in result.output


def test_list_against_unreachable_server(clean_env):
    result = CliRunner().invoke(cli, ["list", "--url", "http://127.0.0.1:9"])

    assert result.exit_code == 1
    assert "Failed to load files" in result.output
