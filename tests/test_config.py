"""Tests for startup configuration loading."""
import pytest
from collector.domain.errors import ConfigError
from collector.infrastructure.config import load_config, load_database_config


CONFIG = """
database:
  driver: postgres
  host: db.internal
  port: 5433
  user: collector
  password: from-file
  database: coins
  charset: utf8
  parse_time: true
"""


@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "production.yaml").write_text(CONFIG, encoding="utf-8")
    return tmp_path


def _environ(**overrides):
    environ = {
        "ENVIRONMENT": "production",
        "GITHUB_TOKEN": "ghp_test",
        "DB_PASSWORD": "secret",
    }
    environ.update(overrides)
    return {key: value for key, value in environ.items() if value is not None}


def test_load_config(config_dir):
    config = load_config(_environ(), config_dir=config_dir)

    assert config.environment == "production"
    assert config.github_token == "ghp_test"
    assert config.github_base_url == "https://github.com"
    assert config.database.connection_params() == {
        "host": "db.internal",
        "port": 5433,
        "user": "collector",
        "password": "secret",
        "dbname": "coins",
        "client_encoding": "utf8",
    }


def test_password_comes_from_environment_only(config_dir):
    config = load_config(_environ(DB_PASSWORD=None), config_dir=config_dir)

    assert config.database.password == ""


def test_missing_environment_is_a_config_error(config_dir):
    with pytest.raises(ConfigError, match="ENVIRONMENT"):
        load_config(_environ(ENVIRONMENT=None), config_dir=config_dir)


def test_missing_github_token_is_a_config_error(config_dir):
    with pytest.raises(ConfigError, match="GITHUB_TOKEN"):
        load_config(_environ(GITHUB_TOKEN=None), config_dir=config_dir)


def test_missing_config_file_is_a_config_error(config_dir):
    with pytest.raises(ConfigError):
        load_config(_environ(ENVIRONMENT="staging"), config_dir=config_dir)


def test_unsupported_driver_is_a_config_error(tmp_path):
    (tmp_path / "production.yaml").write_text(CONFIG.replace("postgres", "mysql"), encoding="utf-8")

    with pytest.raises(ConfigError, match="mysql"):
        load_config(_environ(), config_dir=tmp_path)


def test_missing_setting_is_a_config_error(tmp_path):
    (tmp_path / "production.yaml").write_text("database:\n  driver: postgres\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="host"):
        load_config(_environ(), config_dir=tmp_path)


def test_database_config_does_not_need_github_token(config_dir):
    database = load_database_config(_environ(GITHUB_TOKEN=None), config_dir=config_dir)

    assert database.host == "db.internal"
    assert database.password == "secret"


def test_database_config_still_requires_environment(config_dir):
    with pytest.raises(ConfigError, match="ENVIRONMENT"):
        load_database_config(_environ(ENVIRONMENT=None, GITHUB_TOKEN=None), config_dir=config_dir)
