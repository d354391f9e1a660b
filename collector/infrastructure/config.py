"""Startup configuration loaded from the environment-selected YAML file."""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
import yaml
from collector.domain.errors import ConfigError


CONFIG_DIR = Path("config") / "env"
SUPPORTED_DRIVERS = ("postgres", "postgresql")


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection parameters.

    `parse_time` mirrors the deployment files; psycopg2 always returns
    timestamp columns as datetime objects.
    """
    driver: str
    host: str
    port: int
    user: str
    password: str
    database: str
    charset: str = "utf8"
    parse_time: bool = True

    def connection_params(self) -> Dict[str, Any]:
        """Keyword arguments for psycopg2.connect."""
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "dbname": self.database,
            "client_encoding": self.charset,
        }


@dataclass(frozen=True)
class Config:
    """Everything the collector needs at startup."""
    environment: str
    database: DatabaseConfig
    github_token: str
    github_base_url: str = "https://github.com"


def read_database_config(path: Path, password: str) -> DatabaseConfig:
    """Read the `database` section of a YAML configuration file.

    Any password stored in the file is ignored in favour of `password`.

    Raises:
        ConfigError: When the file is unreadable or malformed
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read the config {path}: {e}") from e

    section = document.get("database") if isinstance(document, dict) else None
    if not isinstance(section, dict):
        raise ConfigError(f"Missing 'database' section in {path}")

    try:
        database = DatabaseConfig(
            driver=str(section["driver"]),
            host=str(section["host"]),
            port=int(section["port"]),
            user=str(section["user"]),
            password=password,
            database=str(section["database"]),
            charset=str(section.get("charset", "utf8")),
            parse_time=bool(section.get("parse_time", True))
        )
    except KeyError as e:
        raise ConfigError(f"Missing database setting {e} in {path}") from e
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid database setting in {path}: {e}") from e

    if database.driver.lower() not in SUPPORTED_DRIVERS:
        raise ConfigError(f"Unsupported database driver: {database.driver}")

    return database


def _environment(environ: Mapping[str, str]) -> str:
    environment = environ.get("ENVIRONMENT")
    if not environment:
        raise ConfigError(
            "Failed to get application mode, check whether ENVIRONMENT is set."
        )
    return environment


def load_database_config(
    environ: Optional[Mapping[str, str]] = None,
    config_dir: Union[str, Path] = CONFIG_DIR
) -> DatabaseConfig:
    """Load only the database settings of the selected environment.

    Used by the database tooling, which needs no GitHub token.

    Raises:
        ConfigError: When ENVIRONMENT is unset or the configuration file
            is invalid
    """
    if environ is None:
        environ = os.environ

    return read_database_config(
        Path(config_dir) / f"{_environment(environ)}.yaml",
        password=environ.get("DB_PASSWORD", "")
    )


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    config_dir: Union[str, Path] = CONFIG_DIR
) -> Config:
    """Validate the environment and load the configuration.

    Args:
        environ: Environment mapping (defaults to os.environ)
        config_dir: Directory holding `<ENVIRONMENT>.yaml` files

    Returns:
        Config

    Raises:
        ConfigError: When ENVIRONMENT or GITHUB_TOKEN is unset or the
            configuration file is invalid
    """
    if environ is None:
        environ = os.environ

    environment = _environment(environ)

    github_token = environ.get("GITHUB_TOKEN")
    if not github_token:
        raise ConfigError("GITHUB_TOKEN environment variable is required")

    return Config(
        environment=environment,
        database=load_database_config(environ, config_dir),
        github_token=github_token,
        github_base_url=environ.get("GITHUB_BASE_URL", "https://github.com")
    )
