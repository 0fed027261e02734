import logging
import os
from importlib import resources
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values, find_dotenv, load_dotenv

from mercury_qa.exceptions import ConfigurationError

CONFIG_FILE_NAME = "config.properties"

# Environment variables that take priority over the matching config key
ENV_OVERRIDES = {
    "MERCURY_USERNAME": "username",
    "MERCURY_PASSWORD": "password",
}

_MISSING = object()


class Config:
    """Read-only view over the framework properties.

    Built once by :func:`load_config` and handed to every consumer. Values are
    kept as strings; typed accessors parse on read and reject malformed values.
    """

    def __init__(self, properties: Mapping[str, str], source: Optional[str] = None):
        self._properties = MappingProxyType(dict(properties))
        self.source = source

    def __contains__(self, key: str) -> bool:
        return key in self._properties

    def __len__(self) -> int:
        return len(self._properties)

    def get(self, key: str, default=_MISSING) -> Optional[str]:
        """Return the raw value for ``key``.

        Without a default a missing key is logged as a warning and ``None`` is
        returned. With a default the default is returned silently.
        """
        value = self._properties.get(key)
        if value is None:
            if default is _MISSING:
                logging.warning(f"Property '{key}' not found in configuration")
                return None
            return default
        return value

    def get_bool(self, key: str, default: bool) -> bool:
        value = self._properties.get(key)
        if value is None:
            return default
        normalized = value.strip().lower()
        if normalized == "true":
            return True
        if normalized == "false":
            return False
        raise ConfigurationError(f"Property '{key}' must be 'true' or 'false', got '{value}'")

    def get_int(self, key: str, default: int) -> int:
        value = self._properties.get(key)
        if value is None:
            return default
        try:
            return int(value.strip())
        except ValueError as e:
            raise ConfigurationError(f"Property '{key}' must be an integer, got '{value}'") from e

    @property
    def browser(self) -> str:
        return self.get("browser", "chrome")

    @property
    def headless(self) -> bool:
        return self.get_bool("headless", False)

    @property
    def environment(self) -> str:
        return self.get("environment", "qa")

    @property
    def base_url(self) -> Optional[str]:
        return self.get(f"base.url.{self.environment}")

    @property
    def api_base_url(self) -> Optional[str]:
        return self.get(f"api.base.url.{self.environment}")

    @property
    def implicit_wait(self) -> int:
        return self.get_int("implicit.wait", 10)

    @property
    def explicit_wait(self) -> int:
        return self.get_int("explicit.wait", 20)

    @property
    def page_load_timeout(self) -> int:
        return self.get_int("page.load.timeout", 30)

    @property
    def username(self) -> Optional[str]:
        return self.get("username")

    @property
    def password(self) -> Optional[str]:
        return self.get("password")

    @property
    def parallel_execution(self) -> bool:
        return self.get_bool("parallel.execution", False)

    @property
    def thread_count(self) -> int:
        return self.get_int("thread.count", 3)

    @property
    def screenshot_on_failure(self) -> bool:
        return self.get_bool("screenshot.on.failure", True)

    @property
    def test_data_dir(self) -> str:
        return self.get("test.data.dir", "test_data")

    @property
    def report_dir(self) -> str:
        return self.get("report.dir", "reports")

    def as_dict(self) -> Dict[str, str]:
        return dict(self._properties)

    def print_all_properties(self):
        logging.info("=== Configuration Properties ===")
        for key in sorted(self._properties):
            logging.info(f"{key} = {self._properties[key]}")
        logging.info("================================")


def find_config_file(config_path: Optional[str] = None) -> str:
    """Locate the properties file.

    An explicit path wins and must exist. Otherwise ``resources/config.properties``
    under the working directory is tried, then the default bundled with the
    package.
    """
    if config_path:
        if os.path.isfile(config_path):
            return config_path
        raise ConfigurationError(f"Specified config file not found: {config_path}")

    local_path = os.path.join(os.getcwd(), "resources", CONFIG_FILE_NAME)
    if os.path.isfile(local_path):
        return local_path

    bundled = resources.files("mercury_qa").joinpath("resources", CONFIG_FILE_NAME)
    if bundled.is_file():
        return str(bundled)

    raise ConfigurationError(
        f"Config file not found, checked: {local_path} and the packaged {CONFIG_FILE_NAME}"
    )


def load_config(config_path: Optional[str] = None, overrides: Optional[Mapping[str, str]] = None) -> Config:
    """Load the configuration once and freeze it.

    Args:
        config_path: Explicit properties file, optional
        overrides: Values applied last, e.g. from command line options

    Returns:
        Config: immutable configuration
    """
    # .env never overrides variables already set in the process environment
    load_dotenv(find_dotenv(usecwd=True), override=False)

    path = find_config_file(config_path)
    try:
        raw = dotenv_values(path, interpolate=False)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Failed to read config file {path}: {e}") from e

    properties = {key: value for key, value in raw.items() if value is not None}
    for env_name, key in ENV_OVERRIDES.items():
        env_value = os.getenv(env_name)
        if env_value:
            properties[key] = env_value
    for key, value in (overrides or {}).items():
        if value is not None:
            properties[key] = str(value)

    logging.info(f"Configuration loaded from {path}")
    return Config(properties, source=path)
