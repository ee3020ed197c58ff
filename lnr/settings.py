"""Config file (organizations and tokens) plus environment settings."""

import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from lnr.console import console
from lnr.errors import ConfigError, NotFoundError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "lnr.cfg"


class EnvSettings(BaseSettings):
    """Values read from the environment (and a .env file in cwd)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    linear_api_key: SecretStr | None = Field(default=None, validation_alias="LINEAR_API_KEY")
    disable_spinner: str | None = Field(default=None, validation_alias="DISABLE_SPINNER")
    config_path: str | None = Field(default=None, validation_alias="LNR_CONFIG")


class Config(BaseModel):
    """App configuration, serialized as JSON in $XDG_CONFIG_HOME/lnr.cfg."""

    organizations: dict[str, str] = {}
    path: str
    mock_url: str | None = None
    mock_string: str | None = None
    mock_select: int | None = None
    spinners: bool | None = True

    def add_organization(self, name: str, token: str) -> None:
        self.organizations[name] = token

    def remove_organization(self, name: str) -> None:
        self.organizations.pop(name, None)

    def organization_names(self) -> list[str]:
        return list(self.organizations)

    def token(self, organization_name: str) -> str:
        try:
            return self.organizations[organization_name]
        except KeyError:
            raise NotFoundError("Organization not found") from None

    def spinners_enabled(self) -> bool:
        if EnvSettings().disable_spinner is not None:
            return False
        return bool(self.spinners)

    def create(self) -> "Config":
        """Write a new config file at `path`."""
        target = Path(self.path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(self.model_dump_json(indent=2))
        except OSError:
            raise ConfigError("Could not create file") from None
        console.print(f"Config successfully created in {self.path}", highlight=False)
        return self

    def save(self) -> str:
        """Overwrite the config file with the current values."""
        target = Path(self.path)
        if not target.exists():
            raise ConfigError("Could not find config")
        try:
            target.write_text(self.model_dump_json(indent=2))
        except OSError:
            raise ConfigError("Could not write to file") from None
        logger.debug("Saved config to %s", self.path)
        return "[green]✓[/green]"

    @classmethod
    def load(cls, path: str) -> "Config":
        try:
            raw = Path(path).read_text()
        except FileNotFoundError:
            raise ConfigError("Could not find file") from None
        except OSError:
            raise ConfigError("Could not read to string") from None
        try:
            return cls.model_validate_json(raw)
        except ValidationError:
            raise ConfigError(f"Could not parse JSON:\n{raw}") from None


def generate_path() -> str:
    """Return the default config path, respecting XDG_CONFIG_HOME."""
    xdg = os.environ.get("XDG_CONFIG_HOME", "")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return str(base / CONFIG_FILENAME)


def get_or_create(config_path: str | None = None) -> Config:
    """Load the config, creating it with defaults first if the file is absent.

    Path precedence: explicit argument, LNR_CONFIG, then the default location.
    """
    path = (config_path or EnvSettings().config_path or generate_path()).strip()
    if Path(path).exists():
        return Config.load(path)
    logger.debug("No config at %s, creating one", path)
    return Config(path=path).create()
