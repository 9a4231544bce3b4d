"""Configuration for the repository tooling."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from .layout import RepositoryLayout

ENV_LOCAL_REPO = "MAVEN_LOCAL_REPO"
ENV_MAVEN_HOME = "MAVEN_HOME"
ENV_USER_HOME = "HOME"


class ToolsConfig(BaseModel):
    """Where to find Maven settings and how to lay out staged repositories."""

    user_home: Path = Field(
        default_factory=Path.home, description="User home directory"
    )
    maven_home: Optional[Path] = Field(
        None, description="Maven installation directory (for global settings)"
    )
    local_repository: Optional[Path] = Field(
        None, description="Override for the normal local repository location"
    )
    layout: RepositoryLayout = Field(
        default=RepositoryLayout.DEFAULT, description="Repository layout"
    )

    @property
    def user_settings_file(self) -> Path:
        """~/.m2/settings.xml"""
        return self.user_home / ".m2" / "settings.xml"

    @property
    def global_settings_file(self) -> Optional[Path]:
        """$MAVEN_HOME/conf/settings.xml, if a Maven home is known."""
        if self.maven_home is None:
            return None
        return self.maven_home / "conf" / "settings.xml"

    @property
    def default_local_repository(self) -> Path:
        """Conventional fallback: ~/.m2/repository"""
        return self.user_home / ".m2" / "repository"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ToolsConfig":
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read (default: os.environ)

        Returns:
            ToolsConfig using HOME, MAVEN_HOME and MAVEN_LOCAL_REPO when set
        """
        environ = os.environ if environ is None else environ
        values: dict[str, object] = {}
        if environ.get(ENV_USER_HOME):
            values["user_home"] = Path(environ[ENV_USER_HOME])
        if environ.get(ENV_MAVEN_HOME):
            values["maven_home"] = Path(environ[ENV_MAVEN_HOME])
        if environ.get(ENV_LOCAL_REPO):
            values["local_repository"] = Path(environ[ENV_LOCAL_REPO])
        return cls(**values)

    @classmethod
    def from_yaml(
        cls, config_file: Path, environ: Optional[Mapping[str, str]] = None
    ) -> "ToolsConfig":
        """
        Load configuration from a YAML file, falling back to the environment.

        Args:
            config_file: YAML mapping using the field names as keys
            environ: Mapping used for keys absent from the file

        Returns:
            ToolsConfig instance

        Raises:
            OSError: If the file cannot be read
            yaml.YAMLError: If the YAML is malformed
            pydantic.ValidationError: If a value is invalid
        """
        data = yaml.safe_load(Path(config_file).read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {config_file}")
        base = cls.from_env(environ).model_dump(exclude_none=True)
        base.update({k: v for k, v in data.items() if v is not None})
        return cls(**base)
