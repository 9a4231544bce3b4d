"""Typer-based CLI application for mvntesttools."""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml
from pydantic import ValidationError

from mvntesttools import __version__
from mvntesttools.core.artifact import MavenProject
from mvntesttools.core.config import ToolsConfig
from mvntesttools.core.errors import TestToolsError
from mvntesttools.core.stager import RepositoryTool

app = typer.Typer(
    name="mvn-test-tools",
    help="Stage Maven plugin artifacts into isolated test repositories",
    add_completion=False,
)

logger = logging.getLogger(__name__)


def version_callback(value: bool):
    """Display version and exit."""
    if value:
        typer.echo(f"mvn-test-tools v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True),
    ] = None,
):
    """mvn-test-tools - Test-time local repositories for plugin builds.

    Installs a built plugin, its POM, and every ancestor POM reachable via
    <relativePath> into a clean local repository directory.
    """
    pass


def configure_logging(log_level: str) -> None:
    """Configure logging from a debug/info/warn/error option value.

    Raises:
        typer.Exit: If the level is not recognised
    """
    log_level_upper = log_level.upper()
    if log_level_upper not in ["DEBUG", "INFO", "WARN", "WARNING", "ERROR"]:
        typer.echo(
            f"❌ Invalid log level: {log_level}. "
            "Must be debug, info, warn, or error.",
            err=True,
        )
        raise typer.Exit(1)

    # Map WARN to WARNING for Python logging
    if log_level_upper == "WARN":
        log_level_upper = "WARNING"

    logging.basicConfig(
        level=getattr(logging, log_level_upper),
        format="%(message)s",
    )


def load_config(config_file: Optional[Path]) -> ToolsConfig:
    """Load configuration from a YAML file or the environment.

    Raises:
        typer.Exit: If the config file cannot be loaded
    """
    if config_file is None:
        return ToolsConfig.from_env()
    try:
        return ToolsConfig.from_yaml(config_file)
    except (OSError, yaml.YAMLError, ValidationError, ValueError) as e:
        typer.echo(f"❌ Cannot load config file {config_file}: {e}", err=True)
        raise typer.Exit(1) from e


ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", help="YAML configuration file"),
]

LogLevelOption = Annotated[
    str,
    typer.Option(
        help="Logging level (debug, info, warn, error)",
        case_sensitive=False,
        hidden=True,  # Hide from --help
    ),
]


@app.command()
def stage(
    pom: Annotated[Path, typer.Argument(help="The plugin project's pom.xml")],
    target: Annotated[
        Path, typer.Argument(help="Test-time local repository directory")
    ],
    artifact: Annotated[
        Optional[Path],
        typer.Option(help="Built plugin artifact (not needed for pom packaging)"),
    ] = None,
    config: ConfigOption = None,
    log_level: LogLevelOption = "warn",
):
    """Install a plugin and its reachable ancestor POMs into TARGET.

    Parent POMs that are only available from the normal local repository
    (not through <relativePath>) are not copied.
    """
    configure_logging(log_level)
    tools_config = load_config(config)

    if not pom.is_file():
        typer.echo(f"❌ POM file does not exist: {pom}", err=True)
        raise typer.Exit(1)

    try:
        project = MavenProject.from_pom(pom, artifact)
    except (OSError, ValueError, ET.ParseError) as e:
        typer.echo(f"❌ Cannot read project POM {pom}: {e}", err=True)
        raise typer.Exit(1) from e

    tool = RepositoryTool(config=tools_config)
    try:
        installed = tool.create_local_repository_from_component_project(
            project, pom, target
        )
    except TestToolsError as e:
        typer.echo(f"❌ {e}", err=True)
        logger.debug("Staging failed", exc_info=True)
        raise typer.Exit(1) from e

    typer.echo(f"✅ Staged {len(installed)} artifact(s) into {target}")
    for index, item in enumerate(installed):
        role = "artifact" if index == 0 else "ancestor"
        typer.echo(f"   • {role}: {item.id}")


@app.command("local-repo")
def local_repo(
    config: ConfigOption = None,
    log_level: LogLevelOption = "warn",
):
    """Print the location of the normal (non-test) local repository."""
    configure_logging(log_level)
    tools_config = load_config(config)

    try:
        directory = RepositoryTool(config=tools_config).find_local_repository_directory()
    except TestToolsError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1) from e

    typer.echo(str(directory))


if __name__ == "__main__":
    app()
