"""Staging plugin artifacts and their ancestor POMs into test repositories."""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from .artifact import Artifact, MavenProject, create_project_artifact
from .config import ToolsConfig
from .errors import TestToolsError
from .layout import RepositoryLayout
from .pom import read_pom
from .repository import (
    ArtifactInstallationError,
    ArtifactInstaller,
    FileSystemInstaller,
    LocalRepository,
)
from .settings import build_settings

logger = logging.getLogger(__name__)


class RepositoryTool:
    """
    Builds clean, test-scoped local repositories for plugin integration tests.

    The layout strategy is an explicit setting (ToolsConfig.layout or the
    ``layout`` argument) and artifact installation is delegated to an
    ArtifactInstaller collaborator.
    """

    def __init__(
        self,
        config: Optional[ToolsConfig] = None,
        installer: Optional[ArtifactInstaller] = None,
        layout: Optional[RepositoryLayout] = None,
    ):
        """
        Initialize repository tool.

        Args:
            config: Tool configuration (default: ToolsConfig.from_env())
            installer: Artifact installer (default: FileSystemInstaller)
            layout: Layout override (default: config.layout)
        """
        self.config = config if config is not None else ToolsConfig.from_env()
        self.installer = installer if installer is not None else FileSystemInstaller()
        self.layout = RepositoryLayout(layout or self.config.layout)

    def find_local_repository_directory(self) -> Path:
        """
        Locate the normal (non-test) local repository.

        Resolution order: configured override, <localRepository> from the
        user settings (overriding global settings), then ~/.m2/repository.

        Returns:
            Path to the normal local repository

        Raises:
            TestToolsError: If a settings file cannot be read or parsed
        """
        if self.config.local_repository is not None:
            return Path(self.config.local_repository)

        try:
            settings = build_settings(
                self.config.user_settings_file,
                self.config.global_settings_file,
                user_home=self.config.user_home,
            )
        except (OSError, ET.ParseError) as e:
            raise TestToolsError("Error building Maven settings.", e) from e

        if not settings.local_repository or not settings.local_repository.strip():
            return self.config.default_local_repository

        return Path(settings.local_repository)

    def create_local_artifact_repository(
        self, local_repository_directory: Optional[Path] = None
    ) -> LocalRepository:
        """
        Create a repository handle.

        Args:
            local_repository_directory: Test-time repository directory; the
                normal local repository is used when omitted

        Returns:
            LocalRepository using the configured layout

        Raises:
            TestToolsError: If settings resolution or URL conversion fails
        """
        if local_repository_directory is None:
            local_repository_directory = self.find_local_repository_directory()

        repository = LocalRepository(Path(local_repository_directory), self.layout)
        try:
            logger.debug("Local repository URL: %s", repository.url)
        except (OSError, ValueError, RuntimeError) as e:
            raise TestToolsError(
                "Error converting local repo directory to a URL.", e
            ) from e
        return repository

    def create_local_repository_from_component_project(
        self,
        project: MavenProject,
        real_pom_file: Path,
        target_local_repo_basedir: Path,
    ) -> list[Artifact]:
        """
        Install a plugin, its POM, and its relative-path-reachable ancestor
        POMs into a clean local repository directory.

        WARNING: parent POMs that exist only in the normal local repository,
        and cannot be reached through <relativePath>, are not installed. Test
        builds that need them will fail to resolve the plugin's ancestry.

        Args:
            project: The built plugin project
            real_pom_file: The plugin's real POM; starting point of the walk
            target_local_repo_basedir: Test repository directory

        Returns:
            Installed artifacts, leading artifact first, then ancestors
            from nearest to farthest

        Raises:
            TestToolsError: If installing the artifact or any ancestor POM
                fails, or an ancestor POM cannot be read
        """
        artifact = project.artifact
        if project.packaging == "pom":
            artifact = artifact.model_copy(update={"file": project.file})

        target_local_repo_basedir = Path(target_local_repo_basedir)
        repository = self.create_local_artifact_repository(target_local_repo_basedir)

        destination = repository.file_of(artifact)
        destination.parent.mkdir(parents=True, exist_ok=True)

        try:
            self.installer.install(artifact.file, artifact, repository)
        except ArtifactInstallationError as e:
            logger.error("Failed to install %s: %s", artifact.id, e)
            raise TestToolsError(
                "Error installing plugin artifact to target local repository: "
                f"{target_local_repo_basedir}",
                e,
            ) from e

        installed = [artifact]
        installed.extend(
            self.install_locally_reachable_ancestor_poms(Path(real_pom_file), repository)
        )

        logger.info(
            "Staged %s with %d ancestor POM(s) into %s",
            artifact.id,
            len(installed) - 1,
            target_local_repo_basedir,
        )
        return installed

    def install_locally_reachable_ancestor_poms(
        self, real_pom_file: Path, repository: LocalRepository
    ) -> list[Artifact]:
        """
        Follow <relativePath> links up the POM ancestry, installing each
        ancestor into ``repository``.

        The real POM itself is only used to find its parent; it is already
        installed together with the plugin artifact.

        Args:
            real_pom_file: The plugin's real POM
            repository: Test-time local repository

        Returns:
            Installed ancestor POM artifacts, nearest first

        Raises:
            TestToolsError: If an ancestor cannot be read or installed
        """
        installed: list[Artifact] = []
        visited: set[Path] = set()
        pom: Optional[Path] = real_pom_file
        first_pass = True

        while pom is not None:
            if not pom.is_file():
                logger.debug("Ancestor POM not found, stopping: %s", pom)
                break

            resolved = pom.resolve()
            if resolved in visited:
                logger.warning("Cyclic parent reference at %s, stopping", pom)
                break
            visited.add(resolved)

            current_pom = pom
            try:
                model = read_pom(current_pom)
            except (OSError, ET.ParseError, ValueError) as e:
                logger.error("Failed to read ancestor POM %s: %s", current_pom, e)
                raise TestToolsError(
                    f"Error reading ancestor POM: {current_pom}", e
                ) from e

            if model.parent is not None:
                pom = _resolve_parent_pom(current_pom, model.parent.relative_path)
            else:
                pom = None

            if first_pass:
                first_pass = False
                continue

            group_id = model.effective_group_id
            version = model.effective_version
            if not group_id or not version:
                raise TestToolsError(
                    f"Error reading ancestor POM: {current_pom} "
                    "(groupId/version not declared or inherited)"
                )

            pom_artifact = create_project_artifact(
                group_id, model.artifact_id, version, current_pom
            )
            try:
                self.installer.install(current_pom, pom_artifact, repository)
            except ArtifactInstallationError as e:
                logger.error("Failed to install ancestor POM %s: %s", current_pom, e)
                raise TestToolsError(
                    f"Error installing ancestor POM: {current_pom} "
                    f"to target local repository: {repository.basedir}",
                    e,
                ) from e

            logger.debug("Installed ancestor POM %s", pom_artifact.id)
            installed.append(pom_artifact)

        return installed


def _resolve_parent_pom(pom_file: Path, relative_path: str) -> Optional[Path]:
    """
    Resolve a parent <relativePath> against the child POM's directory.

    An empty relative path disables the lookup; a directory means its pom.xml.
    """
    if not relative_path.strip():
        return None
    candidate = pom_file.parent / relative_path.strip()
    if candidate.is_dir():
        candidate = candidate / "pom.xml"
    return candidate
