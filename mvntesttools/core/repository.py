"""Local repository handle and file-system artifact installer."""

import logging
import shutil
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol

from .artifact import Artifact, create_project_artifact
from .layout import RepositoryLayout

logger = logging.getLogger(__name__)


class ArtifactInstallationError(Exception):
    """Raised when an artifact cannot be installed into a repository."""


class LocalRepository:
    """
    A local repository directory plus the layout used beneath it.

    Created fresh for each test repository request.
    """

    def __init__(
        self,
        basedir: Path,
        layout: RepositoryLayout = RepositoryLayout.DEFAULT,
        repository_id: str = "local",
    ):
        """
        Initialize repository handle.

        Args:
            basedir: Root directory of the repository
            layout: Layout strategy (default: RepositoryLayout.DEFAULT)
            repository_id: Repository identifier (default: "local")
        """
        self.basedir = Path(basedir)
        self.layout = RepositoryLayout(layout)
        self.id = repository_id

    @property
    def url(self) -> str:
        """file:// URL of the repository root."""
        return self.basedir.expanduser().resolve().as_uri()

    def path_of(self, artifact: Artifact) -> str:
        """Repository-relative path of ``artifact``."""
        return self.layout.path_of(artifact)

    def file_of(self, artifact: Artifact) -> Path:
        """Absolute location of ``artifact`` inside this repository."""
        return self.basedir / self.path_of(artifact)

    def __repr__(self) -> str:
        return (
            f"LocalRepository(id={self.id!r}, basedir={str(self.basedir)!r}, "
            f"layout={self.layout.value!r})"
        )


class ArtifactInstaller(Protocol):
    """Copies a built file into a repository under its coordinates."""

    def install(
        self, source: Path, artifact: Artifact, repository: LocalRepository
    ) -> None:
        """Install ``source`` as ``artifact`` into ``repository``."""
        ...


class FileSystemInstaller:
    """
    Minimal installer for plain local repositories.

    Copies the artifact file into its layout location, copies the project
    POM next to non-POM artifacts, and records the installed version in
    maven-metadata-local.xml for the default layout. No checksums, no
    snapshot timestamping, no remote repositories.
    """

    def install(
        self, source: Path, artifact: Artifact, repository: LocalRepository
    ) -> None:
        """
        Install an artifact file.

        Args:
            source: File to install
            artifact: Coordinates to install under
            repository: Target repository

        Raises:
            ArtifactInstallationError: If the source is missing or any copy
                or metadata write fails
        """
        if source is None or not Path(source).is_file():
            raise ArtifactInstallationError(
                f"Artifact file does not exist for {artifact.id}: {source}"
            )

        try:
            destination = repository.file_of(artifact)
            self._copy(Path(source), destination)

            # Attached project metadata: the POM travels with its artifact
            if artifact.type != "pom" and artifact.pom_file is not None:
                pom_artifact = create_project_artifact(
                    artifact.group_id, artifact.artifact_id, artifact.version
                )
                self._copy(Path(artifact.pom_file), repository.file_of(pom_artifact))

            self._update_local_metadata(artifact, repository)
        except (OSError, ET.ParseError) as e:
            raise ArtifactInstallationError(
                f"Error installing {artifact.id} to {repository.basedir}: {e}"
            ) from e

        logger.info("Installed %s to %s", artifact.id, repository.basedir)

    def _copy(self, source: Path, destination: Path) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        if destination.exists() and destination.resolve() == source.resolve():
            return
        logger.debug("Copying %s -> %s", source, destination)
        shutil.copy2(source, destination)

    def _update_local_metadata(
        self, artifact: Artifact, repository: LocalRepository
    ) -> None:
        """
        Record the installed version in maven-metadata-local.xml.

        Existing versions are preserved; the file is rewritten in full.
        """
        relative = repository.layout.path_of_local_metadata(artifact)
        if relative is None:
            return

        metadata_path = repository.basedir / relative
        versions: list[str] = []
        if metadata_path.exists():
            existing = ET.parse(metadata_path).getroot()
            versions = [
                (v.text or "").strip()
                for v in existing.iterfind("versioning/versions/version")
            ]
        if artifact.version not in versions:
            versions.append(artifact.version)

        root = ET.Element("metadata")
        ET.SubElement(root, "groupId").text = artifact.group_id
        ET.SubElement(root, "artifactId").text = artifact.artifact_id
        versioning = ET.SubElement(root, "versioning")
        release = _latest_release(versions)
        if release:
            ET.SubElement(versioning, "release").text = release
        versions_element = ET.SubElement(versioning, "versions")
        for version in versions:
            ET.SubElement(versions_element, "version").text = version
        ET.SubElement(versioning, "lastUpdated").text = datetime.now(
            timezone.utc
        ).strftime("%Y%m%d%H%M%S")

        metadata_path.parent.mkdir(parents=True, exist_ok=True)
        ET.ElementTree(root).write(metadata_path, encoding="UTF-8", xml_declaration=True)


def _latest_release(versions: list[str]) -> Optional[str]:
    """Most recently installed non-SNAPSHOT version."""
    releases = [v for v in versions if not v.endswith("-SNAPSHOT")]
    return releases[-1] if releases else None
