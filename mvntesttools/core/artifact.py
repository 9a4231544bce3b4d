"""Artifact and project models."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .pom import read_pom


class Artifact(BaseModel):
    """A built output identified by Maven coordinates."""

    group_id: str = Field(..., description="groupId")
    artifact_id: str = Field(..., description="artifactId")
    version: str = Field(..., description="version")
    type: str = Field(default="jar", description="Packaging kind / artifact type")
    classifier: Optional[str] = Field(None, description="Optional classifier")
    file: Optional[Path] = Field(None, description="Location once built")
    pom_file: Optional[Path] = Field(
        None, description="Project POM installed alongside the artifact"
    )

    @property
    def id(self) -> str:
        """Coordinate string: group:artifact:type[:classifier]:version."""
        parts = [self.group_id, self.artifact_id, self.type]
        if self.classifier:
            parts.append(self.classifier)
        parts.append(self.version)
        return ":".join(parts)

    def __str__(self) -> str:
        return self.id


def create_project_artifact(
    group_id: str, artifact_id: str, version: str, pom_file: Optional[Path] = None
) -> Artifact:
    """Create the POM artifact for a project, optionally bound to its file."""
    return Artifact(
        group_id=group_id,
        artifact_id=artifact_id,
        version=version,
        type="pom",
        file=pom_file,
        pom_file=pom_file,
    )


class MavenProject(BaseModel):
    """A built project: its main artifact, packaging and POM location."""

    artifact: Artifact
    packaging: str = Field(default="jar", description="Project packaging")
    file: Path = Field(..., description="Project POM file")

    @classmethod
    def from_pom(
        cls, pom_file: Path, artifact_file: Optional[Path] = None
    ) -> "MavenProject":
        """
        Build a project model from its POM.

        Args:
            pom_file: The project's POM
            artifact_file: Built main artifact (ignored for "pom" packaging)

        Returns:
            MavenProject whose artifact carries the POM as project metadata

        Raises:
            OSError: If the POM cannot be read
            xml.etree.ElementTree.ParseError: If the POM is malformed
            ValueError: If groupId/version cannot be determined
        """
        pom_file = Path(pom_file)
        model = read_pom(pom_file)

        group_id = model.effective_group_id
        version = model.effective_version
        if not group_id or not version:
            raise ValueError(
                f"Cannot determine groupId/version for {model.artifact_id} "
                f"from {pom_file}"
            )

        artifact = Artifact(
            group_id=group_id,
            artifact_id=model.artifact_id,
            version=version,
            type=model.packaging,
            file=Path(artifact_file) if artifact_file else None,
            pom_file=pom_file,
        )
        return cls(artifact=artifact, packaging=model.packaging, file=pom_file)
