"""Repository layout strategies mapping coordinates to relative paths."""

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .artifact import Artifact

# Artifact handlers: type -> (extension, implied classifier)
ARTIFACT_HANDLERS: dict[str, tuple[str, Optional[str]]] = {
    "pom": ("pom", None),
    "jar": ("jar", None),
    "maven-plugin": ("jar", None),
    "ejb": ("jar", None),
    "ejb-client": ("jar", "client"),
    "test-jar": ("jar", "tests"),
    "java-source": ("jar", "sources"),
    "javadoc": ("jar", "javadoc"),
    "war": ("war", None),
    "ear": ("ear", None),
    "rar": ("rar", None),
}

LOCAL_METADATA_FILENAME = "maven-metadata-local.xml"


def extension_for(artifact_type: str) -> str:
    """File extension used for an artifact type (unknown types map to themselves)."""
    return ARTIFACT_HANDLERS.get(artifact_type, (artifact_type, None))[0]


def classifier_for(artifact_type: str, classifier: Optional[str]) -> Optional[str]:
    """Explicit classifier, or the one implied by the artifact type."""
    if classifier:
        return classifier
    return ARTIFACT_HANDLERS.get(artifact_type, (artifact_type, None))[1]


class RepositoryLayout(str, Enum):
    """Layout strategy for a local repository directory."""

    DEFAULT = "default"
    LEGACY = "legacy"

    def path_of(self, artifact: "Artifact") -> str:
        """
        Compute the repository-relative path of an artifact file.

        Args:
            artifact: Artifact whose coordinates determine the location

        Returns:
            Relative path using "/" separators

        Examples:
            default: org/example/demo/1.0/demo-1.0.jar
            legacy:  org.example/jars/demo-1.0.jar
        """
        extension = extension_for(artifact.type)
        classifier = classifier_for(artifact.type, artifact.classifier)

        filename = f"{artifact.artifact_id}-{artifact.version}"
        if classifier:
            filename += f"-{classifier}"
        filename += f".{extension}"

        if self is RepositoryLayout.LEGACY:
            return f"{artifact.group_id}/{artifact.type}s/{filename}"

        group_path = artifact.group_id.replace(".", "/")
        return f"{group_path}/{artifact.artifact_id}/{artifact.version}/{filename}"

    def path_of_local_metadata(self, artifact: "Artifact") -> Optional[str]:
        """
        Path of the artifact-level local metadata file.

        The legacy layout keeps no repository metadata, so None is returned.
        """
        if self is RepositoryLayout.LEGACY:
            return None
        group_path = artifact.group_id.replace(".", "/")
        return f"{group_path}/{artifact.artifact_id}/{LOCAL_METADATA_FILENAME}"
