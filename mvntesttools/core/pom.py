"""POM descriptor model and reader."""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Maven's implicit parent location when <relativePath> is omitted
DEFAULT_RELATIVE_PATH = "../pom.xml"


class ParentReference(BaseModel):
    """The <parent> section of a POM."""

    group_id: Optional[str] = Field(None, description="Parent groupId")
    artifact_id: Optional[str] = Field(None, description="Parent artifactId")
    version: Optional[str] = Field(None, description="Parent version")
    relative_path: str = Field(
        default=DEFAULT_RELATIVE_PATH,
        description="Parent POM location relative to the child POM's directory",
    )


class PomModel(BaseModel):
    """Coordinates and parent link read from a POM file."""

    group_id: Optional[str] = Field(None, description="Declared groupId")
    artifact_id: str = Field(..., description="Declared artifactId")
    version: Optional[str] = Field(None, description="Declared version")
    packaging: str = Field(default="jar", description="Packaging kind")
    parent: Optional[ParentReference] = Field(None, description="Parent link")

    @property
    def effective_group_id(self) -> Optional[str]:
        """groupId, inherited from the parent reference when not declared."""
        if self.group_id is None and self.parent is not None:
            return self.parent.group_id
        return self.group_id

    @property
    def effective_version(self) -> Optional[str]:
        """version, inherited from the parent reference when not declared."""
        if self.version is None and self.parent is not None:
            return self.parent.version
        return self.version


def _local_name(tag: str) -> str:
    # "{http://maven.apache.org/POM/4.0.0}groupId" -> "groupId"
    return tag.rsplit("}", 1)[-1]


def _child_text(element: ET.Element, name: str) -> Optional[str]:
    """
    Return the stripped text of the first direct child named ``name``.

    Args:
        element: Parent XML element
        name: Local (namespace-free) tag name

    Returns:
        Child text, "" for an empty element, None when the child is absent
    """
    for child in element:
        if isinstance(child.tag, str) and _local_name(child.tag) == name:
            return (child.text or "").strip()
    return None


def _find_child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if isinstance(child.tag, str) and _local_name(child.tag) == name:
            return child
    return None


def parse_pom(xml_text: Union[str, bytes]) -> PomModel:
    """
    Parse POM XML text.

    Args:
        xml_text: Full contents of a POM file (text or raw bytes)

    Returns:
        PomModel with coordinates and optional parent reference

    Raises:
        xml.etree.ElementTree.ParseError: If the XML is malformed
        ValueError: If the document is not a <project> or lacks an artifactId
    """
    root = ET.fromstring(xml_text)
    if _local_name(root.tag) != "project":
        raise ValueError(f"Expected <project> root element, found <{root.tag}>")

    parent = None
    parent_element = _find_child(root, "parent")
    if parent_element is not None:
        relative_path = _child_text(parent_element, "relativePath")
        parent = ParentReference(
            group_id=_child_text(parent_element, "groupId"),
            artifact_id=_child_text(parent_element, "artifactId"),
            version=_child_text(parent_element, "version"),
            relative_path=(
                DEFAULT_RELATIVE_PATH if relative_path is None else relative_path
            ),
        )

    artifact_id = _child_text(root, "artifactId")
    if not artifact_id:
        raise ValueError("POM does not declare an artifactId")

    return PomModel(
        group_id=_child_text(root, "groupId") or None,
        artifact_id=artifact_id,
        version=_child_text(root, "version") or None,
        packaging=_child_text(root, "packaging") or "jar",
        parent=parent,
    )


def read_pom(pom_file: Path) -> PomModel:
    """
    Read and parse a POM file in one pass.

    Args:
        pom_file: Path to the POM

    Returns:
        Parsed PomModel

    Raises:
        OSError: If the file cannot be read
        xml.etree.ElementTree.ParseError: If the XML is malformed
        ValueError: If required elements are missing
    """
    pom_file = Path(pom_file)
    logger.debug("Reading POM: %s", pom_file)
    # Bytes let the parser honour the encoding declared in the XML prolog
    return parse_pom(pom_file.read_bytes())
