"""Reading the <localRepository> entry from Maven settings files."""

import logging
import os
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

_PROPERTY_PATTERN = re.compile(r"\$\{([^}]+)\}")


class MavenSettings(BaseModel):
    """The subset of settings.xml used to locate the local repository."""

    local_repository: Optional[str] = Field(
        None, description="Configured local repository directory"
    )


def interpolate(value: str, user_home: Optional[Path] = None) -> str:
    """
    Expand ${user.home} and ${env.NAME} references.

    Unknown expressions are left untouched.

    Examples:
        >>> interpolate("${user.home}/repo", Path("/home/dev"))
        '/home/dev/repo'
    """
    home = str(user_home) if user_home is not None else str(Path.home())

    def replace(match: re.Match) -> str:
        expression = match.group(1)
        if expression == "user.home":
            return home
        if expression.startswith("env."):
            return os.environ.get(expression[4:], match.group(0))
        return match.group(0)

    return _PROPERTY_PATTERN.sub(replace, value)


def read_settings(
    settings_file: Path, user_home: Optional[Path] = None
) -> Optional[MavenSettings]:
    """
    Read a settings.xml file.

    Args:
        settings_file: File to read
        user_home: Value substituted for ${user.home}

    Returns:
        MavenSettings, or None if the file does not exist

    Raises:
        OSError: If the file exists but cannot be read
        xml.etree.ElementTree.ParseError: If the XML is malformed
    """
    settings_file = Path(settings_file)
    if not settings_file.is_file():
        logger.debug("No settings file at %s", settings_file)
        return None

    root = ET.fromstring(settings_file.read_bytes())
    values: dict[str, str] = {}
    for child in root:
        if not isinstance(child.tag, str):
            continue
        name = child.tag.rsplit("}", 1)[-1]
        if name == "localRepository":
            values[name] = (child.text or "").strip()

    local_repository = values.get("localRepository") or None
    if local_repository:
        local_repository = interpolate(local_repository, user_home)

    return MavenSettings(local_repository=local_repository)


def build_settings(
    user_settings_file: Optional[Path],
    global_settings_file: Optional[Path],
    user_home: Optional[Path] = None,
) -> MavenSettings:
    """
    Merge global and user settings; user values take precedence.

    Args:
        user_settings_file: Usually ~/.m2/settings.xml
        global_settings_file: Usually $MAVEN_HOME/conf/settings.xml
        user_home: Value substituted for ${user.home}

    Returns:
        Merged MavenSettings (empty when neither file exists)
    """
    merged = MavenSettings()
    for settings_file in (global_settings_file, user_settings_file):
        if settings_file is None:
            continue
        settings = read_settings(settings_file, user_home)
        if settings is None:
            continue
        if settings.local_repository:
            merged.local_repository = settings.local_repository
    return merged
