"""Pytest configuration and shared fixtures for mvntesttools tests."""

import pytest
from pom_helpers import write_pom

from mvntesttools.core.config import ToolsConfig


@pytest.fixture
def pom_chain(tmp_path):
    """
    Create a three-level project tree linked by relative paths.

    Layout::

        root/pom.xml                      org.example:root:1.0 (pom)
        root/parent/pom.xml               org.example:parent:1.0 -> ../pom.xml
        root/parent/plugin/pom.xml        inherits group/version -> ../pom.xml
        root/parent/plugin/target/plugin-1.0.jar
    """
    root = tmp_path / "root"
    write_pom(root / "pom.xml", "root", packaging="pom")
    write_pom(
        root / "parent" / "pom.xml",
        "parent",
        packaging="pom",
        parent={"group_id": "org.example", "artifact_id": "root", "version": "1.0"},
    )
    plugin_pom = write_pom(
        root / "parent" / "plugin" / "pom.xml",
        "plugin",
        group_id=None,
        version=None,
        packaging="maven-plugin",
        parent={
            "group_id": "org.example",
            "artifact_id": "parent",
            "version": "1.0",
            "relative_path": "../pom.xml",
        },
    )
    jar = plugin_pom.parent / "target" / "plugin-1.0.jar"
    jar.parent.mkdir()
    jar.write_bytes(b"PK\x03\x04fake-jar")

    return {"root": root, "plugin_pom": plugin_pom, "jar": jar}


@pytest.fixture
def tools_config(tmp_path):
    """ToolsConfig isolated from the real home directory and environment."""
    home = tmp_path / "home"
    home.mkdir()
    return ToolsConfig(user_home=home)
