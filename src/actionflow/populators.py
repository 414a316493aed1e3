"""Model populators add facts about the project to the model before actions run."""

from __future__ import annotations

import getpass
import platform
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Iterable, Protocol

from .app_constants import MAVEN_MODEL
from .logging import get_logger

logger = get_logger("populators")


class ModelPopulator(Protocol):
    def contribute_to_model(self, working_directory: Path) -> dict[str, Any]: ...


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child_text(element: ET.Element, name: str) -> str | None:
    for child in element:
        if _local_name(child.tag) == name:
            return (child.text or "").strip() or None
    return None


def _child(element: ET.Element, name: str) -> ET.Element | None:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def read_maven_model(pom_path: Path) -> dict[str, Any]:
    root = ET.parse(pom_path).getroot()
    parent = _child(root, "parent")
    group_id = _child_text(root, "groupId")
    version = _child_text(root, "version")
    if parent is not None:
        group_id = group_id or _child_text(parent, "groupId")
        version = version or _child_text(parent, "version")
    dependencies = []
    deps_element = _child(root, "dependencies")
    if deps_element is not None:
        for dep in deps_element:
            if _local_name(dep.tag) != "dependency":
                continue
            dependencies.append(
                {
                    "group-id": _child_text(dep, "groupId"),
                    "artifact-id": _child_text(dep, "artifactId"),
                    "version": _child_text(dep, "version"),
                    "scope": _child_text(dep, "scope"),
                }
            )
    return {
        "group-id": group_id,
        "artifact-id": _child_text(root, "artifactId"),
        "version": version,
        "name": _child_text(root, "name"),
        "description": _child_text(root, "description"),
        "packaging": _child_text(root, "packaging") or "jar",
        "dependencies": dependencies,
    }


class MavenModelPopulator:
    def contribute_to_model(self, working_directory: Path) -> dict[str, Any]:
        pom_path = working_directory / "pom.xml"
        if not pom_path.is_file():
            return {}
        try:
            maven_model = read_maven_model(pom_path)
        except (ET.ParseError, OSError) as exc:
            logger.warning("Could not read Maven model from %s: %s", pom_path, exc)
            return {}
        additions: dict[str, Any] = {MAVEN_MODEL: maven_model}
        for key, source in (
            ("artifact-id", "artifact-id"),
            ("group-id", "group-id"),
            ("artifact-version", "version"),
            ("project-name", "name"),
            ("project-description", "description"),
        ):
            if maven_model.get(source):
                additions[key] = maven_model[source]
        return additions


class SystemModelPopulator:
    def contribute_to_model(self, working_directory: Path) -> dict[str, Any]:
        try:
            user_name = getpass.getuser()
        except (KeyError, OSError):
            user_name = ""
        return {
            "os-name": platform.system(),
            "user-name": user_name,
            "working-directory": str(working_directory),
        }


def root_package_name(maven_model: dict[str, Any]) -> str | None:
    group_id = maven_model.get("group-id")
    artifact_id = maven_model.get("artifact-id")
    if not group_id or not artifact_id:
        return None
    return f"{group_id}.{artifact_id.replace('-', '')}"


def default_model_populators() -> list[ModelPopulator]:
    return [MavenModelPopulator(), SystemModelPopulator()]


def populate_model(
    model: dict[str, Any], working_directory: Path, populators: Iterable[ModelPopulator]
) -> dict[str, Any]:
    for populator in populators:
        for key, value in populator.contribute_to_model(working_directory).items():
            model.setdefault(key, value)
    maven_model = model.get(MAVEN_MODEL)
    if isinstance(maven_model, dict):
        root_package = root_package_name(maven_model)
        if root_package:
            model.setdefault("root-package", root_package)
    return model


def dependency_artifact_ids(model: dict[str, Any]) -> set[str] | None:
    maven_model = model.get(MAVEN_MODEL)
    if not isinstance(maven_model, dict):
        return None
    return {
        str(dep["artifact-id"]).strip().lower()
        for dep in maven_model.get("dependencies", [])
        if dep.get("artifact-id")
    }
