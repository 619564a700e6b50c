"""Read project metadata from Gradle build files."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "selenium-project"
DEFAULT_SOURCE_DIR = "src/main/java"
DEFAULT_TEST_DIR = "src/test/java"

_PROJECT_NAME_RES = (
    re.compile(r"archivesBaseName\s*=\s*['\"]([^'\"]+)['\"]"),
    re.compile(r"rootProject\.name\s*=\s*['\"]([^'\"]+)['\"]"),
    re.compile(r"project\.name\s*=\s*['\"]([^'\"]+)['\"]"),
)

# configuration 'group:name:version' or configuration("group:name:version")
_COORD_DEP_RE = re.compile(
    r"(\w+)\s*\(?\s*['\"]([^:'\"\s]+):([^:'\"\s]+):([^'\"\s]+)['\"]\s*\)?"
)

# configuration group: 'g', name: 'n', version: 'v'
_MAP_DEP_RE = re.compile(
    r"(\w+)\s*\(?\s*group\s*:\s*['\"]([^'\"]+)['\"]\s*,\s*name\s*:\s*['\"]([^'\"]+)['\"]"
    r"\s*,\s*version\s*:\s*['\"]([^'\"]+)['\"]\s*\)?"
)

_PLUGIN_ID_RE = re.compile(r"id\s*\(?\s*['\"]([^'\"]+)['\"]")
_APPLY_PLUGIN_RE = re.compile(r"apply\s+plugin\s*:\s*['\"]([^'\"]+)['\"]")
_MAVEN_URL_RE = re.compile(r"maven\s*\{\s*url\s*[=(]?\s*(?:uri\s*\(\s*)?['\"]([^'\"]+)['\"]")
_SRC_DIR_RE = re.compile(r"srcDirs?\s*[=(]?\s*(\[[^\]]*\]|['\"][^'\"]+['\"])")
_QUOTED_RE = re.compile(r"['\"]([^'\"]+)['\"]")


@dataclass(frozen=True)
class GradleDependency:
    """A declared Gradle dependency."""

    group: str
    name: str
    version: str
    configuration: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "group": self.group,
            "name": self.name,
            "version": self.version,
            "configuration": self.configuration,
        }


@dataclass
class GradleProject:
    """Project metadata read from a build.gradle file."""

    project_name: str = DEFAULT_PROJECT_NAME
    source_directories: list[str] = field(default_factory=lambda: [DEFAULT_SOURCE_DIR])
    test_directories: list[str] = field(default_factory=lambda: [DEFAULT_TEST_DIR])
    dependencies: list[GradleDependency] = field(default_factory=list)
    plugins: list[str] = field(default_factory=list)
    repositories: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "projectName": self.project_name,
            "sourceDirectories": self.source_directories,
            "testDirectories": self.test_directories,
            "dependencies": [d.to_dict() for d in self.dependencies],
            "plugins": self.plugins,
            "repositories": self.repositories,
        }


def find_block(content: str, name: str, start: int = 0) -> str | None:
    """
    Return the body of the first ``name { ... }`` block at or after ``start``.

    Braces are balanced, so nested blocks stay inside the returned body.
    """
    match = re.compile(r"\b" + re.escape(name) + r"\s*\{").search(content, start)
    if not match:
        return None
    depth = 0
    for i in range(match.end() - 1, len(content)):
        if content[i] == "{":
            depth += 1
        elif content[i] == "}":
            depth -= 1
            if depth == 0:
                return content[match.end() : i]
    return content[match.end() :]


class GradleBuildReader:
    """Reads the parts of a Gradle build file relevant to a conversion."""

    def __init__(self, content: str):
        self.content = content

    def parse(self) -> GradleProject:
        project = GradleProject(
            project_name=self._project_name(),
            source_directories=self._source_set_dirs("main", DEFAULT_SOURCE_DIR),
            test_directories=self._source_set_dirs("test", DEFAULT_TEST_DIR),
            dependencies=self._dependencies(),
            plugins=self._plugins(),
            repositories=self._repositories(),
        )
        logger.debug(
            "Gradle build %s: %d dependencies, %d plugins",
            project.project_name,
            len(project.dependencies),
            len(project.plugins),
        )
        return project

    def _project_name(self) -> str:
        for line in self.content.splitlines():
            for pattern in _PROJECT_NAME_RES:
                match = pattern.search(line)
                if match:
                    return match.group(1)
        return DEFAULT_PROJECT_NAME

    def _source_set_dirs(self, source_set: str, default: str) -> list[str]:
        source_sets = find_block(self.content, "sourceSets")
        if source_sets is None:
            return [default]
        section = find_block(source_sets, source_set)
        if section is None:
            return [default]
        java = find_block(section, "java")
        if java is None:
            return [default]
        dirs: list[str] = []
        for declared in _SRC_DIR_RE.findall(java):
            dirs.extend(_QUOTED_RE.findall(declared))
        return dirs or [default]

    def _dependencies(self) -> list[GradleDependency]:
        block = find_block(self.content, "dependencies")
        if block is None:
            return []

        seen: set[GradleDependency] = set()
        deps: list[GradleDependency] = []
        for pattern in (_COORD_DEP_RE, _MAP_DEP_RE):
            for configuration, group, name, version in pattern.findall(block):
                dep = GradleDependency(
                    group=group, name=name, version=version, configuration=configuration
                )
                if dep not in seen:
                    seen.add(dep)
                    deps.append(dep)
        return deps

    def _plugins(self) -> list[str]:
        plugins: list[str] = []
        block = find_block(self.content, "plugins")
        if block is not None:
            plugins.extend(_PLUGIN_ID_RE.findall(block))
        plugins.extend(_APPLY_PLUGIN_RE.findall(self.content))
        return plugins

    def _repositories(self) -> list[str]:
        block = find_block(self.content, "repositories")
        if block is None:
            return []

        repositories: list[str] = []
        for name in ("mavenCentral", "jcenter", "google"):
            if f"{name}()" in block:
                repositories.append(name)
        repositories.extend(f"maven:{url}" for url in _MAVEN_URL_RE.findall(block))
        return repositories


def parse_gradle(content: str) -> GradleProject:
    """Parse Gradle build file text."""
    return GradleBuildReader(content).parse()
