"""Project-level analysis: class roles and inter-class dependencies."""

import asyncio
import logging
import re
from dataclasses import dataclass, field, replace
from enum import Flag, auto
from pathlib import PurePosixPath
from typing import Any, Awaitable, Callable, Iterable, Sequence

from .errors import FileReadError
from .parsing import ExtractionResult, extract
from .utils import normalize_path

logger = logging.getLogger(__name__)

BUILD_FILE_SUFFIXES = (".gradle", ".gradle.kts")
RESOURCE_SUFFIXES = (".properties", ".xml", ".json", ".yml", ".yaml", ".txt")

TEST_NAME_SUFFIXES = ("Test", "Tests", "TestCase")
UTILITY_NAME_SUFFIXES = ("Util", "Utils", "Helper", "Helpers")
PAGE_OBJECT_NAME_SUFFIXES = ("Page", "PageObject")

# Share of public methods that must be static for a utility class
UTILITY_STATIC_RATIO = 0.7

_PACKAGE_RE = re.compile(r"package\s+([^;]+);")
_PUBLIC_STATIC_METHOD_RE = re.compile(r"\bpublic\s+static\s+(?:final\s+)?[\w<>\[\]]+\s+\w+\s*\(")
_PUBLIC_METHOD_RE = re.compile(
    r"\bpublic\s+(?:static\s+)?(?:final\s+)?[\w<>\[\]]+\s+\w+\s*\("
)


class ClassRole(Flag):
    """Roles a Java class can play. A class may carry several at once."""

    NONE = 0
    TEST = auto()
    PAGE_OBJECT = auto()
    UTILITY = auto()
    BASE = auto()


ROLE_LABELS = {
    ClassRole.TEST: "test",
    ClassRole.PAGE_OBJECT: "page-object",
    ClassRole.UTILITY: "utility",
    ClassRole.BASE: "base",
}

# Roles a subclass takes over from its direct parent
INHERITED_ROLES = ClassRole.TEST | ClassRole.PAGE_OBJECT


def role_labels(roles: ClassRole) -> list[str]:
    """Return the labels of the flags set in ``roles``, in declaration order."""
    return [label for role, label in ROLE_LABELS.items() if role in roles]


@dataclass(frozen=True)
class ProjectFile:
    """A project file with decoded text content."""

    path: str
    content: str


@dataclass(frozen=True)
class JavaClassRecord:
    """One analyzed Java class.

    Records are immutable: role propagation and dependency resolution build
    new records instead of updating existing ones.
    """

    class_name: str
    package_name: str
    file_path: str
    content: str
    imports: tuple[str, ...] = ()
    roles: ClassRole = ClassRole.NONE
    dependencies: tuple[str, ...] = ()
    parent_class: str | None = None
    extraction: ExtractionResult | None = field(default=None, compare=False, repr=False)

    @property
    def qualified_name(self) -> str:
        if self.package_name:
            return f"{self.package_name}.{self.class_name}"
        return self.class_name

    @property
    def is_test_class(self) -> bool:
        return ClassRole.TEST in self.roles

    @property
    def is_page_object_class(self) -> bool:
        return ClassRole.PAGE_OBJECT in self.roles

    @property
    def is_utility_class(self) -> bool:
        return ClassRole.UTILITY in self.roles

    @property
    def is_base_class(self) -> bool:
        return ClassRole.BASE in self.roles

    def to_dict(self) -> dict[str, Any]:
        return {
            "className": self.class_name,
            "packageName": self.package_name,
            "qualifiedName": self.qualified_name,
            "filePath": self.file_path,
            "roles": role_labels(self.roles),
            "parentClass": self.parent_class,
            "imports": list(self.imports),
            "dependencies": list(self.dependencies),
        }


@dataclass
class ProjectStructure:
    """Everything the analyzer learned about a project."""

    classes: list[JavaClassRecord] = field(default_factory=list)
    build_files: list[ProjectFile] = field(default_factory=list)
    resource_files: list[ProjectFile] = field(default_factory=list)
    read_errors: list[FileReadError] = field(default_factory=list)

    @property
    def test_classes(self) -> list[JavaClassRecord]:
        return [c for c in self.classes if c.is_test_class]

    @property
    def page_objects(self) -> list[JavaClassRecord]:
        return [c for c in self.classes if c.is_page_object_class]

    @property
    def utilities(self) -> list[JavaClassRecord]:
        return [c for c in self.classes if c.is_utility_class]

    @property
    def base_classes(self) -> list[JavaClassRecord]:
        return [c for c in self.classes if c.is_base_class]

    @property
    def package_structure(self) -> dict[str, list[str]]:
        """Package name -> class names. The default package is keyed by ``""``."""
        packages: dict[str, list[str]] = {}
        for record in self.classes:
            packages.setdefault(record.package_name, []).append(record.class_name)
        return packages

    @property
    def dependency_graph(self) -> dict[str, list[str]]:
        """Qualified class name -> qualified names it depends on. May contain cycles."""
        return {record.qualified_name: list(record.dependencies) for record in self.classes}

    def find_class(self, class_name: str) -> JavaClassRecord | None:
        """Return the first class (in path order) with this simple name."""
        for record in self.classes:
            if record.class_name == class_name:
                return record
        return None

    def find_by_qualified_name(self, qualified_name: str) -> JavaClassRecord | None:
        for record in self.classes:
            if record.qualified_name == qualified_name:
                return record
        return None

    def resolve_class(self, name: str, referrer: JavaClassRecord) -> JavaClassRecord | None:
        """Return the project class ``referrer`` means when it writes ``name``."""
        candidates = [c for c in self.classes if c.class_name == name.rsplit(".", 1)[-1]]
        return pick_referenced_class(referrer, candidates)

    def to_dict(self) -> dict[str, Any]:
        return {
            "classes": [c.to_dict() for c in self.classes],
            "buildFiles": [f.path for f in self.build_files],
            "resourceFiles": [f.path for f in self.resource_files],
            "packageStructure": self.package_structure,
            "dependencyGraph": self.dependency_graph,
            "readErrors": [{"filePath": e.path, "error": str(e)} for e in self.read_errors],
        }


def pick_referenced_class(
    referrer: JavaClassRecord, candidates: Sequence[JavaClassRecord]
) -> JavaClassRecord | None:
    """
    Choose which of the same-named ``candidates`` a reference in ``referrer`` means.

    An explicit import or fully qualified mention wins, then a class in the
    same package, then a wildcard-imported one, then the first in path order.
    """
    candidates = [c for c in candidates if c.qualified_name != referrer.qualified_name]
    if len(candidates) <= 1:
        return candidates[0] if candidates else None

    for candidate in candidates:
        if not candidate.package_name:
            continue
        mention = r"(?<![\w.])" + re.escape(candidate.qualified_name) + r"\b"
        if candidate.qualified_name in referrer.imports or re.search(mention, referrer.content):
            return candidate
    for candidate in candidates:
        if candidate.package_name == referrer.package_name:
            return candidate
    for candidate in candidates:
        if f"{candidate.package_name}.*" in referrer.imports:
            return candidate
    return candidates[0]


def is_build_file(path: str) -> bool:
    return path.endswith(BUILD_FILE_SUFFIXES)


def is_resource_file(path: str) -> bool:
    """Resource files live under ``/resources/`` or have a config/data extension."""
    path = "/" + normalize_path(path)
    if path.endswith(".java") or is_build_file(path):
        return False
    return "/resources/" in path or path.endswith(RESOURCE_SUFFIXES)


def looks_like_test(class_name: str, path: str, content: str) -> bool:
    path = "/" + normalize_path(path)
    return (
        class_name.endswith(TEST_NAME_SUFFIXES)
        or "@Test" in content
        or "extends TestCase" in content
        or "/test/" in path
        or "/tests/" in path
    )


def looks_like_utility(class_name: str, content: str) -> bool:
    if class_name.endswith(UTILITY_NAME_SUFFIXES):
        return True
    public_methods = len(_PUBLIC_METHOD_RE.findall(content))
    if public_methods == 0:
        return False
    static_methods = len(_PUBLIC_STATIC_METHOD_RE.findall(content))
    return static_methods / public_methods > UTILITY_STATIC_RATIO


def looks_like_page_object(class_name: str, content: str) -> bool:
    return (
        class_name.endswith(PAGE_OBJECT_NAME_SUFFIXES)
        or ("WebElement" in content and "findElement" in content)
        or "PageFactory.initElements" in content
    )


class ProjectAnalyzer:
    """Classifies the classes of a Selenium project and links them together.

    Analysis runs in three steps over path-sorted files:
    1. Build one record per ``.java`` file with name-, content- and
       path-based roles.
    2. Propagate roles along ``extends`` into a new record set: a subclass
       takes the TEST and PAGE_OBJECT flags of its direct parent, and every
       parent that is extended gets BASE. This is one pass in path order, so
       a chain propagates fully only when each parent sorts before its
       subclass; otherwise the parent's step-1 flags are used.
    3. Resolve dependencies on other project classes, by qualified name.
    """

    def analyze(self, files: Iterable[ProjectFile]) -> ProjectStructure:
        ordered = sorted(files, key=lambda f: normalize_path(f.path))
        java_files = [f for f in ordered if f.path.endswith(".java")]

        records = [self._build_record(f) for f in java_files]
        records = self._propagate_roles(records)
        records = self._resolve_dependencies(records)

        structure = ProjectStructure(
            classes=records,
            build_files=[f for f in ordered if is_build_file(f.path)],
            resource_files=[f for f in ordered if is_resource_file(f.path)],
        )
        logger.debug(
            "Analyzed %d classes: %d tests, %d page objects, %d utilities, %d base classes",
            len(structure.classes),
            len(structure.test_classes),
            len(structure.page_objects),
            len(structure.utilities),
            len(structure.base_classes),
        )
        return structure

    async def analyze_paths(
        self,
        paths: Sequence[str],
        reader: Callable[[str], Awaitable[str]],
    ) -> ProjectStructure:
        """
        Read ``paths`` concurrently with ``reader`` and analyze the results.

        A failed read is recorded in ``read_errors`` and the remaining files
        are still analyzed.
        """
        results = await asyncio.gather(*(reader(p) for p in paths), return_exceptions=True)

        files: list[ProjectFile] = []
        errors: list[FileReadError] = []
        for path, result in zip(paths, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                error = (
                    result if isinstance(result, FileReadError) else FileReadError(path, str(result))
                )
                logger.warning("%s", error)
                errors.append(error)
            else:
                files.append(ProjectFile(path=path, content=result))

        structure = self.analyze(files)
        structure.read_errors.extend(errors)
        return structure

    def _build_record(self, file: ProjectFile) -> JavaClassRecord:
        extraction = extract(file.content)
        class_name = extraction.class_name or PurePosixPath(normalize_path(file.path)).stem
        package_match = _PACKAGE_RE.search(file.content)
        parent = extraction.parent_class
        if parent:
            parent = parent.rsplit(".", 1)[-1]

        roles = ClassRole.NONE
        if looks_like_test(class_name, file.path, file.content):
            roles |= ClassRole.TEST
        if looks_like_page_object(class_name, file.content):
            roles |= ClassRole.PAGE_OBJECT
        if looks_like_utility(class_name, file.content):
            roles |= ClassRole.UTILITY

        logger.debug("%s: %s", file.path, role_labels(roles) or "no role")
        return JavaClassRecord(
            class_name=class_name,
            package_name=package_match.group(1).strip() if package_match else "",
            file_path=file.path,
            content=file.content,
            imports=tuple(i["import_path"] for i in extraction.imports),
            roles=roles,
            parent_class=parent,
            extraction=extraction,
        )

    def _propagate_roles(self, records: list[JavaClassRecord]) -> list[JavaClassRecord]:
        by_name = _group_by_name(records)
        parents = [
            pick_referenced_class(r, by_name.get(r.parent_class, [])) if r.parent_class else None
            for r in records
        ]
        extended = {p.qualified_name for p in parents if p is not None}

        # A parent visited earlier contributes its propagated roles
        built: dict[str, JavaClassRecord] = {}
        propagated: list[JavaClassRecord] = []
        for record, parent in zip(records, parents):
            roles = record.roles
            if parent is not None:
                parent = built.get(parent.qualified_name, parent)
                roles |= parent.roles & INHERITED_ROLES
            if record.qualified_name in extended:
                roles |= ClassRole.BASE
            new_record = replace(record, roles=roles)
            built.setdefault(record.qualified_name, new_record)
            propagated.append(new_record)
        return propagated

    def _resolve_dependencies(self, records: list[JavaClassRecord]) -> list[JavaClassRecord]:
        by_name = _group_by_name(records)
        by_qualified_name: dict[str, JavaClassRecord] = {}
        for record in records:
            by_qualified_name.setdefault(record.qualified_name, record)
        name_patterns = {name: re.compile(r"\b" + re.escape(name) + r"\b") for name in by_name}

        resolved: list[JavaClassRecord] = []
        for record in records:
            deps: list[str] = []
            imported_names: set[str] = set()
            for import_path in record.imports:
                dependency = by_qualified_name.get(import_path)
                if dependency is None or dependency.qualified_name == record.qualified_name:
                    continue
                imported_names.add(dependency.class_name)
                if dependency.qualified_name not in deps:
                    deps.append(dependency.qualified_name)
            for name, candidates in by_name.items():
                if name == record.class_name or name in imported_names:
                    continue
                if not name_patterns[name].search(record.content):
                    continue
                dependency = pick_referenced_class(record, candidates)
                if dependency is not None and dependency.qualified_name not in deps:
                    deps.append(dependency.qualified_name)
            resolved.append(replace(record, dependencies=tuple(deps)))
        return resolved


def _group_by_name(records: Iterable[JavaClassRecord]) -> dict[str, list[JavaClassRecord]]:
    """Simple class name -> records with that name, in path order."""
    grouped: dict[str, list[JavaClassRecord]] = {}
    for record in records:
        grouped.setdefault(record.class_name, []).append(record)
    return grouped
