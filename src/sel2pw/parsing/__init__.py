"""Text-pattern extraction for Java sources and Gradle build files."""

from .fragment import ExtractionResult, FragmentKind, ParsedFragment
from .gradle import GradleBuildReader, GradleDependency, GradleProject, parse_gradle
from .java_extractor import (
    EXTRACTION_RULES,
    LOCATOR_KINDS,
    ExtractionRule,
    JavaExtractor,
    extract,
    find_block_end,
)

__all__ = [
    # Fragment types
    "ExtractionResult",
    "FragmentKind",
    "ParsedFragment",
    # Java extraction
    "EXTRACTION_RULES",
    "LOCATOR_KINDS",
    "ExtractionRule",
    "JavaExtractor",
    "extract",
    "find_block_end",
    # Gradle
    "GradleBuildReader",
    "GradleDependency",
    "GradleProject",
    "parse_gradle",
]
