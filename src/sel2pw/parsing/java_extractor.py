"""Selenium fragment extraction from Java source using text patterns."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable

from ..utils import line_number_at
from .fragment import ExtractionResult, FragmentKind, ParsedFragment

logger = logging.getLogger(__name__)

SELENIUM_IMPORT_MARKERS = ("org.openqa.selenium", "junit", "testng")

LOCATOR_KINDS = (
    "id",
    "name",
    "xpath",
    "cssSelector",
    "className",
    "tagName",
    "linkText",
    "partialLinkText",
)

# Words that can sit where a method signature's return type or name would,
# but never start a method declaration.
_NON_METHOD_WORDS = frozenset(
    {
        "if", "for", "while", "switch", "catch", "synchronized", "return",
        "new", "else", "try", "do", "throw", "super", "this", "case",
    }
)
_MODIFIER_WORDS = frozenset(
    {
        "public", "private", "protected", "static", "final",
        "synchronized", "abstract", "native", "default",
    }
)

_IMPORT_RE = re.compile(r"^[ \t]*import\s+(static\s+)?([\w.]+(?:\.\*)?)\s*;", re.MULTILINE)

_CLASS_RE = re.compile(
    r"\bpublic\s+(?:(?:abstract|final)\s+)*class\s+(\w+)(?:\s*<[^>{]*>)?"
    r"(?:\s+extends\s+([\w.]+)(?:\s*<[^>{]*>)?)?"
    r"(?:\s+implements\s+([\w.,\s<>]+?))?\s*\{"
)

_METHOD_RE = re.compile(
    r"(?P<annotations>(?:@\w+(?:\s*\([^)]*\))?\s+)*)"
    r"(?P<modifiers>(?:(?:public|private|protected|static|final|synchronized|abstract|native|default)\s+)*)"
    r"(?:<[^>{}();]+>\s+)?"
    r"(?P<return_type>[\w.$]+(?:\s*<[^(){};=]*>)?(?:\s*\[\s*\])*)\s+"
    r"(?P<name>\w+)\s*\((?P<params>[^)]*)\)\s*"
    r"(?:throws\s+[\w.$]+(?:\s*,\s*[\w.$]+)*\s*)?\{"
)

_LOCATOR_RE = re.compile(
    r"(?P<receiver>(?:\w+\.)*\w+(?:\(\))?)\.findElement\(\s*By\.(?P<kind>"
    + "|".join(LOCATOR_KINDS)
    + r')\s*\(\s*"(?P<value>(?:[^"\\]|\\.)*)"\s*\)\s*\)'
)

_ASSERTION_RE = re.compile(
    r"\b(?:Assert\.)?(?P<name>assertEquals|assertNotEquals|assertTrue|assertFalse"
    r"|assertNotNull|assertNull|assertThat|Assert)\s*\((?P<args>[^;]+)\)"
)

_WAIT_RE = re.compile(
    r"(?:\bnew\s+)?\b(?P<variable>\w*[Ww]ait\w*)\b[^;\n]*?\.until\(\s*(?P<condition>[^;]+)\)"
)

_ACTION_RE = re.compile(
    r"\.click\(\)|\.sendKeys\([^)]+\)|\.clear\(\)|\.submit\(\)"
    r"|\.selectByVisibleText\([^)]+\)|\.selectByValue\([^)]+\)|\.selectByIndex\([^)]+\)"
    r"|\.moveToElement\([^)]+\)|\.dragAndDrop\([^)]+\)|\.perform\(\)"
)

_ACTION_TYPES = (
    (".click(", "click"),
    (".sendKeys(", "input"),
    (".clear(", "clear"),
    (".submit(", "submit"),
    (".selectByVisibleText(", "select"),
    (".selectByValue(", "select"),
    (".selectByIndex(", "select"),
    (".moveToElement(", "hover"),
    (".dragAndDrop(", "dragAndDrop"),
    (".perform(", "perform"),
)


@dataclass(frozen=True)
class ExtractionRule:
    """One entry of the extraction table.

    ``build`` turns a match into ``(raw_text, attributes)``. A rule with a
    custom ``scan`` does its own matching (used for brace-balanced methods).
    """

    kind: FragmentKind
    pattern: re.Pattern[str]
    build: Callable[[re.Match[str], str], tuple[str, dict[str, Any]]]
    first_only: bool = False
    scan: Callable[["ExtractionRule", str], list[ParsedFragment]] | None = None


def _build_import(match: re.Match[str], source: str) -> tuple[str, dict[str, Any]]:
    import_path = match.group(2)
    return match.group(0).strip(), {
        "import_path": import_path,
        "is_static": bool(match.group(1)),
        "is_selenium_related": any(m in import_path for m in SELENIUM_IMPORT_MARKERS),
    }


def _build_class(match: re.Match[str], source: str) -> tuple[str, dict[str, Any]]:
    interfaces: tuple[str, ...] = ()
    if match.group(3):
        raw = re.sub(r"<[^>]*>", "", match.group(3))
        interfaces = tuple(i.strip() for i in raw.split(",") if i.strip())
    return match.group(0), {
        "class_name": match.group(1),
        "parent_class": match.group(2),
        "interfaces": interfaces,
    }


def _build_locator(match: re.Match[str], source: str) -> tuple[str, dict[str, Any]]:
    return match.group(0), {
        "receiver": match.group("receiver"),
        "locator_kind": match.group("kind"),
        "locator_value": match.group("value"),
    }


def _build_assertion(match: re.Match[str], source: str) -> tuple[str, dict[str, Any]]:
    return match.group(0), {
        "assertion_type": match.group("name"),
        "arguments": match.group("args").strip(),
    }


def _build_wait(match: re.Match[str], source: str) -> tuple[str, dict[str, Any]]:
    return match.group(0), {
        "wait_variable": match.group("variable"),
        "condition": match.group("condition").strip(),
    }


def _build_action(match: re.Match[str], source: str) -> tuple[str, dict[str, Any]]:
    action_text = match.group(0)
    start = source.rfind("\n", 0, match.start()) + 1
    end = source.find(";", match.start())
    end = len(source) if end == -1 else end + 1
    action_type = "unknown"
    for marker, name in _ACTION_TYPES:
        if action_text.startswith(marker):
            action_type = name
            break
    return source[start:end].strip(), {
        "action_type": action_type,
        "action_text": action_text,
    }


def _build_method(match: re.Match[str], source: str) -> tuple[str, dict[str, Any]]:
    open_brace = match.end() - 1
    close_brace = find_block_end(source, open_brace)
    end = len(source) if close_brace == -1 else close_brace + 1
    content = source[match.start() : end]
    body_end = close_brace if close_brace != -1 else len(source)
    body = source[open_brace + 1 : body_end]

    annotations = tuple(re.findall(r"@\w+", match.group("annotations")))
    modifiers = tuple(match.group("modifiers").split())
    return_type: str | None = match.group("return_type").strip()
    is_constructor = return_type in _MODIFIER_WORDS
    if is_constructor:
        modifiers = modifiers + (return_type,)
        return_type = None

    return content, {
        "method_name": match.group("name"),
        "return_type": return_type,
        "parameters": match.group("params").strip(),
        "modifiers": modifiers,
        "annotations": annotations,
        "content": content,
        "body": body,
        "is_test_method": "@Test" in annotations,
        "is_setup_method": any(a.startswith("@Before") for a in annotations),
        "is_teardown_method": any(a.startswith("@After") for a in annotations),
        "is_constructor": is_constructor,
        "is_static": "static" in modifiers,
        "is_public": "public" in modifiers,
    }


def _scan_methods(rule: ExtractionRule, source: str) -> list[ParsedFragment]:
    """Find outer method spans; matches inside an earlier span are skipped."""
    fragments: list[ParsedFragment] = []
    covered_until = -1
    for match in rule.pattern.finditer(source):
        if match.start() < covered_until:
            continue
        if match.group("name") in _NON_METHOD_WORDS:
            continue
        if match.group("return_type").strip() in _NON_METHOD_WORDS:
            continue
        raw_text, attributes = rule.build(match, source)
        fragments.append(
            ParsedFragment(
                kind=rule.kind,
                raw_text=raw_text,
                attributes=attributes,
                source_line=line_number_at(source, match.start()),
            )
        )
        covered_until = match.start() + len(raw_text)
    return fragments


def find_block_end(source: str, open_index: int) -> int:
    """
    Return the index of the ``}`` closing the ``{`` at ``open_index``.

    Braces inside string and char literals or comments do not count.
    Returns -1 if the block never closes.
    """
    depth = 0
    i = open_index
    length = len(source)
    while i < length:
        ch = source[i]
        if ch == '"':
            i += 1
            while i < length and source[i] != '"':
                if source[i] == "\\":
                    i += 1
                i += 1
        elif ch == "'":
            char_lit = re.match(r"'(?:[^'\\]|\\.[^']*)'", source[i:])
            if char_lit:
                i += len(char_lit.group(0)) - 1
        elif source.startswith("//", i):
            newline = source.find("\n", i)
            i = length if newline == -1 else newline
            continue
        elif source.startswith("/*", i):
            close = source.find("*/", i + 2)
            i = length if close == -1 else close + 2
            continue
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


# Fixed application order; consumers rely on it for stable output.
EXTRACTION_RULES: tuple[ExtractionRule, ...] = (
    ExtractionRule(FragmentKind.IMPORT, _IMPORT_RE, _build_import),
    ExtractionRule(FragmentKind.CLASS, _CLASS_RE, _build_class, first_only=True),
    ExtractionRule(FragmentKind.METHOD, _METHOD_RE, _build_method, scan=_scan_methods),
    ExtractionRule(FragmentKind.LOCATOR, _LOCATOR_RE, _build_locator),
    ExtractionRule(FragmentKind.ASSERTION, _ASSERTION_RE, _build_assertion),
    ExtractionRule(FragmentKind.WAIT, _WAIT_RE, _build_wait),
    ExtractionRule(FragmentKind.ACTION, _ACTION_RE, _build_action),
)


class JavaExtractor:
    """Extracts Selenium-relevant fragments from Java source text.

    Supports:
    - Imports, flagged when Selenium/JUnit/TestNG related
    - The first public class signature (name, parent, interfaces)
    - Method spans with brace-balanced bodies and JUnit/TestNG role flags
    - ``findElement(By.kind("value"))`` locators
    - Assertions, explicit waits and element actions

    This is pattern matching, not parsing: nested constructs are not
    modelled and only outer method spans are captured.
    """

    def __init__(self, rules: tuple[ExtractionRule, ...] = EXTRACTION_RULES) -> None:
        self._rules = rules

    def extract(self, source: str) -> ExtractionResult:
        """Run every rule over ``source`` in table order."""
        grouped: dict[FragmentKind, list[ParsedFragment]] = {kind: [] for kind in FragmentKind}

        for rule in self._rules:
            if rule.scan is not None:
                grouped[rule.kind].extend(rule.scan(rule, source))
                continue
            for match in rule.pattern.finditer(source):
                raw_text, attributes = rule.build(match, source)
                grouped[rule.kind].append(
                    ParsedFragment(
                        kind=rule.kind,
                        raw_text=raw_text,
                        attributes=attributes,
                        source_line=line_number_at(source, match.start()),
                    )
                )
                if rule.first_only:
                    break

        classes = grouped[FragmentKind.CLASS]
        result = ExtractionResult(
            source=source,
            imports=tuple(grouped[FragmentKind.IMPORT]),
            class_signature=classes[0] if classes else None,
            methods=tuple(grouped[FragmentKind.METHOD]),
            locators=tuple(grouped[FragmentKind.LOCATOR]),
            assertions=tuple(grouped[FragmentKind.ASSERTION]),
            waits=tuple(grouped[FragmentKind.WAIT]),
            actions=tuple(grouped[FragmentKind.ACTION]),
        )
        logger.debug(
            "Extracted %d methods, %d locators, %d assertions from %s",
            len(result.methods),
            len(result.locators),
            len(result.assertions),
            result.class_name or "<no class>",
        )
        return result


def extract(source: str) -> ExtractionResult:
    """Extract fragments from ``source`` with the default rule table."""
    return JavaExtractor().extract(source)
