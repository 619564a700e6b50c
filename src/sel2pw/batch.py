"""Whole-project conversion driven by the analyzer's class roles."""

import logging
import re
from enum import Enum

from .analyzer import JavaClassRecord, ProjectStructure
from .config import ConverterSettings
from .converter import PlaywrightConverter, method_statements
from .errors import ClassConversionError
from .models import (
    BatchConversionResult,
    ConversionComment,
    ConversionFailure,
    ConversionOutput,
    ConversionSummary,
    GeneratedFile,
)
from .parsing import ExtractionResult, ParsedFragment, extract
from .rewriter import RewriteContext, convert_locator, rewrite_expression, rewrite_line
from .scaffold import config_files
from .utils import java_params_to_ts, java_to_ts_path, java_type_to_ts, relative_import_path

logger = logging.getLogger(__name__)

_ANNOTATION = r'@\w+(?:\s*\((?:[^()"]|"(?:[^"\\]|\\.)*"|\([^()]*\))*\))?'
_FIELD_RE = re.compile(
    r"^[ \t]*(?P<annotations>(?:" + _ANNOTATION + r"\s*)*)"
    r"(?:(?:private|protected|public|static|final)\s+)*"
    r"(?P<type>WebElement|By)\s+(?P<name>\w+)\s*(?:=\s*(?P<init>[^;]+))?;",
    re.MULTILINE,
)
_LOCATOR_INIT_RE = re.compile(
    r'(?:findElement\(\s*)?By\.(?P<kind>\w+)\s*\(\s*"(?P<value>(?:[^"\\]|\\.)*)"\s*\)'
)
_FIND_BY_RE = re.compile(
    r'@FindBy\s*\(\s*(?P<kind>\w+)\s*=\s*"(?P<value>(?:[^"\\]|\\.)*)"\s*\)'
)
_FIND_BY_HOW_RE = re.compile(
    r'@FindBy\s*\(\s*how\s*=\s*How\.(?P<how>\w+)\s*,\s*using\s*=\s*"(?P<value>(?:[^"\\]|\\.)*)"\s*\)'
)

# @FindBy attribute names and How constants -> By locator kinds
_FIND_BY_KINDS = {
    "id": "id",
    "name": "name",
    "xpath": "xpath",
    "css": "cssSelector",
    "className": "className",
    "tagName": "tagName",
    "linkText": "linkText",
    "partialLinkText": "partialLinkText",
}
_HOW_KINDS = {
    "ID": "id",
    "NAME": "name",
    "XPATH": "xpath",
    "CSS": "cssSelector",
    "CLASS_NAME": "className",
    "TAG_NAME": "tagName",
    "LINK_TEXT": "linkText",
    "PARTIAL_LINK_TEXT": "partialLinkText",
}

_IF_RE = re.compile(r"^(?P<kw>if|while)\s*\((?P<cond>.*)\)\s*\{$")
_ELSE_IF_RE = re.compile(r"^\}?\s*else\s+if\s*\((?P<cond>.*)\)\s*\{$")
_ELSE_RE = re.compile(r"^\}?\s*else\s*\{$")
_FOR_EACH_RE = re.compile(
    r"^for\s*\(\s*(?:final\s+)?[\w.<>\[\]]+\s+(?P<var>\w+)\s*:\s*(?P<items>.+)\)\s*\{$"
)
_TRY_RE = re.compile(r"^try\s*\{$")
_CATCH_RE = re.compile(r"^\}?\s*catch\s*\(\s*[\w.|\s]+?\s+(?P<var>\w+)\s*\)\s*\{$")
_FINALLY_RE = re.compile(r"^\}?\s*finally\s*\{$")
_RETURN_RE = re.compile(r"^return(?:\s+(?P<expr>.+?))?\s*;$")


def _assigned_locator(name: str, content: str) -> tuple[str, str] | None:
    """Find a later `name = ...By.kind("value")...;` assignment, e.g. in a constructor."""
    pattern = re.compile(
        r"(?<![\w.])(?:this\.)?" + re.escape(name) + r"\s*=\s*[^;=]*?" + _LOCATOR_INIT_RE.pattern
    )
    match = pattern.search(content)
    if match:
        return match.group("kind"), match.group("value")
    return None


PAGE_OBJECT_NOTE = "Converted from Selenium Page Object to Playwright Page Object pattern"
UTILITY_NOTE = "Converted from Java utility class to TypeScript utility"


class Strategy(str, Enum):
    """How a class is converted in a batch run."""

    TEST = "test"
    PAGE_OBJECT = "page-object"
    UTILITY = "utility"


def select_strategy(record: JavaClassRecord) -> Strategy | None:
    """
    Pick the single strategy for a class, or None to skip it.

    Precedence: declared @Test methods, then page object, then utility,
    then a test by name or path.
    """
    extraction = record.extraction or extract(record.content)
    if extraction.test_methods:
        return Strategy.TEST
    if record.is_page_object_class:
        return Strategy.PAGE_OBJECT
    if record.is_utility_class:
        return Strategy.UTILITY
    if record.is_test_class:
        return Strategy.TEST
    return None


def _pad(depth: int, indent: int) -> str:
    return " " * (depth * indent)


def rewrite_member_body(
    method: ParsedFragment, context: RewriteContext, indent: int
) -> tuple[list[str], list[ConversionComment]]:
    """
    Rewrite a page-object or utility method body, keeping its block structure.

    ``if``/``else``, ``while``, for-each, ``try``/``catch``/``finally`` and
    ``return`` are translated directly. Other statements go through the
    statement rewriter. Returned lines are indented relative to the body.
    """
    lines: list[str] = []
    comments: list[ConversionComment] = []
    depth = 0

    for line_number, statement in method_statements(method, keep_braces=True):
        if statement.startswith("}"):
            depth = max(depth - 1, 0)
        if statement in ("}", "};"):
            lines.append(_pad(depth, indent) + "}")
            continue

        code = _control_statement(statement, context)
        if code is None:
            result = rewrite_line(statement, line_number, context)
            comments.extend(result.comments)
            code = result.code
            if result.binding:
                context = context.with_locator(result.binding, result.binding)
            if result.category == "fallback" and statement.endswith("{"):
                # Keep braces balanced around an unconverted block opener
                code = f"{code}\n{{"

        for part in code.split("\n"):
            lines.append(_pad(depth, indent) + part)
        if statement.endswith("{"):
            depth += 1
    return lines, comments


def _control_statement(statement: str, context: RewriteContext) -> str | None:
    """Translate a control-flow statement, or None if ``statement`` is not one."""
    if statement == "{":
        return "{"
    prefix = "} " if statement.startswith("}") else ""

    match = _ELSE_IF_RE.match(statement)
    if match:
        return f"{prefix}else if ({rewrite_expression(match.group('cond'), context)}) {{"
    if _ELSE_RE.match(statement):
        return f"{prefix}else {{"
    match = _CATCH_RE.match(statement)
    if match:
        return f"{prefix}catch ({match.group('var')}) {{"
    if _FINALLY_RE.match(statement):
        return f"{prefix}finally {{"
    if _TRY_RE.match(statement):
        return "try {"
    match = _IF_RE.match(statement)
    if match:
        return f"{match.group('kw')} ({rewrite_expression(match.group('cond'), context)}) {{"
    match = _FOR_EACH_RE.match(statement)
    if match:
        items = rewrite_expression(match.group("items"), context)
        return f"for (const {match.group('var')} of {items}) {{"

    match = _RETURN_RE.match(statement)
    if match:
        result = rewrite_line(statement, 0, context)
        if result.category != "fallback":
            return None
        if match.group("expr") is None:
            return "return;"
        return f"return {rewrite_expression(match.group('expr'), context)};"
    return None


class BatchConverter:
    """Converts every class of an analyzed project.

    Each class is converted by exactly one strategy (see ``select_strategy``)
    or skipped, so the summary always satisfies
    ``total == converted + skipped + errors``. A class that fails is
    recorded and the rest of the run continues.
    """

    def __init__(self, structure: ProjectStructure, settings: ConverterSettings | None = None):
        self.structure = structure
        self.settings = settings or ConverterSettings()

    def convert(self) -> BatchConversionResult:
        outputs: list[ConversionOutput] = []
        failures: list[ConversionFailure] = []
        skipped = 0

        for record in self.structure.classes:
            strategy = select_strategy(record)
            if strategy is None:
                logger.debug("Skipping %s: no convertible role", record.file_path)
                skipped += 1
                continue
            try:
                outputs.append(self._convert_class(record, strategy))
            except Exception as e:
                error = ClassConversionError(record.file_path, str(e))
                logger.warning("%s", error)
                failures.append(ConversionFailure(file_path=record.file_path, error=str(e)))

        resources = [
            GeneratedFile(
                file_path=java_to_ts_path(f.path, self.settings.output_root),
                content=f.content,
            )
            for f in self.structure.resource_files
        ]
        summary = ConversionSummary(
            total_files=len(self.structure.classes),
            converted_files=len(outputs),
            skipped_files=skipped,
            errors=len(failures),
        )
        logger.debug(
            "Batch conversion: %d converted, %d skipped, %d errors",
            summary.converted_files,
            summary.skipped_files,
            summary.errors,
        )
        return BatchConversionResult(
            outputs=outputs,
            config_files=config_files(),
            resource_files=resources,
            summary=summary,
            failures=failures,
        )

    def output_path(self, record: JavaClassRecord, strategy: Strategy) -> str:
        suffix = self.settings.test_suffix if strategy is Strategy.TEST else ".ts"
        return java_to_ts_path(record.file_path, self.settings.output_root, suffix)

    def _convert_class(self, record: JavaClassRecord, strategy: Strategy) -> ConversionOutput:
        extraction = record.extraction or extract(record.content)
        if strategy is Strategy.TEST:
            code, comments = self._convert_test(record, extraction)
        elif strategy is Strategy.PAGE_OBJECT:
            code, comments = self._convert_page_object(record, extraction)
        else:
            code, comments = self._convert_utility(record, extraction)
        return ConversionOutput(
            file_path=self.output_path(record, strategy),
            original_code=record.content,
            converted_code=code,
            comments=comments,
        )

    # -------------------------------------------------------------------------
    # Test classes
    # -------------------------------------------------------------------------

    def _convert_test(
        self, record: JavaClassRecord, extraction: ExtractionResult
    ) -> tuple[str, list[ConversionComment]]:
        result = PlaywrightConverter(extraction, self.settings).convert()
        imports = self._dependency_imports(record, self.output_path(record, Strategy.TEST))
        code = result.code
        if imports:
            code = "\n".join(imports) + "\n" + code
        return code, result.comments

    def _dependency_imports(self, record: JavaClassRecord, from_path: str) -> list[str]:
        """Imports for the page objects first, then the utilities, ``record`` depends on."""
        page_objects: list[str] = []
        utilities: list[str] = []
        for qualified_name in record.dependencies:
            dependency = self.structure.find_by_qualified_name(qualified_name)
            if dependency is None:
                continue
            strategy = select_strategy(dependency)
            if strategy not in (Strategy.PAGE_OBJECT, Strategy.UTILITY):
                continue
            name = dependency.class_name
            target = relative_import_path(from_path, self.output_path(dependency, strategy))
            if strategy is Strategy.PAGE_OBJECT:
                page_objects.append(f"import {{ {name} }} from '{target}';")
            else:
                utilities.append(f"import * as {name} from '{target}';")
        return page_objects + utilities

    # -------------------------------------------------------------------------
    # Page objects
    # -------------------------------------------------------------------------

    def _convert_page_object(
        self, record: JavaClassRecord, extraction: ExtractionResult
    ) -> tuple[str, list[ConversionComment]]:
        step = self.settings.indent
        comments = [ConversionComment(1, PAGE_OBJECT_NOTE, "info")]
        fields = self._locator_fields(record, extraction, comments)

        parent = None
        if record.parent_class:
            candidate = self.structure.resolve_class(record.parent_class, record)
            if candidate is not None and select_strategy(candidate) is Strategy.PAGE_OBJECT:
                parent = candidate

        context = RewriteContext(
            page="this.page", locators={name: f"this.{name}" for name, _ in fields}
        )
        methods: list[str] = []
        for method in extraction.methods:
            if not method["is_public"] or method["is_static"] or method["is_constructor"]:
                continue
            body, body_comments = rewrite_member_body(method, context, step)
            comments.extend(body_comments)
            params = java_params_to_ts(method["parameters"])
            returns = java_type_to_ts(method["return_type"])
            methods.append("")
            methods.append(
                _pad(1, step) + f"async {method['method_name']}({params}): Promise<{returns}> {{"
            )
            methods.extend(_pad(2, step) + line for line in body)
            methods.append(_pad(1, step) + "}")

        lines = [self._playwright_import(["Page", "Locator"], methods)]
        if parent is not None:
            target = relative_import_path(
                self.output_path(record, Strategy.PAGE_OBJECT),
                self.output_path(parent, Strategy.PAGE_OBJECT),
            )
            lines.append(f"import {{ {parent.class_name} }} from '{target}';")
        lines.extend(["", "/**", f" * Page object for {record.class_name}", " */"])

        extends = f" extends {parent.class_name}" if parent is not None else ""
        lines.append(f"export class {record.class_name}{extends} {{")
        if parent is None:
            lines.append(_pad(1, step) + "readonly page: Page;")
        lines.extend(_pad(1, step) + f"readonly {name}: Locator;" for name, _ in fields)
        lines.append("")
        lines.append(_pad(1, step) + "constructor(page: Page) {")
        lines.append(_pad(2, step) + ("super(page);" if parent is not None else "this.page = page;"))
        lines.extend(_pad(2, step) + f"this.{name} = {locator};" for name, locator in fields)
        lines.append(_pad(1, step) + "}")
        lines.extend(methods)
        lines.append("}")
        return "\n".join(lines) + "\n", comments

    def _locator_fields(
        self,
        record: JavaClassRecord,
        extraction: ExtractionResult,
        comments: list[ConversionComment],
    ) -> list[tuple[str, str]]:
        """``(field name, locator expression)`` for each class-level WebElement/By field."""
        class_text = record.content
        for method in extraction.methods:
            class_text = class_text.replace(method["content"], "")

        fields: list[tuple[str, str]] = []
        for match in _FIELD_RE.finditer(class_text):
            name = match.group("name")
            kind_value = self._field_locator(
                match.group("annotations"), match.group("init")
            ) or _assigned_locator(name, record.content)
            if kind_value is not None:
                locator = convert_locator(*kind_value)
                if not locator.known:
                    comments.append(
                        ConversionComment(0, f"Unknown locator type for {name}: {kind_value[0]}", "warning")
                    )
                fields.append((name, locator.expression))
                continue
            fields.append((name, f"page.locator('/* TODO: Add locator for {name} */')"))
            comments.append(
                ConversionComment(0, f"Could not find a locator for {name}", "warning")
            )
        return fields

    @staticmethod
    def _field_locator(annotations: str, init: str | None) -> tuple[str, str] | None:
        if init:
            match = _LOCATOR_INIT_RE.search(init)
            if match:
                return match.group("kind"), match.group("value")
        match = _FIND_BY_RE.search(annotations)
        if match:
            kind = match.group("kind")
            return _FIND_BY_KINDS.get(kind, kind), match.group("value")
        match = _FIND_BY_HOW_RE.search(annotations)
        if match:
            how = match.group("how")
            return _HOW_KINDS.get(how, how), match.group("value")
        return None

    # -------------------------------------------------------------------------
    # Utility classes
    # -------------------------------------------------------------------------

    def _convert_utility(
        self, record: JavaClassRecord, extraction: ExtractionResult
    ) -> tuple[str, list[ConversionComment]]:
        step = self.settings.indent
        comments = [ConversionComment(1, UTILITY_NOTE, "info")]
        context = RewriteContext(page="page")

        functions: list[str] = []
        for method in extraction.methods:
            if not (method["is_public"] and method["is_static"]):
                continue
            body, body_comments = rewrite_member_body(method, context, step)
            comments.extend(body_comments)
            params = java_params_to_ts(method["parameters"])
            returns = java_type_to_ts(method["return_type"])
            functions.append("")
            functions.append(
                f"export async function {method['method_name']}({params}): Promise<{returns}> {{"
            )
            functions.extend(_pad(1, step) + line for line in body)
            functions.append("}")

        lines = [
            "/**",
            f" * Utility functions converted from {record.class_name}",
            " */",
            "",
            self._playwright_import(["Page"], functions),
        ]
        lines.extend(functions)
        return "\n".join(lines) + "\n", comments

    @staticmethod
    def _playwright_import(names: list[str], body: list[str]) -> str:
        text = "\n".join(body)
        imported = list(names)
        if "Locator" not in imported and "Locator" in text:
            imported.append("Locator")
        if "expect(" in text:
            imported.append("expect")
        return f"import {{ {', '.join(imported)} }} from '@playwright/test';"
