"""Single-file conversion of a Selenium test class into a Playwright test module."""

from enum import Enum

from .config import ConverterSettings
from .models import ConversionComment, ConversionResult
from .parsing import ExtractionResult, ParsedFragment, extract
from .rewriter import RewriteContext, rewrite_line
from .utils import indent_lines, to_ts_string

DEFAULT_SUITE_NAME = "SeleniumTest"
PLAYWRIGHT_IMPORT = "import { test, expect } from '@playwright/test';"

_BARE_BRACES = frozenset({"{", "}", "};", "{}"})


class ConverterState(Enum):
    """Emission stages, visited in declaration order."""

    START = 0
    IMPORTS_EMITTED = 1
    SUITE_OPENED = 2
    BEFORE_EACH_EMITTED = 3
    TESTS_EMITTED = 4
    AFTER_EACH_EMITTED = 5
    SUITE_CLOSED = 6


def method_statements(method: ParsedFragment, keep_braces: bool = False) -> list[tuple[int, str]]:
    """
    Split a method body into ``(source_line, statement)`` pairs.

    Blank lines, block comment lines and (unless ``keep_braces``) bare
    braces are dropped. Physical lines are joined until a statement ends
    with ``;``, ``{`` or ``}``. A ``//`` comment line is kept as its own
    statement.
    """
    body: str = method["body"]
    content: str = method["content"]
    offset = content.rfind(body) if body else 0
    first_line = method.source_line + content.count("\n", 0, offset)

    statements: list[tuple[int, str]] = []
    pending: list[str] = []
    pending_line = 0
    for index, raw in enumerate(body.split("\n")):
        text = raw.strip()
        if not text or (text in _BARE_BRACES and not keep_braces):
            continue
        if text.startswith(("/*", "*")):
            continue
        if text.startswith("//"):
            if not pending:
                statements.append((first_line + index, text))
            continue
        if not pending:
            pending_line = first_line + index
        pending.append(text)
        if text.endswith((";", "{", "}")):
            statements.append((pending_line, " ".join(pending)))
            pending = []
    if pending:
        statements.append((pending_line, " ".join(pending)))
    return statements


def rewrite_statements(
    statements: list[tuple[int, str]], context: RewriteContext
) -> tuple[list[str], list[ConversionComment]]:
    """Rewrite statements in order, registering locator bindings as they appear."""
    lines: list[str] = []
    comments: list[ConversionComment] = []
    for line_number, statement in statements:
        result = rewrite_line(statement, line_number, context)
        lines.extend(result.code.split("\n"))
        comments.extend(result.comments)
        if result.binding:
            context = context.with_locator(result.binding, result.binding)
    return lines, comments


class PlaywrightConverter:
    """Converts one extracted Java test class into a Playwright test module.

    Output layout:
        import line
        test.describe('<Class>', () => {
          test.beforeEach(...)   one per setup method, or a placeholder
          test('<method>', ...)  one per @Test method, or a sample test
          test.afterEach(...)    one per teardown method, if any
        });
    """

    def __init__(self, extraction: ExtractionResult, settings: ConverterSettings | None = None):
        self.extraction = extraction
        self.settings = settings or ConverterSettings()
        self.state = ConverterState.START
        self._lines: list[str] = []
        self._comments: list[ConversionComment] = []

    def convert(self) -> ConversionResult:
        self._lines = []
        self._comments = []
        self.state = ConverterState.START

        if "executeScript" in self.extraction.source:
            self._comments.append(
                ConversionComment(
                    1,
                    "JavaScript execution converted to page.evaluate(); "
                    "check that the scripts still run in the page context",
                    "info",
                )
            )

        self._emit_imports()
        self._open_suite()
        self._emit_before_each()
        self._emit_tests()
        self._emit_after_each()
        self._close_suite()

        return ConversionResult(
            code="\n".join(self._lines) + "\n",
            comments=sorted(self._comments, key=lambda c: c.line),
        )

    def _advance(self, state: ConverterState) -> None:
        if state.value <= self.state.value:
            raise RuntimeError(f"Cannot move from {self.state.name} to {state.name}")
        self.state = state

    def _emit_imports(self) -> None:
        self._lines.extend([PLAYWRIGHT_IMPORT, ""])
        self._advance(ConverterState.IMPORTS_EMITTED)

    def _open_suite(self) -> None:
        name = self.extraction.class_name or DEFAULT_SUITE_NAME
        self._lines.append(f"test.describe({to_ts_string(name)}, () => {{")
        self._advance(ConverterState.SUITE_OPENED)

    def _emit_before_each(self) -> None:
        setup = self.extraction.setup_methods
        if not setup:
            self._emit_block("test.beforeEach(async ({ page }) => {", ["// Setup code goes here"])
        for method in setup:
            self._emit_method("test.beforeEach(async ({ page }) => {", method)
        self._advance(ConverterState.BEFORE_EACH_EMITTED)

    def _emit_tests(self) -> None:
        tests = self.extraction.test_methods
        if not tests:
            self._comments.append(
                ConversionComment(0, "No test methods found, created a sample test", "warning")
            )
            self._emit_block(
                "test('sample test', async ({ page }) => {",
                ["// TODO: Add test steps", "await page.goto('about:blank');"],
            )
        for method in tests:
            name = to_ts_string(method["method_name"])
            self._emit_method(f"test({name}, async ({{ page }}) => {{", method)
        self._advance(ConverterState.TESTS_EMITTED)

    def _emit_after_each(self) -> None:
        teardown = self.extraction.teardown_methods
        for method in teardown:
            self._emit_method("test.afterEach(async ({ page }) => {", method)
        if teardown:
            self._advance(ConverterState.AFTER_EACH_EMITTED)

    def _close_suite(self) -> None:
        self._lines.append("});")
        self._advance(ConverterState.SUITE_CLOSED)

    def _emit_method(self, opener: str, method: ParsedFragment) -> None:
        lines, comments = rewrite_statements(method_statements(method), RewriteContext())
        self._comments.extend(comments)
        self._emit_block(opener, lines)

    def _emit_block(self, opener: str, body: list[str]) -> None:
        step = self.settings.indent
        if not self._lines[-1].endswith("{"):
            self._lines.append("")
        self._lines.extend(indent_lines([opener], step))
        self._lines.extend(indent_lines(body, step * 2))
        self._lines.extend(indent_lines(["});"], step))


def convert_source(source: str, settings: ConverterSettings | None = None) -> ConversionResult:
    """Extract and convert Java source text in one call."""
    return PlaywrightConverter(extract(source), settings).convert()
