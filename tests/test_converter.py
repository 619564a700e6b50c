"""Tests for the single-file converter."""

import pytest

from sel2pw.config import ConverterSettings
from sel2pw.converter import (
    PLAYWRIGHT_IMPORT,
    ConverterState,
    PlaywrightConverter,
    convert_source,
    method_statements,
)
from sel2pw.parsing import extract

LOGIN_TEST_OUTPUT = """\
import { test, expect } from '@playwright/test';

test.describe('LoginTest', () => {
  test.beforeEach(async ({ page }) => {
    // TODO: Convert manually: driver = new ChromeDriver();
    await page.goto('https://example.com/login');
  });

  test('testValidLogin', async ({ page }) => {
    await page.locator('#username').fill('admin');
    await page.locator('#password').fill('secret');
    await page.locator('#loginBtn').click();
    const title = await page.title();
    expect(title).toBe("Home");
  });

  test('testErrorMessage', async ({ page }) => {
    const error = page.locator('.error');
    expect(await error.isVisible()).toBe(true);
  });

  test.afterEach(async ({ page }) => {
    // TODO: Convert manually: driver.quit();
  });
});
"""

EMPTY_TEST_OUTPUT = """\
import { test, expect } from '@playwright/test';

test.describe('EmptyTest', () => {
  test.beforeEach(async ({ page }) => {
    // Setup code goes here
  });

  test('sample test', async ({ page }) => {
    // TODO: Add test steps
    await page.goto('about:blank');
  });
});
"""


class TestConvertSource:
    """Tests for whole-file conversion."""

    def test_login_test(self, login_test_source):
        result = convert_source(login_test_source)

        assert result.code == LOGIN_TEST_OUTPUT

    def test_unconverted_lines_are_reported(self, login_test_source):
        result = convert_source(login_test_source)

        assert [(c.line, c.severity) for c in result.comments] == [
            (17, "warning"),
            (38, "warning"),
        ]
        assert "driver = new ChromeDriver();" in result.comments[0].text
        assert "driver.quit();" in result.comments[1].text

    def test_no_test_methods(self, empty_test_source):
        result = convert_source(empty_test_source)

        assert result.code == EMPTY_TEST_OUTPUT
        assert len(result.comments) == 1
        assert result.comments[0].line == 0
        assert result.comments[0].severity == "warning"

    def test_missing_class_name(self):
        result = convert_source("")

        assert result.code.startswith(PLAYWRIGHT_IMPORT)
        assert "test.describe('SeleniumTest', () => {" in result.code
        assert result.code.endswith("});\n")

    def test_conversion_is_deterministic(self, login_test_source):
        assert convert_source(login_test_source) == convert_source(login_test_source)

    def test_custom_indent(self, login_test_source):
        result = convert_source(login_test_source, ConverterSettings(indent=4))
        lines = result.code.splitlines()

        assert "    test.beforeEach(async ({ page }) => {" in lines
        assert "        await page.goto('https://example.com/login');" in lines

    def test_execute_script_note(self):
        source = """
public class ScrollTest {
    @Test
    public void scroll() {
        ((JavascriptExecutor) driver).executeScript("window.scrollTo(0, 0);");
    }
}
"""
        result = convert_source(source)

        assert "await page.evaluate(() => { window.scrollTo(0, 0); });" in result.code
        assert result.comments[0].line == 1
        assert result.comments[0].severity == "info"

    def test_comments_sorted_by_line(self, login_test_source):
        result = convert_source(login_test_source)
        lines = [c.line for c in result.comments]

        assert lines == sorted(lines)

    def test_multiple_setup_methods(self):
        source = """
public class TwoSetups {
    @BeforeClass
    public void once() {
        driver.get("https://example.com");
    }

    @BeforeMethod
    public void each() {
        driver.navigate().refresh();
    }

    @Test
    public void works() {
    }
}
"""
        result = convert_source(source)

        assert result.code.count("test.beforeEach(") == 2
        assert "test.afterEach(" not in result.code


class TestPlaywrightConverter:
    """Tests for the converter's emission stages."""

    def test_state_after_conversion(self, login_test_source):
        converter = PlaywrightConverter(extract(login_test_source))
        converter.convert()

        assert converter.state is ConverterState.SUITE_CLOSED

    def test_states_never_move_backwards(self, login_test_source):
        converter = PlaywrightConverter(extract(login_test_source))
        converter.convert()

        with pytest.raises(RuntimeError):
            converter._advance(ConverterState.SUITE_OPENED)

    def test_convert_twice(self, login_test_source):
        converter = PlaywrightConverter(extract(login_test_source))

        assert converter.convert() == converter.convert()


class TestMethodStatements:
    """Tests for splitting method bodies into statements."""

    def test_line_numbers(self, login_test_source):
        method = extract(login_test_source).test_methods[0]
        statements = method_statements(method)

        assert [line for line, _ in statements] == [23, 24, 25, 26, 27]
        assert statements[0][1] == 'driver.findElement(By.id("username")).sendKeys("admin");'

    def test_joins_wrapped_statements(self):
        source = """
public class Wrapped {
    @Test
    public void wrapped() {
        driver.findElement(By.id("a"))
            .click();
        // note
        /* block */
    }
}
"""
        method = extract(source).test_methods[0]
        statements = method_statements(method)

        assert statements == [
            (5, 'driver.findElement(By.id("a")) .click();'),
            (7, "// note"),
        ]

    def test_braces_kept_on_request(self):
        source = """
public class Braces {
    public void run() {
        if (ready) {
            go();
        }
    }
}
"""
        method = extract(source).methods[0]

        assert [s for _, s in method_statements(method)] == ["if (ready) {", "go();"]
        assert [s for _, s in method_statements(method, keep_braces=True)] == [
            "if (ready) {",
            "go();",
            "}",
        ]
