"""Integration tests for CLI."""

import json
import subprocess
import sys
from pathlib import Path

import pytest


def run_sel2pw(args: list[str], cwd: Path) -> subprocess.CompletedProcess:
    """Run sel2pw CLI command."""
    return subprocess.run(
        [sys.executable, "-m", "sel2pw.cli"] + args,
        cwd=cwd,
        capture_output=True,
        text=True,
    )


@pytest.fixture
def login_test_file(temp_dir, login_test_source):
    path = temp_dir / "LoginTest.java"
    path.write_text(login_test_source)
    return path


class TestConvertCommand:
    """Tests for sel2pw convert."""

    def test_convert_to_stdout(self, temp_dir, login_test_file):
        """Converted code goes to stdout, review notes to stderr."""
        result = run_sel2pw(["convert", str(login_test_file)], temp_dir)

        assert result.returncode == 0
        assert result.stdout.startswith("import { test, expect } from '@playwright/test';")
        assert "test.describe('LoginTest', () => {" in result.stdout
        assert "[warning] line 17: Could not convert: driver = new ChromeDriver();" in result.stderr

    def test_convert_to_file(self, temp_dir, login_test_file):
        out = temp_dir / "out" / "login.spec.ts"
        result = run_sel2pw(["convert", str(login_test_file), "-o", str(out)], temp_dir)

        assert result.returncode == 0
        assert f"Wrote {out}" in result.stdout
        assert "await page.locator('#loginBtn').click();" in out.read_text()

    def test_convert_json(self, temp_dir, login_test_file):
        result = run_sel2pw(["convert", str(login_test_file), "--json"], temp_dir)

        assert result.returncode == 0
        data = json.loads(result.stdout)
        assert "await page.goto('https://example.com/login');" in data["code"]
        assert [c["line"] for c in data["comments"]] == [17, 38]

    def test_missing_file(self, temp_dir):
        result = run_sel2pw(["convert", "Missing.java"], temp_dir)

        assert result.returncode == 1
        assert "Error: Failed to read file: Missing.java" in result.stderr


class TestAnalyzeCommand:
    def test_analyze(self, temp_dir, project_dir):
        result = run_sel2pw(["analyze", str(project_dir)], temp_dir)

        assert result.returncode == 0
        assert "Classes: 3" in result.stdout
        assert "  Page objects: 1" in result.stdout
        assert "com.example.tests.LoginFlowTest  [test]" in result.stdout
        assert (
            "  depends on: com.example.pages.LoginPage, com.example.utils.WaitUtils"
            in result.stdout
        )

    def test_analyze_json(self, temp_dir, project_dir):
        result = run_sel2pw(["analyze", str(project_dir), "--json"], temp_dir)

        assert result.returncode == 0
        data = json.loads(result.stdout)
        assert data["resourceFiles"] == ["src/test/resources/config.properties"]
        assert data["classes"][0]["roles"] == ["test", "page-object"]

    def test_ignored_directories(self, temp_dir, project_dir):
        build_copy = project_dir / "build" / "Generated.java"
        build_copy.parent.mkdir()
        build_copy.write_text("public class Generated {\n}\n")

        result = run_sel2pw(["analyze", str(project_dir), "--json"], temp_dir)

        names = [c["className"] for c in json.loads(result.stdout)["classes"]]
        assert "Generated" not in names

    def test_empty_directory(self, temp_dir):
        empty = temp_dir / "empty"
        empty.mkdir()

        result = run_sel2pw(["analyze", str(empty)], temp_dir)

        assert result.returncode == 0
        assert "Warning: No Java source files found under" in result.stderr
        assert "Classes: 0" in result.stdout

    def test_not_a_directory(self, temp_dir):
        result = run_sel2pw(["analyze", "nowhere"], temp_dir)

        assert result.returncode == 1
        assert "not a directory" in result.stderr


class TestBatchCommand:
    def test_batch(self, temp_dir, project_dir):
        out = temp_dir / "playwright"
        result = run_sel2pw(["batch", str(project_dir), "-o", str(out)], temp_dir)

        assert result.returncode == 0
        assert f"Converted 3 of 3 classes into {out}" in result.stdout
        assert (out / "src/com/example/tests/LoginFlowTest.spec.ts").exists()
        assert (out / "src/com/example/pages/LoginPage.ts").exists()
        assert (out / "src/com/example/utils/WaitUtils.ts").exists()
        assert (out / "playwright.config.ts").exists()
        assert (out / "package.json").exists()
        assert (out / "src/test/resources/config.properties").read_text() == (
            "base.url=https://example.com\n"
        )

    def test_batch_json(self, temp_dir, project_dir):
        out = temp_dir / "playwright"
        result = run_sel2pw(["batch", str(project_dir), "-o", str(out), "--json"], temp_dir)

        assert result.returncode == 0
        data = json.loads(result.stdout)
        assert data["summary"]["convertedFiles"] == 3

    def test_batch_requires_output(self, temp_dir, project_dir):
        result = run_sel2pw(["batch", str(project_dir)], temp_dir)

        assert result.returncode == 2


class TestGradleCommand:
    def test_gradle(self, temp_dir, project_dir):
        result = run_sel2pw(["gradle", str(project_dir / "build.gradle")], temp_dir)

        assert result.returncode == 0
        assert "Project: shop-tests" in result.stdout
        assert "Dependencies (3):" in result.stdout
        assert "  testImplementation org.testng:testng:7.8.0" in result.stdout

    def test_gradle_json(self, temp_dir, project_dir):
        result = run_sel2pw(["gradle", str(project_dir / "build.gradle"), "--json"], temp_dir)

        assert json.loads(result.stdout)["plugins"] == ["java", "io.qameta.allure"]


class TestGeneral:
    def test_no_command_prints_help(self, temp_dir):
        result = run_sel2pw([], temp_dir)

        assert result.returncode == 0
        assert "usage: sel2pw" in result.stdout

    def test_version(self, temp_dir):
        result = run_sel2pw(["--version"], temp_dir)

        assert result.returncode == 0
        assert result.stdout.startswith("sel2pw ")
