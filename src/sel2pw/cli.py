"""Command-line interface for sel2pw."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from . import __version__
from .analyzer import ProjectAnalyzer, ProjectStructure, is_build_file, is_resource_file, role_labels
from .batch import BatchConverter
from .config import ConverterSettings
from .converter import convert_source
from .errors import FileReadError, NoJavaSourcesError, OutputPathError, Sel2pwError
from .models import ConversionComment, GeneratedFile
from .parsing import parse_gradle
from .utils import normalize_path

# Directories never scanned for project files
IGNORED_DIRS = {".git", ".gradle", ".idea", "build", "target", "node_modules", "out"}


def read_text(path: Path) -> str:
    """Read a UTF-8 text file, raising FileReadError on failure."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(str(path), str(e)) from e


def write_text(path: Path, content: str) -> None:
    """Write a text file, creating parent directories."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise OutputPathError(str(path), str(e)) from e


def collect_project_paths(root: Path) -> list[str]:
    """Relative POSIX paths of the Java, build and resource files under ``root``."""
    paths: list[str] = []
    for path in sorted(root.rglob("*")):
        if not path.is_file():
            continue
        relative = path.relative_to(root)
        if any(part in IGNORED_DIRS for part in relative.parts[:-1]):
            continue
        rel = normalize_path(relative.as_posix())
        if rel.endswith(".java") or is_build_file(rel) or is_resource_file(rel):
            paths.append(rel)
    return paths


def load_project(root: Path) -> ProjectStructure:
    """Read and analyze a project directory; file reads run concurrently."""
    if not root.is_dir():
        raise FileReadError(str(root), "not a directory")

    async def reader(rel_path: str) -> str:
        return await asyncio.to_thread(read_text, root / rel_path)

    structure = asyncio.run(ProjectAnalyzer().analyze_paths(collect_project_paths(root), reader))
    if not structure.classes:
        print(f"Warning: {NoJavaSourcesError(str(root))}", file=sys.stderr)
    return structure


def format_comment(comment: ConversionComment) -> str:
    location = f"line {comment.line}" if comment.line else "file"
    return f"[{comment.severity}] {location}: {comment.text}"


def cmd_convert(args: argparse.Namespace) -> int:
    """Convert one Java file."""
    try:
        source = read_text(Path(args.file))
        result = convert_source(source, ConverterSettings.from_env())

        if args.output:
            write_text(Path(args.output), result.code)

        if args.json:
            print(json.dumps(result.to_dict(), indent=2))
            return 0

        if args.output:
            print(f"Wrote {args.output}")
        else:
            print(result.code, end="")
        for comment in result.comments:
            print(format_comment(comment), file=sys.stderr)
        return 0

    except Sel2pwError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_analyze(args: argparse.Namespace) -> int:
    """Analyze a Selenium project directory."""
    try:
        structure = load_project(Path(args.directory))

        if args.json:
            print(json.dumps(structure.to_dict(), indent=2))
            return 0

        print(f"Classes: {len(structure.classes)}")
        print(f"  Tests: {len(structure.test_classes)}")
        print(f"  Page objects: {len(structure.page_objects)}")
        print(f"  Utilities: {len(structure.utilities)}")
        print(f"  Base classes: {len(structure.base_classes)}")
        print(f"Build files: {len(structure.build_files)}")
        print(f"Resource files: {len(structure.resource_files)}")
        print()

        for record in structure.classes:
            roles = ", ".join(role_labels(record.roles)) or "none"
            print(f"{record.qualified_name}  [{roles}]  {record.file_path}")
            if record.dependencies:
                print(f"  depends on: {', '.join(record.dependencies)}")
        return 0

    except Sel2pwError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_batch(args: argparse.Namespace) -> int:
    """Convert a whole project directory into a Playwright project."""
    try:
        structure = load_project(Path(args.directory))
        result = BatchConverter(structure, ConverterSettings.from_env()).convert()

        out_dir = Path(args.output)
        generated = [GeneratedFile(o.file_path, o.converted_code) for o in result.outputs]
        for file in generated + result.config_files + result.resource_files:
            write_text(out_dir / file.file_path, file.content)

        if args.json:
            print(json.dumps(result.to_dict(), indent=2))
            return 0

        summary = result.summary
        print(f"Converted {summary.converted_files} of {summary.total_files} classes into {out_dir}")
        print(f"  Skipped: {summary.skipped_files}")
        print(f"  Errors: {summary.errors}")
        for failure in result.failures:
            print(f"  {failure.file_path}: {failure.error}", file=sys.stderr)

        warnings = sum(
            1 for o in result.outputs for c in o.comments if c.severity == "warning"
        )
        if warnings:
            print(f"{warnings} statements need manual review (see TODO markers)")
        return 0

    except Sel2pwError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_gradle(args: argparse.Namespace) -> int:
    """Show what a Gradle build file declares."""
    try:
        project = parse_gradle(read_text(Path(args.file)))

        if args.json:
            print(json.dumps(project.to_dict(), indent=2))
            return 0

        print(f"Project: {project.project_name}")
        print(f"Source directories: {', '.join(project.source_directories)}")
        print(f"Test directories: {', '.join(project.test_directories)}")
        if project.plugins:
            print(f"Plugins: {', '.join(project.plugins)}")
        if project.repositories:
            print(f"Repositories: {', '.join(project.repositories)}")
        print(f"Dependencies ({len(project.dependencies)}):")
        for dep in project.dependencies:
            print(f"  {dep.configuration} {dep.group}:{dep.name}:{dep.version}")
        return 0

    except Sel2pwError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the API server."""
    try:
        import uvicorn

        print("Starting sel2pw API server...")
        print(f"API docs: http://{args.host}:{args.port}/docs")
        print()

        # When reload is enabled, uvicorn requires the app as an import string
        app_target = "sel2pw.api:app" if args.reload else None
        if app_target is None:
            from .api import app
            app_target = app

        uvicorn.run(app_target, host=args.host, port=args.port, reload=args.reload)
        return 0

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sel2pw",
        description="Convert Selenium Java tests to Playwright TypeScript.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose (debug) output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # convert
    convert_parser = subparsers.add_parser("convert", help="Convert one Java test file")
    convert_parser.add_argument("file", help="Java source file")
    convert_parser.add_argument("--output", "-o", help="Write the TypeScript output to this file")
    convert_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # analyze
    analyze_parser = subparsers.add_parser("analyze", help="Classify the classes of a project")
    analyze_parser.add_argument("directory", help="Project root directory")
    analyze_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # batch
    batch_parser = subparsers.add_parser("batch", help="Convert a whole project")
    batch_parser.add_argument("directory", help="Project root directory")
    batch_parser.add_argument(
        "--output", "-o", required=True, help="Directory for the Playwright project"
    )
    batch_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # gradle
    gradle_parser = subparsers.add_parser("gradle", help="Read a Gradle build file")
    gradle_parser.add_argument("file", help="build.gradle or build.gradle.kts")
    gradle_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument(
        "--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)"
    )
    serve_parser.add_argument(
        "--port", type=int, default=8000, help="Port to bind to (default: 8000)"
    )
    serve_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    return parser


def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    if args.verbose:
        logging.getLogger("sel2pw").setLevel(logging.DEBUG)

    if not args.command:
        parser.print_help()
        return 0

    commands = {
        "convert": cmd_convert,
        "analyze": cmd_analyze,
        "batch": cmd_batch,
        "gradle": cmd_gradle,
        "serve": cmd_serve,
    }

    cmd_func = commands.get(args.command)
    if cmd_func:
        return cmd_func(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
