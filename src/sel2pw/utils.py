"""Utility functions for sel2pw."""

import re

_SOURCE_ROOT_RE = re.compile(r"(^|/)src/(?:main|test)/java/")

# Java type -> TypeScript type
_TYPE_MAP = {
    "String": "string",
    "CharSequence": "string",
    "char": "string",
    "Character": "string",
    "int": "number",
    "Integer": "number",
    "long": "number",
    "Long": "number",
    "short": "number",
    "Short": "number",
    "float": "number",
    "Float": "number",
    "double": "number",
    "Double": "number",
    "boolean": "boolean",
    "Boolean": "boolean",
    "void": "void",
    "Void": "void",
    "WebDriver": "Page",
    "WebElement": "Locator",
    "By": "string",
}

_LIST_TYPE_RE = re.compile(r"^(?:List|ArrayList|Collection|Set|Iterable)<\s*(.+)\s*>$")


def normalize_path(path: str) -> str:
    """Normalize a path to POSIX style (forward slashes, no leading ./)."""
    posix = path.replace("\\", "/")
    while posix.startswith("./"):
        posix = posix[2:]
    return posix


def line_number_at(text: str, offset: int) -> int:
    """Return the 1-based line number of a character offset."""
    return text.count("\n", 0, offset) + 1


def java_to_ts_path(java_path: str, output_root: str = "src", suffix: str = ".ts") -> str:
    """
    Map a Java source path to its converted TypeScript path.

    ``src/main/java/`` and ``src/test/java/`` collapse into ``output_root``
    and the ``.java`` extension becomes ``suffix``.
    """
    path = normalize_path(java_path)
    path = _SOURCE_ROOT_RE.sub(lambda m: f"{m.group(1)}{output_root}/", path, count=1)
    if path.endswith(".java"):
        path = path[: -len(".java")] + suffix
    return path


def relative_import_path(from_path: str, to_path: str) -> str:
    """
    Compute the TypeScript module specifier that ``from_path`` uses to import ``to_path``.

    Both arguments are converted (``.ts``) paths. The target's ``.ts``
    extension is dropped and a bare leading name is prefixed with ``./``.

    Examples:
        >>> relative_import_path("src/tests/LoginTest.spec.ts", "src/pages/LoginPage.ts")
        '../pages/LoginPage'
        >>> relative_import_path("src/LoginTest.spec.ts", "src/LoginPage.ts")
        './LoginPage'
    """
    from_parts = normalize_path(from_path).split("/")[:-1]
    to_parts = normalize_path(to_path).split("/")
    to_file = to_parts.pop()
    if to_file.endswith(".ts"):
        to_file = to_file[: -len(".ts")]

    common = 0
    for a, b in zip(from_parts, to_parts):
        if a != b:
            break
        common += 1

    up = "../" * (len(from_parts) - common)
    down = "/".join(to_parts[common:] + [to_file])
    relative = up + down

    if not relative.startswith(".") and not relative.startswith("/"):
        relative = "./" + relative
    return relative


def find_closing_paren(text: str, open_index: int) -> int:
    """
    Find the index of the parenthesis closing the one at ``open_index``.

    Parentheses inside double- or single-quoted literals are ignored and
    backslash escapes are honoured. Returns -1 when unbalanced.
    """
    depth = 0
    quote: str | None = None
    escape = False
    for i in range(open_index, len(text)):
        ch = text[i]
        if escape:
            escape = False
            continue
        if ch == "\\":
            escape = True
            continue
        if quote:
            if ch == quote:
                quote = None
            continue
        if ch in ('"', "'"):
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
    return -1


def split_arguments(text: str) -> list[str]:
    """
    Split an argument list on top-level commas.

    Commas nested in parentheses, brackets, generics braces or string
    literals do not split. Empty input yields an empty list.
    """
    if not text.strip():
        return []

    args: list[str] = []
    depth = 0
    angle = 0  # generic type brackets, tracked apart from comparisons
    quote: str | None = None
    escape = False
    current: list[str] = []
    for i, ch in enumerate(text):
        if escape:
            escape = False
            current.append(ch)
            continue
        if ch == "\\":
            escape = True
            current.append(ch)
            continue
        if quote:
            if ch == quote:
                quote = None
            current.append(ch)
            continue
        if ch in ('"', "'"):
            quote = ch
        elif ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth -= 1
        elif ch == "<" and _opens_generic(text, i):
            angle += 1
        elif ch == ">" and angle > 0:
            angle -= 1
        elif ch == "," and depth == 0 and angle == 0:
            args.append("".join(current).strip())
            current = []
            continue
        current.append(ch)
    args.append("".join(current).strip())
    return args


def _opens_generic(text: str, index: int) -> bool:
    """True if the ``<`` at ``index`` looks like ``List<String`` rather than ``a < b``."""
    if index == 0 or not (text[index - 1].isalnum() or text[index - 1] == "_"):
        return False
    rest = text[index + 1 :].lstrip()
    return bool(rest) and (rest[0].isupper() or rest[0] == "?")


def is_string_literal(expr: str) -> bool:
    """Return True if ``expr`` is a single Java double-quoted string literal."""
    return re.fullmatch(r'"(?:[^"\\]|\\.)*"', expr.strip()) is not None


def to_ts_string(value: str) -> str:
    """Quote raw text as a single-quoted TypeScript string literal."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )
    return f"'{escaped}'"


def unescape_java(value: str) -> str:
    """Resolve backslash escapes from the inside of a Java string literal."""
    escapes = {"n": "\n", "t": "\t", "r": "\r"}
    return re.sub(r"\\(.)", lambda m: escapes.get(m.group(1), m.group(1)), value)


def java_literal_to_ts(expr: str) -> str:
    """
    Convert a Java string literal to a single-quoted TypeScript literal.

    Non-literal expressions are returned unchanged.
    """
    expr = expr.strip()
    if not is_string_literal(expr):
        return expr
    inner = expr[1:-1].replace('\\"', '"')
    return "'" + inner.replace("'", "\\'") + "'"


def java_type_to_ts(java_type: str) -> str:
    """Map a Java type name to a TypeScript type (``any`` when unknown)."""
    java_type = java_type.strip()
    if java_type.endswith("[]"):
        return java_type_to_ts(java_type[:-2]) + "[]"
    list_match = _LIST_TYPE_RE.match(java_type)
    if list_match:
        return java_type_to_ts(list_match.group(1)) + "[]"
    return _TYPE_MAP.get(java_type, "any")


def java_params_to_ts(params: str) -> str:
    """
    Convert a Java parameter list to a TypeScript one.

    ``WebDriver`` parameters are renamed to ``page`` so that rewritten
    bodies, which address the browser as ``page``, still resolve.
    """
    converted: list[str] = []
    for param in split_arguments(params):
        # Drop annotations and the final modifier
        param = re.sub(r"@\w+(?:\([^)]*\))?\s*", "", param)
        param = re.sub(r"\bfinal\s+", "", param).strip()
        parts = param.rsplit(None, 1)
        if len(parts) < 2:
            converted.append(param)
            continue
        java_type, name = parts
        if java_type.endswith("..."):
            converted.append(f"...{name}: {java_type_to_ts(java_type[:-3])}[]")
            continue
        ts_type = java_type_to_ts(java_type)
        if ts_type == "Page":
            name = "page"
        converted.append(f"{name}: {ts_type}")
    return ", ".join(converted)


def indent_lines(lines: list[str], spaces: int) -> list[str]:
    """Indent each non-empty line by ``spaces`` spaces."""
    pad = " " * spaces
    return [pad + line if line else line for line in lines]
