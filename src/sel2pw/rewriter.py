"""Statement-level rewriting of Selenium Java into Playwright TypeScript.

Each Java statement is matched against an ordered rule table. The first rule
whose trigger fires owns the statement: it either produces a translation or,
when its finer pattern does not fit, a category-specific manual-review marker.
Statements no rule claims become a generic manual-review marker. Rewriting
never raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Mapping

from .models import ConversionComment
from .utils import (
    find_closing_paren,
    is_string_literal,
    java_literal_to_ts,
    java_type_to_ts,
    split_arguments,
    to_ts_string,
    unescape_java,
)

MANUAL_MARKER = "// TODO: Convert manually:"

# Known locator kinds. "selector" entries become page.locator(...),
# "text" entries become page.getByText(..., { exact }).
_LOCATOR_TABLE: dict[str, tuple[str, Callable[[str], str]]] = {
    "id": ("selector", lambda v: "#" + v),
    "name": ("selector", lambda v: f'[name="{v}"]'),
    "xpath": ("selector", lambda v: "xpath=" + v),
    "cssSelector": ("selector", lambda v: v),
    "className": ("selector", lambda v: "." + v),
    "tagName": ("selector", lambda v: v),
    "linkText": ("text", lambda v: v),
    "partialLinkText": ("text", lambda v: v),
}

_KEYS = {
    "ENTER": "Enter",
    "RETURN": "Enter",
    "TAB": "Tab",
    "ESCAPE": "Escape",
    "BACK_SPACE": "Backspace",
    "DELETE": "Delete",
    "SPACE": "Space",
    "ARROW_UP": "ArrowUp",
    "ARROW_DOWN": "ArrowDown",
    "ARROW_LEFT": "ArrowLeft",
    "ARROW_RIGHT": "ArrowRight",
    "UP": "ArrowUp",
    "DOWN": "ArrowDown",
    "LEFT": "ArrowLeft",
    "RIGHT": "ArrowRight",
    "HOME": "Home",
    "END": "End",
    "PAGE_UP": "PageUp",
    "PAGE_DOWN": "PageDown",
}

_WAIT_STATES = {
    "visibilityOfElementLocated": "visible",
    "visibilityOf": "visible",
    "presenceOfElementLocated": "attached",
    "elementToBeClickable": "attached",
    "invisibilityOfElementLocated": "hidden",
    "invisibilityOf": "hidden",
}

_DRIVER = r"(?:(?:this\.)?(?:driver|webDriver|wd)|getDriver\(\))"

_FIND_ELEMENT_RE = re.compile(
    r"(?:(?:\w+\.)*\w+(?:\(\))?\.)?findElements?\(\s*By\.(?P<kind>\w+)\s*\(\s*"
    r'"(?P<value>(?:[^"\\]|\\.)*)"\s*\)\s*\)'
)
# findElement(name) where name is a By field or variable
_FIND_ELEMENT_BY_NAME_RE = re.compile(
    r"(?:(?:\w+\.)*\w+(?:\(\))?\.)?findElements?\(\s*(?:this\.)?(?P<name>\w+)\s*\)"
)
_BY_RE = re.compile(r'By\.(?P<kind>\w+)\s*\(\s*"(?P<value>(?:[^"\\]|\\.)*)"\s*\)')

# Optional "Type name =", "name =" or "return" ahead of the expression.
_PREFIX_RE = re.compile(
    r"^(?:(?P<decl>(?:final\s+)?[\w.]+(?:\s*<[^=]*>)?(?:\[\])?\s+)?(?P<var>\w+)\s*=(?!=)\s*"
    r"|(?P<ret>return)\s+)?(?P<expr>.*)$",
    re.DOTALL,
)

_NAVIGATION_TRIGGER_RE = re.compile(r"^" + _DRIVER + r"\.(?:get|navigate)\(")
_GET_RE = re.compile(r"^" + _DRIVER + r"\.(?:get|navigate\(\)\.to)\((?P<url>.+)\)\s*;?$")
_HISTORY_RE = re.compile(r"^" + _DRIVER + r"\.navigate\(\)\.(?P<op>back|forward|refresh)\(\)\s*;?$")

_ASSERTION_TRIGGER_RE = re.compile(r"\bassert[A-Z]\w*\s*\(|\bAssert\.\w+\s*\(")
_ASSERTION_CALL_RE = re.compile(r"^(?:\w+\.)?(?P<name>assert\w+|fail)\s*\(")

_WAIT_TRIGGER_RE = re.compile(
    r"\.until\(|\bThread\.sleep\(|\bnew\s+(?:WebDriverWait|FluentWait)\b"
)
_CONDITION_RE = re.compile(r"^(?:ExpectedConditions\.)?(?P<name>\w+)\s*\((?P<arg>.*)\)$", re.DOTALL)
_SLEEP_RE = re.compile(r"^Thread\.sleep\((?P<ms>.+)\)\s*;?$")

_JS_TRIGGER_RE = re.compile(r"\.execute(?:Async)?Script\(")

_DECLARATION_TYPES = (
    "WebElement|String|int|long|double|float|boolean|Integer|Long|Double|Float|Boolean"
)
_DECLARATION_TRIGGER_RE = re.compile(
    r"\b(?:" + _DECLARATION_TYPES + r")\s+\w+\s*(?:=|;)"
)
_DECLARATION_RE = re.compile(
    r"^(?:final\s+)?(?P<type>" + _DECLARATION_TYPES + r")\s+(?P<name>\w+)"
    r"\s*(?:=\s*(?P<value>.+?))?\s*;?$",
    re.DOTALL,
)

_DRIVER_ARGUMENT_RE = re.compile(r"([(,]\s*)(?:this\.)?(?:driver|webDriver|wd)(\s*[,)])")

_DRIVER_QUERIES = (
    (re.compile(_DRIVER + r"\.getTitle\(\)"), "await {page}.title()", True),
    (re.compile(_DRIVER + r"\.getPageSource\(\)"), "await {page}.content()", True),
    (re.compile(_DRIVER + r"\.getCurrentUrl\(\)"), "{page}.url()", False),
)


@dataclass(frozen=True)
class LocatorRewrite:
    """A Playwright locator expression. ``known`` is False for unsupported kinds."""

    expression: str
    known: bool = True


@dataclass(frozen=True)
class RewriteContext:
    """What a statement can refer to besides the Java text itself.

    Attributes:
        page: TypeScript expression for the page, ``page`` or ``this.page``.
        locators: Java variable or field name -> TypeScript locator expression.
    """

    page: str = "page"
    locators: Mapping[str, str] = field(default_factory=dict)

    def with_locator(self, name: str, expression: str) -> RewriteContext:
        locators = dict(self.locators)
        locators[name] = expression
        return RewriteContext(page=self.page, locators=locators)


@dataclass(frozen=True)
class LineRewrite:
    """Result of rewriting one statement.

    ``binding`` names a variable the statement bound to a locator, so later
    statements can act on it.
    """

    code: str
    comments: tuple[ConversionComment, ...] = ()
    category: str = "fallback"
    binding: str | None = None


class _NoMatch(Exception):
    """A rule's trigger fired but the statement did not fit its patterns."""


# ---------------------------------------------------------------------------
# Locators
# ---------------------------------------------------------------------------


def convert_locator(kind: str, value: str, page: str = "page") -> LocatorRewrite:
    """
    Map a Selenium ``By.<kind>("<value>")`` locator to a Playwright locator.

    ``value`` is the text of the Java literal without its quotes. Unsupported
    kinds fall back to a raw ``locator`` and are reported as not known.

    Examples:
        >>> convert_locator("id", "loginBtn").expression
        "page.locator('#loginBtn')"
        >>> convert_locator("linkText", "Sign in").expression
        "page.getByText('Sign in', { exact: true })"
    """
    raw = unescape_java(value)
    entry = _LOCATOR_TABLE.get(kind)
    if entry is None:
        return LocatorRewrite(f"{page}.locator({to_ts_string(raw)})", known=False)
    style, build = entry
    if style == "text":
        exact = "true" if kind == "linkText" else "false"
        return LocatorRewrite(f"{page}.getByText({to_ts_string(build(raw))}, {{ exact: {exact} }})")
    return LocatorRewrite(f"{page}.locator({to_ts_string(build(raw))})")


_TS_STRING = r"'(?P<value>(?:[^'\\]|\\.)*)'"
_GET_BY_TEXT_RE = re.compile(
    r"^[\w.]+\.getByText\(" + _TS_STRING + r",\s*\{\s*exact:\s*(?P<exact>true|false)\s*\}\)$"
)
_PAGE_LOCATOR_RE = re.compile(r"^[\w.]+\.locator\(" + _TS_STRING + r"\)$")
_SIMPLE_IDENT = r"[^\s.#\[\]>+~:,()'\"]+"


def reverse_locator(expression: str) -> tuple[str, str] | None:
    """
    Recover ``(kind, value)`` from a Playwright locator expression.

    Returns None when ``expression`` is not a locator this module produces.
    """
    expression = expression.strip()
    match = _GET_BY_TEXT_RE.match(expression)
    if match:
        kind = "linkText" if match.group("exact") == "true" else "partialLinkText"
        return kind, unescape_java(match.group("value"))

    match = _PAGE_LOCATOR_RE.match(expression)
    if not match:
        return None
    selector = unescape_java(match.group("value"))

    if selector.startswith("xpath="):
        return "xpath", selector[len("xpath=") :]
    name_match = re.fullmatch(r'\[name="(.*)"\]', selector)
    if name_match:
        return "name", name_match.group(1)
    if re.fullmatch(r"#" + _SIMPLE_IDENT, selector):
        return "id", selector[1:]
    if re.fullmatch(r"\." + _SIMPLE_IDENT, selector):
        return "className", selector[1:]
    if re.fullmatch(r"[A-Za-z][\w-]*", selector):
        return "tagName", selector
    return "cssSelector", selector


# ---------------------------------------------------------------------------
# Element chains
# ---------------------------------------------------------------------------


def _locator_at_start(text: str, context: RewriteContext) -> tuple[str, str, str | None] | None:
    """
    Resolve a locator at the start of ``text``.

    Returns ``(expression, rest, warning)`` or None when ``text`` does not
    start with ``findElement(By...)``, ``findElement(name)`` or a known
    locator name.
    """
    match = _FIND_ELEMENT_RE.match(text)
    if match:
        locator = convert_locator(match.group("kind"), match.group("value"), context.page)
        warning = None if locator.known else f"Unknown locator type: {match.group('kind')}"
        return locator.expression, text[match.end() :], warning

    match = _FIND_ELEMENT_BY_NAME_RE.match(text)
    if match and match.group("name") in context.locators:
        return context.locators[match.group("name")], text[match.end() :], None

    name_match = re.match(r"(?:this\.)?(\w+)\b", text)
    if name_match and name_match.group(1) in context.locators:
        return context.locators[name_match.group(1)], text[name_match.end() :], None
    return None


def _locator_argument(arg: str, context: RewriteContext) -> str | None:
    """Resolve a whole argument (``By.id("x")``, a findElement chain or a name) to a locator."""
    arg = arg.strip()
    by_match = _BY_RE.fullmatch(arg)
    if by_match:
        return convert_locator(by_match.group("kind"), by_match.group("value"), context.page).expression
    resolved = _locator_at_start(arg, context)
    if resolved and not resolved[1].strip():
        return resolved[0]
    return None


def _split_call(text: str) -> tuple[str, str, str] | None:
    """Split ``.method(args)rest`` into its parts; None if ``text`` is not a call."""
    match = re.match(r"\s*\.(\w+)\s*\(", text)
    if not match:
        return None
    close = find_closing_paren(text, match.end() - 1)
    if close == -1:
        return None
    return match.group(1), text[match.end() : close], text[close + 1 :]


def _action_call(locator: str, method: str, args: str) -> str | None:
    """The awaited Playwright call for a WebElement method, or None if unmapped."""
    arguments = split_arguments(args)
    if method == "click" and not arguments:
        return f"await {locator}.click()"
    if method == "sendKeys" and len(arguments) == 1:
        key = re.fullmatch(r"Keys\.(\w+)", arguments[0])
        if key:
            name = _KEYS.get(key.group(1), key.group(1).title())
            return f"await {locator}.press({to_ts_string(name)})"
        if "Keys." in arguments[0]:
            return None
        return f"await {locator}.fill({java_literal_to_ts(arguments[0])})"
    if method == "clear" and not arguments:
        return f"await {locator}.clear()"
    if method == "getText" and not arguments:
        return f"await {locator}.textContent()"
    if method == "getAttribute" and len(arguments) == 1:
        return f"await {locator}.getAttribute({java_literal_to_ts(arguments[0])})"
    if method == "isDisplayed" and not arguments:
        return f"await {locator}.isVisible()"
    if method == "isEnabled" and not arguments:
        return f"await {locator}.isEnabled()"
    if method == "isSelected" and not arguments:
        return f"await {locator}.isChecked()"
    if method == "submit" and not arguments:
        return f"await {locator}.evaluate((el) => (el as HTMLInputElement).form?.submit())"
    if method == "selectByVisibleText" and len(arguments) == 1:
        return f"await {locator}.selectOption({{ label: {java_literal_to_ts(arguments[0])} }})"
    if method == "selectByValue" and len(arguments) == 1:
        return f"await {locator}.selectOption({java_literal_to_ts(arguments[0])})"
    if method == "selectByIndex" and len(arguments) == 1:
        return f"await {locator}.selectOption({{ index: {arguments[0]} }})"
    return None


def _assign(prefix: re.Match[str], expression: str) -> str:
    """Re-attach an assignment or return prefix to a TypeScript expression."""
    if prefix.group("ret"):
        return f"return {expression};"
    if prefix.group("var"):
        keyword = "const " if prefix.group("decl") else ""
        return f"{keyword}{prefix.group('var')} = {expression};"
    return f"{expression};"


def _strip_semicolon(text: str) -> str:
    text = text.strip()
    return text[:-1].rstrip() if text.endswith(";") else text


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


def rewrite_expression(expr: str, context: RewriteContext | None = None) -> str:
    """
    Rewrite Selenium calls embedded in a Java expression.

    Element chains become awaited locator calls and driver queries become
    page calls. Everything else, literals included, is kept as written.
    ``String.contains`` and ``length()`` are mapped to their TypeScript
    spellings.
    """
    context = context or RewriteContext()
    expr = expr.strip()

    for pattern, template, awaited in _DRIVER_QUERIES:
        expr = _replace_awaited(
            expr, pattern, lambda m, t=template: t.format(page=context.page), awaited
        )

    expr = _rewrite_element_chains(expr, context)
    # The driver handed to another object becomes the page
    expr = _DRIVER_ARGUMENT_RE.sub(lambda m: m.group(1) + context.page + m.group(2), expr)
    expr = re.sub(r"\.contains\(", ".includes(", expr)
    expr = re.sub(r"\.length\(\)", ".length", expr)
    return expr


def _replace_awaited(
    expr: str,
    pattern: re.Pattern[str],
    build: Callable[[re.Match[str]], str],
    awaited: bool,
) -> str:
    """Substitute ``pattern``, parenthesizing awaited results that are chained on."""
    parts: list[str] = []
    last = 0
    for match in pattern.finditer(expr):
        replacement = build(match)
        if awaited and expr[match.end() : match.end() + 1] == ".":
            replacement = f"({replacement})"
        parts.append(expr[last : match.start()])
        parts.append(replacement)
        last = match.end()
    parts.append(expr[last:])
    return "".join(parts)


def _rewrite_element_chains(expr: str, context: RewriteContext) -> str:
    names = "|".join(re.escape(n) for n in sorted(context.locators, key=len, reverse=True))
    starts = _FIND_ELEMENT_RE.pattern
    if names:
        starts = (
            f"{starts}|{_FIND_ELEMENT_BY_NAME_RE.pattern}"
            f"|(?<![\\w.])(?:this\\.)?(?:{names})\\b(?=\\s*\\.)"
        )
    start_re = re.compile(starts)

    out: list[str] = []
    pos = 0
    while True:
        match = start_re.search(expr, pos)
        if not match:
            out.append(expr[pos:])
            return "".join(out)
        resolved = _locator_at_start(expr[match.start() :], context)
        if resolved is None:
            out.append(expr[pos : match.end()])
            pos = match.end()
            continue
        locator, rest, _ = resolved
        call = _split_call(rest)
        replacement = locator
        consumed = len(expr) - len(rest)
        if call is not None:
            method, args, after = call
            action = _action_call(locator, method, args)
            if action is not None:
                replacement = action
                consumed = len(expr) - len(after)
                if after.lstrip().startswith("."):
                    replacement = f"({replacement})"
        out.append(expr[pos : match.start()])
        out.append(replacement)
        pos = consumed


# ---------------------------------------------------------------------------
# Rule converters. Each raises _NoMatch when the statement does not fit.
# ---------------------------------------------------------------------------


def _convert_navigation(line: str, line_number: int, context: RewriteContext) -> LineRewrite:
    history = _HISTORY_RE.match(line)
    if history:
        method = {"back": "goBack", "forward": "goForward", "refresh": "reload"}[history.group("op")]
        return LineRewrite(f"await {context.page}.{method}();")

    match = _GET_RE.match(line)
    if not match:
        raise _NoMatch
    url = match.group("url").strip()
    if is_string_literal(url):
        url = to_ts_string(unescape_java(url[1:-1]))
    else:
        url = rewrite_expression(url, context)
    return LineRewrite(f"await {context.page}.goto({url});")


def _element_trigger(line: str, context: RewriteContext) -> bool:
    expr = _PREFIX_RE.match(line).group("expr")
    if expr.startswith("new Select("):
        expr = expr[len("new Select(") :].lstrip()
    return _locator_at_start(expr, context) is not None


def _convert_element(line: str, line_number: int, context: RewriteContext) -> LineRewrite:
    prefix = _PREFIX_RE.match(line)
    expr = prefix.group("expr")
    comments: list[ConversionComment] = []

    if expr.startswith("new Select("):
        close = find_closing_paren(expr, len("new Select"))
        if close == -1:
            raise _NoMatch
        locator = _locator_argument(expr[len("new Select(") : close], context)
        if locator is None:
            raise _NoMatch
        rest = expr[close + 1 :]
    else:
        resolved = _locator_at_start(expr, context)
        if resolved is None:
            raise _NoMatch
        locator, rest, warning = resolved
        if warning:
            comments.append(ConversionComment(line_number, warning, "warning"))

    if not _strip_semicolon(rest):
        # Bare locator: only meaningful as a binding
        if not prefix.group("var"):
            raise _NoMatch
        binding = prefix.group("var") if prefix.group("decl") else None
        return LineRewrite(_assign(prefix, locator), tuple(comments), binding=binding)

    call = _split_call(rest)
    if call is None or _strip_semicolon(call[2]):
        raise _NoMatch
    action = _action_call(locator, call[0], call[1])
    if action is None:
        raise _NoMatch
    return LineRewrite(_assign(prefix, action), tuple(comments))


def _message_first(arguments: list[str]) -> bool:
    """JUnit puts an optional message first, TestNG puts it last."""
    return is_string_literal(arguments[0]) and not is_string_literal(arguments[-1])


def _convert_assertion(line: str, line_number: int, context: RewriteContext) -> LineRewrite:
    match = _ASSERTION_CALL_RE.match(line)
    if not match:
        raise _NoMatch
    close = find_closing_paren(line, match.end() - 1)
    if close == -1 or _strip_semicolon(line[close + 1 :]):
        raise _NoMatch
    name = match.group("name")
    args = [rewrite_expression(a, context) for a in split_arguments(line[match.end() : close])]

    if name == "fail" and len(args) <= 1:
        message = args[0] if args else "'Assertion failed'"
        return LineRewrite(f"throw new Error({message});")

    if name in ("assertEquals", "assertNotEquals") and len(args) in (2, 3):
        matcher = "toBe" if name == "assertEquals" else "not.toBe"
        if len(args) == 2:
            return LineRewrite(f"expect({args[0]}).{matcher}({args[1]});")
        if _message_first(args):
            return LineRewrite(f"expect({args[1]}, {args[0]}).{matcher}({args[2]});")
        return LineRewrite(f"expect({args[0]}, {args[2]}).{matcher}({args[1]});")

    matchers = {
        "assertTrue": "toBe(true)",
        "assertFalse": "toBe(false)",
        "assertNotNull": "not.toBeNull()",
        "assertNull": "toBeNull()",
    }
    if name in matchers and len(args) in (1, 2):
        if len(args) == 1:
            return LineRewrite(f"expect({args[0]}).{matchers[name]};")
        value, message = (args[1], args[0]) if _message_first(args) else (args[0], args[1])
        return LineRewrite(f"expect({value}, {message}).{matchers[name]};")

    raise _NoMatch


def _convert_wait(line: str, line_number: int, context: RewriteContext) -> LineRewrite:
    sleep = _SLEEP_RE.match(line)
    if sleep:
        return LineRewrite(
            f"await {context.page}.waitForTimeout({sleep.group('ms').strip()});",
            (
                ConversionComment(
                    line_number,
                    "Thread.sleep converted to waitForTimeout; prefer waiting for a condition",
                    "info",
                ),
            ),
        )

    until = line.find(".until(")
    if until == -1:
        if re.search(r"\bnew\s+(?:WebDriverWait|FluentWait)\b", line):
            return LineRewrite(
                "// WebDriverWait removed: Playwright waits for elements automatically"
            )
        raise _NoMatch

    close = find_closing_paren(line, until + len(".until"))
    if close == -1 or _strip_semicolon(line[close + 1 :]):
        raise _NoMatch
    condition = _CONDITION_RE.match(line[until + len(".until(") : close].strip())
    if not condition:
        raise _NoMatch
    name, arg = condition.group("name"), condition.group("arg").strip()

    if name in _WAIT_STATES:
        locator = _locator_argument(arg, context)
        if locator is None:
            raise _NoMatch
        wait = f"await {locator}.waitFor({{ state: '{_WAIT_STATES[name]}' }});"
        prefix = _PREFIX_RE.match(line)
        if prefix.group("decl") and prefix.group("var"):
            variable = prefix.group("var")
            code = f"const {variable} = {locator};\nawait {variable}.waitFor({{ state: '{_WAIT_STATES[name]}' }});"
            return LineRewrite(code, binding=variable)
        return LineRewrite(wait)

    if not is_string_literal(arg):
        raise _NoMatch
    value = to_ts_string(unescape_java(arg[1:-1]))
    if name == "urlContains":
        return LineRewrite(
            f"await {context.page}.waitForURL((url) => url.toString().includes({value}));"
        )
    if name == "urlToBe":
        return LineRewrite(f"await {context.page}.waitForURL({value});")
    if name == "titleIs":
        return LineRewrite(f"await expect({context.page}).toHaveTitle({value});")
    raise _NoMatch


def _convert_js(line: str, line_number: int, context: RewriteContext) -> LineRewrite:
    prefix = _PREFIX_RE.match(line)
    trigger = _JS_TRIGGER_RE.search(line)
    close = find_closing_paren(line, trigger.end() - 1)
    if close == -1 or _strip_semicolon(line[close + 1 :]):
        raise _NoMatch
    args = split_arguments(line[trigger.end() : close])
    if not args or not is_string_literal(args[0]):
        raise _NoMatch
    script = unescape_java(args[0][1:-1])
    extra = args[1:]

    if not extra:
        return LineRewrite(_assign(prefix, f"await {context.page}.evaluate(() => {{ {script} }})"))

    if len(extra) == 1:
        locator = _locator_argument(extra[0], context)
        if locator is not None:
            script = script.replace("arguments[0]", "element")
            return LineRewrite(
                _assign(prefix, f"await {locator}.evaluate((element) => {{ {script} }})")
            )

    names = [f"arg{i}" for i in range(len(extra))]
    for i, name in enumerate(names):
        script = script.replace(f"arguments[{i}]", name)
    values = ", ".join(rewrite_expression(a, context) for a in extra)
    return LineRewrite(
        _assign(
            prefix,
            f"await {context.page}.evaluate(([{', '.join(names)}]) => {{ {script} }}, [{values}])",
        )
    )


def _convert_declaration(line: str, line_number: int, context: RewriteContext) -> LineRewrite:
    match = _DECLARATION_RE.match(line)
    if not match:
        raise _NoMatch
    name, value = match.group("name"), match.group("value")
    if value is None:
        return LineRewrite(f"let {name}: {java_type_to_ts(match.group('type'))};")

    locator = _locator_argument(value, context)
    if locator is not None:
        return LineRewrite(f"const {name} = {locator};", binding=name)
    return LineRewrite(f"const {name} = {rewrite_expression(value, context)};")


@dataclass(frozen=True)
class RewriteRule:
    """One entry of the rewrite table: a trigger and the converter it guards."""

    category: str
    label: str
    trigger: Callable[[str, RewriteContext], bool]
    convert: Callable[[str, int, RewriteContext], LineRewrite]


# Fixed priority order; the first rule whose trigger fires owns the statement.
REWRITE_RULES: tuple[RewriteRule, ...] = (
    RewriteRule(
        "navigation",
        "navigation",
        lambda line, ctx: bool(_NAVIGATION_TRIGGER_RE.search(line)),
        _convert_navigation,
    ),
    RewriteRule("element-action", "element action", _element_trigger, _convert_element),
    RewriteRule(
        "assertion",
        "assertion",
        lambda line, ctx: bool(_ASSERTION_TRIGGER_RE.search(line)),
        _convert_assertion,
    ),
    RewriteRule(
        "wait",
        "wait",
        lambda line, ctx: bool(_WAIT_TRIGGER_RE.search(line)),
        _convert_wait,
    ),
    RewriteRule(
        "js-execution",
        "JavaScript execution",
        lambda line, ctx: bool(_JS_TRIGGER_RE.search(line)),
        _convert_js,
    ),
    RewriteRule(
        "variable-declaration",
        "variable declaration",
        lambda line, ctx: bool(_DECLARATION_TRIGGER_RE.search(line)),
        _convert_declaration,
    ),
)


def rewrite_line(
    line: str, line_number: int = 0, context: RewriteContext | None = None
) -> LineRewrite:
    """
    Rewrite one Java statement into Playwright TypeScript.

    Args:
        line: The statement, possibly joined from several physical lines.
        line_number: 1-based source line used for comments (0 = unmapped).
        context: Page reference and known locator names.

    Returns:
        LineRewrite whose ``code`` is never empty.
    """
    context = context or RewriteContext()
    statement = " ".join(part.strip() for part in line.strip().splitlines())

    if statement.startswith("//"):
        return LineRewrite(statement, category="comment")

    for rule in REWRITE_RULES:
        if not statement or not rule.trigger(statement, context):
            continue
        try:
            result = rule.convert(statement, line_number, context)
        except _NoMatch:
            return LineRewrite(
                f"// TODO: Convert {rule.label} manually: {statement}",
                (
                    ConversionComment(
                        line_number, f"Could not convert {rule.label}: {statement}", "warning"
                    ),
                ),
                category=rule.category,
            )
        return LineRewrite(result.code, result.comments, rule.category, result.binding)

    return LineRewrite(
        f"{MANUAL_MARKER} {statement}",
        (ConversionComment(line_number, f"Could not convert: {statement}", "warning"),),
    )
