"""Fragment dataclasses produced by the Java extractor."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FragmentKind(str, Enum):
    """Category of a recognized Java fragment."""

    IMPORT = "import"
    CLASS = "class"
    METHOD = "method"
    LOCATOR = "locator"
    ASSERTION = "assertion"
    WAIT = "wait"
    ACTION = "action"


@dataclass(frozen=True)
class ParsedFragment:
    """A recognized syntactic unit from one Java source file.

    Attributes:
        kind: Category of the fragment.
        raw_text: The matched source substring. For actions this is the
            enclosing statement rather than just the call.
        attributes: Kind-specific fields:
            - import: import_path, is_static, is_selenium_related
            - class: class_name, parent_class, interfaces
            - method: method_name, return_type, parameters, modifiers,
              annotations, content, body, is_test_method, is_setup_method,
              is_teardown_method, is_constructor, is_static, is_public
            - locator: receiver, locator_kind, locator_value
            - assertion: assertion_type, arguments
            - wait: wait_variable, condition
            - action: action_type, action_text
        source_line: 1-based line of the match start. 0 means the fragment
            has no single corresponding source line.
    """

    kind: FragmentKind
    raw_text: str
    attributes: dict[str, Any] = field(default_factory=dict)
    source_line: int = 0

    def __getitem__(self, key: str) -> Any:
        return self.attributes[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)


@dataclass(frozen=True)
class ExtractionResult:
    """All fragments extracted from one Java source file.

    The original ``source`` is kept alongside the fragments so that
    consumers never need to reassemble it from partial matches.
    """

    source: str
    imports: tuple[ParsedFragment, ...] = ()
    class_signature: ParsedFragment | None = None
    methods: tuple[ParsedFragment, ...] = ()
    locators: tuple[ParsedFragment, ...] = ()
    assertions: tuple[ParsedFragment, ...] = ()
    waits: tuple[ParsedFragment, ...] = ()
    actions: tuple[ParsedFragment, ...] = ()

    @property
    def class_name(self) -> str | None:
        if self.class_signature is None:
            return None
        return self.class_signature["class_name"]

    @property
    def parent_class(self) -> str | None:
        if self.class_signature is None:
            return None
        return self.class_signature["parent_class"]

    @property
    def test_methods(self) -> list[ParsedFragment]:
        return [m for m in self.methods if m["is_test_method"]]

    @property
    def setup_methods(self) -> list[ParsedFragment]:
        return [m for m in self.methods if m["is_setup_method"]]

    @property
    def teardown_methods(self) -> list[ParsedFragment]:
        return [m for m in self.methods if m["is_teardown_method"]]

    @property
    def fragments(self) -> list[ParsedFragment]:
        """All fragments, grouped by kind in extraction order."""
        result: list[ParsedFragment] = list(self.imports)
        if self.class_signature is not None:
            result.append(self.class_signature)
        result.extend(self.methods)
        result.extend(self.locators)
        result.extend(self.assertions)
        result.extend(self.waits)
        result.extend(self.actions)
        return result
