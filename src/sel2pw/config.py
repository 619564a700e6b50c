"""Converter settings for sel2pw."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping

logger = logging.getLogger(__name__)

DEFAULT_INDENT = 2
DEFAULT_OUTPUT_ROOT = "src"
DEFAULT_TEST_SUFFIX = ".spec.ts"

# Environment overrides
ENV_INDENT = "SEL2PW_INDENT"
ENV_OUTPUT_ROOT = "SEL2PW_OUTPUT_ROOT"
ENV_TEST_SUFFIX = "SEL2PW_TEST_SUFFIX"


@dataclass(frozen=True)
class ConverterSettings:
    """Settings shared by the single-file and batch converters.

    Attributes:
        indent: Spaces per nesting level in generated TypeScript.
        output_root: Directory that replaces ``src/main/java`` and
            ``src/test/java`` in output paths.
        test_suffix: File suffix for converted test classes.
    """

    indent: int = DEFAULT_INDENT
    output_root: str = DEFAULT_OUTPUT_ROOT
    test_suffix: str = DEFAULT_TEST_SUFFIX

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ConverterSettings":
        """Build settings from ``SEL2PW_*`` environment variables."""
        env = os.environ if environ is None else environ

        indent = DEFAULT_INDENT
        raw_indent = env.get(ENV_INDENT)
        if raw_indent:
            try:
                indent = int(raw_indent)
            except ValueError:
                logger.warning("Ignoring %s=%r: not an integer", ENV_INDENT, raw_indent)
            else:
                if indent < 0:
                    logger.warning("Ignoring %s=%r: must be >= 0", ENV_INDENT, raw_indent)
                    indent = DEFAULT_INDENT

        output_root = env.get(ENV_OUTPUT_ROOT, DEFAULT_OUTPUT_ROOT).strip("/") or DEFAULT_OUTPUT_ROOT
        test_suffix = env.get(ENV_TEST_SUFFIX, DEFAULT_TEST_SUFFIX) or DEFAULT_TEST_SUFFIX

        return cls(indent=indent, output_root=output_root, test_suffix=test_suffix)
