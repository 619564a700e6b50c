"""Data models for sel2pw conversion results."""

from dataclasses import dataclass, field
from typing import Any

SEVERITIES = ("info", "warning", "error")


@dataclass(frozen=True)
class ConversionComment:
    """A review note attached to converted output.

    ``line`` is the 1-based source line the note refers to, or 0 when the
    note has no single corresponding source line.
    """

    line: int
    text: str
    severity: str = "info"  # "info"|"warning"|"error"

    def to_dict(self) -> dict[str, Any]:
        return {"line": self.line, "text": self.text, "type": self.severity}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConversionComment":
        return cls(
            line=data.get("line", 0),
            text=data["text"],
            severity=data.get("type", "info"),
        )


@dataclass
class ConversionResult:
    """Result of converting one Java source file."""

    code: str
    comments: list[ConversionComment] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "comments": [c.to_dict() for c in self.comments],
        }


@dataclass
class ConversionOutput:
    """One converted file produced by a batch run."""

    file_path: str
    original_code: str
    converted_code: str
    comments: list[ConversionComment] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "filePath": self.file_path,
            "originalCode": self.original_code,
            "convertedCode": self.converted_code,
            "comments": [c.to_dict() for c in self.comments],
        }


@dataclass(frozen=True)
class GeneratedFile:
    """A file emitted alongside the converted sources (config or resource)."""

    file_path: str
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {"filePath": self.file_path, "content": self.content}


@dataclass(frozen=True)
class ConversionFailure:
    """A class whose conversion raised and was skipped."""

    file_path: str
    error: str

    def to_dict(self) -> dict[str, Any]:
        return {"filePath": self.file_path, "error": self.error}


@dataclass(frozen=True)
class ConversionSummary:
    """Counts for a batch run.

    ``total_files == converted_files + skipped_files + errors`` always holds.
    """

    total_files: int
    converted_files: int
    skipped_files: int
    errors: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalFiles": self.total_files,
            "convertedFiles": self.converted_files,
            "skippedFiles": self.skipped_files,
            "errors": self.errors,
        }


@dataclass
class BatchConversionResult:
    """Everything produced by converting a whole project."""

    outputs: list[ConversionOutput]
    config_files: list[GeneratedFile]
    resource_files: list[GeneratedFile]
    summary: ConversionSummary
    failures: list[ConversionFailure] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "outputs": [o.to_dict() for o in self.outputs],
            "configFiles": [f.to_dict() for f in self.config_files],
            "resourceFiles": [f.to_dict() for f in self.resource_files],
            "summary": self.summary.to_dict(),
            "errorDetails": [f.to_dict() for f in self.failures],
        }
