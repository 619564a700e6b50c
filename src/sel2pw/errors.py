"""Custom exceptions for sel2pw."""


class Sel2pwError(Exception):
    """Base exception for all sel2pw errors."""

    pass


class FileReadError(Sel2pwError):
    """Raised when a project file cannot be read."""

    def __init__(self, path: str, reason: str | None = None):
        self.path = path
        self.reason = reason
        msg = f"Failed to read file: {path}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class ClassConversionError(Sel2pwError):
    """Raised when a single class cannot be converted during a batch run."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not convert {path}: {reason}")


class NoJavaSourcesError(Sel2pwError):
    """Raised when an input set contains no .java files."""

    def __init__(self, root: str | None = None):
        self.root = root
        msg = "No Java source files found."
        if root:
            msg = f"No Java source files found under {root}."
        super().__init__(msg)


class InvalidSourceError(Sel2pwError):
    """Raised when a request carries empty or unusable source text."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid source: {reason}")


class OutputPathError(Sel2pwError):
    """Raised when converted output cannot be written."""

    def __init__(self, path: str, reason: str | None = None):
        self.path = path
        msg = f"Cannot write output to {path}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
