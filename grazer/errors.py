class GrazerError(Exception):
    """Base class for errors raised while computing metrics."""


class SourceParseError(GrazerError):
    """
    A file with a recognized source extension could not be parsed into a
    usable syntax tree.

    Distinct from "not a code file": the caller asked for structural metrics
    and there is nothing to measure.
    """

    def __init__(self, path: str, detail: str = "syntax errors in source"):
        self.path = path
        self.detail = detail
        super().__init__(f"Failed to parse {path}: {detail}")


class InvalidPathError(GrazerError):
    """The requested path is neither a regular file nor a directory."""

    def __init__(self, path: str, message: str | None = None):
        self.path = path
        super().__init__(message or f"Path is not a file or directory: {path}")


class PathNotFoundError(InvalidPathError):
    def __init__(self, path: str):
        super().__init__(path, f"Path does not exist: {path}")
